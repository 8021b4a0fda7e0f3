from setuptools import setup, find_packages

setup(
    name="draftpatch",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "draftpatch=draftpatch.cli:main",
        ],
    },
    description="Apply assistant-proposed unified diffs to blog drafts.",
)
