"""
Patch extraction — pulls patch text out of an assistant's markdown reply.
"""

from __future__ import annotations

import re

_OPEN_FENCE = re.compile(r"^```(?:patch|diff)\s*\n?")
_CLOSE_FENCE = re.compile(r"\n?```\s*\Z")
_HEADER_ANYWHERE = re.compile(
    r"(?:^|\n)@@ -\d+(?:,\d+)? \+\d+(?:,\d+)? @@"
)
# ```lang\n ... \n``` blocks; the info string may be empty
_FENCED_BLOCK = re.compile(
    r"^```[ \t]*([\w+-]*)[^\n]*\n(.*?)^```[ \t]*$",
    re.MULTILINE | re.DOTALL,
)
_PATCH_LANGUAGES = ("patch", "diff")


def extract_patch_from_block(block: str) -> str:
    """Strip a surrounding ```patch / ```diff fence and trim the result."""
    block = _OPEN_FENCE.sub("", block, count=1)
    block = _CLOSE_FENCE.sub("", block, count=1)
    return block.strip()


def has_patch_header(text: str) -> bool:
    """True if any line of *text* starts with a ``@@ -a,b +c,d @@`` header."""
    return _HEADER_ANYWHERE.search(text) is not None


def is_patch_block(language: str | None, content: str) -> bool:
    """Decide whether a fenced code block should be treated as a patch."""
    if language and language.lower() in _PATCH_LANGUAGES:
        return True
    return has_patch_header(content)


def find_patch_blocks(markdown: str) -> list[str]:
    """Return the content of every fenced block in *markdown* that is a patch.

    A single trailing newline is dropped from each block, matching how the
    block would be shown before the user applies it.
    """
    blocks: list[str] = []
    for match in _FENCED_BLOCK.finditer(markdown):
        language, content = match.group(1), match.group(2)
        if not is_patch_block(language, content):
            continue
        if content.endswith("\n"):
            content = content[:-1]
        blocks.append(content)
    return blocks
