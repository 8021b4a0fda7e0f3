"""
draftpatch — apply assistant-proposed unified diffs to blog drafts.

Public API for library usage::

    from draftpatch import apply_patch

    result = apply_patch(draft, "@@ -2,1 +2,1 @@\\n-old line\\n+new line")
    if result.ok:
        draft = result.text
"""

from .editing import (
    ApplyResult, Hunk, HunkLine, PatchApplier, PatchErrorKind, PatchParser,
    apply_patch, extract_patch_from_block, find_patch_blocks, parse_patch,
)

__all__ = [
    "apply_patch", "parse_patch", "extract_patch_from_block",
    "find_patch_blocks", "ApplyResult", "Hunk", "HunkLine",
    "PatchApplier", "PatchErrorKind", "PatchParser",
]
