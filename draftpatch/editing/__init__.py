"""Patch editing — parse assistant diffs and apply them to drafts."""

from .diff_parser import PatchParser, Hunk, HunkLine, parse_patch
from .patch_applier import (
    PatchApplier, ApplyResult, PatchErrorKind,
    PatchApplyError, HunkMismatchError, apply_patch,
)
from .extract import (
    extract_patch_from_block, find_patch_blocks, has_patch_header,
    is_patch_block,
)

__all__ = [
    "PatchParser", "Hunk", "HunkLine", "parse_patch",
    "PatchApplier", "ApplyResult", "PatchErrorKind",
    "PatchApplyError", "HunkMismatchError", "apply_patch",
    "extract_patch_from_block", "find_patch_blocks", "has_patch_header",
    "is_patch_block",
]
