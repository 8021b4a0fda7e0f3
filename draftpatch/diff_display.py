"""
Diff display — generate patches between two drafts and render patch text
for the terminal.
"""

from __future__ import annotations

import difflib

from .editing.diff_parser import parse_patch
from .editing.patch_applier import split_lines

_RESET = "\033[0m"
_COLORS = {
    "header": "\033[36m",   # cyan
    "remove": "\033[31m",   # red
    "add": "\033[32m",      # green
}


def compute_diff(old_text: str, new_text: str,
                 context_lines: int = 3) -> str | None:
    """Return a patch turning *old_text* into *new_text*.

    Only ``@@`` hunks are emitted (no ``---``/``+++`` file headers), in the
    same grammar the applier consumes. Returns None if the texts are equal.
    """
    if old_text == new_text:
        return None

    diff = difflib.unified_diff(
        split_lines(old_text), split_lines(new_text),
        n=context_lines, lineterm="",
    )
    # Drop the ---/+++ file header pair
    body = [line for i, line in enumerate(diff) if i >= 2]
    return "\n".join(body) if body else None


def classify_line(line: str) -> str:
    """Classify a patch line as "header", "remove", "add" or "context"."""
    if line.startswith("@@"):
        return "header"
    if line.startswith("-") and not line.startswith("---"):
        return "remove"
    if line.startswith("+") and not line.startswith("+++"):
        return "add"
    return "context"


def format_colored_diff(patch_text: str) -> str:
    """Add ANSI colors to patch text.

    Green for additions (+), red for deletions (-), cyan for @@ hunks.
    """
    colored: list[str] = []
    for line in patch_text.split("\n"):
        color = _COLORS.get(classify_line(line))
        colored.append(f"{color}{line}{_RESET}" if color else line)
    return "\n".join(colored)


def describe_patch(patch_text: str) -> str:
    """Return a short label such as ``Patch (2 hunks)``."""
    count = len(parse_patch(patch_text))
    return f"Patch ({count} hunk{'' if count == 1 else 's'})"
