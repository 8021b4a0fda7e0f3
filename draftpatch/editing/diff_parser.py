"""
Diff parser — parses unified-diff hunks proposed by the writing assistant
into structured hunks the applier can place in a draft.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Line kinds
CONTEXT = "context"
REMOVE = "remove"
ADD = "add"

# Patterns
_HEADER_PATTERN = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_HUNK_MARKER = "@@"


@dataclass
class HunkLine:
    """A single line of a hunk, without its ``+``/``-``/space marker."""
    kind: str                  # "context", "remove" or "add"
    content: str = ""


@dataclass
class Hunk:
    """One contiguous edit region of a unified diff."""
    old_start: int             # 1-indexed, as declared by the header
    old_count: int = 1
    new_start: int = 1
    new_count: int = 1
    lines: list[HunkLine] = field(default_factory=list)

    def count_context(self) -> int:
        return sum(1 for l in self.lines if l.kind == CONTEXT)

    def count_removals(self) -> int:
        return sum(1 for l in self.lines if l.kind == REMOVE)

    def count_additions(self) -> int:
        return sum(1 for l in self.lines if l.kind == ADD)

    def compute_counts(self) -> tuple[int, int]:
        """Return (old_count, new_count) as implied by the hunk's lines."""
        context = self.count_context()
        return context + self.count_removals(), context + self.count_additions()

    def header(self) -> str:
        return (
            f"@@ -{self.old_start},{self.old_count} "
            f"+{self.new_start},{self.new_count} @@"
        )


class PatchParser:
    """Parse unified-diff hunks from patch text.

    The parser is lenient: text before the first header and malformed
    ``@@`` lines are skipped, and declared counts are not checked against
    the hunk body. It never raises.
    """

    def parse(self, patch_text: str) -> list[Hunk]:
        """Parse *patch_text* into an ordered list of hunks.

        Parameters
        ----------
        patch_text:
            Raw unified-diff text (one or more ``@@ ... @@`` blocks).

        Returns
        -------
        list[Hunk]
            The hunks in header order; empty if no valid header was found.
        """
        hunks: list[Hunk] = []
        lines = patch_text.split("\n")
        i = 0

        while i < len(lines):
            match = _HEADER_PATTERN.match(lines[i])
            if not match:
                if lines[i].startswith(_HUNK_MARKER):
                    logger.debug("[Patch] Skipping malformed header: %r", lines[i])
                i += 1
                continue

            hunk = Hunk(
                old_start=int(match.group(1)),
                old_count=int(match.group(2) or 1),
                new_start=int(match.group(3)),
                new_count=int(match.group(4) or 1),
            )
            i += 1

            # Body runs until the next @@ line or end of input
            while i < len(lines) and not lines[i].startswith(_HUNK_MARKER):
                hunk.lines.append(self._parse_line(lines[i]))
                i += 1

            hunks.append(hunk)

        logger.debug("[Patch] Parsed %d hunk(s)", len(hunks))
        return hunks

    @staticmethod
    def _parse_line(line: str) -> HunkLine:
        if line.startswith("-"):
            return HunkLine(REMOVE, line[1:])
        if line.startswith("+"):
            return HunkLine(ADD, line[1:])
        # Context: a single leading space is a marker, anything else is content
        if line.startswith(" "):
            line = line[1:]
        return HunkLine(CONTEXT, line)


def parse_patch(patch_text: str) -> list[Hunk]:
    """Parse *patch_text* with a default :class:`PatchParser`."""
    return PatchParser().parse(patch_text)
