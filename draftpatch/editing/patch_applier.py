"""
Patch applier — applies parsed hunks to a draft in memory, locating each
hunk by its context lines so patches survive line-number drift.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .diff_parser import ADD, CONTEXT, REMOVE, Hunk, PatchParser

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_BEFORE = 15
DEFAULT_SEARCH_AFTER = 25


class PatchErrorKind(str, enum.Enum):
    EMPTY_PATCH = "empty_patch"
    NO_VALID_HUNKS = "no_valid_hunks"
    HUNK_APPLY_FAILURE = "hunk_apply_failure"


class PatchApplyError(Exception):
    """Raised when a patch cannot be applied cleanly."""


class HunkMismatchError(PatchApplyError):
    """Raised when a hunk's context or removed lines do not match the draft."""

    def __init__(self, hunk: Hunk) -> None:
        super().__init__(
            f"Could not apply hunk at line {hunk.old_start}. "
            "The document may have changed."
        )
        self.hunk = hunk


@dataclass
class ApplyResult:
    """Result of applying a patch to a draft.

    On failure ``text`` is empty and the caller keeps its prior draft.
    """
    ok: bool = False
    text: str = ""
    error: str = ""
    error_kind: Optional[PatchErrorKind] = None
    hunks_applied: int = 0


def split_lines(text: str) -> list[str]:
    """Split document text on newlines; empty text is zero lines."""
    if text == "":
        return []
    return text.split("\n")


class PatchApplier:
    """Apply unified-diff patches to a document, tolerating offset drift.

    Each hunk is searched for in a window of ``search_before`` lines
    before and ``search_after`` lines after its expected position; the
    first position where every context and removed line matches wins.
    """

    def __init__(
        self,
        search_before: int = DEFAULT_SEARCH_BEFORE,
        search_after: int = DEFAULT_SEARCH_AFTER,
    ) -> None:
        self._search_before = search_before
        self._search_after = search_after
        self._parser = PatchParser()

    def apply(self, text: str, patch: str) -> ApplyResult:
        """Apply *patch* to *text*.

        Hunks are applied in order; each expected position is shifted by
        the net lines added by the hunks before it. The first hunk that
        cannot be placed fails the whole patch.

        Parameters
        ----------
        text:
            The current document.
        patch:
            Unified-diff text containing one or more hunks.

        Returns
        -------
        ApplyResult
            The patched text, or the reason the patch was rejected.
        """
        result = ApplyResult()

        trimmed = patch.strip()
        if not trimmed:
            result.error = "Empty patch"
            result.error_kind = PatchErrorKind.EMPTY_PATCH
            return result

        hunks = self._parser.parse(trimmed)
        if not hunks:
            result.error = "No valid hunks in patch"
            result.error_kind = PatchErrorKind.NO_VALID_HUNKS
            return result

        lines = split_lines(text)
        line_offset = 0

        for hunk in hunks:
            try:
                lines, shift = self._apply_hunk(lines, hunk, line_offset)
            except HunkMismatchError as exc:
                logger.warning(
                    "[Patch] Hunk %d/%d at line %d failed: %s",
                    result.hunks_applied + 1, len(hunks), hunk.old_start, exc,
                )
                result.error = str(exc)
                result.error_kind = PatchErrorKind.HUNK_APPLY_FAILURE
                result.hunks_applied = 0
                return result
            line_offset += shift
            result.hunks_applied += 1

        result.ok = True
        result.text = "\n".join(lines)
        return result

    # ------------------------------------------------------------------
    # Position search
    # ------------------------------------------------------------------

    def find_position(
        self,
        lines: list[str],
        hunk: Hunk,
        line_offset: int = 0,
    ) -> int | None:
        """Return the 0-indexed position where *hunk* verifies, or None."""
        expected = hunk.old_start - 1 + line_offset
        first_context = next((l for l in hunk.lines if l.kind == CONTEXT), None)

        if first_context is None:
            # Pure insertion: nothing to anchor on
            return expected if 0 <= expected <= len(lines) else None

        start = max(0, expected - self._search_before)
        end = min(len(lines), expected + self._search_after)
        for pos in range(start, end):
            if lines[pos] != first_context.content:
                continue
            if self._verify_at(lines, hunk, pos):
                if pos != expected:
                    logger.debug(
                        "[Patch] Hunk line %d matched at %d (offset %+d)",
                        hunk.old_start, pos + 1, pos - expected,
                    )
                return pos

        return None

    @staticmethod
    def _verify_at(lines: list[str], hunk: Hunk, start: int) -> bool:
        """Check every context and removed line of *hunk* from *start*."""
        pos = start
        for hunk_line in hunk.lines:
            if hunk_line.kind == ADD:
                continue
            if pos >= len(lines) or lines[pos] != hunk_line.content:
                return False
            pos += 1
        return True

    # ------------------------------------------------------------------
    # Hunk application
    # ------------------------------------------------------------------

    def _apply_hunk(
        self,
        lines: list[str],
        hunk: Hunk,
        line_offset: int,
    ) -> tuple[list[str], int]:
        """Apply a single hunk, returning the new lines and the net shift."""
        pos = self.find_position(lines, hunk, line_offset)
        if pos is None:
            fallback = max(0, hunk.old_start - 1 + line_offset)
            if fallback > len(lines):
                raise HunkMismatchError(hunk)
            pos = fallback

        replaced: list[str] = []
        doc_pos = pos
        added = 0
        removed = 0

        for hunk_line in hunk.lines:
            if hunk_line.kind == ADD:
                replaced.append(hunk_line.content)
                added += 1
                continue

            if doc_pos >= len(lines) or lines[doc_pos] != hunk_line.content:
                raise HunkMismatchError(hunk)
            if hunk_line.kind == REMOVE:
                removed += 1
            else:
                replaced.append(lines[doc_pos])
            doc_pos += 1

        new_lines = lines[:pos] + replaced + lines[doc_pos:]
        return new_lines, added - removed


def apply_patch(text: str, patch: str) -> ApplyResult:
    """Apply *patch* to *text* with the default search window."""
    return PatchApplier().apply(text, patch)
