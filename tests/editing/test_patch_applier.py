"""Tests for the PatchApplier."""

import pytest

from draftpatch.editing.diff_parser import parse_patch
from draftpatch.editing.patch_applier import (
    PatchApplier, ApplyResult, PatchErrorKind, apply_patch, split_lines,
)


DRAFT = """\
# Shipping a blog in a weekend

I wanted a place to write.

## Stack

The site runs on a managed backend.
Posts are stored as markdown.

## Lessons

Keep it small."""


class TestSplitLines:
    def test_empty_text_is_zero_lines(self):
        assert split_lines("") == []

    def test_trailing_newline_keeps_blank_line(self):
        assert split_lines("a\nb\n") == ["a", "b", ""]


class TestApplySingleHunk:
    def test_replace_line(self):
        result = apply_patch("A\nB\nC", "@@ -2,1 +2,1 @@\n-B\n+B2")

        assert result.ok is True
        assert result.text == "A\nB2\nC"
        assert result.error == ""
        assert result.hunks_applied == 1

    def test_insert_into_empty_document(self):
        result = apply_patch("", "@@ -1,0 +1,1 @@\n+Hello")

        assert result.ok is True
        assert result.text == "Hello"

    def test_zero_start_insertion_clamped_to_top(self):
        result = apply_patch("", "@@ -0,0 +1,2 @@\n+# Title\n+Body")

        assert result.ok is True
        assert result.text == "# Title\nBody"

    def test_pure_insertion_at_expected_line(self):
        result = apply_patch("a\nb\nc", "@@ -3,0 +3,1 @@\n+inserted")

        assert result.ok is True
        assert result.text == "a\nb\ninserted\nc"

    def test_pure_insertion_at_end(self):
        result = apply_patch("a\nb", "@@ -3,0 +3,1 @@\n+c")

        assert result.ok is True
        assert result.text == "a\nb\nc"

    def test_pure_insertion_past_end_fails(self):
        result = apply_patch("a\nb", "@@ -9,0 +9,1 @@\n+c")

        assert result.ok is False
        assert result.error_kind is PatchErrorKind.HUNK_APPLY_FAILURE

    def test_context_and_edit(self):
        patch = (
            "@@ -6,3 +6,3 @@\n"
            " \n"
            "-The site runs on a managed backend.\n"
            "+The site runs on a hosted backend.\n"
            " Posts are stored as markdown."
        )
        result = apply_patch(DRAFT, patch)

        assert result.ok is True
        assert "The site runs on a hosted backend." in result.text
        assert "managed" not in result.text
        assert result.text.count("\n") == DRAFT.count("\n")

    def test_context_only_hunk_is_noop(self):
        patch = "@@ -1,3 +1,3 @@\n # Shipping a blog in a weekend\n \n I wanted a place to write."
        result = apply_patch(DRAFT, patch)

        assert result.ok is True
        assert result.text == DRAFT

    def test_delete_everything(self):
        result = apply_patch("x\ny", "@@ -1,2 +0,0 @@\n-x\n-y")

        assert result.ok is True
        assert result.text == ""

    def test_trailing_newline_preserved(self):
        result = apply_patch("a\nb\n", "@@ -1,1 +1,1 @@\n-a\n+A")

        assert result.ok is True
        assert result.text == "A\nb\n"


class TestFuzzyPosition:
    def test_shifted_target_found_in_window(self):
        doc = "\n".join(["x"] * 5 + ["A", "B", "C"])
        patch = "@@ -1,2 +1,2 @@\n A\n-B\n+B2"

        result = apply_patch(doc, patch)

        assert result.ok is True
        assert result.text == "\n".join(["x"] * 5 + ["A", "B2", "C"])

    def test_offset_before_expected_position(self):
        doc = "A\nB\nC\nD"
        patch = "@@ -10,2 +10,2 @@\n C\n-D\n+D2"

        result = apply_patch(doc, patch)

        assert result.ok is True
        assert result.text == "A\nB\nC\nD2"

    def test_first_verified_match_wins(self):
        doc = "\n".join(["intro", "note", "old", "middle", "note", "old"])
        patch = "@@ -5,2 +5,2 @@\n note\n-old\n+new"

        result = apply_patch(doc, patch)

        # Scan starts from the top of the window, so the earlier pair wins
        assert result.ok is True
        assert result.text.split("\n") == [
            "intro", "note", "new", "middle", "note", "old",
        ]

    def test_candidate_failing_verification_is_skipped(self):
        doc = "\n".join(["head", "head", "body"])
        patch = "@@ -1,2 +1,2 @@\n head\n-body\n+BODY"

        result = apply_patch(doc, patch)

        assert result.ok is True
        assert result.text == "head\nhead\nBODY"

    def test_drift_beyond_window_fails(self):
        doc = "\n".join(["x"] * 40 + ["A", "B"])
        patch = "@@ -1,2 +1,2 @@\n A\n-B\n+B2"

        result = apply_patch(doc, patch)

        assert result.ok is False
        assert result.error == (
            "Could not apply hunk at line 1. The document may have changed."
        )

    def test_custom_window(self):
        doc = "\n".join(["x"] * 40 + ["A", "B"])
        patch = "@@ -1,2 +1,2 @@\n A\n-B\n+B2"

        result = PatchApplier(search_after=50).apply(doc, patch)

        assert result.ok is True
        assert result.text.endswith("A\nB2")

    @staticmethod
    def _anchored_doc(anchor: int, length: int = 60) -> str:
        lines = ["x"] * length
        lines[anchor:anchor + 2] = ["A", "B"]
        return "\n".join(lines)

    @pytest.mark.parametrize("anchor, found", [
        (5, True),      # expected - 15
        (4, False),
        (44, True),     # expected + 24, last line of the window
        (45, False),
    ])
    def test_default_window_edges(self, anchor, found):
        # Declared line 21 puts the expected position at index 20
        patch = "@@ -21,2 +21,2 @@\n A\n-B\n+B2"

        result = apply_patch(self._anchored_doc(anchor), patch)

        assert result.ok is found
        if found:
            assert result.text.split("\n")[anchor + 1] == "B2"
        else:
            assert "line 21" in result.error

    @pytest.mark.parametrize("anchor, found", [
        (17, True),
        (16, False),
        (23, True),
        (24, False),
    ])
    def test_custom_window_edges(self, anchor, found):
        patch = "@@ -21,2 +21,2 @@\n A\n-B\n+B2"
        applier = PatchApplier(search_before=3, search_after=4)

        result = applier.apply(self._anchored_doc(anchor), patch)

        assert result.ok is found

    def test_find_position_reports_drift(self):
        lines = ["x", "x", "x", "A", "B"]
        hunk = parse_patch("@@ -1,2 +1,2 @@\n A\n-B\n+B2")[0]

        assert PatchApplier().find_position(lines, hunk) == 3

    def test_find_position_none_when_absent(self):
        hunk = parse_patch("@@ -1,1 +1,1 @@\n ZZZ")[0]

        assert PatchApplier().find_position(["a", "b"], hunk) is None


class TestMultiHunkOffset:
    def test_second_hunk_shifted_by_first(self):
        doc = "\n".join(f"line{i}" for i in range(1, 11))
        patch = (
            "@@ -1,1 +1,4 @@\n"
            " line1\n"
            "+new a\n"
            "+new b\n"
            "+new c\n"
            "@@ -8,1 +11,1 @@\n"
            "-line8\n"
            "+LINE8"
        )

        result = apply_patch(doc, patch)

        # The second hunk has no context, so it lands exactly at 8 - 1 + 3
        assert result.ok is True
        lines = result.text.split("\n")
        assert lines[:4] == ["line1", "new a", "new b", "new c"]
        assert lines[10] == "LINE8"
        assert "line8" not in lines
        assert result.hunks_applied == 2

    def test_removal_shifts_later_hunks_up(self):
        doc = "a\nb\nc\nd\ne"
        patch = "@@ -1,2 +1,0 @@\n-a\n-b\n@@ -5,1 +3,1 @@\n-e\n+E"

        result = apply_patch(doc, patch)

        assert result.ok is True
        assert result.text == "c\nd\nE"

    def test_failing_second_hunk_returns_no_partial_result(self):
        doc = "A\nB\nC"
        patch = "@@ -1,1 +1,1 @@\n-A\n+A2\n@@ -3,1 +3,1 @@\n-ZZZ\n+Y"

        result = apply_patch(doc, patch)

        assert result.ok is False
        assert result.text == ""
        assert result.hunks_applied == 0
        assert "line 3" in result.error


class TestFailures:
    def test_empty_patch(self):
        result = apply_patch("A\nB", "")

        assert result == ApplyResult(
            ok=False, error="Empty patch",
            error_kind=PatchErrorKind.EMPTY_PATCH,
        )

    def test_whitespace_only_patch(self):
        result = apply_patch("A\nB", "  \n\t\n")

        assert result.ok is False
        assert result.error == "Empty patch"

    def test_no_valid_hunks(self):
        result = apply_patch("A\nB", "-A\n+B")

        assert result.ok is False
        assert result.error == "No valid hunks in patch"
        assert result.error_kind is PatchErrorKind.NO_VALID_HUNKS

    def test_missing_line_cites_declared_start(self):
        result = apply_patch("A\nB\nC", "@@ -2,1 +2,1 @@\n-ZZZ\n+Y")

        assert result.ok is False
        assert result.error.startswith("Could not apply hunk at line 2")
        assert result.error_kind is PatchErrorKind.HUNK_APPLY_FAILURE

    def test_context_missing_anywhere(self):
        result = apply_patch("A\nB\nC", "@@ -2,2 +2,2 @@\n ZZZ\n-B\n+B2")

        assert result.ok is False
        assert "line 2" in result.error

    def test_document_untouched_on_failure(self):
        doc = "A\nB\nC"
        apply_patch(doc, "@@ -1,1 +1,1 @@\n-nope\n+x")

        assert doc == "A\nB\nC"


class TestRoundTrip:
    @pytest.mark.parametrize("old, new", [
        ("A\nB\nC", "A\nB2\nC"),
        ("", "fresh draft\nwith two lines"),
        ("one\ntwo\nthree", ""),
        (DRAFT, DRAFT.replace("Keep it small.", "Keep it small.\n\nShip it.")),
        (DRAFT, DRAFT.replace("# Shipping", "# Launching").replace(
            "Posts are stored as markdown.", "Posts are markdown files.")),
    ])
    def test_generated_diff_reproduces_target(self, old, new):
        from draftpatch.diff_display import compute_diff

        patch = compute_diff(old, new)
        result = apply_patch(old, patch)

        assert result.ok is True
        assert result.text == new

    def test_generated_hunks_have_consistent_counts(self):
        from draftpatch.diff_display import compute_diff

        new = DRAFT.replace("I wanted a place to write.", "I wanted\na place.")
        for hunk in parse_patch(compute_diff(DRAFT, new)):
            assert hunk.compute_counts() == (hunk.old_count, hunk.new_count)
