"""Unit tests for plandoc.markdown.fields — the field mutation engine."""
from __future__ import annotations

import pytest

from plandoc.markdown import extract_bold_field, extract_field, patch_fields, replace_field

_STATE = """# Project State

**Current Phase:** 03
**Current Phase Name:** API Layer
**Status:** In progress
**Last Activity:** 2024-01-15 — Completed 03-01-PLAN.md

## Blockers

- Waiting for API credentials
- Need design review

## Notes

Free text.
"""


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


class TestExtractField:
    def test_bold_field(self) -> None:
        assert extract_field(_STATE, "Status") == "In progress"

    def test_value_with_colon_and_dash(self) -> None:
        assert extract_field(_STATE, "Last Activity") == "2024-01-15 — Completed 03-01-PLAN.md"

    def test_case_insensitive_label(self) -> None:
        assert extract_field(_STATE, "status") == "In progress"

    def test_label_is_not_a_prefix_match(self) -> None:
        assert extract_field(_STATE, "Phase") is None
        assert extract_field(_STATE, "Current Phase") == "03"

    def test_section_body(self) -> None:
        assert extract_field(_STATE, "Blockers") == "- Waiting for API credentials\n- Need design review"

    def test_missing(self) -> None:
        assert extract_field(_STATE, "Velocity") is None

    def test_goal_with_colon_outside_bold_is_not_found(self) -> None:
        assert extract_bold_field("**Goal**: Ship it\n", "Goal") is None

    def test_label_with_regex_characters(self) -> None:
        assert extract_bold_field("**Cost ($):** 12\n", "Cost ($)") == "12"


# ---------------------------------------------------------------------------
# Replacement
# ---------------------------------------------------------------------------


class TestReplaceField:
    def test_replaces_only_value(self) -> None:
        updated = replace_field(_STATE, "Status", "Complete")
        assert updated == _STATE.replace("**Status:** In progress", "**Status:** Complete")

    def test_value_inserted_literally(self) -> None:
        updated = replace_field(_STATE, "Status", r"Paid $1.00 \1 \g<0>")
        assert updated is not None
        assert r"**Status:** Paid $1.00 \1 \g<0>" in updated

    def test_missing_field_returns_none(self) -> None:
        assert replace_field(_STATE, "Velocity", "fast") is None

    def test_does_not_touch_longer_label(self) -> None:
        updated = replace_field(_STATE, "Current Phase", "04")
        assert updated is not None
        assert "**Current Phase:** 04" in updated
        assert "**Current Phase Name:** API Layer" in updated

    def test_gap_inserted_when_absent(self) -> None:
        assert replace_field("**Status:**\n", "Status", "Done") == "**Status:** Done\n"

    def test_section_replacement_keeps_following_heading(self) -> None:
        updated = replace_field(_STATE, "Blockers", "None")
        assert updated is not None
        assert "## Blockers\nNone\n\n## Notes\n" in updated
        assert "Waiting for API credentials" not in updated
        assert updated.endswith("## Notes\n\nFree text.\n")

    def test_section_replacement_at_end(self) -> None:
        updated = replace_field(_STATE, "Notes", "Rewritten")
        assert updated is not None
        assert updated.endswith("## Notes\nRewritten\n")

    def test_round_trip(self) -> None:
        updated = replace_field(_STATE, "Current Phase", "07")
        assert updated is not None
        assert extract_field(updated, "Current Phase") == "07"

    def test_replace_with_same_value_is_identity(self) -> None:
        assert replace_field(_STATE, "Status", "In progress") == _STATE

    def test_crlf_line_break_kept(self) -> None:
        text = "**Status:** Old\r\n**Plan:** 1\r\n"
        assert replace_field(text, "Status", "New") == "**Status:** New\r\n**Plan:** 1\r\n"


# ---------------------------------------------------------------------------
# Patching
# ---------------------------------------------------------------------------


class TestPatchFields:
    def test_all_found(self) -> None:
        result = patch_fields(_STATE, {"Status": "Complete", "Current Phase": "04"})
        assert result.updated == ["Status", "Current Phase"]
        assert result.failed == []
        assert not result.partial
        assert "**Status:** Complete" in result.content
        assert "**Current Phase:** 04" in result.content

    def test_partial_failure_keeps_successes(self) -> None:
        result = patch_fields(_STATE, [("Status", "Done"), ("Missing", "x")])
        assert result.updated == ["Status"]
        assert result.failed == ["Missing"]
        assert result.partial
        assert result.changed
        assert "**Status:** Done" in result.content

    def test_applied_in_order(self) -> None:
        result = patch_fields("**A:** 1\n", [("A", "2"), ("A", "3")])
        assert result.content == "**A:** 3\n"

    def test_nothing_found(self) -> None:
        result = patch_fields(_STATE, {"Nope": "x"})
        assert not result.changed
        assert result.content == _STATE
        assert result.to_dict() == {"updated": [], "failed": ["Nope"]}

    @pytest.mark.parametrize("label", ["Status", "Last Activity"])
    def test_untouched_lines_survive(self, label: str) -> None:
        result = patch_fields(_STATE, {label: "x"})
        assert "## Blockers\n\n- Waiting for API credentials\n" in result.content
        assert "Free text.\n" in result.content
