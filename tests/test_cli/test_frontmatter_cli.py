"""CLI tests for the ``frontmatter`` command group."""
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from click.testing import Result

from plandoc.frontmatter import parse_frontmatter, to_plain

_PLAN = """---
phase: 01-foundation
plan: 01
type: execute
wave: 1
depends_on: []
files_modified: [src/app.py]
autonomous: true
must_haves:
  truths:
    - App starts
---

# Plan

Body stays put.
"""


class TestFrontmatterGet:
    def test_whole_block(
        self, write_planning: Callable[[str, str], Path], invoke_json: Callable[..., Any]
    ) -> None:
        write_planning("PLAN.md", _PLAN)
        payload = invoke_json("frontmatter", "get", ".planning/PLAN.md")
        assert payload["phase"] == "01-foundation"
        assert payload["plan"] == "01"
        assert payload["depends_on"] == []
        assert payload["must_haves"] == {"truths": ["App starts"]}

    def test_single_field(
        self, write_planning: Callable[[str, str], Path], invoke_json: Callable[..., Any]
    ) -> None:
        write_planning("PLAN.md", _PLAN)
        assert invoke_json("frontmatter", "get", ".planning/PLAN.md", "--field", "wave") == {"wave": "1"}

    def test_missing_field(
        self, write_planning: Callable[[str, str], Path], invoke_json: Callable[..., Any]
    ) -> None:
        write_planning("PLAN.md", _PLAN)
        payload = invoke_json("frontmatter", "get", ".planning/PLAN.md", "--field", "nope")
        assert payload == {"error": "Field not found", "field": "nope"}

    def test_missing_file(self, invoke_json: Callable[..., Any]) -> None:
        payload = invoke_json("frontmatter", "get", "missing.md")
        assert payload["error"] == "File not found"

    def test_yaml_output(
        self, write_planning: Callable[[str, str], Path], invoke: Callable[..., Result]
    ) -> None:
        write_planning("PLAN.md", _PLAN)
        result = invoke("frontmatter", "get", ".planning/PLAN.md", "--format", "yaml")
        assert result.exit_code == 0
        assert yaml.safe_load(result.stdout)["files_modified"] == ["src/app.py"]

    def test_no_block_is_empty(
        self, write_planning: Callable[[str, str], Path], invoke_json: Callable[..., Any]
    ) -> None:
        write_planning("NOTES.md", "# Notes\n")
        assert invoke_json("frontmatter", "get", ".planning/NOTES.md") == {}


class TestFrontmatterSet:
    def test_sets_field_and_keeps_body(
        self, write_planning: Callable[[str, str], Path], invoke_json: Callable[..., Any]
    ) -> None:
        path = write_planning("PLAN.md", _PLAN)
        payload = invoke_json("frontmatter", "set", ".planning/PLAN.md", "--field", "wave", "--value", "2")
        assert payload == {"updated": True, "field": "wave", "value": 2}
        text = path.read_text(encoding="utf-8")
        assert to_plain(parse_frontmatter(text))["wave"] == "2"  # type: ignore[index]
        assert text.endswith("\n# Plan\n\nBody stays put.\n")

    def test_json_list_value(
        self, write_planning: Callable[[str, str], Path], invoke_json: Callable[..., Any]
    ) -> None:
        path = write_planning("PLAN.md", _PLAN)
        invoke_json("frontmatter", "set", ".planning/PLAN.md", "--field", "depends_on", "--value", '["01-01"]')
        assert to_plain(parse_frontmatter(path.read_text(encoding="utf-8")))["depends_on"] == ["01-01"]  # type: ignore[index]

    def test_null_removes_field(
        self, write_planning: Callable[[str, str], Path], invoke_json: Callable[..., Any]
    ) -> None:
        path = write_planning("PLAN.md", _PLAN)
        invoke_json("frontmatter", "set", ".planning/PLAN.md", "--field", "autonomous", "--value", "null")
        assert parse_frontmatter(path.read_text(encoding="utf-8")).get("autonomous") is None

    def test_creates_block_when_absent(
        self, write_planning: Callable[[str, str], Path], invoke_json: Callable[..., Any]
    ) -> None:
        path = write_planning("NOTES.md", "# Notes\n")
        invoke_json("frontmatter", "set", ".planning/NOTES.md", "--field", "status", "--value", "draft")
        assert path.read_text(encoding="utf-8") == "---\nstatus: draft\n---\n# Notes\n"

    def test_missing_file(self, invoke_json: Callable[..., Any]) -> None:
        payload = invoke_json("frontmatter", "set", "nope.md", "--field", "a", "--value", "b")
        assert payload["error"] == "File not found"

    def test_multi_line_value_round_trips(
        self, write_planning: Callable[[str, str], Path], invoke_json: Callable[..., Any]
    ) -> None:
        path = write_planning("PLAN.md", _PLAN)
        notes = "first line\n---\nstatus: injected"
        invoke_json("frontmatter", "set", ".planning/PLAN.md", "--field", "notes", "--value", notes)
        text = path.read_text(encoding="utf-8")
        assert text.endswith("\n# Plan\n\nBody stays put.\n")
        assert invoke_json("frontmatter", "get", ".planning/PLAN.md", "--field", "notes") == {"notes": notes}
        missing = invoke_json("frontmatter", "get", ".planning/PLAN.md", "--field", "status")
        assert missing["error"] == "Field not found"

    def test_invalid_field_name_is_usage_error(
        self, write_planning: Callable[[str, str], Path], invoke: Callable[..., Result]
    ) -> None:
        path = write_planning("PLAN.md", _PLAN)
        result = invoke("frontmatter", "set", ".planning/PLAN.md", "--field", "my key", "--value", "x")
        assert result.exit_code != 0
        assert "Invalid field name" in result.output
        assert path.read_text(encoding="utf-8") == _PLAN


class TestFrontmatterMerge:
    def test_merges_keys(
        self, write_planning: Callable[[str, str], Path], invoke_json: Callable[..., Any]
    ) -> None:
        path = write_planning("PLAN.md", _PLAN)
        payload = invoke_json(
            "frontmatter", "merge", ".planning/PLAN.md", "--data", '{"wave": 3, "tags": ["api"]}'
        )
        assert payload == {"merged": True, "fields": ["wave", "tags"]}
        plain = to_plain(parse_frontmatter(path.read_text(encoding="utf-8")))
        assert plain["wave"] == "3"  # type: ignore[index]
        assert plain["tags"] == ["api"]  # type: ignore[index]
        assert plain["phase"] == "01-foundation"  # type: ignore[index]

    def test_invalid_json_is_usage_error(
        self, write_planning: Callable[[str, str], Path], invoke: Callable[..., Result]
    ) -> None:
        path = write_planning("PLAN.md", _PLAN)
        result = invoke("frontmatter", "merge", ".planning/PLAN.md", "--data", "{bad")
        assert result.exit_code != 0
        assert "Invalid JSON" in result.output
        assert path.read_text(encoding="utf-8") == _PLAN

    def test_non_object_is_usage_error(
        self, write_planning: Callable[[str, str], Path], invoke: Callable[..., Result]
    ) -> None:
        write_planning("PLAN.md", _PLAN)
        result = invoke("frontmatter", "merge", ".planning/PLAN.md", "--data", "[1]")
        assert result.exit_code != 0

    def test_invalid_nested_key_is_usage_error(
        self, write_planning: Callable[[str, str], Path], invoke: Callable[..., Result]
    ) -> None:
        path = write_planning("PLAN.md", _PLAN)
        result = invoke("frontmatter", "merge", ".planning/PLAN.md", "--data", '{"tech": {"bad key": 1}}')
        assert result.exit_code != 0
        assert "Invalid frontmatter key" in result.output
        assert path.read_text(encoding="utf-8") == _PLAN

    def test_nested_list_that_cannot_inline_is_usage_error(
        self, write_planning: Callable[[str, str], Path], invoke: Callable[..., Result]
    ) -> None:
        path = write_planning("PLAN.md", _PLAN)
        result = invoke("frontmatter", "merge", ".planning/PLAN.md", "--data", '{"m": [["a, b", "\'q\'"]]}')
        assert result.exit_code != 0
        assert "Nested list" in result.output
        assert path.read_text(encoding="utf-8") == _PLAN


class TestFrontmatterValidate:
    def test_plan_schema(
        self, write_planning: Callable[[str, str], Path], invoke_json: Callable[..., Any]
    ) -> None:
        write_planning("PLAN.md", _PLAN)
        payload = invoke_json("frontmatter", "validate", ".planning/PLAN.md", "--schema", "plan")
        assert payload["valid"] is True
        assert payload["schema"] == "plan"

    def test_summary_schema_reports_missing(
        self, write_planning: Callable[[str, str], Path], invoke_json: Callable[..., Any]
    ) -> None:
        write_planning("PLAN.md", _PLAN)
        payload = invoke_json("frontmatter", "validate", ".planning/PLAN.md", "--schema", "summary")
        assert payload["valid"] is False
        assert "subsystem" in payload["missing"]

    def test_unknown_schema(
        self, write_planning: Callable[[str, str], Path], invoke: Callable[..., Result]
    ) -> None:
        write_planning("PLAN.md", _PLAN)
        result = invoke("frontmatter", "validate", ".planning/PLAN.md", "--schema", "bogus")
        assert result.exit_code != 0
        assert "Unknown schema" in result.output
