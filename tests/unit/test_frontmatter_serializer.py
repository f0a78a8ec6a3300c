"""Unit tests for plandoc.frontmatter serializer, splicer and schemas."""
from __future__ import annotations

import pytest

from plandoc.frontmatter import (
    MapValue,
    Scalar,
    extract_frontmatter,
    from_plain,
    parse_frontmatter,
    serialize_frontmatter,
    splice_frontmatter,
    validate_frontmatter,
)
from plandoc.frontmatter.serializer import render_scalar

_PLAN_DOC = """---
phase: 01-foundation
plan: 01
type: execute
wave: 1
depends_on: []
files_modified:
  - src/app.py
  - src/db.py
  - src/models/user.py
  - tests/test_app.py
autonomous: true
must_haves:
  truths:
    - User can sign in
  artifacts:
    - path: src/app.py
      provides: Application entry point
      min_lines: 20
  key_links:
    - from: src/app.py
      to: src/db.py
      via: import
---

# Plan 01

Body text with a horizontal rule below.

---

More body.
"""


def round_trip(value: MapValue) -> MapValue:
    return parse_frontmatter(splice_frontmatter("", value))


# ---------------------------------------------------------------------------
# Scalar rendering
# ---------------------------------------------------------------------------


class TestRenderScalar:
    @pytest.mark.parametrize("text", ["plain", "01-foundation", "src/app.py", "two words"])
    def test_plain_text_unquoted(self, text: str) -> None:
        assert render_scalar(text) == text

    @pytest.mark.parametrize("text", ["", " padded", "a: b", "# comment", "[x", "{}", "'q"])
    def test_ambiguous_text_quoted(self, text: str) -> None:
        assert render_scalar(text) == f'"{text}"'

    def test_quote_and_backslash_escaped(self) -> None:
        assert render_scalar('q"') == '"q\\""'
        assert render_scalar('a: "b" \\ c') == '"a: \\"b\\" \\\\ c"'

    @pytest.mark.parametrize(
        ("text", "rendered"),
        [
            ("a\nb", '"a\\nb"'),
            ("a\r\nb", '"a\\r\\nb"'),
            ("a\u2028b", '"a\\u2028b"'),
            ("a\x0cb", '"a\\u000cb"'),
        ],
    )
    def test_line_breaks_escaped(self, text: str, rendered: str) -> None:
        assert render_scalar(text) == rendered
        assert "\n" not in rendered


# ---------------------------------------------------------------------------
# Serializer
# ---------------------------------------------------------------------------


class TestSerializeFrontmatter:
    def test_scalars(self) -> None:
        assert serialize_frontmatter({"phase": "01", "wave": 2}) == "phase: 01\nwave: 2"

    def test_empty_list_inline(self) -> None:
        assert serialize_frontmatter({"depends_on": []}) == "depends_on: []"

    def test_short_list_inline(self) -> None:
        assert serialize_frontmatter({"tags": ["api", "auth"]}) == "tags: [api, auth]"

    def test_long_list_block_form(self) -> None:
        text = serialize_frontmatter({"files": ["a", "b", "c", "d"]})
        assert text == "files:\n  - a\n  - b\n  - c\n  - d"

    def test_list_with_commas_uses_block_form(self) -> None:
        assert serialize_frontmatter({"notes": ["a, b"]}) == "notes:\n  - a, b"

    def test_nested_map(self) -> None:
        text = serialize_frontmatter({"tech": {"added": ["click"], "style": "flat"}})
        assert text == "tech:\n  added: [click]\n  style: flat"

    def test_list_of_maps(self) -> None:
        text = serialize_frontmatter({"artifacts": [{"path": "a.py", "provides": "x"}]})
        assert text == "artifacts:\n  - path: a.py\n    provides: x"

    def test_empty_map_item(self) -> None:
        assert serialize_frontmatter({"items": [{}, "x", "y", "z"]}) == "items:\n  - {}\n  - x\n  - y\n  - z"

    def test_none_entries_omitted(self) -> None:
        assert serialize_frontmatter({"a": None, "b": "1"}) == "b: 1"

    def test_empty_map_serializes_to_nothing(self) -> None:
        assert serialize_frontmatter(MapValue()) == ""

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(TypeError):
            serialize_frontmatter(["not", "a", "map"])  # type: ignore[arg-type]


class TestRoundTrip:
    def test_plan_document(self) -> None:
        value = parse_frontmatter(_PLAN_DOC)
        assert round_trip(value) == value

    @pytest.mark.parametrize(
        "plain",
        [
            {"a": "x: y", "b": "#tag", "c": "", "d": " lead"},
            {"list": ["[bracket", "{}", "'quote"]},
            {"deep": {"deeper": {"deepest": ["1", "2", "3", "4"]}}},
            {"items": [{"k": "v", "sub": {"x": "1"}}, {"k": "w", "list": ["a"]}]},
            {"matrix": [["a", "b"], ["c"]]},
            {"empty_map": {}, "empty_list": []},
        ],
    )
    def test_structures(self, plain: dict) -> None:
        value = from_plain(plain)
        assert isinstance(value, MapValue)
        assert round_trip(value) == value

    def test_serialize_is_idempotent(self) -> None:
        once = splice_frontmatter(_PLAN_DOC, parse_frontmatter(_PLAN_DOC))
        twice = splice_frontmatter(once, parse_frontmatter(once))
        assert once == twice


class TestMultiLineValues:
    def test_delimiter_in_value_does_not_end_block(self) -> None:
        text = splice_frontmatter("# Body\n", {"notes": "a\n---\nstatus: hacked"})
        assert [line for line in text.splitlines() if line == "---"] == ["---", "---"]
        assert text.endswith("---\n# Body\n")
        assert extract_frontmatter(text) == {"notes": "a\n---\nstatus: hacked"}

    @pytest.mark.parametrize(
        "text",
        [
            "line one\nline two",
            "crlf\r\nend",
            "trailing\n",
            "sep\u2028x",
            'say "hi"',
            "C:\\new: x",
            "\\n stays literal",
            "tab\tand \\ backslash",
        ],
    )
    def test_scalar_round_trip(self, text: str) -> None:
        value = from_plain({"v": text})
        assert isinstance(value, MapValue)
        assert round_trip(value) == value

    def test_list_items_with_line_breaks(self) -> None:
        value = from_plain({"notes": ["a\nb", "c"]})
        assert isinstance(value, MapValue)
        assert serialize_frontmatter(value) == 'notes:\n  - "a\\nb"\n  - c'
        assert round_trip(value) == value


class TestUnwritableValues:
    @pytest.mark.parametrize("plain", [{"my key": "x"}, {"a:b": "1"}, {"outer": {"bad key": "1"}}])
    def test_invalid_key_rejected(self, plain: dict) -> None:
        with pytest.raises(ValueError, match="Invalid frontmatter key"):
            serialize_frontmatter(plain)

    def test_nested_list_that_cannot_inline_rejected(self) -> None:
        with pytest.raises(ValueError, match="Nested list"):
            serialize_frontmatter({"m": [["a, b", "'q'"]]})

    def test_empty_nested_list_written_inline(self) -> None:
        value = from_plain({"m": [[], "x"]})
        assert isinstance(value, MapValue)
        assert serialize_frontmatter(value) == "m:\n  - []\n  - x"
        assert round_trip(value) == value


# ---------------------------------------------------------------------------
# Splicer
# ---------------------------------------------------------------------------


class TestSpliceFrontmatter:
    def test_body_is_preserved(self) -> None:
        value = parse_frontmatter(_PLAN_DOC).with_entry("wave", Scalar("2"))
        spliced = splice_frontmatter(_PLAN_DOC, value)
        body_start = _PLAN_DOC.index("\n# Plan 01")
        assert spliced.endswith(_PLAN_DOC[body_start:])
        assert parse_frontmatter(spliced).get("wave") == Scalar("2")

    def test_body_horizontal_rule_untouched(self) -> None:
        spliced = splice_frontmatter(_PLAN_DOC, MapValue((("phase", Scalar("02")),)))
        assert spliced.count("\n---\n") == 2
        assert "More body." in spliced

    def test_prepends_when_no_block(self) -> None:
        spliced = splice_frontmatter("# Title\n", {"status": "draft"})
        assert spliced == "---\nstatus: draft\n---\n# Title\n"

    def test_prepends_when_block_unterminated(self) -> None:
        text = "---\na: 1\n"
        spliced = splice_frontmatter(text, {"a": "2"})
        assert spliced.startswith("---\na: 2\n---\n")
        assert spliced.endswith(text)

    def test_single_block_after_repeated_splices(self) -> None:
        text = "# Title\n"
        for wave in range(3):
            text = splice_frontmatter(text, {"wave": wave})
        assert text == "---\nwave: 2\n---\n# Title\n"

    def test_crlf_body_bytes_kept(self) -> None:
        text = "---\r\na: 1\r\n---\r\nline one\r\nline two\r\n"
        spliced = splice_frontmatter(text, {"a": "2"})
        assert spliced.endswith("\r\nline one\r\nline two\r\n")


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


class TestValidateFrontmatter:
    def test_complete_plan(self) -> None:
        report = validate_frontmatter(parse_frontmatter(_PLAN_DOC), "plan")
        assert report.valid
        assert report.missing == []

    def test_missing_fields_listed_in_schema_order(self) -> None:
        report = validate_frontmatter(from_plain({"phase": "01", "tags": []}), "summary")
        assert not report.valid
        assert report.missing == ["plan", "subsystem", "duration", "completed"]
        assert report.present == ["phase", "tags"]

    def test_to_dict(self) -> None:
        report = validate_frontmatter(MapValue(), "verification")
        assert report.to_dict() == {
            "valid": False,
            "missing": ["phase", "verified", "status", "score"],
            "present": [],
            "schema": "verification",
        }

    def test_unknown_schema(self) -> None:
        with pytest.raises(KeyError):
            validate_frontmatter(MapValue(), "nope")
