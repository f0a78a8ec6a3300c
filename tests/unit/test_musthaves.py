"""Unit tests for plandoc.musthaves — the must_haves block reader."""
from __future__ import annotations

from plandoc.musthaves import (
    Artifact,
    KeyLink,
    Truth,
    parse_must_haves_block,
    read_artifacts,
    read_key_links,
    read_truths,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def plan(*must_haves: str) -> str:
    """Return a plan document whose ``must_haves`` holds ``must_haves`` lines."""
    return "\n".join(
        [
            "---",
            "phase: 01-test",
            "plan: 01",
            "files_modified: [src/app.js]",
            "must_haves:",
            *must_haves,
            "---",
            "",
            "<tasks></tasks>",
        ]
    )


_FULL = plan(
    "    truths:",
    '      - "User can sign in"',
    "      - Session survives reload",
    "    artifacts:",
    '      - path: "src/app.js"',
    "        provides: Entry point",
    "        min_lines: 2",
    '        contains: "export"',
    "        exports:",
    "          - GET",
    "          - POST",
    "      - path: src/db.js",
    "        exports: [connect, close]",
    "    key_links:",
    '      - from: "src/a.js"',
    '        to: "src/b.js"',
    "        via: import",
    '        pattern: "import.*b"',
)


# ---------------------------------------------------------------------------
# Raw block parsing
# ---------------------------------------------------------------------------


class TestParseMustHavesBlock:
    def test_truths_are_strings(self) -> None:
        assert parse_must_haves_block(_FULL, "truths") == ["User can sign in", "Session survives reload"]

    def test_artifact_fields(self) -> None:
        entries = parse_must_haves_block(_FULL, "artifacts")
        assert entries[0] == {
            "path": "src/app.js",
            "provides": "Entry point",
            "min_lines": 2,
            "contains": "export",
            "exports": ["GET", "POST"],
        }

    def test_inline_list_field(self) -> None:
        entries = parse_must_haves_block(_FULL, "artifacts")
        assert entries[1] == {"path": "src/db.js", "exports": ["connect", "close"]}

    def test_missing_block(self) -> None:
        assert parse_must_haves_block(plan("  truths:", "    - x"), "artifacts") == []

    def test_no_frontmatter(self) -> None:
        assert parse_must_haves_block("# Plan\n", "truths") == []

    def test_two_space_indentation(self) -> None:
        text = plan("  artifacts:", "    - path: a.py", "      min_lines: 5")
        assert parse_must_haves_block(text, "artifacts") == [{"path": "a.py", "min_lines": 5}]

    def test_block_ends_at_sibling(self) -> None:
        text = plan("  truths:", "    - one", "  artifacts:", "    - path: a.py")
        assert parse_must_haves_block(text, "truths") == ["one"]

    def test_block_outside_must_haves_ignored(self) -> None:
        text = "---\ntruths:\n  - stray\nmust_haves:\n  artifacts:\n    - path: a\n---\n"
        assert parse_must_haves_block(text, "truths") == []

    def test_block_after_must_haves_region_ignored(self) -> None:
        text = "---\nmust_haves:\n  truths:\n    - inside\nother:\n  artifacts:\n    - path: a\n---\n"
        assert parse_must_haves_block(text, "artifacts") == []


# ---------------------------------------------------------------------------
# Typed readers
# ---------------------------------------------------------------------------


class TestTypedReaders:
    def test_read_truths(self) -> None:
        assert read_truths(_FULL) == [Truth("User can sign in"), Truth("Session survives reload")]

    def test_read_artifacts(self) -> None:
        first, second = read_artifacts(_FULL)
        assert first == Artifact(
            path="src/app.js",
            provides="Entry point",
            min_lines=2,
            contains="export",
            exports=("GET", "POST"),
        )
        assert second.exports == ("connect", "close")
        assert second.min_lines is None

    def test_artifact_without_path_skipped(self) -> None:
        text = plan("  artifacts:", "    - provides: nothing", "    - path: a.py")
        assert [artifact.path for artifact in read_artifacts(text)] == ["a.py"]

    def test_read_key_links(self) -> None:
        assert read_key_links(_FULL) == [
            KeyLink(from_path="src/a.js", to_path="src/b.js", via="import", pattern="import.*b"),
        ]

    def test_key_link_to_dict_uses_short_names(self) -> None:
        link = KeyLink(from_path="a", to_path="b")
        assert link.to_dict() == {"from": "a", "to": "b", "via": None, "pattern": None}

    def test_key_link_needs_both_ends(self) -> None:
        text = plan("  key_links:", "    - from: a.js", "      via: import")
        assert read_key_links(text) == []
