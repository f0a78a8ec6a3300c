"""Section and table appender.

Appends rows to markdown tables and items to ``- `` lists inside a heading
section, and flips ``- [ ]`` checklist lines.  Sections that hold nothing
carry a placeholder line (``None``, ``None yet``, ``No decisions yet.``);
appending replaces the placeholder, and removing the last item puts ``None``
back.  Every function returns the new document text, or ``None`` when the
addressed section, table or line is absent.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date

from plandoc.markdown.scanner import Line, find_section, iter_lines, section_lines
from plandoc.phases.numbering import same_phase

logger = logging.getLogger(__name__)

EMPTY_PLACEHOLDER = "None"

_PLACEHOLDER_RE = re.compile(r"^(?:none(?: yet)?|no \w+(?: \w+)? yet)\.?$", re.IGNORECASE)
_SEPARATOR_RE = re.compile(r"^\s*\|(?:\s*:?-+:?\s*\|)+\s*$")
_CHECKBOX_RE = re.compile(r"^(\s*[-*]\s+)\[ \]")
_PHASE_ITEM_RE = re.compile(r"Phase\s+(\d+[A-Za-z]?(?:\.\d+)*[A-Za-z]?)\b", re.IGNORECASE)

Titles = str | Sequence[str]


def is_placeholder(text: str) -> bool:
    """Return ``True`` for a line that only marks an empty section."""
    stripped = text.strip()
    if stripped.startswith("- "):
        stripped = stripped[2:].strip()
    stripped = stripped.strip("*_")
    return bool(_PLACEHOLDER_RE.match(stripped))


def _is_list_line(text: str) -> bool:
    return text.lstrip().startswith(("- ", "* "))


def _is_table_row(text: str) -> bool:
    return text.strip().startswith("|")


def _is_placeholder_row(text: str) -> bool:
    cells = [cell.strip() for cell in text.strip().strip("|").split("|")]
    filled = [cell for cell in cells if cell]
    return len(filled) == 1 and is_placeholder(filled[0])


def _replace_line(doc: str, line: Line, new_text: str) -> str:
    return doc[: line.start] + new_text + doc[line.end:]


def _insert_after(doc: str, line: Line, new_text: str) -> str:
    if line.next_start > line.end:
        return doc[: line.next_start] + new_text + "\n" + doc[line.next_start:]
    return doc[: line.end] + "\n" + new_text + doc[line.end:]


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def append_table_row(doc: str, headings: Titles, row: str) -> str | None:
    """Append ``row`` to the table under the first matching heading.

    Parameters
    ----------
    doc:
        Document text.
    headings:
        Section title, or alternative titles tried together.
    row:
        Complete table row, e.g. ``"| Phase 2 P1 | 5min | 3 tasks | 4 files |"``.

    Returns
    -------
    str | None
        The new document.  A placeholder directly below the header (a bare
        ``None yet`` line or a row holding only a placeholder) is replaced by
        ``row``; otherwise ``row`` goes after the last table row.  ``None``
        when the section or its table is missing.
    """
    section = find_section(doc, headings)
    if section is None:
        return None
    lines = section_lines(doc, section)
    separator = next(
        (i for i, line in enumerate(lines) if not line.in_fence and _SEPARATOR_RE.match(line.text)),
        None,
    )
    if separator is None:
        logger.debug("No table found under %r", headings)
        return None

    rows: list[Line] = []
    for line in lines[separator + 1:]:
        if not _is_table_row(line.text):
            break
        rows.append(line)

    if rows and all(_is_placeholder_row(line.text) for line in rows):
        updated = _replace_line(doc, rows[0], row)
        shift = len(updated) - len(doc)
        for extra in reversed(rows[1:]):
            updated = updated[: extra.start + shift] + updated[extra.next_start + shift:]
        return updated
    if not rows:
        following = lines[separator + 1] if separator + 1 < len(lines) else None
        if following is not None and is_placeholder(following.text):
            return _replace_line(doc, following, row)
        return _insert_after(doc, lines[separator], row)
    return _insert_after(doc, rows[-1], row)


def set_table_cell(doc: str, key: str, column: int, value: str) -> str | None:
    """Set one cell of the first table row whose first cell equals ``key``.

    ``column`` indexes the cells of the row (negative values count from the
    last cell).  The comparison on ``key`` is case-insensitive.  Returns
    ``None`` when no row matches or the row has no such column.
    """
    wanted = key.strip().lower()
    for line in iter_lines(doc):
        text = line.text.strip()
        if line.in_fence or not (text.startswith("|") and text.endswith("|")):
            continue
        parts = line.text.split("|")
        cells = parts[1:-1]
        if not cells or cells[0].strip().lower() != wanted:
            continue
        try:
            cells[column] = f" {value} "
        except IndexError:
            return None
        return _replace_line(doc, line, "|".join([parts[0], *cells, parts[-1]]))
    return None


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RemovalResult:
    """Outcome of ``remove_list_items``."""

    content: str
    removed: list[str] = field(default_factory=list)
    emptied: bool = False


def _section_span(doc: str, headings: Titles) -> tuple[str, list[str], str] | None:
    section = find_section(doc, headings)
    if section is None:
        return None
    prefix = doc[: section.body_start]
    if not prefix.endswith("\n"):
        prefix += "\n"
    return prefix, section.body(doc).split("\n"), doc[section.end:]


def append_list_item(doc: str, headings: Titles, item: str) -> str | None:
    """Append ``- item`` to the list under the first matching heading.

    Placeholder lines in the section are removed.  The item goes after the
    last list line, else after the last non-blank line, else where the
    placeholder stood.  Returns ``None`` when the section is missing.
    """
    span = _section_span(doc, headings)
    if span is None:
        return None
    prefix, body, rest = span
    entry = item if item.startswith("- ") else f"- {item}"

    kept: list[str] = []
    placeholder_at: int | None = None
    for text in body:
        if is_placeholder(text):
            if placeholder_at is None:
                placeholder_at = len(kept)
            continue
        kept.append(text)

    list_lines = [i for i, text in enumerate(kept) if _is_list_line(text)]
    filled = [i for i, text in enumerate(kept) if text.strip()]
    if list_lines:
        position = list_lines[-1] + 1
    elif filled:
        position = filled[-1] + 1
    elif placeholder_at is not None:
        position = placeholder_at
    else:
        position = 1 if len(kept) > 1 and kept[0] == "" else 0
    kept.insert(position, entry)
    return prefix + "\n".join(kept) + rest


def remove_list_items(doc: str, headings: Titles, text: str) -> RemovalResult | None:
    """Remove every ``- `` line of a section containing ``text``.

    Matching is a case-insensitive substring test.  When no list line is
    left the ``None`` placeholder is inserted where the first removed line
    stood.  Returns ``None`` when the section is missing.
    """
    span = _section_span(doc, headings)
    if span is None:
        return None
    prefix, body, rest = span
    needle = text.lower()

    kept: list[str] = []
    removed: list[str] = []
    first_removed: int | None = None
    for line in body:
        if _is_list_line(line) and needle in line.lower():
            if first_removed is None:
                first_removed = len(kept)
            removed.append(line.strip()[2:].strip())
            continue
        kept.append(line)

    emptied = bool(removed) and not any(_is_list_line(line) for line in kept)
    if emptied and first_removed is not None:
        kept.insert(first_removed, EMPTY_PLACEHOLDER)
    return RemovalResult(content=prefix + "\n".join(kept) + rest, removed=removed, emptied=emptied)


def list_items(doc: str, headings: Titles) -> list[str]:
    """Return the ``- `` items of a section, placeholders excluded."""
    section = find_section(doc, headings)
    if section is None:
        return []
    items: list[str] = []
    for line in section_lines(doc, section):
        if line.in_fence or not _is_list_line(line.text) or is_placeholder(line.text):
            continue
        items.append(line.text.strip()[2:].strip())
    return items


# ---------------------------------------------------------------------------
# Checklists
# ---------------------------------------------------------------------------


def toggle_checkbox(doc: str, matcher: Callable[[str], bool], annotation: str = "") -> str | None:
    """Check the first unchecked ``- [ ]`` line accepted by ``matcher``.

    ``matcher`` receives the line text.  ``annotation`` is appended to the
    end of the line.  Returns ``None`` when no line matches.
    """
    for line in iter_lines(doc):
        if line.in_fence:
            continue
        match = _CHECKBOX_RE.match(line.text)
        if match is None or not matcher(line.text):
            continue
        checked = match.group(1) + "[x]" + line.text[match.end():].rstrip() + annotation
        return _replace_line(doc, line, checked)
    return None


def mark_phase_checkbox(roadmap: str, phase: str, when: date | str | None = None) -> str | None:
    """Check the roadmap checklist entry of ``phase``.

    Phase numbers are compared after normalization, so ``"1"`` never checks
    ``Phase 10`` or ``Phase 12``.  The line gets `` (completed YYYY-MM-DD)``
    appended.
    """
    stamp = when if isinstance(when, str) else (when or date.today()).isoformat()

    def matches(text: str) -> bool:
        found = _PHASE_ITEM_RE.search(text)
        return found is not None and same_phase(found.group(1), phase)

    return toggle_checkbox(roadmap, matches, f" (completed {stamp})")


def mark_requirement_checkbox(doc: str, requirement: str) -> str | None:
    """Check the ``- [ ] **REQ-ID**`` line of ``requirement``."""
    pattern = re.compile(r"\*\*" + re.escape(requirement) + r"\*\*", re.IGNORECASE)
    return toggle_checkbox(doc, lambda text: pattern.search(text) is not None)
