"""Reader for the ``must_haves`` sub-schema of plan frontmatter.

``must_haves`` holds three blocks written with deeper and looser
indentation than the rest of the frontmatter, for example::

    must_haves:
        artifacts:
          - path: "src/app.js"
            min_lines: 2
            exports:
              - GET

so it gets its own reader instead of going through the generic parser.  The
reader is indentation relative: it only requires that a block be nested
under ``must_haves:``, items be nested under the block, and item fields be
nested under their item.
"""
from __future__ import annotations

import logging
import re
from typing import Union

from plandoc.frontmatter.document import locate_frontmatter
from plandoc.frontmatter.parser import parse_inline_list, unquote
from plandoc.frontmatter.values import Scalar

logger = logging.getLogger(__name__)

ROOT_KEY = "must_haves"

_FIELD_RE = re.compile(r"^([A-Za-z0-9_-]+):(?:\s+(.*))?$")

FieldValue = Union[str, int, list[str]]
RawEntry = Union[str, dict[str, FieldValue]]


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def _coerce(raw: str) -> FieldValue:
    if raw.startswith("["):
        return [item.text for item in parse_inline_list(raw).items if isinstance(item, Scalar)]
    value = unquote(raw)
    return int(value) if value.isdigit() else value


# ---------------------------------------------------------------------------
# Block location
# ---------------------------------------------------------------------------


def _region(lines: list[str]) -> tuple[list[str], int]:
    """Return the lines nested under ``must_haves:`` and its indent.

    Without a ``must_haves:`` key the whole block is searched, with any
    indented line eligible as a block name.
    """
    for index, line in enumerate(lines):
        if line.strip() == f"{ROOT_KEY}:":
            root_indent = _indent_of(line)
            region: list[str] = []
            for follower in lines[index + 1:]:
                if follower.strip() and _indent_of(follower) <= root_indent:
                    break
                region.append(follower)
            return region, root_indent
    return lines, 0


def _block_lines(region: list[str], root_indent: int, block: str) -> list[str]:
    for index, line in enumerate(region):
        if line.strip() != f"{block}:":
            continue
        block_indent = _indent_of(line)
        if block_indent <= root_indent:
            continue
        collected: list[str] = []
        for follower in region[index + 1:]:
            if not follower.strip():
                continue
            if _indent_of(follower) <= block_indent:
                break
            collected.append(follower)
        return collected
    return []


# ---------------------------------------------------------------------------
# Item parsing
# ---------------------------------------------------------------------------


def _group_items(lines: list[str]) -> list[list[str]]:
    item_indent: int | None = None
    groups: list[list[str]] = []
    for line in lines:
        stripped = line.strip()
        indent = _indent_of(line)
        if stripped.startswith("- ") and (item_indent is None or indent <= item_indent):
            item_indent = indent
            groups.append([" " * (indent + 2) + stripped[2:].lstrip()])
        elif groups:
            groups[-1].append(line)
    return groups


def _parse_item(group: list[str]) -> RawEntry:
    head = group[0].strip()
    match = _FIELD_RE.match(head)
    if match is None:
        return unquote(head)

    record: dict[str, FieldValue] = {}
    current: str | None = None
    for line in group:
        stripped = line.strip()
        if stripped.startswith("- "):
            if current is not None:
                existing = record.get(current)
                items = existing if isinstance(existing, list) else []
                items.append(unquote(stripped[2:].strip()))
                record[current] = items
            continue
        field_match = _FIELD_RE.match(stripped)
        if field_match is None:
            continue
        key, raw = field_match.group(1), (field_match.group(2) or "").strip()
        record[key] = _coerce(raw) if raw else ""
        current = key if not raw else None
    return record


def parse_must_haves_block(text: str, block: str) -> list[RawEntry]:
    """Return the entries of one ``must_haves`` block.

    Parameters
    ----------
    text:
        Full document text.
    block:
        Block name, usually ``truths``, ``artifacts`` or ``key_links``.

    Returns
    -------
    list
        One entry per ``- `` item, in document order.  An item is a plain
        string when its first line is not ``field: value``, otherwise a flat
        ``dict``.  Digit-only values become ``int``; a field with no value
        followed by deeper ``- `` lines becomes a list.  An absent block or
        absent frontmatter yields ``[]``.
    """
    located = locate_frontmatter(text)
    if located is None:
        return []
    region, root_indent = _region(located.inner.splitlines())
    lines = _block_lines(region, root_indent, block)
    if not lines:
        logger.debug("must_haves block %r not found", block)
        return []
    return [_parse_item(group) for group in _group_items(lines)]
