"""Frontmatter serializer: ``MapValue`` to block text.

The output is the text that goes *between* the two ``---`` delimiter lines;
the splicer adds the delimiters.  Output is chosen so that the parser reads
it back to a structurally equal value:

- Empty lists render as ``key: []``.
- Lists of at most three short, plain scalars render inline, ``key: [a, b]``.
- Other lists render in block form, one ``- item`` per line, two spaces deeper
  than the key.
- Scalars that the parser would misread are double-quoted.  Inside double
  quotes ``\\``, ``"`` and line breaks are backslash-escaped, so a value can
  never end the block early.
- Nested maps render as ``key:`` followed by their entries two spaces deeper.

Values the parser could not read back raise ``ValueError``: keys outside
``[A-Za-z0-9_-]+`` and nested lists that do not fit the inline form.
"""
from __future__ import annotations

from collections.abc import Mapping

from plandoc.frontmatter.values import (
    ListValue,
    MapValue,
    Scalar,
    Value,
    from_plain,
    is_valid_key,
    to_plain,
)

INDENT = 2

_INLINE_MAX_ITEMS = 3
_INLINE_MAX_WIDTH = 60
_QUOTES = ("'", '"')

# every character str.splitlines() breaks on
LINE_BREAKS = frozenset("\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029")

_INLINE_FORBIDDEN = frozenset(",:#[]") | LINE_BREAKS
_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r"}


# ---------------------------------------------------------------------------
# Scalar rendering
# ---------------------------------------------------------------------------


def _needs_quotes(text: str) -> bool:
    if text == "" or text != text.strip():
        return True
    if ":" in text or "#" in text:
        return True
    if LINE_BREAKS.intersection(text):
        return True
    if text[0] in "[{":
        return True
    return text[0] in _QUOTES or text[-1] in _QUOTES


def _escape(text: str) -> str:
    parts: list[str] = []
    for char in text:
        if char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif char in LINE_BREAKS:
            parts.append(f"\\u{ord(char):04x}")
        else:
            parts.append(char)
    return "".join(parts)


def render_scalar(text: str) -> str:
    """Return ``text`` as it should appear after ``key: `` or ``- ``."""
    if _needs_quotes(text):
        return f'"{_escape(text)}"'
    return text


def _inline_ok(items: tuple[Value, ...]) -> bool:
    if not items or len(items) > _INLINE_MAX_ITEMS:
        return False
    texts: list[str] = []
    for item in items:
        if not isinstance(item, Scalar):
            return False
        text = item.text
        if not text or text != text.strip():
            return False
        if _INLINE_FORBIDDEN.intersection(text):
            return False
        if text[0] in _QUOTES or text[-1] in _QUOTES:
            return False
        texts.append(text)
    return len(", ".join(texts)) <= _INLINE_MAX_WIDTH


def _inline(items: tuple[Value, ...]) -> str:
    parts = [item.text if isinstance(item, Scalar) else "" for item in items]
    return "[" + ", ".join(part for part in parts if part) + "]"


# ---------------------------------------------------------------------------
# Emitters
# ---------------------------------------------------------------------------


def _emit_map(value: MapValue, indent: int, lines: list[str]) -> None:
    pad = " " * indent
    for key, child in value.entries:
        if not is_valid_key(key):
            raise ValueError(f"Invalid frontmatter key: {key!r}")
        if isinstance(child, Scalar):
            lines.append(f"{pad}{key}: {render_scalar(child.text)}")
        elif isinstance(child, ListValue):
            if not child.items:
                lines.append(f"{pad}{key}: []")
            elif _inline_ok(child.items):
                lines.append(f"{pad}{key}: {_inline(child.items)}")
            else:
                lines.append(f"{pad}{key}:")
                _emit_list(child, indent + INDENT, lines)
        else:
            lines.append(f"{pad}{key}:")
            _emit_map(child, indent + INDENT, lines)


def _emit_list(value: ListValue, indent: int, lines: list[str]) -> None:
    pad = " " * indent
    for item in value.items:
        if isinstance(item, Scalar):
            lines.append(f"{pad}- {render_scalar(item.text)}")
        elif isinstance(item, ListValue):
            # Nested lists only exist in inline form.
            if item.items and not _inline_ok(item.items):
                raise ValueError(f"Nested list cannot be written inline: {to_plain(item)!r}")
            lines.append(f"{pad}- {_inline(item.items)}")
        elif not item.entries:
            lines.append(f"{pad}- {{}}")
        else:
            sub: list[str] = []
            _emit_map(item, indent + INDENT, sub)
            sub[0] = f"{pad}- " + sub[0][indent + INDENT:]
            lines.extend(sub)


def serialize_frontmatter(value: MapValue | Mapping[str, object]) -> str:
    """Serialize a top-level map to frontmatter block text.

    Parameters
    ----------
    value:
        A ``MapValue``, or a plain mapping which is first converted with
        ``from_plain`` (``None`` entries are omitted).

    Returns
    -------
    str
        Block text without delimiters and without a trailing newline.
        An empty map serializes to ``""``.
    """
    if not isinstance(value, MapValue):
        converted = from_plain(value)
        if not isinstance(converted, MapValue):
            raise TypeError("Frontmatter must be a mapping")
        value = converted
    lines: list[str] = []
    _emit_map(value, 0, lines)
    return "\n".join(lines)
