"""Frontmatter parser: document text to ``MapValue``.

The format is a small YAML-like subset.  Parsing is line based and driven by
an explicit indentation stack:

- ``key: value`` stores a scalar, ``key: [a, b]`` an inline list.
- ``key:`` with nothing after it opens a *placeholder*.  The format cannot
  tell an empty map from an empty list from a list-valued key until the next
  deeper line is read, so the placeholder stays undecided until then:
  a ``- item`` line promotes it to a list, a ``key: value`` line to a map.
  A placeholder that never receives a child becomes an empty map.
- ``- key: value`` inside a list starts a map item; further keys of that
  item sit on deeper lines.
- ``key: [`` followed by ``- item`` lines and a closing ``]`` line is read
  as a block list.

Nothing here raises.  Lines that fit no rule are skipped, so callers treat a
missing key as absent rather than as an error.

Known limitation
----------------
Inline lists are split on every comma regardless of quoting, so
``["a, b", c]`` yields three items.  Callers depend on the naive split; it
is kept as is.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Union

from plandoc.frontmatter.document import locate_frontmatter
from plandoc.frontmatter.values import (
    KEY_RE,
    ListValue,
    MapValue,
    PlainValue,
    Scalar,
    Value,
    to_plain,
)

logger = logging.getLogger(__name__)

# ``key:`` must be followed by whitespace or end of line, so ``http://x``
# stays a scalar.
_ENTRY_RE = re.compile(r"^(" + KEY_RE.pattern + r"):(?:\s+(.*))?$")

_QUOTES = ("'", '"')

# escapes written by the serializer inside double quotes
_ESCAPE_RE = re.compile(r'\\(["\\nr]|u[0-9a-fA-F]{4})')
_UNESCAPES = {'"': '"', "\\": "\\", "n": "\n", "r": "\r"}

# ---------------------------------------------------------------------------
# Parse-time containers
# ---------------------------------------------------------------------------

_PLACEHOLDER = "placeholder"
_MAP = "map"
_LIST = "list"


class _Node:
    """Mutable container used while parsing; frozen into a ``Value`` at the end."""

    __slots__ = ("kind", "key", "entries", "items")

    def __init__(self, kind: str = _PLACEHOLDER, key: str | None = None) -> None:
        self.kind = kind
        self.key = key
        self.entries: dict[str, _Slot] = {}
        self.items: list[_Slot] = []

    def accept_entry(self) -> bool:
        """Promote a placeholder to a map; return whether entries are allowed."""
        if self.kind == _PLACEHOLDER:
            self.kind = _MAP
            logger.debug("Placeholder %r resolved to a map", self.key)
        return self.kind == _MAP

    def accept_item(self) -> bool:
        """Promote a placeholder to a list; return whether items are allowed."""
        if self.kind == _PLACEHOLDER:
            self.kind = _LIST
            logger.debug("Placeholder %r resolved to a list", self.key)
        return self.kind == _LIST

    def freeze(self) -> Value:
        if self.kind == _LIST:
            return ListValue(items=tuple(_freeze(item) for item in self.items))
        return self.freeze_map()

    def freeze_map(self) -> MapValue:
        return MapValue(entries=tuple((k, _freeze(v)) for k, v in self.entries.items()))


_Slot = Union[_Node, Scalar, ListValue, MapValue]


def _freeze(slot: _Slot) -> Value:
    return slot.freeze() if isinstance(slot, _Node) else slot


@dataclass(slots=True)
class _Frame:
    node: _Node
    indent: int


# ---------------------------------------------------------------------------
# Scalar helpers
# ---------------------------------------------------------------------------


def _unescape(match: re.Match[str]) -> str:
    code = match.group(1)
    if code.startswith("u"):
        return chr(int(code[1:], 16))
    return _UNESCAPES[code]


def unquote(text: str) -> str:
    """Strip one pair of matching surrounding quotes from ``text``.

    Double-quoted text also has its backslash escapes reversed; unknown
    escapes are kept as written.  Single-quoted text is taken literally.
    """
    if len(text) >= 2 and text[0] == text[-1] and text[0] in _QUOTES:
        inner = text[1:-1]
        if text[0] == '"':
            return _ESCAPE_RE.sub(_unescape, inner)
        return inner
    return text


def _strip_quote_chars(text: str) -> str:
    if text[:1] in _QUOTES:
        text = text[1:]
    if text[-1:] in _QUOTES:
        text = text[:-1]
    return text


def parse_inline_list(text: str) -> ListValue:
    """Parse ``[a, b, c]`` by a naive comma split (see module docstring)."""
    inner = text[1:] if text.startswith("[") else text
    if inner.endswith("]"):
        inner = inner[:-1]
    items = (_strip_quote_chars(part.strip()) for part in inner.split(","))
    return ListValue(items=tuple(Scalar(item) for item in items if item))


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class FrontmatterParser:
    """Line scanner with an indentation-depth stack.

    A fresh instance is used per block; ``parse_block`` may be called only
    once per instance.
    """

    def __init__(self) -> None:
        self._root = _Node(_MAP)
        self._stack: list[_Frame] = [_Frame(self._root, -1)]

    def parse_block(self, inner: str) -> MapValue:
        """Parse the text between the two delimiter lines."""
        for raw in inner.splitlines():
            content = raw.strip()
            if not content:
                continue
            indent = len(raw) - len(raw.lstrip())
            while len(self._stack) > 1 and indent <= self._stack[-1].indent:
                self._stack.pop()
            top = self._stack[-1].node

            if content.startswith("- "):
                text = content[2:].lstrip()
                self._item(text, indent, indent + content.index(text), top)
                continue

            match = _ENTRY_RE.match(content)
            if match is not None:
                self._entry(match.group(1), (match.group(2) or "").strip(), indent, top)

        return self._root.freeze_map()

    def _entry(self, key: str, value: str, indent: int, top: _Node) -> None:
        if not top.accept_entry():
            return
        if value == "":
            child = _Node(key=key)
            top.entries[key] = child
            self._stack.append(_Frame(child, indent))
        elif value == "[":
            # multi-line bracket form; the closing ``]`` line matches no rule
            child = _Node(_LIST, key=key)
            top.entries[key] = child
            self._stack.append(_Frame(child, indent))
        elif value.startswith("["):
            top.entries[key] = parse_inline_list(value)
        else:
            top.entries[key] = Scalar(unquote(value))

    def _item(self, text: str, indent: int, text_col: int, top: _Node) -> None:
        if not top.accept_item():
            return
        if text == "{}":
            top.items.append(MapValue())
            return
        if text.startswith("[") and text.endswith("]"):
            top.items.append(parse_inline_list(text))
            return
        match = _ENTRY_RE.match(text)
        if match is None:
            top.items.append(Scalar(unquote(text)))
            return
        # ``- key: value`` opens a map item; its first key sits at text_col.
        item = _Node(_MAP)
        top.items.append(item)
        self._stack.append(_Frame(item, indent))
        self._entry(match.group(1), (match.group(2) or "").strip(), text_col, item)


# ---------------------------------------------------------------------------
# Module-level convenience functions
# ---------------------------------------------------------------------------


def parse_frontmatter(text: str) -> MapValue:
    """Parse the frontmatter of a document.

    Parameters
    ----------
    text:
        Full document text.

    Returns
    -------
    MapValue
        The top-level map; empty when the document has no frontmatter or
        the block is empty.
    """
    block = locate_frontmatter(text)
    if block is None:
        return MapValue()
    return FrontmatterParser().parse_block(block.inner)


def extract_frontmatter(text: str) -> dict[str, PlainValue]:
    """Parse the frontmatter of a document into plain ``dict``/``list``/``str``."""
    return {key: to_plain(value) for key, value in parse_frontmatter(text).entries}
