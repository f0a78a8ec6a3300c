"""Value model for parsed frontmatter.

Every value produced by the frontmatter parser is one of three frozen
dataclasses: ``Scalar``, ``ListValue`` or ``MapValue``.  They compare
structurally, which is what the round-trip contract relies on:
``parse(serialize(v)) == v``.

Callers that want plain Python data (for JSON emission) use ``to_plain``;
data coming in from JSON (``frontmatter set``/``merge``) goes through
``from_plain`` before it reaches the serializer.
"""
from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Union

# keys the parser reads back; anything else cannot be written
KEY_RE = re.compile(r"[A-Za-z0-9_-]+")


# ---------------------------------------------------------------------------
# Value variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Scalar:
    """A single text value.  The format has no typed scalars."""

    text: str


@dataclass(frozen=True, slots=True)
class ListValue:
    """An ordered sequence of values."""

    items: tuple["Value", ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["Value"]:
        return iter(self.items)


@dataclass(frozen=True, slots=True)
class MapValue:
    """An ordered mapping with unique string keys.

    Parameters
    ----------
    entries:
        ``(key, value)`` pairs in document order.  Keys are unique; use
        ``with_entry`` to add or overwrite a key without breaking that.
    """

    entries: tuple[tuple[str, "Value"], ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.entries)

    def keys(self) -> list[str]:
        """Return the keys in document order."""
        return [k for k, _ in self.entries]

    def get(self, key: str, default: "Value | None" = None) -> "Value | None":
        """Return the value stored under ``key``, or ``default``."""
        for k, v in self.entries:
            if k == key:
                return v
        return default

    def with_entry(self, key: str, value: "Value") -> "MapValue":
        """Return a copy with ``key`` set to ``value``.

        An existing key keeps its position; a new key is appended.
        """
        replaced = False
        entries: list[tuple[str, Value]] = []
        for k, v in self.entries:
            if k == key:
                entries.append((k, value))
                replaced = True
            else:
                entries.append((k, v))
        if not replaced:
            entries.append((key, value))
        return MapValue(entries=tuple(entries))

    def without(self, key: str) -> "MapValue":
        """Return a copy with ``key`` removed (no-op when absent)."""
        return MapValue(entries=tuple((k, v) for k, v in self.entries if k != key))


Value = Union[Scalar, ListValue, MapValue]

PlainValue = Union[str, list["PlainValue"], dict[str, "PlainValue"]]


# ---------------------------------------------------------------------------
# Conversion to and from plain Python data
# ---------------------------------------------------------------------------


def to_plain(value: Value) -> PlainValue:
    """Convert a ``Value`` tree to ``str`` / ``list`` / ``dict``."""
    if isinstance(value, Scalar):
        return value.text
    if isinstance(value, ListValue):
        return [to_plain(item) for item in value.items]
    if isinstance(value, MapValue):
        return {k: to_plain(v) for k, v in value.entries}
    raise TypeError(f"Unknown value type: {type(value)}")


def _scalar_text(obj: object) -> str:
    # bool first: bool is an int subclass
    if isinstance(obj, bool):
        return "true" if obj else "false"
    return str(obj)


def from_plain(obj: object) -> Value:
    """Convert JSON-like Python data into a ``Value`` tree.

    ``None`` map entries and list items are dropped, since the serializer
    omits them anyway.  Booleans become ``"true"``/``"false"`` and numbers
    their decimal text.
    """
    if isinstance(obj, (Scalar, ListValue, MapValue)):
        return obj
    if isinstance(obj, Mapping):
        return MapValue(
            entries=tuple(
                (str(k), from_plain(v)) for k, v in obj.items() if v is not None
            )
        )
    if isinstance(obj, (list, tuple)):
        return ListValue(items=tuple(from_plain(v) for v in obj if v is not None))
    if obj is None:
        raise TypeError("None has no frontmatter representation")
    return Scalar(text=_scalar_text(obj))


def is_valid_key(key: str) -> bool:
    """Return ``True`` when ``key`` can be written as ``key: value``."""
    return KEY_RE.fullmatch(key) is not None
