"""Typed views over the three ``must_haves`` blocks.

Entries are rebuilt from the document text on every call; nothing is cached.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from plandoc.musthaves.parser import FieldValue, parse_must_haves_block


@dataclass(frozen=True, slots=True)
class Truth:
    """An observable statement that must hold once the plan is done."""

    text: str


@dataclass(frozen=True, slots=True)
class Artifact:
    """A file the plan must produce.

    Parameters
    ----------
    path:
        File path relative to the project root.
    provides:
        Free-text description of what the file provides.
    min_lines:
        Minimum line count, when set.
    contains:
        Literal text the file must contain, when set.
    exports:
        Names the file must export.
    """

    path: str
    provides: str | None = None
    min_lines: int | None = None
    contains: str | None = None
    exports: tuple[str, ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "provides": self.provides,
            "min_lines": self.min_lines,
            "contains": self.contains,
            "exports": list(self.exports),
        }


@dataclass(frozen=True, slots=True)
class KeyLink:
    """A connection from one file to another the plan must establish."""

    from_path: str
    to_path: str
    via: str | None = None
    pattern: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_path,
            "to": self.to_path,
            "via": self.via,
            "pattern": self.pattern,
        }


MustHavesEntry = Union[Truth, Artifact, KeyLink]


def _text(record: dict[str, FieldValue], key: str) -> str | None:
    value = record.get(key)
    if value is None or value == "" or isinstance(value, list):
        return None
    return str(value)


def _int(record: dict[str, FieldValue], key: str) -> int | None:
    value = record.get(key)
    return value if isinstance(value, int) else None


def _names(record: dict[str, FieldValue], key: str) -> tuple[str, ...]:
    value = record.get(key)
    if isinstance(value, list):
        return tuple(value)
    if isinstance(value, str) and value:
        return (value,)
    return ()


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------


def read_truths(text: str) -> list[Truth]:
    """Return the ``truths`` entries of a plan document."""
    truths: list[Truth] = []
    for entry in parse_must_haves_block(text, "truths"):
        if isinstance(entry, str):
            truths.append(Truth(entry))
    return truths


def read_artifacts(text: str) -> list[Artifact]:
    """Return the ``artifacts`` entries that name a ``path``."""
    artifacts: list[Artifact] = []
    for entry in parse_must_haves_block(text, "artifacts"):
        if isinstance(entry, str):
            continue
        path = _text(entry, "path")
        if path is None:
            continue
        artifacts.append(
            Artifact(
                path=path,
                provides=_text(entry, "provides"),
                min_lines=_int(entry, "min_lines"),
                contains=_text(entry, "contains"),
                exports=_names(entry, "exports"),
            )
        )
    return artifacts


def read_key_links(text: str) -> list[KeyLink]:
    """Return the ``key_links`` entries that name both ends."""
    links: list[KeyLink] = []
    for entry in parse_must_haves_block(text, "key_links"):
        if isinstance(entry, str):
            continue
        source, target = _text(entry, "from"), _text(entry, "to")
        if source is None or target is None:
            continue
        links.append(
            KeyLink(
                from_path=source,
                to_path=target,
                via=_text(entry, "via"),
                pattern=_text(entry, "pattern"),
            )
        )
    return links
