"""Required-field checklists for the frontmatter of each document kind."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from plandoc.frontmatter.values import MapValue

FRONTMATTER_SCHEMAS: dict[str, tuple[str, ...]] = {
    "plan": (
        "phase",
        "plan",
        "type",
        "wave",
        "depends_on",
        "files_modified",
        "autonomous",
        "must_haves",
    ),
    "summary": ("phase", "plan", "subsystem", "tags", "duration", "completed"),
    "verification": ("phase", "verified", "status", "score"),
}


@dataclass(frozen=True, slots=True)
class SchemaReport:
    """Outcome of checking a frontmatter map against one schema."""

    schema: str
    missing: list[str] = field(default_factory=list)
    present: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.missing

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "missing": list(self.missing),
            "present": list(self.present),
            "schema": self.schema,
        }


def validate_frontmatter(frontmatter: MapValue | Mapping[str, Any], schema: str) -> SchemaReport:
    """Check which required fields of ``schema`` are present.

    Parameters
    ----------
    frontmatter:
        Parsed frontmatter, as a ``MapValue`` or a plain mapping.
    schema:
        One of the keys of ``FRONTMATTER_SCHEMAS``.

    Returns
    -------
    SchemaReport
        Required fields split into missing and present, in schema order.

    Raises
    ------
    KeyError
        If ``schema`` is not a known schema name.
    """
    required = FRONTMATTER_SCHEMAS[schema]
    missing = [name for name in required if name not in frontmatter]
    present = [name for name in required if name in frontmatter]
    return SchemaReport(schema=schema, missing=missing, present=present)
