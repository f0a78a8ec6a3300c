"""plandoc — round-trip editing of planning documents.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import plandoc

    doc = open(".planning/phases/01-setup/01-01-PLAN.md").read()

    # Read and rewrite the frontmatter; the body is left byte-identical
    meta = plandoc.parse_frontmatter(doc)
    doc = plandoc.splice_frontmatter(doc, meta.with_entry("wave", plandoc.Scalar("2")))

    # Edit a ``**Status:**`` line or a ``## Status`` section
    doc = plandoc.replace_field(doc, "Status", "Complete") or doc

    # Look up a roadmap phase
    lookup = plandoc.get_phase(roadmap_text, "2.1")

    plandoc.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from plandoc.frontmatter.values import ListValue, MapValue, Scalar

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from plandoc.markdown.fields import PatchResult
    from plandoc.phases.locator import PhaseLookup


def parse_frontmatter(text: str) -> "MapValue":
    """Parse the frontmatter block at the head of ``text``.

    Parameters
    ----------
    text:
        Full document text.

    Returns
    -------
    MapValue
        The top-level map; empty when the document has no block.
    """
    from plandoc.frontmatter.parser import parse_frontmatter as _parse

    return _parse(text)


def serialize_frontmatter(value: "MapValue") -> str:
    """Render ``value`` as frontmatter block text, delimiters excluded."""
    from plandoc.frontmatter.serializer import serialize_frontmatter as _serialize

    return _serialize(value)


def splice_frontmatter(text: str, value: "MapValue") -> str:
    """Return ``text`` with its frontmatter block replaced by ``value``."""
    from plandoc.frontmatter.splicer import splice_frontmatter as _splice

    return _splice(text, value)


def extract_field(doc: str, label: str) -> str | None:
    """Return the value of a ``**label:**`` line or ``## label`` section."""
    from plandoc.markdown.fields import extract_field as _extract

    return _extract(doc, label)


def replace_field(doc: str, label: str, value: str) -> str | None:
    """Replace the value of field ``label``; ``None`` when it is absent."""
    from plandoc.markdown.fields import replace_field as _replace

    return _replace(doc, label, value)


def patch_fields(doc: str, fields: dict[str, str]) -> "PatchResult":
    """Replace several fields, reporting which ones were not found."""
    from plandoc.markdown.fields import patch_fields as _patch

    return _patch(doc, fields)


def get_phase(roadmap: str, number: str) -> "PhaseLookup":
    """Locate the detail section of phase ``number`` in a roadmap.

    Parameters
    ----------
    roadmap:
        ROADMAP document text.
    number:
        Phase number; ``"1"``, ``"01"`` and ``"001"`` are equivalent.

    Returns
    -------
    PhaseLookup
        ``found=False`` when the phase has no detail section.
    """
    from plandoc.phases.locator import get_phase as _get_phase

    return _get_phase(roadmap, number)


__all__ = [
    "__version__",
    # Values
    "Scalar",
    "ListValue",
    "MapValue",
    # Frontmatter
    "parse_frontmatter",
    "serialize_frontmatter",
    "splice_frontmatter",
    # Fields
    "extract_field",
    "replace_field",
    "patch_fields",
    # Phases
    "get_phase",
]
