"""Field mutation engine: read and rewrite labeled values in a document body.

A field is addressed by its label and found in one of two forms, tried in
this order:

1. A bold label, ``**Status:** In progress``.  The value is the rest of the
   line.
2. A heading section, ``## Blockers`` up to the next heading of the same or a
   shallower level.  The value is the section body.

Labels match case-insensitively.  Lookups that miss return ``None``; nothing
here raises.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from plandoc.markdown.scanner import find_section

logger = logging.getLogger(__name__)


def _bold_pattern(label: str) -> re.Pattern[str]:
    return re.compile(
        r"(\*\*" + re.escape(label) + r":\*\*)([ \t]*)([^\r\n]*)",
        re.IGNORECASE,
    )


# ---------------------------------------------------------------------------
# Single fields
# ---------------------------------------------------------------------------


def extract_bold_field(doc: str, label: str) -> str | None:
    """Return the trimmed value of the first ``**label:**`` line, or ``None``."""
    match = _bold_pattern(label).search(doc)
    return match.group(3).strip() if match is not None else None


def extract_field(doc: str, label: str) -> str | None:
    """Return the value of field ``label``.

    Parameters
    ----------
    doc:
        Document text.
    label:
        Field label without the ``**``/``:`` decoration or heading hashes.

    Returns
    -------
    str | None
        The trimmed bold-label value, else the trimmed section body, else
        ``None`` when the document has neither form.
    """
    value = extract_bold_field(doc, label)
    if value is not None:
        return value
    section = find_section(doc, label)
    if section is None:
        return None
    return section.body(doc).strip()


def replace_field(doc: str, label: str, value: str) -> str | None:
    """Return ``doc`` with the value of field ``label`` replaced by ``value``.

    Only the value portion changes; every other character of ``doc`` is kept.
    ``value`` is inserted literally (no backreference or escape expansion).

    Returns
    -------
    str | None
        The new document, or ``None`` when the field does not exist.
    """
    match = _bold_pattern(label).search(doc)
    if match is not None:
        gap = match.group(2) or " "
        return doc[: match.start(2)] + gap + value + doc[match.end(3):]

    section = find_section(doc, label)
    if section is None:
        return None
    body = value.rstrip("\n") + "\n"
    if section.end < len(doc):
        body += "\n"
    prefix = doc[: section.body_start]
    if not prefix.endswith("\n"):
        prefix += "\n"
    return prefix + body + doc[section.end:]


# ---------------------------------------------------------------------------
# Multi-field patch
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PatchResult:
    """Outcome of ``patch_fields``.

    Parameters
    ----------
    content:
        The document after every successful replacement.
    updated:
        Labels that were replaced, in application order.
    failed:
        Labels that were not found.
    """

    content: str
    updated: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        """``True`` when some labels were replaced and some were not."""
        return bool(self.updated) and bool(self.failed)

    @property
    def changed(self) -> bool:
        return bool(self.updated)

    def to_dict(self) -> dict[str, Any]:
        return {"updated": list(self.updated), "failed": list(self.failed)}


def patch_fields(doc: str, fields: Mapping[str, str] | Iterable[tuple[str, str]]) -> PatchResult:
    """Replace several fields, each against the result of the previous one.

    There is no rollback: labels that are found are replaced even when
    others fail, and both outcomes are reported.
    """
    pairs = fields.items() if isinstance(fields, Mapping) else fields
    content = doc
    updated: list[str] = []
    failed: list[str] = []
    for label, value in pairs:
        replaced = replace_field(content, label, value)
        if replaced is None:
            logger.debug("Field %r not found", label)
            failed.append(label)
            continue
        content = replaced
        updated.append(label)
    return PatchResult(content=content, updated=updated, failed=failed)
