"""``requirements`` commands."""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from plandoc.commands.common import Payload, requirements_path
from plandoc.documents import read_optional, write_document
from plandoc.markdown import mark_requirement_checkbox, set_table_cell

logger = logging.getLogger(__name__)

_ID_SPLIT_RE = re.compile(r"[\s,\[\]]+")

COMPLETE = "Complete"


def parse_requirement_ids(raw: Iterable[str]) -> list[str]:
    """Split ``REQ-01,REQ-02``, ``[REQ-01, REQ-02]`` or separate arguments."""
    ids: list[str] = []
    for chunk in raw:
        for part in _ID_SPLIT_RE.split(chunk):
            if part and part not in ids:
                ids.append(part)
    return ids


def mark_complete(root: Path, raw_ids: Iterable[str]) -> Payload:
    """Check off requirements and set their traceability status to Complete.

    A requirement counts as found when either its ``- [ ] **ID**`` checkbox
    or its traceability table row was updated.
    """
    ids = parse_requirement_ids(raw_ids)
    path = requirements_path(root)
    doc = read_optional(path)
    if doc is None:
        return {"updated": False, "reason": "REQUIREMENTS.md not found", "ids": ids}

    marked: list[str] = []
    not_found: list[str] = []
    for requirement in ids:
        changed = False
        checked = mark_requirement_checkbox(doc, requirement)
        if checked is not None:
            doc, changed = checked, True
        traced = set_table_cell(doc, requirement, -1, COMPLETE)
        if traced is not None and traced != doc:
            doc, changed = traced, True
        (marked if changed else not_found).append(requirement)

    if marked:
        write_document(path, doc)
        logger.debug("Marked %d requirement(s) complete", len(marked))
    return {
        "updated": bool(marked),
        "marked_complete": marked,
        "not_found": not_found,
        "total": len(ids),
    }
