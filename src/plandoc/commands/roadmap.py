"""``roadmap`` and ``phase`` commands."""
from __future__ import annotations

import logging
from pathlib import Path

from plandoc.commands.common import Payload, error, phases_dir, roadmap_path, today
from plandoc.documents import read_optional, write_document
from plandoc.markdown import mark_phase_checkbox
from plandoc.phases import PhaseFiles, analyze_roadmap, get_phase

logger = logging.getLogger(__name__)

ROADMAP_MISSING = "ROADMAP.md not found"


def list_phase_files(root: Path) -> dict[str, PhaseFiles] | None:
    """Return the listing of every ``.planning/phases/*`` directory.

    ``None`` when the project has no phases directory at all.
    """
    base = phases_dir(root)
    if not base.is_dir():
        return None
    listings: dict[str, PhaseFiles] = {}
    for directory in sorted(base.iterdir()):
        if not directory.is_dir():
            continue
        names = tuple(sorted(entry.name for entry in directory.iterdir() if entry.is_file()))
        listings[directory.name] = PhaseFiles(directory=directory.name, names=names)
    return listings


def roadmap_get_phase(root: Path, number: str) -> Payload:
    """Look up the detail section of phase ``number`` in ROADMAP.md."""
    roadmap = read_optional(roadmap_path(root))
    if roadmap is None:
        return {"found": False, "error": ROADMAP_MISSING}
    return get_phase(roadmap, number).to_dict()


def roadmap_analyze(root: Path) -> Payload:
    """Summarize ROADMAP.md against the phase directories on disk."""
    roadmap = read_optional(roadmap_path(root))
    if roadmap is None:
        return error(ROADMAP_MISSING)
    return analyze_roadmap(roadmap, list_phase_files(root)).to_dict()


def phase_complete(root: Path, number: str) -> Payload:
    """Check off phase ``number`` in the ROADMAP.md checklist."""
    path = roadmap_path(root)
    roadmap = read_optional(path)
    if roadmap is None:
        return error(ROADMAP_MISSING)
    stamp = today()
    updated = mark_phase_checkbox(roadmap, number, stamp)
    if updated is None:
        return {"completed": False, "phase": number, "reason": "Unchecked phase entry not found"}
    write_document(path, updated)
    logger.debug("Marked phase %s complete", number)
    return {"completed": True, "phase": number, "date": stamp}
