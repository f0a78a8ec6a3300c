"""Phase section locator for ROADMAP documents.

A roadmap describes each phase under a heading ``Phase <number>: <name>`` at
level 2, 3 or 4, and usually lists all phases in a checklist as well::

    - [ ] **Phase 1: Foundation** - Set up project

    ### Phase 1: Foundation
    **Goal:** Set up project infrastructure
    **Depends on:** Nothing
    **Success Criteria** (what must be TRUE):
      1. First criterion

Phase numbers are compared after normalization, so ``"1"``, ``"01"`` and
``"001"`` all find ``Phase 1`` while ``Phase 10`` and ``Phase 12`` are never
matched by ``"1"``.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from plandoc.markdown.fields import extract_bold_field
from plandoc.markdown.scanner import Heading, iter_lines, scan_headings, section_end
from plandoc.phases.numbering import same_phase

logger = logging.getLogger(__name__)

MALFORMED_ROADMAP = "malformed_roadmap"

_NUMBER = r"\d+[A-Za-z]?(?:\.\d+)*[A-Za-z]?"
_PHASE_TITLE_RE = re.compile(r"^Phase\s+(" + _NUMBER + r")\s*:\s*(.*)$", re.IGNORECASE)
_CHECKLIST_RE = re.compile(
    r"^\s*[-*]\s+\[([ xX])\]\s*\**Phase\s+(" + _NUMBER + r")\s*:?\s*([^*]*)",
    re.IGNORECASE,
)
_CRITERIA_RE = re.compile(r"\*\*Success Criteria\*\*", re.IGNORECASE)
_NUMBERED_RE = re.compile(r"^\s*\d+\.\s+(.*\S)\s*$")

PHASE_HEADING_LEVELS = (2, 3, 4)


@dataclass(frozen=True, slots=True)
class PhaseSection:
    """A phase heading with the text it governs.

    ``text`` spans from the heading line to the next heading of the same or a
    shallower level, trailing whitespace removed.
    """

    number: str
    name: str
    heading: Heading
    text: str


@dataclass(frozen=True, slots=True)
class ChecklistEntry:
    """One ``- [ ] **Phase N: Name**`` line of the roadmap checklist."""

    number: str
    name: str
    checked: bool


@dataclass(frozen=True, slots=True)
class PhaseLookup:
    """Result of ``get_phase``.

    Parameters
    ----------
    found:
        Whether a detail section for the phase exists.
    phase_number:
        The number as written in the heading when found, else as requested.
    phase_name:
        Heading text after the colon.
    goal:
        Value of the ``**Goal:**`` line, or ``None``.
    depends_on:
        Value of the ``**Depends on:**`` line, or ``None``.
    success_criteria:
        Numbered lines below ``**Success Criteria**``, numbers stripped.
    section:
        The full section text, heading included.
    error, message:
        Set to ``"malformed_roadmap"`` and an explanation when the roadmap
        lists phases in its checklist but has no phase sections at all.
        ``phase_name`` is then taken from the checklist entry, if any.
    """

    found: bool
    phase_number: str
    phase_name: str | None = None
    goal: str | None = None
    depends_on: str | None = None
    success_criteria: list[str] = field(default_factory=list)
    section: str | None = None
    error: str | None = None
    message: str | None = None

    @property
    def malformed(self) -> bool:
        return self.error == MALFORMED_ROADMAP

    def to_dict(self) -> dict[str, Any]:
        if not self.found:
            payload: dict[str, Any] = {"found": False, "phase_number": self.phase_number}
            if self.error is not None:
                payload["error"] = self.error
                payload["message"] = self.message
            if self.phase_name is not None:
                payload["phase_name"] = self.phase_name
            return payload
        return {
            "found": True,
            "phase_number": self.phase_number,
            "phase_name": self.phase_name,
            "goal": self.goal,
            "depends_on": self.depends_on,
            "success_criteria": list(self.success_criteria),
            "section": self.section,
        }


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


def phase_sections(roadmap: str) -> list[PhaseSection]:
    """Return every phase detail section in document order."""
    headings = scan_headings(roadmap)
    sections: list[PhaseSection] = []
    for position, heading in enumerate(headings):
        if heading.level not in PHASE_HEADING_LEVELS:
            continue
        match = _PHASE_TITLE_RE.match(heading.title.strip())
        if match is None:
            continue
        end = section_end(roadmap, headings, position)
        sections.append(
            PhaseSection(
                number=match.group(1),
                name=match.group(2).strip(),
                heading=heading,
                text=roadmap[heading.line.start:end].rstrip(),
            )
        )
    return sections


def checklist_entries(roadmap: str) -> list[ChecklistEntry]:
    """Return the phases listed in the roadmap checklist."""
    entries: list[ChecklistEntry] = []
    for line in iter_lines(roadmap):
        if line.in_fence:
            continue
        match = _CHECKLIST_RE.match(line.text)
        if match is not None:
            entries.append(
                ChecklistEntry(
                    number=match.group(2),
                    name=match.group(3).strip(),
                    checked=match.group(1) != " ",
                )
            )
    return entries


def success_criteria(section: str) -> list[str]:
    """Return the numbered lines that follow ``**Success Criteria**``."""
    criteria: list[str] = []
    collecting = False
    for line in section.splitlines():
        if not collecting:
            collecting = _CRITERIA_RE.search(line) is not None
            continue
        match = _NUMBERED_RE.match(line)
        if match is not None:
            criteria.append(match.group(1))
        elif line.strip() or criteria:
            break
    return criteria


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def get_phase(roadmap: str, number: str) -> PhaseLookup:
    """Locate the detail section of phase ``number``.

    Parameters
    ----------
    roadmap:
        ROADMAP document text.
    number:
        Requested phase number, e.g. ``"1"``, ``"02"``, ``"2.1"``, ``"12A"``.

    Returns
    -------
    PhaseLookup
        ``found=False`` when no heading matches.  When additionally the
        checklist lists phases but no phase heading exists anywhere, the
        result carries ``error="malformed_roadmap"``.
    """
    sections = phase_sections(roadmap)
    for candidate in sections:
        if not same_phase(candidate.number, number):
            continue
        return PhaseLookup(
            found=True,
            phase_number=candidate.number,
            phase_name=candidate.name,
            goal=extract_bold_field(candidate.text, "Goal"),
            depends_on=extract_bold_field(candidate.text, "Depends on"),
            success_criteria=success_criteria(candidate.text),
            section=candidate.text,
        )

    entries = checklist_entries(roadmap)
    if not sections and entries:
        logger.debug("Roadmap lists phases but has no phase sections")
        listed = next((entry for entry in entries if same_phase(entry.number, number)), None)
        if listed is not None:
            message = (
                f"Phase {number} is listed in the roadmap checklist but the "
                f"'### Phase {listed.number}:' detail section is missing"
            )
        else:
            message = (
                f"Roadmap lists {len(entries)} phase(s) in its checklist but every "
                "'### Phase N:' detail section is missing"
            )
        return PhaseLookup(
            found=False,
            phase_number=number,
            phase_name=(listed.name or None) if listed is not None else None,
            error=MALFORMED_ROADMAP,
            message=message,
        )
    return PhaseLookup(found=False, phase_number=number)
