"""Roadmap analysis: phases, milestones and on-disk progress.

``analyze_roadmap`` is pure.  The caller lists the files of each phase
directory and hands them in as ``PhaseFiles``; deciding which directory
belongs to which phase is done by ``match_phase_directory``.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from plandoc.markdown.fields import extract_bold_field
from plandoc.markdown.scanner import scan_headings
from plandoc.phases.locator import checklist_entries, phase_sections
from plandoc.phases.numbering import normalize_phase_name, same_phase

_MILESTONE_RE = re.compile(r"\b(v\d+(?:\.\d+)+)\b")

# disk status values, most advanced first
COMPLETE = "complete"
PARTIAL = "partial"
PLANNED = "planned"
RESEARCHED = "researched"
DISCUSSED = "discussed"
EMPTY = "empty"
NO_DIRECTORY = "no_directory"


def _has_suffix(name: str, kind: str) -> bool:
    return name == f"{kind}.md" or name.endswith(f"-{kind}.md")


@dataclass(frozen=True, slots=True)
class PhaseFiles:
    """File names found in one phase directory."""

    directory: str
    names: tuple[str, ...] = ()

    @property
    def plans(self) -> int:
        return sum(1 for name in self.names if _has_suffix(name, "PLAN"))

    @property
    def summaries(self) -> int:
        return sum(1 for name in self.names if _has_suffix(name, "SUMMARY"))

    @property
    def has_research(self) -> bool:
        return any(_has_suffix(name, "RESEARCH") for name in self.names)

    @property
    def has_context(self) -> bool:
        return any(_has_suffix(name, "CONTEXT") for name in self.names)

    @property
    def status(self) -> str:
        if self.plans and self.summaries >= self.plans:
            return COMPLETE
        if self.summaries:
            return PARTIAL
        if self.plans:
            return PLANNED
        if self.has_research:
            return RESEARCHED
        if self.has_context:
            return DISCUSSED
        return EMPTY


def match_phase_directory(number: str, directories: Iterable[str]) -> str | None:
    """Return the directory of phase ``number``.

    A phase directory is named after the normalized number, optionally
    followed by ``-slug``: ``01``, ``01-foundation``, ``02.1-hotfix``.
    """
    wanted = normalize_phase_name(number)
    for directory in sorted(directories):
        head = directory.split("-", 1)[0]
        if normalize_phase_name(head) == wanted:
            return directory
    return None


@dataclass(frozen=True, slots=True)
class PhaseStatus:
    """One phase of the roadmap with its progress on disk."""

    number: str
    name: str
    goal: str | None
    depends_on: str | None
    plan_count: int
    summary_count: int
    has_research: bool
    has_context: bool
    disk_status: str
    roadmap_complete: bool
    directory: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "name": self.name,
            "goal": self.goal,
            "depends_on": self.depends_on,
            "plan_count": self.plan_count,
            "summary_count": self.summary_count,
            "has_research": self.has_research,
            "has_context": self.has_context,
            "disk_status": self.disk_status,
            "roadmap_complete": self.roadmap_complete,
            "directory": self.directory,
        }


@dataclass(frozen=True, slots=True)
class Milestone:
    version: str
    heading: str

    def to_dict(self) -> dict[str, str]:
        return {"version": self.version, "heading": self.heading}


@dataclass(frozen=True, slots=True)
class RoadmapAnalysis:
    """Overview of a roadmap."""

    phases: list[PhaseStatus] = field(default_factory=list)
    milestones: list[Milestone] = field(default_factory=list)
    missing_phase_details: list[str] = field(default_factory=list)

    @property
    def total_plans(self) -> int:
        return sum(phase.plan_count for phase in self.phases)

    @property
    def total_summaries(self) -> int:
        return sum(phase.summary_count for phase in self.phases)

    @property
    def completed_phases(self) -> int:
        return sum(1 for phase in self.phases if phase.disk_status == COMPLETE)

    @property
    def progress_percent(self) -> int:
        if not self.total_plans:
            return 0
        return min(100, round(self.total_summaries / self.total_plans * 100))

    @property
    def current_phase(self) -> str | None:
        for phase in self.phases:
            if phase.disk_status != COMPLETE:
                return phase.number
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "milestones": [milestone.to_dict() for milestone in self.milestones],
            "phases": [phase.to_dict() for phase in self.phases],
            "phase_count": len(self.phases),
            "completed_phases": self.completed_phases,
            "total_plans": self.total_plans,
            "total_summaries": self.total_summaries,
            "progress_percent": self.progress_percent,
            "current_phase": self.current_phase,
            "missing_phase_details": list(self.missing_phase_details) or None,
        }


def milestones(roadmap: str) -> list[Milestone]:
    """Return the ``## v1.0 Title`` milestone headings in document order."""
    found: list[Milestone] = []
    for heading in scan_headings(roadmap):
        if heading.level not in (2, 3):
            continue
        match = _MILESTONE_RE.search(heading.title)
        if match is not None and not heading.title.lower().startswith("phase"):
            found.append(Milestone(version=match.group(1), heading=heading.title.strip()))
    return found


def analyze_roadmap(roadmap: str, files: Mapping[str, PhaseFiles] | None = None) -> RoadmapAnalysis:
    """Summarize ``roadmap`` against the phase directories in ``files``.

    Parameters
    ----------
    roadmap:
        ROADMAP document text.
    files:
        Phase directory name to its listing.  ``None`` means the project has
        no phases directory, so every phase is ``no_directory``.

    Returns
    -------
    RoadmapAnalysis
        Phases in roadmap order, milestones, and checklist phases that lack a
        detail section.
    """
    files = files or {}
    checklist = checklist_entries(roadmap)
    sections = phase_sections(roadmap)

    phases: list[PhaseStatus] = []
    for section in sections:
        directory = match_phase_directory(section.number, files)
        listing = files[directory] if directory is not None else None
        checked = any(
            entry.checked and same_phase(entry.number, section.number) for entry in checklist
        )
        phases.append(
            PhaseStatus(
                number=section.number,
                name=section.name,
                goal=extract_bold_field(section.text, "Goal"),
                depends_on=extract_bold_field(section.text, "Depends on"),
                plan_count=listing.plans if listing else 0,
                summary_count=listing.summaries if listing else 0,
                has_research=listing.has_research if listing else False,
                has_context=listing.has_context if listing else False,
                disk_status=listing.status if listing else NO_DIRECTORY,
                roadmap_complete=checked,
                directory=directory,
            )
        )

    missing = [
        entry.number
        for entry in checklist
        if not any(same_phase(entry.number, section.number) for section in sections)
    ]
    return RoadmapAnalysis(phases=phases, milestones=milestones(roadmap), missing_phase_details=missing)
