"""Phases: numbering, roadmap section lookup and roadmap analysis."""
from __future__ import annotations

from plandoc.phases.locator import (
    MALFORMED_ROADMAP,
    ChecklistEntry,
    PhaseLookup,
    PhaseSection,
    checklist_entries,
    get_phase,
    phase_sections,
    success_criteria,
)
from plandoc.phases.numbering import (
    compare_phase_numbers,
    normalize_phase_name,
    phase_sort_key,
    same_phase,
)
from plandoc.phases.roadmap import (
    Milestone,
    PhaseFiles,
    PhaseStatus,
    RoadmapAnalysis,
    analyze_roadmap,
    match_phase_directory,
    milestones,
)

__all__ = [
    # Numbering
    "normalize_phase_name",
    "phase_sort_key",
    "compare_phase_numbers",
    "same_phase",
    # Locator
    "MALFORMED_ROADMAP",
    "PhaseSection",
    "ChecklistEntry",
    "PhaseLookup",
    "phase_sections",
    "checklist_entries",
    "success_criteria",
    "get_phase",
    # Analysis
    "PhaseFiles",
    "PhaseStatus",
    "Milestone",
    "RoadmapAnalysis",
    "milestones",
    "match_phase_directory",
    "analyze_roadmap",
]
