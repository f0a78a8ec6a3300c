"""Command layer: file-backed operations returning JSON-ready payloads.

Each function takes the project root (or a document path), performs one
read-modify-write cycle and returns a ``dict``.  Lookup misses come back as
``{"error": ...}`` payloads; invalid invocation raises ``InvalidInputError``.
"""
from __future__ import annotations

from plandoc.commands.frontmatter import (
    frontmatter_get,
    frontmatter_merge,
    frontmatter_set,
    frontmatter_validate,
)
from plandoc.commands.models import resolve_model_command
from plandoc.commands.requirements import mark_complete, parse_requirement_ids
from plandoc.commands.roadmap import (
    list_phase_files,
    phase_complete,
    roadmap_analyze,
    roadmap_get_phase,
)
from plandoc.commands.state import (
    build_state_frontmatter,
    normalize_status,
    state_add_blocker,
    state_add_decision,
    state_advance_plan,
    state_get,
    state_json,
    state_load,
    state_patch,
    state_record_metric,
    state_record_session,
    state_resolve_blocker,
    state_snapshot,
    state_update,
    state_update_progress,
    sync_state_frontmatter,
)
from plandoc.commands.verify import verify_artifacts, verify_key_links

__all__ = [
    # Frontmatter
    "frontmatter_get",
    "frontmatter_set",
    "frontmatter_merge",
    "frontmatter_validate",
    # Verification
    "verify_artifacts",
    "verify_key_links",
    # Roadmap and phases
    "list_phase_files",
    "roadmap_get_phase",
    "roadmap_analyze",
    "phase_complete",
    # Requirements
    "parse_requirement_ids",
    "mark_complete",
    # State
    "build_state_frontmatter",
    "sync_state_frontmatter",
    "normalize_status",
    "state_load",
    "state_get",
    "state_json",
    "state_snapshot",
    "state_update",
    "state_patch",
    "state_advance_plan",
    "state_update_progress",
    "state_record_session",
    "state_add_decision",
    "state_add_blocker",
    "state_resolve_blocker",
    "state_record_metric",
    # Configuration
    "resolve_model_command",
]
