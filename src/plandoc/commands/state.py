"""``state`` commands: read and mutate ``.planning/STATE.md``.

STATE.md is a markdown document of ``**Label:** value`` lines and ``##``
sections (Decisions, Blockers, Performance Metrics, Session Continuity).
Every write also refreshes a machine-readable frontmatter block derived from
the body, so the file always carries exactly one up-to-date block.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from plandoc.commands.common import Payload, error, state_path, today, utc_timestamp
from plandoc.commands.roadmap import list_phase_files
from plandoc.config import CONFIG_NAME, load_config
from plandoc.documents import planning_path, read_optional, write_document
from plandoc.frontmatter import (
    locate_frontmatter,
    parse_frontmatter,
    splice_frontmatter,
    strip_frontmatter,
    to_plain,
)
from plandoc.markdown import (
    append_list_item,
    append_table_row,
    extract_bold_field,
    extract_field,
    find_section,
    list_items,
    patch_fields,
    remove_list_items,
    replace_field,
)
from plandoc.markdown.scanner import section_lines

logger = logging.getLogger(__name__)

STATE_MISSING = "STATE.md not found"
STATE_VERSION = "1.0"

DECISION_SECTIONS = ("Decisions", "Decisions Made")
BLOCKER_SECTIONS = ("Blockers", "Blockers/Concerns")
SESSION_SECTIONS = ("Session", "Session Continuity")
METRICS_SECTIONS = ("Performance Metrics",)

_PERCENT_RE = re.compile(r"(\d+)\s*%")
_LEADING_INT_RE = re.compile(r"^\s*(\d+)")
_DECISION_ITEM_RE = re.compile(r"^\[Phase\s+([^\]]+)\]:\s*(.*?)(?:\s+—\s+(.*))?$")
_SEPARATOR_RE = re.compile(r"^\s*\|(?:\s*:?-+:?\s*\|)+\s*$")

BAR_WIDTH = 10


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _leading_int(value: str | None) -> int | None:
    if value is None:
        return None
    match = _LEADING_INT_RE.match(value)
    return int(match.group(1)) if match is not None else None


def _percent(value: str | None) -> int | None:
    if value is None:
        return None
    match = _PERCENT_RE.search(value)
    return int(match.group(1)) if match is not None else None


def _first_field(doc: str, labels: Iterable[str]) -> str | None:
    for label in labels:
        value = extract_bold_field(doc, label)
        if value is not None:
            return value
    return None


def normalize_status(status: str | None) -> str:
    """Map a free-text ``Status`` value onto a fixed vocabulary."""
    text = (status or "").lower()
    if not text:
        return "unknown"
    if "paused" in text or "stopped" in text:
        return "paused"
    if any(word in text for word in ("in progress", "executing", "ready to execute")):
        return "executing"
    if "ready to plan" in text or "planning" in text:
        return "planning"
    if "verif" in text:
        return "verifying"
    if "complete" in text or "done" in text:
        return "completed"
    return "unknown"


def progress_bar(percent: int) -> str:
    filled = max(0, min(BAR_WIDTH, round(percent / 10)))
    return "█" * filled + "░" * (BAR_WIDTH - filled)


def _disk_progress(root: Path) -> tuple[int, int]:
    listings = list_phase_files(root) or {}
    plans = sum(files.plans for files in listings.values())
    summaries = sum(files.summaries for files in listings.values())
    return plans, summaries


# ---------------------------------------------------------------------------
# Frontmatter sync
# ---------------------------------------------------------------------------


def build_state_frontmatter(body: str, root: Path | None = None) -> dict[str, Any]:
    """Derive the machine-readable summary of a STATE.md body.

    Parameters
    ----------
    body:
        STATE.md text without its frontmatter block.
    root:
        Project root; when given, plan totals are counted on disk.

    Returns
    -------
    dict
        Plain mapping; ``None`` values are dropped on serialization.
    """
    plans, summaries = _disk_progress(root) if root is not None else (0, 0)
    percent = _percent(extract_bold_field(body, "Progress"))
    if percent is None and plans:
        percent = min(100, round(summaries / plans * 100))
    return {
        "state_version": STATE_VERSION,
        "current_phase": extract_bold_field(body, "Current Phase"),
        "current_phase_name": extract_bold_field(body, "Current Phase Name"),
        "current_plan": extract_bold_field(body, "Current Plan"),
        "status": normalize_status(extract_bold_field(body, "Status")),
        "stopped_at": _first_field(body, ("Stopped At", "Stopped at")),
        "paused_at": extract_bold_field(body, "Paused At"),
        "last_updated": utc_timestamp(),
        "last_activity": extract_bold_field(body, "Last Activity"),
        "progress": {
            "total_phases": _leading_int(extract_bold_field(body, "Total Phases")),
            "total_plans": plans or _leading_int(extract_bold_field(body, "Total Plans in Phase")),
            "completed_plans": summaries,
            "percent": percent if percent is not None else 0,
        },
    }


def sync_state_frontmatter(text: str, root: Path | None = None) -> str:
    """Replace the frontmatter of ``text`` with one derived from its body."""
    return splice_frontmatter(text, build_state_frontmatter(strip_frontmatter(text), root))


def _write_state(root: Path, text: str) -> None:
    write_document(state_path(root), sync_state_frontmatter(text, root))


# ---------------------------------------------------------------------------
# Read commands
# ---------------------------------------------------------------------------


def state_load(root: Path) -> Payload:
    """Return the project config together with the raw STATE.md text."""
    state = read_optional(state_path(root))
    return {
        "config": load_config(root).to_dict(),
        "state_raw": state or "",
        "state_exists": state is not None,
        "config_exists": planning_path(root, CONFIG_NAME).is_file(),
        "roadmap_exists": planning_path(root, "ROADMAP.md").is_file(),
    }


def state_get(root: Path, field: str | None = None) -> Payload:
    """Return the whole STATE.md, or one bold field or section of it."""
    state = read_optional(state_path(root))
    if state is None:
        return error(STATE_MISSING)
    if field is None:
        return {"content": state}
    value = extract_field(strip_frontmatter(state), field)
    if value is None:
        return error(f'Section or field "{field}" not found')
    return {field: value}


def state_json(root: Path) -> Payload:
    """Return the STATE.md frontmatter, derived from the body when absent."""
    state = read_optional(state_path(root))
    if state is None:
        return error(STATE_MISSING)
    if locate_frontmatter(state) is not None:
        return to_plain(parse_frontmatter(state))
    return build_state_frontmatter(state, root)


def _decisions(body: str) -> list[dict[str, str | None]]:
    section = find_section(body, DECISION_SECTIONS)
    if section is None:
        return []
    decisions: list[dict[str, str | None]] = []
    in_table = False
    for line in section_lines(body, section):
        text = line.text.strip()
        if _SEPARATOR_RE.match(text):
            in_table = True
            continue
        if in_table and text.startswith("|"):
            cells = [cell.strip() for cell in text.strip("|").split("|")]
            if len(cells) >= 2:
                decisions.append({
                    "phase": cells[0],
                    "summary": cells[1],
                    "rationale": cells[2] if len(cells) > 2 else None,
                })
            continue
        in_table = False
    for item in list_items(body, DECISION_SECTIONS):
        match = _DECISION_ITEM_RE.match(item)
        if match is not None:
            decisions.append({
                "phase": match.group(1).strip(),
                "summary": match.group(2).strip(),
                "rationale": match.group(3).strip() if match.group(3) else None,
            })
    return decisions


def _session(body: str) -> dict[str, str | None]:
    section = find_section(body, SESSION_SECTIONS)
    text = section.body(body) if section is not None else ""
    return {
        "last_date": _first_field(text, ("Last Date", "Last session")),
        "stopped_at": extract_bold_field(text, "Stopped At"),
        "resume_file": extract_bold_field(text, "Resume File"),
    }


def state_snapshot(root: Path) -> Payload:
    """Return the structured content of STATE.md.

    Bold fields become snake_case keys (numbers parsed where they are
    numbers), plus ``decisions``, ``blockers`` and ``session``.
    """
    state = read_optional(state_path(root))
    if state is None:
        return error(STATE_MISSING)
    body = strip_frontmatter(state)
    return {
        "current_phase": extract_bold_field(body, "Current Phase"),
        "current_phase_name": extract_bold_field(body, "Current Phase Name"),
        "total_phases": _leading_int(extract_bold_field(body, "Total Phases")),
        "current_plan": extract_bold_field(body, "Current Plan"),
        "total_plans_in_phase": _leading_int(extract_bold_field(body, "Total Plans in Phase")),
        "status": extract_bold_field(body, "Status"),
        "progress_percent": _percent(extract_bold_field(body, "Progress")),
        "last_activity": extract_bold_field(body, "Last Activity"),
        "last_activity_desc": extract_bold_field(body, "Last Activity Description"),
        "decisions": _decisions(body),
        "blockers": list_items(body, BLOCKER_SECTIONS),
        "paused_at": extract_bold_field(body, "Paused At"),
        "session": _session(body),
    }


# ---------------------------------------------------------------------------
# Field mutation commands
# ---------------------------------------------------------------------------


def state_update(root: Path, field: str, value: str) -> Payload:
    """Replace one field of STATE.md."""
    state = read_optional(state_path(root))
    if state is None:
        return {"updated": False, "reason": STATE_MISSING}
    updated = replace_field(state, field, value)
    if updated is None:
        return {"updated": False, "reason": f'Field "{field}" not found in STATE.md'}
    _write_state(root, updated)
    return {"updated": True, "field": field, "value": value}


def state_patch(root: Path, fields: Mapping[str, str] | Iterable[tuple[str, str]]) -> Payload:
    """Replace several fields at once, writing whichever ones exist."""
    state = read_optional(state_path(root))
    if state is None:
        return error(STATE_MISSING)
    result = patch_fields(state, fields)
    if result.changed:
        _write_state(root, result.content)
    return result.to_dict()


def state_advance_plan(root: Path) -> Payload:
    """Move ``Current Plan`` forward, or flag the phase ready for verification."""
    state = read_optional(state_path(root))
    if state is None:
        return error(STATE_MISSING)
    current = _leading_int(extract_bold_field(state, "Current Plan"))
    total = _leading_int(extract_bold_field(state, "Total Plans in Phase"))
    if current is None or total is None:
        return error("Cannot parse Current Plan or Total Plans in Phase from STATE.md")

    if current >= total:
        result = patch_fields(state, [
            ("Status", "Phase complete — ready for verification"),
            ("Last Activity", today()),
        ])
        _write_state(root, result.content)
        return {
            "advanced": False,
            "reason": "last_plan",
            "current_plan": current,
            "total_plans": total,
            "status": "ready_for_verification",
        }

    result = patch_fields(state, [
        ("Current Plan", str(current + 1)),
        ("Status", "Ready to execute"),
        ("Last Activity", today()),
    ])
    _write_state(root, result.content)
    return {
        "advanced": True,
        "previous_plan": current,
        "current_plan": current + 1,
        "total_plans": total,
    }


def state_update_progress(root: Path) -> Payload:
    """Recompute ``Progress`` from the plans and summaries on disk."""
    state = read_optional(state_path(root))
    if state is None:
        return error(STATE_MISSING)
    plans, summaries = _disk_progress(root)
    percent = min(100, round(summaries / plans * 100)) if plans else 0
    bar = progress_bar(percent)
    updated = replace_field(state, "Progress", f"[{bar}] {percent}%")
    if updated is None:
        return {"updated": False, "reason": "Progress field not found in STATE.md"}
    _write_state(root, updated)
    return {
        "updated": True,
        "percent": percent,
        "completed": summaries,
        "total": plans,
        "bar": bar,
    }


def state_record_session(root: Path, stopped_at: str | None = None, resume_file: str | None = None) -> Payload:
    """Stamp the session continuity fields with today's date."""
    state = read_optional(state_path(root))
    if state is None:
        return error(STATE_MISSING)

    doc = state
    updated: list[str] = []
    pending: list[tuple[tuple[str, ...], str]] = [(("Last session", "Last Date"), today())]
    if stopped_at:
        pending.append((("Stopped at",), stopped_at))
    pending.append((("Resume file",), resume_file or "None"))
    for labels, value in pending:
        for label in labels:
            replaced = replace_field(doc, label, value)
            if replaced is not None:
                doc = replaced
                updated.append(label)
                break

    if not updated:
        return {"recorded": False, "reason": "No session fields found in STATE.md"}
    _write_state(root, doc)
    return {"recorded": True, "updated": updated}


# ---------------------------------------------------------------------------
# Section mutation commands
# ---------------------------------------------------------------------------


def state_add_decision(root: Path, phase: str | None, summary: str | None, rationale: str | None = None) -> Payload:
    """Append ``- [Phase X]: summary — rationale`` to the Decisions section."""
    state = read_optional(state_path(root))
    if state is None:
        return error(STATE_MISSING)
    if not summary:
        return error("summary required")
    entry = f"[Phase {phase or '?'}]: {summary}"
    if rationale:
        entry += f" — {rationale}"
    updated = append_list_item(state, DECISION_SECTIONS, entry)
    if updated is None:
        return {"added": False, "reason": "Decisions section not found in STATE.md"}
    _write_state(root, updated)
    return {"added": True, "decision": entry}


def state_add_blocker(root: Path, text: str | None) -> Payload:
    """Append ``- text`` to the Blockers section."""
    state = read_optional(state_path(root))
    if state is None:
        return error(STATE_MISSING)
    if not text:
        return error("text required")
    updated = append_list_item(state, BLOCKER_SECTIONS, text)
    if updated is None:
        return {"added": False, "reason": "Blockers section not found in STATE.md"}
    _write_state(root, updated)
    return {"added": True, "blocker": text}


def state_resolve_blocker(root: Path, text: str | None) -> Payload:
    """Remove every blocker line containing ``text``, case-insensitively."""
    state = read_optional(state_path(root))
    if state is None:
        return error(STATE_MISSING)
    if not text:
        return error("text required")
    result = remove_list_items(state, BLOCKER_SECTIONS, text)
    if result is None:
        return {"resolved": False, "reason": "Blockers section not found in STATE.md"}
    if result.removed:
        _write_state(root, result.content)
    else:
        logger.debug("No blocker matched %r", text)
    return {"resolved": True, "blocker": text, "removed": result.removed}


def state_record_metric(
    root: Path,
    phase: str | None,
    plan: str | None,
    duration: str | None,
    tasks: str | None = None,
    files: str | None = None,
) -> Payload:
    """Append a row to the Performance Metrics table."""
    state = read_optional(state_path(root))
    if state is None:
        return error(STATE_MISSING)
    if not (phase and plan and duration):
        return error("phase, plan and duration required")
    row = f"| Phase {phase} P{plan} | {duration} | {tasks or '-'} tasks | {files or '-'} files |"
    updated = append_table_row(state, METRICS_SECTIONS, row)
    if updated is None:
        return {"recorded": False, "reason": "Performance Metrics section not found in STATE.md"}
    _write_state(root, updated)
    return {"recorded": True, "phase": phase, "plan": plan, "duration": duration}
