"""Helpers shared by the command implementations."""
from __future__ import annotations

import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from plandoc.documents import planning_path

Payload = dict[str, Any]

STATE_FILE = "STATE.md"
ROADMAP_FILE = "ROADMAP.md"
REQUIREMENTS_FILE = "REQUIREMENTS.md"
PHASES_DIR = "phases"


def error(message: str, **extra: Any) -> Payload:
    """Return an error payload; commands report misses as data, not faults."""
    return {"error": message, **extra}


def today() -> str:
    return date.today().isoformat()


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def decode_value(raw: str) -> Any:
    """Decode ``raw`` as JSON when it is valid JSON, else keep the text."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def state_path(root: Path) -> Path:
    return planning_path(root, STATE_FILE)


def roadmap_path(root: Path) -> Path:
    return planning_path(root, ROADMAP_FILE)


def requirements_path(root: Path) -> Path:
    return planning_path(root, REQUIREMENTS_FILE)


def phases_dir(root: Path) -> Path:
    return planning_path(root, PHASES_DIR)
