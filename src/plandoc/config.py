"""Project configuration from ``.planning/config.json``.

``load_config`` never fails: a missing file, unreadable file or invalid JSON
yields the defaults.  Settings may sit at the top level or inside a section
(``planning``, ``workflow``, ``git``); a top-level key wins over the same key
in a section.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from plandoc.documents import planning_path

logger = logging.getLogger(__name__)

CONFIG_NAME = "config.json"

DEFAULT_PROFILE = "balanced"
FALLBACK_MODEL = "sonnet"

# agent type -> model tier per profile
MODEL_PROFILES: dict[str, dict[str, str]] = {
    "planner": {"quality": "opus", "balanced": "opus", "budget": "sonnet"},
    "roadmapper": {"quality": "opus", "balanced": "sonnet", "budget": "sonnet"},
    "executor": {"quality": "opus", "balanced": "sonnet", "budget": "sonnet"},
    "phase-researcher": {"quality": "opus", "balanced": "sonnet", "budget": "haiku"},
    "project-researcher": {"quality": "opus", "balanced": "sonnet", "budget": "haiku"},
    "research-synthesizer": {"quality": "sonnet", "balanced": "sonnet", "budget": "haiku"},
    "debugger": {"quality": "opus", "balanced": "sonnet", "budget": "sonnet"},
    "codebase-mapper": {"quality": "sonnet", "balanced": "haiku", "budget": "haiku"},
    "verifier": {"quality": "sonnet", "balanced": "sonnet", "budget": "haiku"},
    "plan-checker": {"quality": "sonnet", "balanced": "sonnet", "budget": "haiku"},
    "integration-checker": {"quality": "sonnet", "balanced": "sonnet", "budget": "haiku"},
}

# section that may hold each setting besides the top level
_SECTIONS: dict[str, str] = {
    "commit_docs": "planning",
    "search_gitignored": "planning",
    "research": "workflow",
    "plan_checker": "workflow",
    "verifier": "workflow",
    "branching_strategy": "git",
}


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Effective project settings."""

    model_profile: str = DEFAULT_PROFILE
    commit_docs: bool = True
    search_gitignored: bool = False
    research: bool = True
    plan_checker: bool = True
    verifier: bool = True
    brave_search: bool = False
    parallelization: bool = True
    branching_strategy: str = "none"
    model_overrides: dict[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _read_json(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read %s: %s; using defaults", path, exc)
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Invalid JSON in %s: %s; using defaults", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _lookup(data: dict[str, Any], key: str) -> Any:
    if key in data:
        return data[key]
    section = data.get(_SECTIONS.get(key, ""))
    if isinstance(section, dict):
        return section.get(key)
    return None


def load_config(root: Path | str | None = None) -> ProjectConfig:
    """Load the settings of the project rooted at ``root``.

    Parameters
    ----------
    root:
        Project root holding ``.planning/``.  Defaults to the current
        working directory.

    Returns
    -------
    ProjectConfig
        Settings with every key missing from the file set to its default.
    """
    base = Path(root) if root is not None else Path.cwd()
    data = _read_json(planning_path(base, CONFIG_NAME))
    defaults = ProjectConfig()
    values: dict[str, Any] = {}
    for name in (
        "model_profile",
        "commit_docs",
        "search_gitignored",
        "research",
        "plan_checker",
        "verifier",
        "brave_search",
        "branching_strategy",
    ):
        found = _lookup(data, name)
        values[name] = getattr(defaults, name) if found is None else found

    parallelization = data.get("parallelization")
    if isinstance(parallelization, dict):
        parallelization = parallelization.get("enabled")
    values["parallelization"] = (
        defaults.parallelization if parallelization is None else bool(parallelization)
    )

    overrides = data.get("model_overrides")
    values["model_overrides"] = overrides if isinstance(overrides, dict) else None
    return ProjectConfig(**values)


# ---------------------------------------------------------------------------
# Model resolution
# ---------------------------------------------------------------------------


def resolve_model(agent: str, config: ProjectConfig) -> str:
    """Return the model tier for ``agent`` under ``config``.

    Precedence is a per-agent override, then the profile table, then
    ``FALLBACK_MODEL`` for agents the table does not know.  ``"opus"`` is
    reported as ``"inherit"`` so the caller keeps its own top-tier model.
    """
    overrides = config.model_overrides or {}
    model = overrides.get(agent)
    if model is None:
        profiles = MODEL_PROFILES.get(agent)
        if profiles is None:
            logger.debug("Unknown agent %r; using %s", agent, FALLBACK_MODEL)
            return FALLBACK_MODEL
        model = profiles.get(config.model_profile, profiles[DEFAULT_PROFILE])
    return "inherit" if model == "opus" else model
