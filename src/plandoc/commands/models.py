"""``resolve-model`` command."""
from __future__ import annotations

from pathlib import Path

from plandoc.commands.common import Payload
from plandoc.config import MODEL_PROFILES, load_config, resolve_model


def resolve_model_command(root: Path, agent: str) -> Payload:
    """Report the model tier ``agent`` runs on in the project at ``root``."""
    config = load_config(root)
    payload: Payload = {
        "model": resolve_model(agent, config),
        "profile": config.model_profile,
    }
    if agent not in MODEL_PROFILES:
        payload["unknown_agent"] = True
    return payload
