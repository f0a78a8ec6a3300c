"""Must-haves: truths, artifacts and key links declared in plan frontmatter."""
from __future__ import annotations

from plandoc.musthaves.entries import (
    Artifact,
    KeyLink,
    MustHavesEntry,
    Truth,
    read_artifacts,
    read_key_links,
    read_truths,
)
from plandoc.musthaves.parser import parse_must_haves_block

__all__ = [
    "Truth",
    "Artifact",
    "KeyLink",
    "MustHavesEntry",
    "parse_must_haves_block",
    "read_truths",
    "read_artifacts",
    "read_key_links",
]
