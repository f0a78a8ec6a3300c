"""``verify`` commands: check a plan's must-haves against the working tree.

Artifact checks: the file exists, has at least ``min_lines`` lines, contains
the ``contains`` text and mentions every name in ``exports``.

Key-link checks, in order: ``pattern`` found in the source file, else in the
target file; without a pattern, the target path must appear in the source.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from plandoc.commands.common import Payload, error
from plandoc.documents import read_document, read_optional, resolve_path
from plandoc.errors import DocumentNotFoundError
from plandoc.musthaves import Artifact, KeyLink, read_artifacts, read_key_links

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ArtifactCheck:
    path: str
    exists: bool
    issues: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.issues

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "exists": self.exists,
            "issues": list(self.issues),
            "passed": self.passed,
        }


@dataclass(frozen=True, slots=True)
class LinkCheck:
    link: KeyLink
    verified: bool
    detail: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.link.from_path,
            "to": self.link.to_path,
            "via": self.link.via,
            "verified": self.verified,
            "detail": self.detail,
        }


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def check_artifact(root: Path, artifact: Artifact) -> ArtifactCheck:
    content = read_optional(resolve_path(root, artifact.path))
    if content is None:
        return ArtifactCheck(path=artifact.path, exists=False, issues=["File not found"])

    issues: list[str] = []
    line_count = len(content.split("\n"))
    if artifact.min_lines is not None and line_count < artifact.min_lines:
        issues.append(f"Only {line_count} lines, need {artifact.min_lines}")
    if artifact.contains and artifact.contains not in content:
        issues.append(f"Missing pattern: {artifact.contains}")
    for name in artifact.exports:
        if name not in content:
            issues.append(f"Missing export: {name}")
    return ArtifactCheck(path=artifact.path, exists=True, issues=issues)


def check_key_link(root: Path, link: KeyLink) -> LinkCheck:
    source = read_optional(resolve_path(root, link.from_path))
    if source is None:
        return LinkCheck(link, False, "Source file not found")

    if link.pattern is None:
        if link.to_path in source:
            return LinkCheck(link, True, "Target referenced in source")
        return LinkCheck(link, False, "Target not referenced in source")

    try:
        pattern = re.compile(link.pattern)
    except re.error as exc:
        logger.debug("Invalid key-link pattern %r: %s", link.pattern, exc)
        return LinkCheck(link, False, f"Invalid regex pattern: {link.pattern}")
    if pattern.search(source):
        return LinkCheck(link, True, "Pattern found in source")
    target = read_optional(resolve_path(root, link.to_path))
    if target is not None and pattern.search(target):
        return LinkCheck(link, True, "Pattern found in target")
    return LinkCheck(link, False, f"Pattern {link.pattern!r} not found in source or target")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def verify_artifacts(root: Path, plan: Path) -> Payload:
    """Check every ``must_haves.artifacts`` entry of ``plan``."""
    try:
        text = read_document(resolve_path(root, plan))
    except DocumentNotFoundError as exc:
        return error("File not found", path=str(exc.path))
    artifacts = read_artifacts(text)
    if not artifacts:
        return error("No must_haves.artifacts found in frontmatter", path=str(plan))
    checks = [check_artifact(root, artifact) for artifact in artifacts]
    passed = sum(1 for check in checks if check.passed)
    return {
        "all_passed": passed == len(checks),
        "passed": passed,
        "total": len(checks),
        "artifacts": [check.to_dict() for check in checks],
    }


def verify_key_links(root: Path, plan: Path) -> Payload:
    """Check every ``must_haves.key_links`` entry of ``plan``."""
    try:
        text = read_document(resolve_path(root, plan))
    except DocumentNotFoundError as exc:
        return error("File not found", path=str(exc.path))
    links = read_key_links(text)
    if not links:
        return error("No must_haves.key_links found in frontmatter", path=str(plan))
    checks = [check_key_link(root, link) for link in links]
    verified = sum(1 for check in checks if check.verified)
    return {
        "all_verified": verified == len(checks),
        "verified": verified,
        "total": len(checks),
        "links": [check.to_dict() for check in checks],
    }
