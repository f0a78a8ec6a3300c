"""Reading and writing planning documents.

Writes are atomic: the new text goes to a sibling temporary file which then
replaces the original with ``os.replace``.  A crash part way through leaves
the original file untouched.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

from plandoc.errors import DocumentAccessError, DocumentNotFoundError

logger = logging.getLogger(__name__)

PLANNING_DIR = ".planning"


def planning_path(root: Path | str, *parts: str) -> Path:
    """Return a path inside the ``.planning`` directory of project ``root``."""
    return Path(root, PLANNING_DIR, *parts)


def resolve_path(root: Path | str, path: Path | str) -> Path:
    """Resolve ``path`` against ``root`` unless it is already absolute."""
    candidate = Path(path)
    return candidate if candidate.is_absolute() else Path(root) / candidate


def read_document(path: Path | str) -> str:
    """Return the text of ``path``.

    Raises
    ------
    DocumentNotFoundError
        If ``path`` does not exist or is not a regular file.
    DocumentAccessError
        If ``path`` cannot be opened or is not valid UTF-8.
    """
    path = Path(path)
    if not path.is_file():
        raise DocumentNotFoundError(path)
    try:
        # newline="" keeps CRLF documents byte-identical on write-back
        with open(path, encoding="utf-8", newline="") as handle:
            return handle.read()
    except UnicodeDecodeError as exc:
        raise DocumentAccessError(path, "not valid UTF-8") from exc
    except OSError as exc:
        raise DocumentAccessError(path, exc.strerror or str(exc)) from exc


def read_optional(path: Path | str) -> str | None:
    """Return the text of ``path``, or ``None`` when it does not exist."""
    try:
        return read_document(path)
    except DocumentNotFoundError:
        logger.debug("Optional document %s not present", path)
        return None


def write_document(path: Path | str, text: str) -> None:
    """Atomically replace the contents of ``path`` with ``text``.

    Raises
    ------
    DocumentAccessError
        If the temporary file cannot be written or moved into place.
    """
    path = Path(path)
    tmp = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp, path)
    except OSError as exc:
        raise DocumentAccessError(path, exc.strerror or str(exc), action="write") from exc
    logger.debug("Wrote %d characters to %s", len(text), path)
