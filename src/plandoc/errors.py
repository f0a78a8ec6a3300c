"""Exception types raised by the I/O and command layers.

The text engines (``frontmatter``, ``musthaves``, ``markdown``, ``phases``)
never raise; misses are returned as ``None`` or as result objects.  Only
file access and caller input can fail.  The CLI turns a missing file into an
``{"error": ...}`` payload, an unreadable or unwritable file into an error
payload with exit status 1, and invalid input into a usage error.
"""
from __future__ import annotations

from pathlib import Path


class PlandocError(Exception):
    """Base class for all plandoc errors."""


class DocumentNotFoundError(PlandocError, FileNotFoundError):
    """Raised when a document that must exist is missing.

    Parameters
    ----------
    path:
        The path that was looked up.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"File not found: {path}")


class DocumentAccessError(PlandocError, OSError):
    """Raised when a document exists but cannot be read or written.

    Covers permission problems, directories in the way and text that is not
    valid UTF-8.

    Parameters
    ----------
    path:
        The document path.
    reason:
        Description of the underlying failure.
    action:
        ``"read"`` or ``"write"``.
    """

    def __init__(self, path: Path | str, reason: str, action: str = "read") -> None:
        self.path = Path(path)
        self.reason = reason
        self.action = action
        super().__init__(f"Cannot {action} file {path}: {reason}")


class InvalidInputError(PlandocError, ValueError):
    """Raised when caller-supplied values cannot be used.

    Parameters
    ----------
    message:
        Human-readable description, emitted verbatim in the error payload.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
