"""Locating the frontmatter block inside a document.

A frontmatter block opens with a bare ``---`` line on the very first line of
the document and closes at the next bare ``---`` line.  Everything after the
closing delimiter is the body.  The offsets computed here are what lets the
splicer replace the block while leaving the body byte-identical.
"""
from __future__ import annotations

from dataclasses import dataclass

DELIMITER = "---"


@dataclass(frozen=True, slots=True)
class FrontmatterBlock:
    """Location of a frontmatter block within a document.

    Parameters
    ----------
    start:
        Offset of the opening delimiter (always ``0``).
    end:
        Offset just past the closing delimiter, excluding its line break.
        Equals ``len(text)`` for an unterminated block.
    inner:
        Text between the two delimiter lines, without the final line break.
    closed:
        ``False`` when the closing delimiter is missing.
    """

    start: int
    end: int
    inner: str
    closed: bool


def _is_delimiter(line: str) -> bool:
    return line.rstrip("\r\n").rstrip() == DELIMITER


def locate_frontmatter(text: str) -> FrontmatterBlock | None:
    """Return the frontmatter block of ``text``, or ``None`` if it has none."""
    lines = text.splitlines(keepends=True)
    if not lines or not _is_delimiter(lines[0]):
        return None

    offset = len(lines[0])
    inner_start = offset
    for line in lines[1:]:
        if _is_delimiter(line):
            inner = text[inner_start:offset]
            if inner.endswith("\n"):
                inner = inner[:-1]
            if inner.endswith("\r"):
                inner = inner[:-1]
            end = offset + len(line.rstrip("\r\n"))
            return FrontmatterBlock(start=0, end=end, inner=inner, closed=True)
        offset += len(line)

    return FrontmatterBlock(start=0, end=len(text), inner=text[inner_start:], closed=False)


def strip_frontmatter(text: str) -> str:
    """Return the body of ``text`` with any closed frontmatter block removed.

    The line break that follows the closing delimiter is dropped too, so a
    document ``---\\na: b\\n---\\n# Title`` yields ``# Title``.
    """
    block = locate_frontmatter(text)
    if block is None or not block.closed:
        return text
    body = text[block.end:]
    if body.startswith("\r\n"):
        return body[2:]
    if body.startswith("\n"):
        return body[1:]
    return body
