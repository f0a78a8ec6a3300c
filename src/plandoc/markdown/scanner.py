"""Line and heading scanning for markdown documents.

Offsets are character offsets into the original text, so callers can splice
replacements without disturbing any other byte.  Lines inside fenced code
blocks never count as headings.
"""
from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

_HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(.*?)(?:[ \t]+#+)?[ \t]*$")
_FENCE_RE = re.compile(r"^[ \t]{0,3}(`{3,}|~{3,})")


@dataclass(frozen=True, slots=True)
class Line:
    """One line of a document.

    Parameters
    ----------
    index:
        Zero-based line number.
    start:
        Offset of the first character.
    end:
        Offset just past the last character, excluding the line break.
    next_start:
        Offset of the following line (``end`` plus the line break length).
    text:
        Line content without the line break.
    in_fence:
        ``True`` when the line belongs to a fenced code block, fence
        markers included.
    """

    index: int
    start: int
    end: int
    next_start: int
    text: str
    in_fence: bool


@dataclass(frozen=True, slots=True)
class Heading:
    """An ATX heading (``## Title``)."""

    level: int
    title: str
    line: Line


@dataclass(frozen=True, slots=True)
class Section:
    """A heading together with the text it governs.

    ``body_start`` is the offset just past the heading line; ``end`` is the
    offset of the next heading of the same or a shallower level, or the end
    of the document.
    """

    heading: Heading
    body_start: int
    end: int

    @property
    def start(self) -> int:
        return self.heading.line.start

    def body(self, text: str) -> str:
        return text[self.body_start:self.end]


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


def iter_lines(text: str) -> Iterator[Line]:
    """Yield every line of ``text`` with offsets and fence state."""
    offset = 0
    fence: str | None = None
    for index, raw in enumerate(text.splitlines(keepends=True)):
        content = raw.rstrip("\r\n")
        match = _FENCE_RE.match(content)
        in_fence = fence is not None
        if match is not None:
            marker = match.group(1)
            if fence is None:
                fence = marker
                in_fence = True
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
                in_fence = True
        yield Line(
            index=index,
            start=offset,
            end=offset + len(content),
            next_start=offset + len(raw),
            text=content,
            in_fence=in_fence,
        )
        offset += len(raw)


def scan_headings(text: str) -> list[Heading]:
    """Return the headings of ``text`` in document order."""
    headings: list[Heading] = []
    for line in iter_lines(text):
        if line.in_fence:
            continue
        match = _HEADING_RE.match(line.text)
        if match is not None:
            headings.append(Heading(len(match.group(1)), match.group(2), line))
    return headings


def section_end(text: str, headings: Sequence[Heading], position: int) -> int:
    """Return where the section opened by ``headings[position]`` ends."""
    level = headings[position].level
    for following in headings[position + 1:]:
        if following.level <= level:
            return following.line.start
    return len(text)


def find_section(text: str, titles: str | Sequence[str], min_level: int = 2) -> Section | None:
    """Locate the first section whose title matches one of ``titles``.

    Parameters
    ----------
    text:
        Document text.
    titles:
        A title or alternative titles, compared case-insensitively after
        trimming.
    min_level:
        Shallowest heading level considered; ``2`` skips the ``#`` document
        title.

    Returns
    -------
    Section | None
        ``None`` when no heading matches.
    """
    wanted = {titles.strip().lower()} if isinstance(titles, str) else {
        title.strip().lower() for title in titles
    }
    headings = scan_headings(text)
    for position, heading in enumerate(headings):
        if heading.level < min_level or heading.title.strip().lower() not in wanted:
            continue
        return Section(
            heading=heading,
            body_start=heading.line.next_start,
            end=section_end(text, headings, position),
        )
    return None


def section_lines(text: str, section: Section) -> list[Line]:
    """Return the body lines of ``section`` (the heading line excluded)."""
    return [
        line
        for line in iter_lines(text)
        if section.body_start <= line.start < section.end
    ]
