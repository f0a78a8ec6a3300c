"""Phase numbers: normalization and ordering.

A phase number has an integer part, optional dot-separated sublevels and an
optional letter suffix: ``1``, ``02``, ``2.1``, ``12A``, ``1.2.3``.  The
canonical form pads the integer part to two digits and upper-cases the
letter, so ``"1"``, ``"01"`` and ``"001"`` all name the same phase.
"""
from __future__ import annotations

import re

_PHASE_RE = re.compile(r"^(\d+)([A-Z])?((?:\.\d+)*)([A-Z])?$", re.IGNORECASE)

PhaseSortKey = tuple[int, tuple[int, ...], str]


def _parts(phase: str) -> tuple[int, tuple[int, ...], str] | None:
    match = _PHASE_RE.match(phase.strip())
    if match is None:
        return None
    integer, early_letter, decimals, late_letter = match.groups()
    sublevels = tuple(int(part) for part in decimals.split(".") if part)
    letter = (late_letter or early_letter or "").upper()
    return int(integer), sublevels, letter


def normalize_phase_name(phase: str) -> str:
    """Return the canonical form of ``phase``.

    ``"1"`` becomes ``"01"``, ``"2.1"`` becomes ``"02.1"`` and ``"1a"``
    becomes ``"01A"``.  Text that is not a phase number is returned
    unchanged.
    """
    parts = _parts(phase)
    if parts is None:
        return phase
    integer, sublevels, letter = parts
    decimals = "".join(f".{level}" for level in sublevels)
    return f"{integer:02d}{decimals}{letter}"


def phase_sort_key(phase: str) -> PhaseSortKey:
    """Sort key ordering by integer part, then sublevels, then letter.

    ``"2" < "2.1" < "2.2" < "10"`` and ``"12" < "12A" < "12B"``.  Text that
    is not a phase number sorts after every real phase.
    """
    parts = _parts(phase)
    if parts is None:
        return (2**31, (), phase)
    return parts


def compare_phase_numbers(left: str, right: str) -> int:
    """Return ``-1``, ``0`` or ``1`` comparing two phase numbers."""
    if _parts(left) is None or _parts(right) is None:
        return (left > right) - (left < right)
    a, b = phase_sort_key(left), phase_sort_key(right)
    return (a > b) - (a < b)


def same_phase(left: str, right: str) -> bool:
    """Return ``True`` when both strings name the same phase."""
    return normalize_phase_name(left) == normalize_phase_name(right)
