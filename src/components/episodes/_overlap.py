"""
Overlap validation - pure functions, no I/O.

Decides whether a candidate interval conflicts with the existing episodes of
one owner and period. An open episode (no end) is treated as covering
[start, +inf) for comparison purposes only.

By default the comparison is boundary-inclusive: an episode that ends at
exactly the instant another starts counts as overlapping it. Passing
boundary_inclusive=False lets such episodes sit back to back.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from src.domain.entities import Episode


def _before(a: datetime, b: datetime, inclusive: bool) -> bool:
    return a <= b if inclusive else a < b


def intervals_overlap(
    s1: datetime,
    e1: datetime,
    s2: datetime,
    e2: datetime,
    boundary_inclusive: bool = True,
) -> bool:
    """Closed intervals [s1, e1] and [s2, e2] overlap."""
    return _before(s1, e2, boundary_inclusive) and _before(s2, e1, boundary_inclusive)


def _conflicts_with(
    existing: Episode,
    candidate_start: datetime,
    candidate_end: datetime | None,
    inclusive: bool,
) -> bool:
    if candidate_end is None:
        # Open candidate: any open episode, or a closed one containing our start.
        # Closed episodes lying wholly after the start are caught when the
        # candidate is ended.
        if existing.end is None:
            return True
        return existing.start <= candidate_start and _before(
            candidate_start, existing.end, inclusive
        )

    if existing.end is None:
        return _before(existing.start, candidate_end, inclusive)

    return intervals_overlap(
        existing.start, existing.end, candidate_start, candidate_end, inclusive
    )


def find_conflict(
    existing: Iterable[Episode],
    candidate_start: datetime,
    candidate_end: datetime | None = None,
    exclude_id: str | None = None,
    boundary_inclusive: bool = True,
) -> Episode | None:
    """
    Return the first existing episode the candidate conflicts with.

    Callers must ensure candidate_end >= candidate_start beforehand.
    The episode whose id equals exclude_id is ignored (used when editing).
    """
    for episode in existing:
        if exclude_id is not None and episode.id == exclude_id:
            continue
        if _conflicts_with(episode, candidate_start, candidate_end, boundary_inclusive):
            return episode
    return None


def conflicts(
    existing: Iterable[Episode],
    candidate_start: datetime,
    candidate_end: datetime | None = None,
    exclude_id: str | None = None,
    boundary_inclusive: bool = True,
) -> bool:
    """True if the candidate interval conflicts with any existing episode."""
    return (
        find_conflict(
            existing,
            candidate_start,
            candidate_end,
            exclude_id=exclude_id,
            boundary_inclusive=boundary_inclusive,
        )
        is not None
    )
