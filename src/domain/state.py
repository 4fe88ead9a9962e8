from datetime import datetime
from typing import Literal

from src.domain.entities import Episode, EpisodeStatus
from src.domain.timeutil import minutes_between

EpisodeAction = Literal["end", "edit", "delete"]


def can_transition(current: EpisodeStatus, action: EpisodeAction) -> bool:
    """
    Determine if an action is allowed from the current state.

    open   --end/edit--> closed
    closed --edit-->     closed
    any    --delete-->   removed
    Nothing returns to open.
    """
    if action == "delete":
        return True
    if action == "edit":
        return current in ("open", "closed")
    if action == "end":
        return current == "open"
    return False


def close(episode: Episode, end: datetime, now: datetime) -> Episode:
    """
    Return a NEW closed Episode ending at ``end``.
    Raises ValueError if the episode is already closed or end precedes start.
    """
    if not can_transition(episode.status, "end"):
        raise ValueError(f"Invalid transition from {episode.status} via end")
    if end < episode.start:
        raise ValueError("end cannot be before start")

    return episode.model_copy(
        update={
            "end": end,
            "duration": minutes_between(episode.start, end),
            "updated_at": now,
        }
    )


def reschedule(episode: Episode, start: datetime, end: datetime, now: datetime) -> Episode:
    """
    Return a NEW closed Episode covering [start, end]. Period never changes.
    Raises ValueError if end precedes start.
    """
    if end < start:
        raise ValueError("end cannot be before start")

    return episode.model_copy(
        update={
            "start": start,
            "end": end,
            "duration": minutes_between(start, end),
            "updated_at": now,
        }
    )
