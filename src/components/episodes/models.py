"""
Episodes component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from src.domain.entities import Episode

# --- Error Kinds ---


class ErrorKind(str, Enum):
    """Why an episode operation was rejected."""

    INVALID_INPUT = "invalid_input"
    INVALID_ORDERING = "invalid_ordering"
    OVERLAP_CONFLICT = "overlap_conflict"
    ALREADY_CLOSED = "already_closed"
    NOT_FOUND_OR_NOT_OWNED = "not_found_or_not_owned"


# --- Validation Error ---


@dataclass(frozen=True)
class EpisodeError:
    """Episode operation error."""

    code: ErrorKind
    message: str
    episode_id: str | None = None
    field: str | None = None


# Timestamps arrive either as datetimes or ISO-8601 strings.
TimestampLike = datetime | str


# --- Input Models ---


@dataclass(frozen=True)
class StartEpisodeInput:
    """Input for starting a new (open) episode."""

    owner: str
    start_time: TimestampLike
    period: str


@dataclass(frozen=True)
class EndEpisodeInput:
    """Input for closing an open episode."""

    owner: str
    episode_id: str
    end_time: TimestampLike


@dataclass(frozen=True)
class EditEpisodeInput:
    """Input for overwriting an episode's start and end."""

    owner: str
    episode_id: str
    new_start: TimestampLike
    new_end: TimestampLike


@dataclass(frozen=True)
class DeleteEpisodeInput:
    """Input for deleting an episode."""

    owner: str
    episode_id: str


@dataclass(frozen=True)
class GetEpisodeInput:
    """Input for fetching one episode."""

    owner: str
    episode_id: str


@dataclass(frozen=True)
class ListEpisodesInput:
    """Input for listing an owner's episodes in a period."""

    owner: str
    period: str


# --- Output Models ---


@dataclass(frozen=True)
class EpisodeOutput:
    """Output for operations that return an episode."""

    episode: Episode | None
    errors: list[EpisodeError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class DeleteOutput:
    """Output for delete operation."""

    deleted: bool
    errors: list[EpisodeError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class EpisodeListOutput:
    """Output for list operation."""

    episodes: tuple[Episode, ...]
    total: int
