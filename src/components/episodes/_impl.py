"""
EpisodeLifecycleService - start, end, edit and delete episodes.

Key behaviors:
- An owner's episodes never overlap within a period
- At most one open episode per owner and period
- duration is present iff end is present, in minutes
- Every request is validated fully before anything is written
- Check-then-write runs inside one unit of work so concurrent writers
  for the same owner and period cannot both pass validation
- Unknown ids and other owners' ids are reported identically
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from src.domain.entities import Episode
from src.domain.state import can_transition, close, reschedule
from src.domain.timeutil import parse_timestamp

from ._overlap import find_conflict
from .models import EpisodeError, ErrorKind
from .ports import ConcurrentWriteError, TimePort, UnitOfWorkFactory

logger = logging.getLogger(__name__)

# --- Configuration ---


@dataclass(frozen=True)
class EpisodeConfig:
    """Episode configuration from rules."""

    boundary_inclusive: bool = True


DEFAULT_CONFIG = EpisodeConfig()


# --- Error Messages ---

MSG_NOT_FOUND = "Episode not found or does not belong to the owner."
MSG_ALREADY_CLOSED = "Episode already has an end time."
MSG_END_BEFORE_START = "End time cannot be before start time."
MSG_EDIT_END_BEFORE_START = "New end time cannot be before new start time."
MSG_START_OVERLAP = (
    "An overlapping episode already exists or is ongoing for this owner in this period."
)
MSG_EDIT_OVERLAP = (
    "Edited episode overlaps with another existing episode for this owner in this period."
)
MSG_END_OVERLAP = (
    "Ending the episode here would overlap another episode for this owner in this period."
)
MSG_CONCURRENT = "Episode was modified by a concurrent request; retry with fresh data."


def _not_found(episode_id: str) -> EpisodeError:
    return EpisodeError(
        code=ErrorKind.NOT_FOUND_OR_NOT_OWNED,
        message=MSG_NOT_FOUND,
        episode_id=episode_id,
    )


def _concurrent(episode_id: str) -> EpisodeError:
    # Lost races are reported like any other overlap conflict.
    return EpisodeError(
        code=ErrorKind.OVERLAP_CONFLICT,
        message=MSG_CONCURRENT,
        episode_id=episode_id,
    )


def _invalid_timestamp(field: str) -> EpisodeError:
    return EpisodeError(
        code=ErrorKind.INVALID_INPUT,
        message=f"Invalid {field} provided. Must be a valid timestamp.",
        field=field,
    )


# --- Validation Functions ---


def validate_identifiers(**values: object) -> list[EpisodeError]:
    """Owner, period and episode ids must be non-empty strings."""
    errors: list[EpisodeError] = []
    for name, value in values.items():
        if not isinstance(value, str) or not value.strip():
            errors.append(
                EpisodeError(
                    code=ErrorKind.INVALID_INPUT,
                    message=f"{name} is required",
                    field=name,
                )
            )
    return errors


class _SystemTime:
    def now_utc(self) -> datetime:
        return datetime.now(UTC)


# --- Episode Lifecycle Service ---


class EpisodeLifecycleService:
    """
    Episode lifecycle service.

    State machine: open --end--> closed, open|closed --edit--> closed,
    open|closed --delete--> removed. Nothing returns to open.
    """

    def __init__(
        self,
        unit_of_work: UnitOfWorkFactory,
        time_port: TimePort | None = None,
        config: EpisodeConfig = DEFAULT_CONFIG,
    ) -> None:
        self._uow = unit_of_work
        self._time = time_port or _SystemTime()
        self._config = config

    def _now(self) -> datetime:
        return self._time.now_utc()

    # --- Queries ---

    def get(
        self, owner: str, episode_id: str
    ) -> tuple[Episode | None, list[EpisodeError]]:
        """Get an owner's episode by id."""
        with self._uow() as uow:
            episode = uow.episodes.get_by_id(episode_id)
        if episode is None or episode.owner != owner:
            return None, [_not_found(episode_id)]
        return episode, []

    def list_episodes(self, owner: str, period: str) -> list[Episode]:
        """List an owner's episodes in a period, ordered by start."""
        with self._uow() as uow:
            episodes = uow.episodes.list_for_owner_period(owner, period)
        return sorted(episodes, key=lambda e: e.start)

    # --- Commands ---

    def start(
        self,
        owner: str,
        start_time: object,
        period: str,
    ) -> tuple[Episode | None, list[EpisodeError]]:
        """
        Start a new open episode.

        Returns:
            Tuple of (episode, errors). Episode is None if rejected.
        """
        errors = validate_identifiers(owner=owner, period=period)
        start = parse_timestamp(start_time)
        if start is None:
            errors.append(_invalid_timestamp("start_time"))
        if errors or start is None:
            logger.info("Rejected start for owner=%s: %s", owner, errors[0].code.value)
            return None, errors

        overlap = EpisodeError(code=ErrorKind.OVERLAP_CONFLICT, message=MSG_START_OVERLAP)
        try:
            with self._uow() as uow:
                existing = uow.episodes.list_for_owner_period(owner, period)
                blocking = find_conflict(
                    existing,
                    start,
                    None,
                    boundary_inclusive=self._config.boundary_inclusive,
                )
                if blocking is not None:
                    logger.info(
                        "Rejected start for owner=%s period=%s: overlaps episode %s",
                        owner,
                        period,
                        blocking.id,
                    )
                    return None, [overlap]

                now = self._now()
                episode = Episode(
                    owner=owner,
                    period=period,
                    start=start,
                    created_at=now,
                    updated_at=now,
                )
                uow.episodes.save(episode)
                uow.commit()
        except ConcurrentWriteError as e:
            logger.warning(
                "Concurrent start lost for owner=%s period=%s: %s", owner, period, e
            )
            return None, [overlap]

        logger.info("Started episode %s for owner=%s period=%s", episode.id, owner, period)
        return episode, []

    def end(
        self,
        owner: str,
        episode_id: str,
        end_time: object,
    ) -> tuple[Episode | None, list[EpisodeError]]:
        """
        Close an open episode.

        Returns:
            Tuple of (episode, errors). Episode is None if rejected.
        """
        end = parse_timestamp(end_time)
        if end is None:
            return None, [_invalid_timestamp("end_time")]

        try:
            with self._uow() as uow:
                episode = uow.episodes.get_by_id(episode_id)
                if episode is None or episode.owner != owner:
                    return None, [_not_found(episode_id)]

                if not can_transition(episode.status, "end"):
                    return None, [
                        EpisodeError(
                            code=ErrorKind.ALREADY_CLOSED,
                            message=MSG_ALREADY_CLOSED,
                            episode_id=episode_id,
                        )
                    ]

                if end < episode.start:
                    return None, [
                        EpisodeError(
                            code=ErrorKind.INVALID_ORDERING,
                            message=MSG_END_BEFORE_START,
                            episode_id=episode_id,
                            field="end_time",
                        )
                    ]

                # A backfilled start may precede closed episodes; the closing
                # interval must not run into them.
                existing = uow.episodes.list_for_owner_period(owner, episode.period)
                blocking = find_conflict(
                    existing,
                    episode.start,
                    end,
                    exclude_id=episode_id,
                    boundary_inclusive=self._config.boundary_inclusive,
                )
                if blocking is not None:
                    logger.info(
                        "Rejected end of %s: overlaps episode %s", episode_id, blocking.id
                    )
                    return None, [
                        EpisodeError(
                            code=ErrorKind.OVERLAP_CONFLICT,
                            message=MSG_END_OVERLAP,
                            episode_id=episode_id,
                            field="end_time",
                        )
                    ]

                closed = close(episode, end, self._now())
                uow.episodes.save(closed)
                uow.commit()
        except ConcurrentWriteError as e:
            logger.warning("Concurrent end lost for episode %s: %s", episode_id, e)
            return None, [_concurrent(episode_id)]

        logger.info("Ended episode %s (%.2f min)", episode_id, closed.duration)
        return closed, []

    def edit(
        self,
        owner: str,
        episode_id: str,
        new_start: object,
        new_end: object,
    ) -> tuple[Episode | None, list[EpisodeError]]:
        """
        Overwrite an episode's start and end. The episode becomes closed.

        The edited episode is excluded from its own overlap check, so editing
        to its current interval always succeeds.

        Returns:
            Tuple of (episode, errors). Episode is None if rejected.
        """
        start = parse_timestamp(new_start)
        end = parse_timestamp(new_end)
        if start is None or end is None:
            return None, [
                EpisodeError(
                    code=ErrorKind.INVALID_INPUT,
                    message="Invalid new_start or new_end provided. Must be valid timestamps.",
                    episode_id=episode_id,
                    field="new_start" if start is None else "new_end",
                )
            ]

        overlap = EpisodeError(
            code=ErrorKind.OVERLAP_CONFLICT,
            message=MSG_EDIT_OVERLAP,
            episode_id=episode_id,
        )
        try:
            with self._uow() as uow:
                episode = uow.episodes.get_by_id(episode_id)
                if episode is None or episode.owner != owner:
                    return None, [_not_found(episode_id)]

                if end < start:
                    return None, [
                        EpisodeError(
                            code=ErrorKind.INVALID_ORDERING,
                            message=MSG_EDIT_END_BEFORE_START,
                            episode_id=episode_id,
                            field="new_end",
                        )
                    ]

                existing = uow.episodes.list_for_owner_period(owner, episode.period)
                blocking = find_conflict(
                    existing,
                    start,
                    end,
                    exclude_id=episode_id,
                    boundary_inclusive=self._config.boundary_inclusive,
                )
                if blocking is not None:
                    logger.info(
                        "Rejected edit of %s: overlaps episode %s", episode_id, blocking.id
                    )
                    return None, [overlap]

                edited = reschedule(episode, start, end, self._now())
                uow.episodes.save(edited)
                uow.commit()
        except ConcurrentWriteError as e:
            logger.warning("Concurrent edit lost for episode %s: %s", episode_id, e)
            return None, [overlap]

        logger.info("Edited episode %s (%.2f min)", episode_id, edited.duration)
        return edited, []

    def delete(self, owner: str, episode_id: str) -> tuple[bool, list[EpisodeError]]:
        """
        Permanently delete an episode.

        Returns:
            Tuple of (success, errors).
        """
        try:
            with self._uow() as uow:
                episode = uow.episodes.get_by_id(episode_id)
                if episode is None or episode.owner != owner:
                    return False, [_not_found(episode_id)]
                uow.episodes.delete(episode_id)
                uow.commit()
        except ConcurrentWriteError as e:
            logger.warning("Concurrent delete lost for episode %s: %s", episode_id, e)
            return False, [_concurrent(episode_id)]

        logger.info("Deleted episode %s for owner=%s", episode_id, owner)
        return True, []
