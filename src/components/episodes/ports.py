"""
Episodes component port definitions.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol

from src.domain.entities import Episode


class ConcurrentWriteError(Exception):
    """
    Raised by a store when a competing writer wins.

    Covers both a storage-level "one open episode per owner and period"
    constraint and a failure to obtain the write lock in time.
    """


class EpisodeRepoPort(Protocol):
    """Repository interface for episodes."""

    def get_by_id(self, episode_id: str) -> Episode | None:
        """Get episode by ID."""
        ...

    def list_for_owner_period(self, owner: str, period: str) -> list[Episode]:
        """List an owner's episodes in a period, ordered by start."""
        ...

    def save(self, episode: Episode) -> Episode:
        """Insert or update episode."""
        ...

    def delete(self, episode_id: str) -> None:
        """Delete episode."""
        ...


class EpisodeUnitOfWorkPort(Protocol):
    """
    Transaction over the episode store.

    Reads and writes made through ``episodes`` between enter and commit are
    serialized against other units of work. Leaving the block without
    committing discards the writes.
    """

    @property
    def episodes(self) -> EpisodeRepoPort:
        """Repository bound to this transaction."""
        ...

    def __enter__(self) -> EpisodeUnitOfWorkPort: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None: ...

    def commit(self) -> None:
        """Make the writes durable."""
        ...

    def rollback(self) -> None:
        """Discard the writes."""
        ...


UnitOfWorkFactory = Callable[[], EpisodeUnitOfWorkPort]


class TimePort(Protocol):
    """Port for time operations."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
