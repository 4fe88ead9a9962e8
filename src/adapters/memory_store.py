"""
In-memory episode and period marker stores.

Used by tests and by callers that embed the core without a database.
A store-wide lock serializes units of work; writes are staged and only
become visible on commit.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any

from src.components.episodes.ports import ConcurrentWriteError
from src.domain.entities import Episode, PeriodMarker

_DELETED = object()


def _copy(episode: Episode | None) -> Episode | None:
    # Callers get their own instance; stored episodes change only on commit.
    return episode.model_copy() if episode is not None else None


class InMemoryEpisodeStore:
    """Episode store backed by a dict."""

    def __init__(self, lock_timeout_seconds: float = 5.0) -> None:
        self._episodes: dict[str, Episode] = {}
        self._lock = threading.Lock()
        self._lock_timeout = lock_timeout_seconds

    # Read-only access, used by the summary component.

    def get_by_id(self, episode_id: str) -> Episode | None:
        return _copy(self._episodes.get(episode_id))

    def list_for_owner_period(self, owner: str, period: str) -> list[Episode]:
        matches = [
            e for e in list(self._episodes.values()) if e.owner == owner and e.period == period
        ]
        return [e.model_copy() for e in sorted(matches, key=lambda e: e.start)]

    def unit_of_work(self) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self)


class _StagedEpisodeRepo:
    """Repository view of committed episodes plus this transaction's writes."""

    def __init__(self, store: InMemoryEpisodeStore) -> None:
        self._store = store
        self.pending: dict[str, Any] = {}

    def _visible(self) -> dict[str, Episode]:
        merged = dict(self._store._episodes)
        for episode_id, value in self.pending.items():
            if value is _DELETED:
                merged.pop(episode_id, None)
            else:
                merged[episode_id] = value
        return merged

    def get_by_id(self, episode_id: str) -> Episode | None:
        return _copy(self._visible().get(episode_id))

    def list_for_owner_period(self, owner: str, period: str) -> list[Episode]:
        matches = [
            e for e in self._visible().values() if e.owner == owner and e.period == period
        ]
        return [e.model_copy() for e in sorted(matches, key=lambda e: e.start)]

    def save(self, episode: Episode) -> Episode:
        self.pending[episode.id] = episode.model_copy()
        return episode

    def delete(self, episode_id: str) -> None:
        self.pending[episode_id] = _DELETED


class InMemoryUnitOfWork:
    """Unit of work over an InMemoryEpisodeStore."""

    def __init__(self, store: InMemoryEpisodeStore) -> None:
        self._store = store
        self._repo: _StagedEpisodeRepo | None = None

    def __enter__(self) -> InMemoryUnitOfWork:
        if not self._store._lock.acquire(timeout=self._store._lock_timeout):
            raise ConcurrentWriteError("timed out waiting for the episode store lock")
        self._repo = _StagedEpisodeRepo(self._store)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self._repo = None
        self._store._lock.release()

    @property
    def episodes(self) -> _StagedEpisodeRepo:
        if self._repo is None:
            raise RuntimeError("Unit of work is not active")
        return self._repo

    def commit(self) -> None:
        repo = self.episodes
        for episode_id, value in repo.pending.items():
            if value is _DELETED:
                self._store._episodes.pop(episode_id, None)
            else:
                self._store._episodes[episode_id] = value
        repo.pending.clear()

    def rollback(self) -> None:
        self.episodes.pending.clear()


class InMemoryPeriodMarkerRepo:
    """Period markers backed by a dict."""

    def __init__(self) -> None:
        self._markers: dict[str, PeriodMarker] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> PeriodMarker | None:
        return self._markers.get(name)

    def compare_and_set(self, name: str, period: str, now_utc: datetime) -> bool:
        with self._lock:
            current = self._markers.get(name)
            if current is not None and current.period == period:
                return False
            self._markers[name] = PeriodMarker(name=name, period=period, claimed_at=now_utc)
            return True
