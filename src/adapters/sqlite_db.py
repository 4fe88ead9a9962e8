"""
SQLite Database Adapter.

Implements the episode and period marker ports using SQLite.
Schema lives in migrations/ and is applied by SQLiteMigrator.

Key behaviors:
- Units of work open with BEGIN IMMEDIATE, so check-then-write sequences
  are serialized against every other writer
- A partial unique index allows one open episode per owner and period;
  violating it raises ConcurrentWriteError
- Lock waits are bounded by busy_timeout_seconds
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Any

from src.components.episodes.ports import ConcurrentWriteError
from src.domain.entities import Episode, PeriodMarker

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def parse_dt(s: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    return datetime.fromisoformat(s) if s else None


# -----------------------------------------------------------------------------
# Base SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(
        self,
        db_path: str,
        connection: sqlite3.Connection | None = None,
        busy_timeout_seconds: float = 5.0,
    ):
        self.db_path = db_path
        self._external_conn = connection
        self._busy_timeout = busy_timeout_seconds

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn

        conn = sqlite3.connect(self.db_path, timeout=self._busy_timeout)
        conn.row_factory = dict_factory
        return conn

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None


# -----------------------------------------------------------------------------
# Episode Repository
# -----------------------------------------------------------------------------


class SQLiteEpisodeRepo(SQLiteRepoBase):
    """SQLite implementation of EpisodeRepoPort."""

    def get_by_id(self, episode_id: str) -> Episode | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM episodes WHERE id = ?", (episode_id,)).fetchone()
            return self._map_row(row) if row else None
        finally:
            if self._should_close():
                conn.close()

    def list_for_owner_period(self, owner: str, period: str) -> list[Episode]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM episodes WHERE owner = ? AND period = ?",
                (owner, period),
            ).fetchall()
            # Sorted here: ISO strings with and without fractions don't sort lexically.
            return sorted((self._map_row(r) for r in rows), key=lambda e: e.start)
        finally:
            if self._should_close():
                conn.close()

    def save(self, episode: Episode) -> Episode:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO episodes (
                    id, owner, period, start_at, end_at, duration_minutes,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    start_at=excluded.start_at,
                    end_at=excluded.end_at,
                    duration_minutes=excluded.duration_minutes,
                    updated_at=excluded.updated_at
                """,
                (
                    episode.id,
                    episode.owner,
                    episode.period,
                    episode.start.isoformat(),
                    episode.end.isoformat() if episode.end else None,
                    episode.duration,
                    episode.created_at.isoformat(),
                    episode.updated_at.isoformat(),
                ),
            )
            if self._should_close():
                conn.commit()
            return episode
        except sqlite3.IntegrityError as e:
            # Only the open-episode index can fail here; ids upsert.
            raise ConcurrentWriteError(str(e)) from e
        finally:
            if self._should_close():
                conn.close()

    def delete(self, episode_id: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM episodes WHERE id = ?", (episode_id,))
            if self._should_close():
                conn.commit()
        finally:
            if self._should_close():
                conn.close()

    def _map_row(self, row: dict[str, Any]) -> Episode:
        return Episode(
            id=row["id"],
            owner=row["owner"],
            period=row["period"],
            start=datetime.fromisoformat(row["start_at"]),
            end=parse_dt(row["end_at"]),
            duration=row["duration_minutes"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


# -----------------------------------------------------------------------------
# Period Marker Repository
# -----------------------------------------------------------------------------


class SQLitePeriodMarkerRepo(SQLiteRepoBase):
    """SQLite implementation of PeriodMarkerRepoPort."""

    def get(self, name: str) -> PeriodMarker | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM period_markers WHERE name = ?", (name,)
            ).fetchone()
            if not row:
                return None
            return PeriodMarker(
                name=row["name"],
                period=row["period"],
                claimed_at=datetime.fromisoformat(row["claimed_at"]),
            )
        finally:
            if self._should_close():
                conn.close()

    def compare_and_set(self, name: str, period: str, now_utc: datetime) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                """
                INSERT INTO period_markers (name, period, claimed_at)
                VALUES (?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    period=excluded.period,
                    claimed_at=excluded.claimed_at
                WHERE period_markers.period <> excluded.period
                """,
                (name, period, now_utc.isoformat()),
            )
            if self._should_close():
                conn.commit()
            return cursor.rowcount > 0
        finally:
            if self._should_close():
                conn.close()


# -----------------------------------------------------------------------------
# Unit of Work
# -----------------------------------------------------------------------------


class SQLiteUnitOfWork:
    """
    SQLite Unit of Work implementation.

    Takes the database write lock on enter (BEGIN IMMEDIATE) and holds it
    until commit or exit, so reads made inside are still true at write time.
    """

    def __init__(self, db_path: str, busy_timeout_seconds: float = 5.0):
        self.db_path = db_path
        self.busy_timeout_seconds = busy_timeout_seconds
        self._conn: sqlite3.Connection | None = None
        self._episodes: SQLiteEpisodeRepo | None = None

    def __enter__(self) -> SQLiteUnitOfWork:
        conn = sqlite3.connect(
            self.db_path,
            timeout=self.busy_timeout_seconds,
            isolation_level=None,
        )
        conn.row_factory = dict_factory
        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.OperationalError as e:
            conn.close()
            raise ConcurrentWriteError(f"could not lock {self.db_path}: {e}") from e
        self._conn = conn
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if self._conn:
            # Anything not committed is discarded.
            self.rollback()
            self._conn.close()
            self._conn = None
        self._episodes = None

    def commit(self) -> None:
        if self._conn and self._conn.in_transaction:
            try:
                self._conn.execute("COMMIT")
            except sqlite3.OperationalError as e:
                # Readers still holding shared locks past the busy timeout.
                raise ConcurrentWriteError(f"could not commit to {self.db_path}: {e}") from e

    def rollback(self) -> None:
        if self._conn and self._conn.in_transaction:
            self._conn.execute("ROLLBACK")

    @property
    def episodes(self) -> SQLiteEpisodeRepo:
        if self._conn is None:
            raise RuntimeError("Unit of work is not active")
        if self._episodes is None:
            self._episodes = SQLiteEpisodeRepo(self.db_path, self._conn)
        return self._episodes
