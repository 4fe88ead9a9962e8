"""
Service context - wires the episode components to their adapters.

Transports (HTTP, CLI, jobs) build one context and call its operations;
every operation returns the component's output record.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from src.adapters.clock import SystemClock
from src.adapters.memory_store import InMemoryEpisodeStore, InMemoryPeriodMarkerRepo
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite_db import SQLiteEpisodeRepo, SQLitePeriodMarkerRepo, SQLiteUnitOfWork
from src.components import episodes, period_marker, summary
from src.components.episodes.models import TimestampLike
from src.components.episodes.ports import TimePort, UnitOfWorkFactory
from src.components.period_marker.ports import PeriodMarkerRepoPort
from src.components.summary.ports import EpisodeReaderPort
from src.domain.timeutil import parse_timestamp, period_for
from src.rules.loader import load_rules
from src.rules.models import Rules

logger = logging.getLogger(__name__)


@dataclass
class ServiceContext:
    unit_of_work: UnitOfWorkFactory
    reader: EpisodeReaderPort
    markers: PeriodMarkerRepoPort
    rules: Rules = field(default_factory=Rules)
    clock: TimePort = field(default_factory=SystemClock)

    @classmethod
    def create(
        cls,
        rules: Rules | None = None,
        db_path: str | None = None,
        migrations_dir: str | None = None,
        clock: TimePort | None = None,
    ) -> ServiceContext:
        """SQLite-backed context; applies pending migrations first."""
        rules = rules or Rules()
        path = db_path or rules.storage.db_path
        timeout = rules.storage.busy_timeout_seconds

        SQLiteMigrator(path, migrations_dir or rules.storage.migrations_dir).run_migrations()
        logger.info("Episode store ready at %s", path)

        return cls(
            unit_of_work=lambda: SQLiteUnitOfWork(path, busy_timeout_seconds=timeout),
            reader=SQLiteEpisodeRepo(path, busy_timeout_seconds=timeout),
            markers=SQLitePeriodMarkerRepo(path, busy_timeout_seconds=timeout),
            rules=rules,
            clock=clock or SystemClock(),
        )

    @classmethod
    def from_rules_file(
        cls,
        path: Path,
        db_path: str | None = None,
        clock: TimePort | None = None,
    ) -> ServiceContext:
        return cls.create(rules=load_rules(path), db_path=db_path, clock=clock)

    @classmethod
    def in_memory(
        cls,
        rules: Rules | None = None,
        clock: TimePort | None = None,
    ) -> ServiceContext:
        store = InMemoryEpisodeStore()
        return cls(
            unit_of_work=store.unit_of_work,
            reader=store,
            markers=InMemoryPeriodMarkerRepo(),
            rules=rules or Rules(),
            clock=clock or SystemClock(),
        )

    # --- Operations ---

    def start(
        self,
        owner: str,
        start_time: TimestampLike,
        period: str | None = None,
    ) -> episodes.EpisodeOutput:
        """Start an episode; period defaults to the one containing start_time."""
        if period is None:
            ts = parse_timestamp(start_time)
            # An unparseable start is reported by the component itself.
            period = period_for(ts, self.rules.periods.format) if ts else "-"
        return episodes.run_start(
            episodes.StartEpisodeInput(owner=owner, start_time=start_time, period=period),
            unit_of_work=self.unit_of_work,
            time_port=self.clock,
            rules=self.rules,
        )

    def end(self, owner: str, episode_id: str, end_time: TimestampLike) -> episodes.EpisodeOutput:
        return episodes.run_end(
            episodes.EndEpisodeInput(owner=owner, episode_id=episode_id, end_time=end_time),
            unit_of_work=self.unit_of_work,
            time_port=self.clock,
            rules=self.rules,
        )

    def edit(
        self,
        owner: str,
        episode_id: str,
        new_start: TimestampLike,
        new_end: TimestampLike,
    ) -> episodes.EpisodeOutput:
        return episodes.run_edit(
            episodes.EditEpisodeInput(
                owner=owner, episode_id=episode_id, new_start=new_start, new_end=new_end
            ),
            unit_of_work=self.unit_of_work,
            time_port=self.clock,
            rules=self.rules,
        )

    def delete(self, owner: str, episode_id: str) -> episodes.DeleteOutput:
        return episodes.run_delete(
            episodes.DeleteEpisodeInput(owner=owner, episode_id=episode_id),
            unit_of_work=self.unit_of_work,
            time_port=self.clock,
            rules=self.rules,
        )

    def get(self, owner: str, episode_id: str) -> episodes.EpisodeOutput:
        return episodes.run_get(
            episodes.GetEpisodeInput(owner=owner, episode_id=episode_id),
            unit_of_work=self.unit_of_work,
        )

    def list_episodes(self, owner: str, period: str) -> episodes.EpisodeListOutput:
        return episodes.run_list(
            episodes.ListEpisodesInput(owner=owner, period=period),
            unit_of_work=self.unit_of_work,
        )

    def summarise(self, owner: str, period: str) -> summary.SummaryOutput:
        return summary.run_summarise(
            summary.SummariseInput(owner=owner, period=period),
            repo=self.reader,
            rules=self.rules,
        )

    def claim_period(self, name: str, period: str | None = None) -> period_marker.ClaimOutput:
        return period_marker.run_claim(
            period_marker.ClaimPeriodInput(name=name, period=period),
            repo=self.markers,
            time_port=self.clock,
            rules=self.rules,
        )
