"""
Regression tests for the episode store invariants.

Drives seeded random sequences of start/end/edit/delete through the
in-memory context and checks the store after every operation.
"""

from __future__ import annotations

import random
from datetime import UTC, datetime, timedelta

import pytest

from src.adapters.clock import FixedClock
from src.app_shell.context import ServiceContext
from src.components.episodes import ErrorKind
from src.domain.entities import Episode
from src.domain.timeutil import minutes_between

OWNERS = ["user:A", "user:B"]
PERIODS = ["2024-01", "2024-02"]
BASE = {"2024-01": datetime(2024, 1, 10, tzinfo=UTC), "2024-02": datetime(2024, 2, 10, tzinfo=UTC)}


def all_episodes(ctx: ServiceContext) -> list[Episode]:
    return [
        e
        for owner in OWNERS
        for period in PERIODS
        for e in ctx.list_episodes(owner, period).episodes
    ]


def check_invariants(ctx: ServiceContext) -> None:
    for owner in OWNERS:
        for period in PERIODS:
            episodes = list(ctx.list_episodes(owner, period).episodes)

            assert sum(1 for e in episodes if e.is_open) <= 1

            closed = [e for e in episodes if not e.is_open]
            for i, a in enumerate(closed):
                assert a.duration is not None and a.duration >= 0
                assert a.end is not None
                assert a.duration == pytest.approx(minutes_between(a.start, a.end))
                for b in closed[i + 1 :]:
                    assert b.end is not None
                    assert not (a.start <= b.end and b.start <= a.end), (a, b)


def random_time(rng: random.Random, period: str) -> datetime:
    return BASE[period] + timedelta(minutes=rng.randrange(0, 48 * 60, 5))


def run_sequence(seed: int, steps: int = 150) -> ServiceContext:
    rng = random.Random(seed)
    ctx = ServiceContext.in_memory(clock=FixedClock(datetime(2024, 3, 1, tzinfo=UTC)))

    for _ in range(steps):
        owner = rng.choice(OWNERS)
        period = rng.choice(PERIODS)
        known = [e for e in all_episodes(ctx) if e.owner == owner]
        action = rng.choice(["start", "start", "end", "edit", "delete"])

        if action == "start" or not known:
            ctx.start(owner, random_time(rng, period), period)
        else:
            target = rng.choice(known)
            if action == "end":
                ctx.end(owner, target.id, target.start + timedelta(minutes=rng.randrange(0, 240)))
            elif action == "edit":
                start = random_time(rng, target.period)
                ctx.edit(owner, target.id, start, start + timedelta(minutes=rng.randrange(0, 240)))
            else:
                ctx.delete(owner, target.id)

        check_invariants(ctx)

    return ctx


@pytest.mark.parametrize("seed", [1, 7, 42, 2024])
def test_random_sequences_preserve_invariants(seed: int) -> None:
    run_sequence(seed)


@pytest.mark.parametrize("seed", [3, 11])
def test_edit_to_same_interval_never_conflicts_with_itself(seed: int) -> None:
    ctx = run_sequence(seed, steps=80)

    for episode in all_episodes(ctx):
        if episode.is_open:
            continue
        result = ctx.edit(episode.owner, episode.id, episode.start, episode.end)
        if result.success:
            continue
        # Only another episode may block it: an open one started before our end
        assert result.errors[0].code == ErrorKind.OVERLAP_CONFLICT
        others = ctx.list_episodes(episode.owner, episode.period).episodes
        assert any(
            o.is_open and o.start <= episode.end for o in others if o.id != episode.id
        ), result.errors


@pytest.mark.parametrize("seed", [5, 13])
def test_summary_average_times_count_is_total(seed: int) -> None:
    ctx = run_sequence(seed, steps=80)

    for owner in OWNERS:
        for period in PERIODS:
            summary = ctx.summarise(owner, period).summary
            closed = [
                e.duration
                for e in ctx.list_episodes(owner, period).episodes
                if e.duration is not None
            ]
            assert summary.count == len(closed)
            if summary.count == 0:
                assert summary.average_duration == 0
            else:
                assert summary.average_duration * summary.count == pytest.approx(sum(closed))


def test_deleted_episode_is_gone_for_every_operation() -> None:
    ctx = ServiceContext.in_memory(clock=FixedClock(datetime(2024, 3, 1, tzinfo=UTC)))
    owner = OWNERS[0]
    started = ctx.start(owner, "2024-01-01T10:00:00Z", "2024-01").episode
    assert started is not None

    assert ctx.delete(owner, started.id).success

    for result in (
        ctx.end(owner, started.id, "2024-01-01T11:00:00Z"),
        ctx.edit(owner, started.id, "2024-01-01T10:00:00Z", "2024-01-01T11:00:00Z"),
        ctx.delete(owner, started.id),
    ):
        assert result.errors[0].code == ErrorKind.NOT_FOUND_OR_NOT_OWNED
