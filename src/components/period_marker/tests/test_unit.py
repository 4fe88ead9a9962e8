"""
Period marker component unit tests.
"""

from __future__ import annotations

import threading
from datetime import UTC, datetime

import pytest

from src.adapters.clock import FixedClock
from src.adapters.memory_store import InMemoryPeriodMarkerRepo
from src.components.period_marker import ClaimPeriodInput, GetMarkerInput, run_claim, run_get
from src.rules.models import PeriodRules, Rules


@pytest.fixture
def repo() -> InMemoryPeriodMarkerRepo:
    return InMemoryPeriodMarkerRepo()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 1, 15, 8, 0, tzinfo=UTC))


class TestClaim:
    def test_first_claim_wins(self, repo: InMemoryPeriodMarkerRepo, clock: FixedClock) -> None:
        result = run_claim(ClaimPeriodInput(name="archive"), repo=repo, time_port=clock)

        assert result.claimed is True
        assert result.period == "2024-01"

    def test_second_claim_same_period_loses(
        self, repo: InMemoryPeriodMarkerRepo, clock: FixedClock
    ) -> None:
        run_claim(ClaimPeriodInput(name="archive"), repo=repo, time_port=clock)
        clock.set(datetime(2024, 1, 31, 23, 59, tzinfo=UTC))

        result = run_claim(ClaimPeriodInput(name="archive"), repo=repo, time_port=clock)

        assert result.claimed is False

    def test_new_period_claims_again(
        self, repo: InMemoryPeriodMarkerRepo, clock: FixedClock
    ) -> None:
        run_claim(ClaimPeriodInput(name="archive"), repo=repo, time_port=clock)
        clock.set(datetime(2024, 2, 1, 0, 0, tzinfo=UTC))

        result = run_claim(ClaimPeriodInput(name="archive"), repo=repo, time_port=clock)

        assert result.claimed is True
        assert result.period == "2024-02"
        marker = run_get(GetMarkerInput(name="archive"), repo=repo).marker
        assert marker is not None
        assert marker.period == "2024-02"
        assert marker.claimed_at == clock.now_utc()

    def test_markers_are_independent(
        self, repo: InMemoryPeriodMarkerRepo, clock: FixedClock
    ) -> None:
        assert run_claim(ClaimPeriodInput(name="a"), repo=repo, time_port=clock).claimed
        assert run_claim(ClaimPeriodInput(name="b"), repo=repo, time_port=clock).claimed

    def test_explicit_period(self, repo: InMemoryPeriodMarkerRepo, clock: FixedClock) -> None:
        result = run_claim(
            ClaimPeriodInput(name="archive", period="2023-12"), repo=repo, time_port=clock
        )
        assert result.period == "2023-12"

    def test_daily_period_format(self, repo: InMemoryPeriodMarkerRepo, clock: FixedClock) -> None:
        rules = Rules(periods=PeriodRules(format="%Y-%m-%d"))

        result = run_claim(ClaimPeriodInput(name="daily"), repo=repo, time_port=clock, rules=rules)

        assert result.period == "2024-01-15"

    def test_concurrent_claims_single_winner(
        self, repo: InMemoryPeriodMarkerRepo, clock: FixedClock
    ) -> None:
        results: list[bool] = []
        barrier = threading.Barrier(8)

        def claim() -> None:
            barrier.wait()
            out = run_claim(ClaimPeriodInput(name="archive"), repo=repo, time_port=clock)
            results.append(out.claimed)

        threads = [threading.Thread(target=claim) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1

    def test_get_unknown_marker(self, repo: InMemoryPeriodMarkerRepo) -> None:
        assert run_get(GetMarkerInput(name="never"), repo=repo).marker is None
