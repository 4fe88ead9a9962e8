"""
Summary component unit tests.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from src.components.summary import (
    SummariseInput,
    SummaryConfig,
    aggregate,
    format_summary,
    run,
    run_summarise,
)
from src.domain.entities import Episode
from src.rules.models import Rules, SummaryRules

# --- Mock Repository ---


class MockEpisodeReader:
    """In-memory read-only episode source for testing."""

    def __init__(self, episodes: list[Episode]) -> None:
        self._episodes = episodes
        self.calls: list[tuple[str, str]] = []

    def list_for_owner_period(self, owner: str, period: str) -> list[Episode]:
        self.calls.append((owner, period))
        return [e for e in self._episodes if e.owner == owner and e.period == period]


BASE = datetime(2023, 10, 10, 9, 0, tzinfo=UTC)


def make_episode(owner: str, period: str, offset_hours: int, minutes: float | None) -> Episode:
    start = BASE + timedelta(hours=offset_hours)
    if minutes is None:
        return Episode(owner=owner, period=period, start=start)
    return Episode(
        owner=owner,
        period=period,
        start=start,
        end=start + timedelta(minutes=minutes),
        duration=minutes,
    )


@pytest.fixture
def repo() -> MockEpisodeReader:
    return MockEpisodeReader(
        [
            make_episode("user:Alice", "2023-10", 0, 30),
            make_episode("user:Alice", "2023-10", 2, 60),
            make_episode("user:Alice", "2023-10", 4, None),
            make_episode("user:Alice", "2023-11", 0, 30),
            make_episode("user:Bob", "2023-10", 0, 15),
        ]
    )


class TestSummarise:
    def test_only_closed_episodes_count(self, repo: MockEpisodeReader) -> None:
        result = run_summarise(SummariseInput(owner="user:Alice", period="2023-10"), repo=repo)

        summary = result.summary
        assert result.success is True
        assert summary.count == 2
        assert summary.average_duration == 45
        assert summary.total_duration == 90
        assert summary.open_count == 1
        assert summary.text == (
            "Summary for user:Alice in 2023-10: 2 episode(s) "
            "with an average duration of 45.00 minutes."
        )

    def test_scoped_to_owner_and_period(self, repo: MockEpisodeReader) -> None:
        bob = run_summarise(SummariseInput(owner="user:Bob", period="2023-10"), repo=repo)
        nov = run_summarise(SummariseInput(owner="user:Alice", period="2023-11"), repo=repo)

        assert (bob.summary.count, bob.summary.average_duration) == (1, 15)
        assert (nov.summary.count, nov.summary.average_duration) == (1, 30)
        assert repo.calls == [("user:Bob", "2023-10"), ("user:Alice", "2023-11")]

    def test_empty_period_is_zero(self, repo: MockEpisodeReader) -> None:
        result = run_summarise(SummariseInput(owner="user:Alice", period="2023-12"), repo=repo)

        assert result.success is True
        assert result.summary.count == 0
        assert result.summary.average_duration == 0
        assert result.summary.text.endswith("0 episode(s) with an average duration of 0.00 minutes.")

    def test_only_open_episodes_is_zero(self) -> None:
        repo = MockEpisodeReader([make_episode("u", "p", 0, None)])

        result = run_summarise(SummariseInput(owner="u", period="p"), repo=repo)

        assert result.summary.count == 0
        assert result.summary.average_duration == 0
        assert result.summary.open_count == 1

    def test_label_and_decimals_from_rules(self, repo: MockEpisodeReader) -> None:
        rules = Rules(summary=SummaryRules(episode_label="breakthrough", decimals=1))

        result = run_summarise(
            SummariseInput(owner="user:Alice", period="2023-10"), repo=repo, rules=rules
        )

        assert result.summary.text == (
            "Summary for user:Alice in 2023-10: 2 breakthrough(s) "
            "with an average duration of 45.0 minutes."
        )

    def test_run_dispatch(self, repo: MockEpisodeReader) -> None:
        result = run(SummariseInput(owner="user:Bob", period="2023-10"), repo=repo)
        assert result.summary.count == 1

        with pytest.raises(ValueError):
            run(object(), repo=repo)  # type: ignore[arg-type]


class TestAggregate:
    def test_average_times_count_is_total(self) -> None:
        durations = [12.5, 7.25, 33.0, 0.0, 91.75]
        episodes = [make_episode("u", "p", i * 3, d) for i, d in enumerate(durations)]

        summary = aggregate("u", "p", episodes)

        assert summary.count == len(durations)
        assert summary.average_duration * summary.count == pytest.approx(sum(durations))

    def test_format_rounds_to_two_places(self) -> None:
        text = format_summary("u", "p", 3, 100 / 3, SummaryConfig())
        assert text == "Summary for u in p: 3 episode(s) with an average duration of 33.33 minutes."
