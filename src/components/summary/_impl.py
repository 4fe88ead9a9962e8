"""
Summary aggregation - pure reduction over an owner's episodes in a period.

Key behaviors:
- Only closed episodes (duration present) count towards count and average
- average_duration is 0 when there is nothing to average
- Never mutates and never fails
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from src.domain.entities import Episode

from .models import PeriodSummary

# --- Configuration ---


@dataclass(frozen=True)
class SummaryConfig:
    """Summary configuration from rules."""

    episode_label: str = "episode"
    decimals: int = 2


DEFAULT_CONFIG = SummaryConfig()


def format_summary(
    owner: str,
    period: str,
    count: int,
    average_duration: float,
    config: SummaryConfig = DEFAULT_CONFIG,
) -> str:
    """Human readable one-line summary."""
    return (
        f"Summary for {owner} in {period}: {count} {config.episode_label}(s) "
        f"with an average duration of {average_duration:.{config.decimals}f} minutes."
    )


def aggregate(
    owner: str,
    period: str,
    episodes: Iterable[Episode],
    config: SummaryConfig = DEFAULT_CONFIG,
) -> PeriodSummary:
    """Reduce episodes to a PeriodSummary."""
    durations: list[float] = []
    open_count = 0
    for episode in episodes:
        if episode.duration is None:
            open_count += 1
        else:
            durations.append(episode.duration)

    count = len(durations)
    total = sum(durations)
    average = total / count if count else 0.0

    return PeriodSummary(
        owner=owner,
        period=period,
        count=count,
        average_duration=average,
        total_duration=total,
        open_count=open_count,
        text=format_summary(owner, period, count, average, config),
    )
