"""
Summary component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SummariseInput:
    """Input for summarising an owner's period."""

    owner: str
    period: str


@dataclass(frozen=True)
class PeriodSummary:
    """
    Aggregate over the closed episodes of one owner and period.

    Open episodes are counted in open_count only.
    """

    owner: str
    period: str
    count: int
    average_duration: float
    total_duration: float
    open_count: int
    text: str


@dataclass(frozen=True)
class SummaryOutput:
    """Output for summarise. Summarising never fails."""

    summary: PeriodSummary
    success: bool = True
