"""
Period marker component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.domain.entities import PeriodMarker


@dataclass(frozen=True)
class ClaimPeriodInput:
    """
    Input for claiming a period for a named side effect.

    period=None means "the period containing now".
    """

    name: str
    period: str | None = None


@dataclass(frozen=True)
class GetMarkerInput:
    """Input for reading a marker."""

    name: str


@dataclass(frozen=True)
class ClaimOutput:
    """
    Output for claim.

    claimed is True only for the single caller that moved the marker to
    this period; everybody else sees False.
    """

    name: str
    period: str
    claimed: bool


@dataclass(frozen=True)
class MarkerOutput:
    """Output for get."""

    marker: PeriodMarker | None
