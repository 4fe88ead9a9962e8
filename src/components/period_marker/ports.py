"""
Period marker component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from src.domain.entities import PeriodMarker


class PeriodMarkerRepoPort(Protocol):
    """Repository interface for period markers."""

    def get(self, name: str) -> PeriodMarker | None:
        """Get marker by name."""
        ...

    def compare_and_set(self, name: str, period: str, now_utc: datetime) -> bool:
        """
        Atomically set marker ``name`` to ``period`` unless it already holds it.

        Returns True if the marker was changed.
        """
        ...


class TimePort(Protocol):
    """Port for time operations."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
