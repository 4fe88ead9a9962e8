"""
Summary component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from src.domain.entities import Episode


class EpisodeReaderPort(Protocol):
    """Read-only view of the episode store."""

    def list_for_owner_period(self, owner: str, period: str) -> list[Episode]:
        """List an owner's episodes in a period."""
        ...
