from datetime import UTC, datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

# --- Enums / Literals ---
EpisodeStatus = Literal["open", "closed"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- Episodes ---

class Episode(BaseModel):
    """
    One occurrence of a tracked event.

    An episode with no end is "open" (still happening). Duration is stored
    in minutes and only exists once the episode has an end.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    owner: str
    period: str
    start: datetime
    end: datetime | None = None
    duration: float | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _check_duration(self) -> "Episode":
        if (self.end is None) != (self.duration is None):
            raise ValueError("duration must be set exactly when end is set")
        if self.duration is not None and self.duration < 0:
            raise ValueError("duration cannot be negative")
        return self

    @property
    def status(self) -> EpisodeStatus:
        return "open" if self.end is None else "closed"

    @property
    def is_open(self) -> bool:
        return self.end is None


# --- Period Markers ---

class PeriodMarker(BaseModel):
    name: str
    period: str
    claimed_at: datetime = Field(default_factory=_utcnow)
