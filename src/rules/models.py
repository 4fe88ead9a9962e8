from pydantic import BaseModel, Field


class OverlapRules(BaseModel):
    # Touching intervals count as overlapping when True.
    boundary_inclusive: bool = True


class SummaryRules(BaseModel):
    episode_label: str = Field(default="episode", min_length=1)
    decimals: int = Field(default=2, ge=0, le=6)


class PeriodRules(BaseModel):
    format: str = "%Y-%m"


class StorageRules(BaseModel):
    db_path: str = "episodes.db"
    migrations_dir: str = "migrations"
    busy_timeout_seconds: float = Field(default=5.0, ge=0)


class Rules(BaseModel):
    overlap: OverlapRules = Field(default_factory=OverlapRules)
    summary: SummaryRules = Field(default_factory=SummaryRules)
    periods: PeriodRules = Field(default_factory=PeriodRules)
    storage: StorageRules = Field(default_factory=StorageRules)


DEFAULT_RULES = Rules()
