from datetime import UTC, datetime
from pathlib import Path

import pytest

from src.adapters.clock import FixedClock
from src.app_shell.context import ServiceContext
from src.rules.models import Rules, StorageRules

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def migrations_dir() -> str:
    return str(PROJECT_ROOT / "migrations")


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "episodes.db")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 1, 31, 12, 0, tzinfo=UTC))


@pytest.fixture
def sqlite_ctx(db_path: str, migrations_dir: str, clock: FixedClock) -> ServiceContext:
    """
    ServiceContext backed by a temporary, fully migrated SQLite database.
    """
    rules = Rules(storage=StorageRules(db_path=db_path, migrations_dir=migrations_dir))
    return ServiceContext.create(rules=rules, clock=clock)


@pytest.fixture
def memory_ctx(clock: FixedClock) -> ServiceContext:
    return ServiceContext.in_memory(clock=clock)


@pytest.fixture(params=["memory", "sqlite"])
def ctx(request: pytest.FixtureRequest) -> ServiceContext:
    """Runs a test against both stores."""
    return request.getfixturevalue(f"{request.param}_ctx")
