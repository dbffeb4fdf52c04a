"""
Shared pytest fixtures and configuration for all tests.
"""

import os
import shutil
import subprocess
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
import strawberry
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncSession

from alembic import command
from alembic.config import Config

ALEMBIC_INI = Path(__file__).parent.parent / "alembic.ini"


def find_pg_ctl() -> str | None:
    """Locate the `pg_ctl` binary pytest-postgresql uses to start a server.

    Client-only installs ship `pg_config` without the server binaries, so
    `pg_ctl` is looked up on PATH and then in `pg_config --bindir`.
    """
    found = shutil.which("pg_ctl")
    if found:
        return found

    pg_config = shutil.which("pg_config")
    if not pg_config:
        return None
    try:
        completed = subprocess.run(
            [pg_config, "--bindir"], capture_output=True, text=True, check=True
        )
    except (OSError, subprocess.CalledProcessError):
        return None

    candidate = Path(completed.stdout.strip()) / "pg_ctl"
    return str(candidate) if candidate.is_file() else None


def postgres_available() -> bool:
    return find_pg_ctl() is not None


def pytest_collection_modifyitems(config: Any, items: list[Any]) -> None:
    if postgres_available():
        return
    skip_db = pytest.mark.skip(reason="PostgreSQL binaries not installed")
    for item in items:
        if "requires_db" in item.keywords:
            item.add_marker(skip_db)


# Unit test fixtures: a mocked data-access handle


@pytest.fixture
def mock_session() -> AsyncMock:
    """An AsyncSession double; configure `execute.return_value` per test."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def mock_db(mock_session: AsyncMock) -> MagicMock:
    """A Database double whose `session()` yields `mock_session`."""
    db = MagicMock()
    db.session.return_value.__aenter__.return_value = mock_session
    return db


@pytest.fixture
def mock_info(mock_db: MagicMock) -> MagicMock:
    """Create a mock GraphQL info object with the injected database."""
    info = MagicMock(spec=strawberry.Info)
    info.context = {"request": MagicMock(), "db": mock_db}
    return info


# Integration fixtures: a real PostgreSQL via pytest-postgresql


@pytest.fixture(scope="function")
def test_database(postgresql: Any) -> Generator[tuple[str, str], None, None]:
    """Return the DSN for the running pytest-postgresql database."""
    info = postgresql.info
    dsn = URL.create(
        "postgresql",
        username=info.user,
        password=getattr(info, "password", None) or None,
        host=info.host,
        port=info.port,
        database=info.dbname,
    ).render_as_string(hide_password=False)
    yield dsn, info.dbname


@pytest.fixture(scope="function")
def alembic_migrate(test_database: tuple[str, str]) -> Generator[None, None, None]:
    """Run Alembic upgrade to head against the pytest-postgresql instance."""
    dsn, _ = test_database
    os.environ["POINTS_DATABASE_URL"] = dsn
    cfg = Config(str(ALEMBIC_INI))
    command.upgrade(cfg, "head")
    yield
    command.downgrade(cfg, "base")


@pytest_asyncio.fixture(scope="function")
async def database(
    alembic_migrate: None, test_database: tuple[str, str]
) -> AsyncGenerator[Any, None]:
    """A real Database handle bound to the migrated test database."""
    _ = alembic_migrate
    from points_api.database import Database

    dsn, _ = test_database
    db = Database(dsn, pool_size=2, max_overflow=0)
    yield db
    await db.dispose()


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "requires_db: mark test as requiring database connection")
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
