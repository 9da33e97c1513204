"""Pytest configuration and fixtures."""

import os

import pytest
import structlog

# Set required environment variables for testing BEFORE any imports of Settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./hoopstats_test.db")

from hoopstats.config import DatabaseConfig, LoggingConfig, Settings  # noqa: E402
from hoopstats.database import Database  # noqa: E402
from hoopstats.services import GameService, PlayerService, StatsService, TeamService  # noqa: E402
from hoopstats.storage import (  # noqa: E402
    GameRepository,
    PlayerRepository,
    StatsRepository,
    TeamRepository,
    TransactionManager,
)
from tests.test_helpers import Seeder  # noqa: E402


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    """File-backed SQLite database unique to the test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'hoopstats.db'}"


@pytest.fixture
def test_settings(sqlite_url, tmp_path) -> Settings:
    """Settings pointing at the per-test SQLite database and a temporary log file."""
    return Settings(
        database=DatabaseConfig(url=sqlite_url),
        logging=LoggingConfig(level="DEBUG", file=str(tmp_path / "logs" / "hoopstats.log")),
    )


@pytest.fixture
def logger():
    return structlog.get_logger("hoopstats.tests")


@pytest.fixture
async def database(test_settings, logger):
    """Create test database with all tables."""
    db = Database(test_settings.database, logger)
    await db.init_db()

    yield db

    await db.close()


@pytest.fixture
async def test_session(database):
    """Plain session for direct repository tests. Nothing is committed unless the test does."""
    async with database.session() as session:
        yield session


@pytest.fixture
def tx(database, logger) -> TransactionManager:
    return TransactionManager(database.session_maker, logger)


@pytest.fixture
def seed(tx) -> Seeder:
    return Seeder(tx)


@pytest.fixture
def team_service(tx, logger) -> TeamService:
    return TeamService(TeamRepository, tx, logger)


@pytest.fixture
def player_service(tx, logger) -> PlayerService:
    return PlayerService(PlayerRepository, TeamRepository, tx, logger)


@pytest.fixture
def game_service(tx, logger) -> GameService:
    return GameService(GameRepository, TeamRepository, tx, logger)


@pytest.fixture
def stats_service(tx, test_settings, logger) -> StatsService:
    return StatsService(StatsRepository, PlayerRepository, GameRepository, tx, test_settings, logger)
