"""Tests for the hoopstats command line."""

import asyncio
import logging

import pytest
import structlog
from typer.testing import CliRunner

from hoopstats.cli.main import app
from hoopstats.config import get_settings, reset_settings_cache
from hoopstats.database import Database
from hoopstats.storage import TransactionManager
from tests.test_helpers import Seeder

pytestmark = pytest.mark.integration

runner = CliRunner()


@pytest.fixture
def cli_env(sqlite_url, tmp_path, monkeypatch):
    """Point the CLI at a per-test SQLite file and log file."""
    monkeypatch.setenv("DATABASE_URL", sqlite_url)
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "logs" / "cli.log"))
    reset_settings_cache()
    yield sqlite_url
    reset_settings_cache()
    # load_settings() installed handlers bound to the runner's streams
    logging.basicConfig(handlers=[logging.NullHandler()], force=True)


def _seed_one_game() -> int:
    """Hawks beat the Bulls 25-20 in a finished 2023-24 game; returns the Hawks id."""

    async def run() -> int:
        settings = get_settings()
        db = Database(settings.database, structlog.get_logger("hoopstats.tests"))
        try:
            await db.init_db()
            seed = Seeder(TransactionManager(db.session_maker, structlog.get_logger()))
            hawks = await seed.team("Hawks")
            bulls = await seed.team("Bulls")
            trae = await seed.player(hawks.id, "Trae", "Young")
            zach = await seed.player(bulls.id, "Zach", "LaVine")
            game = await seed.game(hawks.id, bulls.id)
            await seed.stat(trae.id, game.id, points=25)
            await seed.stat(zach.id, game.id, points=20)
            return hawks.id
        finally:
            await db.close()

    return asyncio.run(run())


def test_db_init_and_ping(cli_env):
    init = runner.invoke(app, ["db", "init"])
    ping = runner.invoke(app, ["db", "ping"])

    assert init.exit_code == 0, init.output
    assert "Schema ready" in init.output
    assert ping.exit_code == 0, ping.output
    assert "reachable" in ping.output


def test_stats_player_missing(cli_env):
    runner.invoke(app, ["db", "init"])

    result = runner.invoke(app, ["stats", "player", "42"])

    assert result.exit_code == 1
    assert "not_found" in result.output


def test_stats_team_bad_season(cli_env):
    runner.invoke(app, ["db", "init"])

    result = runner.invoke(app, ["stats", "team", "1", "--season", "2023"])

    assert result.exit_code == 1
    assert "invalid_input" in result.output
    assert "season" in result.output


def test_stats_team_record(cli_env):
    hawks_id = _seed_one_game()

    result = runner.invoke(app, ["stats", "team", str(hawks_id), "--season", "2023-24"])

    assert result.exit_code == 0, result.output
    assert "1-0" in result.output
    assert "25" in result.output


def test_stats_player_career(cli_env):
    _seed_one_game()

    result = runner.invoke(app, ["stats", "player", "1"])

    assert result.exit_code == 0, result.output
    assert "career" in result.output
    assert "25.00" in result.output
