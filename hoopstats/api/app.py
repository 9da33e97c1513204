"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import APIRouter, FastAPI

from hoopstats import __version__
from hoopstats.api.errors import register_exception_handlers
from hoopstats.api.routes import games, health, players, stats, teams
from hoopstats.config import Settings, get_settings
from hoopstats.database import Database
from hoopstats.services import GameService, PlayerService, StatsService, TeamService
from hoopstats.storage import (
    GameRepository,
    PlayerRepository,
    StatsRepository,
    TeamRepository,
    TransactionManager,
)


def build_api_router(prefix: str) -> APIRouter:
    """Versioned API routes, with the health checks mirrored under ``/health``."""
    router = APIRouter(prefix=prefix)
    router.include_router(teams.router)
    router.include_router(players.router)
    router.include_router(games.router)
    router.include_router(stats.router)
    router.include_router(health.router, prefix="/health")
    return router


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the API application.

    The lifespan owns the database: it creates the engine (and schema, when
    ``database.create_schema`` is set), wires repositories and services onto
    ``app.state`` and disposes the engine on shutdown.
    """
    settings = settings or get_settings()
    log = structlog.get_logger("hoopstats.api")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        db = Database(settings.database, log)
        if settings.database.create_schema:
            await db.init_db()
        tx = TransactionManager(db.session_maker, log)

        app.state.settings = settings
        app.state.database = db
        app.state.team_service = TeamService(TeamRepository, tx, log)
        app.state.player_service = PlayerService(PlayerRepository, TeamRepository, tx, log)
        app.state.game_service = GameService(GameRepository, TeamRepository, tx, log)
        app.state.stats_service = StatsService(
            StatsRepository, PlayerRepository, GameRepository, tx, settings, log
        )

        log.info("api_started", database=settings.database.safe_url(), version=__version__)
        try:
            yield
        finally:
            await db.close()
            log.info("api_stopped")

    app = FastAPI(title="hoopstats", version=__version__, lifespan=lifespan)
    register_exception_handlers(app)
    app.include_router(build_api_router(settings.server.api_prefix))
    app.include_router(health.router)
    return app
