"""Game use cases."""

from __future__ import annotations

import time
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from hoopstats.errors import DomainError, InvalidInputError, raise_if_any
from hoopstats.models import Game, GameStatus, Page, PageResult
from hoopstats.services.base import bind_service_logger, dump_field_errors, elapsed_ms
from hoopstats.services.validation import (
    ExistenceCheck,
    collect_missing,
    normalize_page,
    validate_game,
    validate_id,
)
from hoopstats.storage.contracts import GameStoreFactory, TeamStoreFactory
from hoopstats.storage.transaction import TransactionManager


class GameService:
    def __init__(
        self,
        games: GameStoreFactory,
        teams: TeamStoreFactory,
        tx: TransactionManager,
        logger: structlog.stdlib.BoundLogger,
    ):
        self.games = games
        self.teams = teams
        self.tx = tx
        self.log = bind_service_logger(logger, "game")

    async def create_game(
        self,
        season: str,
        date: datetime | None,
        home_team_id: int,
        away_team_id: int,
        status: str = GameStatus.SCHEDULED.value,
    ) -> Game:
        """
        Create a game between two distinct, existing teams.

        Both team references are checked before reporting, so a request naming
        two unknown teams gets both field errors at once.
        """
        start = time.perf_counter()
        try:
            game = validate_game(season, date, home_team_id, away_team_id, status)
        except InvalidInputError as e:
            self.log.debug(
                "game_validation_failed",
                stage="structure",
                field_errors=dump_field_errors(e.field_errors),
            )
            raise

        async def work(session: AsyncSession) -> Game:
            teams = self.teams(session)
            missing = await collect_missing(
                [
                    ExistenceCheck(
                        "home_team_id", "team does not exist", lambda: teams.exists(home_team_id)
                    ),
                    ExistenceCheck(
                        "away_team_id", "team does not exist", lambda: teams.exists(away_team_id)
                    ),
                ]
            )
            if missing:
                self.log.debug(
                    "game_validation_failed",
                    stage="existence",
                    field_errors=dump_field_errors(missing),
                )
            raise_if_any(missing)
            return await self.games(session).create(game)

        try:
            created = await self.tx.within_transaction(work)
        except InvalidInputError:
            raise
        except DomainError as e:
            self.log.error(
                "create_game_failed",
                home_team_id=home_team_id,
                away_team_id=away_team_id,
                error=e.code,
                detail=e.message,
            )
            raise

        self.log.info("game_created", game_id=created.id, took_ms=elapsed_ms(start))
        return created

    async def get_game(self, game_id: int) -> Game:
        validate_id(game_id)
        return await self.tx.with_session(lambda s: self.games(s).get_by_id(game_id))

    async def list_games(self, page: Page) -> PageResult[Game]:
        p = normalize_page(page)
        try:
            return await self.tx.with_session(lambda s: self.games(s).list(p))
        except DomainError as e:
            self.log.error(
                "list_games_failed", limit=p.limit, offset=p.offset, error=e.code, detail=e.message
            )
            raise
