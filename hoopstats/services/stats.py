"""Stat line use cases."""

from __future__ import annotations

import time

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from hoopstats.config import Settings
from hoopstats.errors import DomainError, InvalidInputError, raise_if_any
from hoopstats.models import PlayerStatLine
from hoopstats.services.base import bind_service_logger, dump_field_errors, elapsed_ms
from hoopstats.services.validation import (
    ExistenceCheck,
    collect_missing,
    validate_id,
    validate_stat_line,
)
from hoopstats.storage.contracts import GameStoreFactory, PlayerStoreFactory, StatsStoreFactory
from hoopstats.storage.transaction import TransactionManager


class StatsService:
    def __init__(
        self,
        stats: StatsStoreFactory,
        players: PlayerStoreFactory,
        games: GameStoreFactory,
        tx: TransactionManager,
        settings: Settings,
        logger: structlog.stdlib.BoundLogger,
    ):
        self.stats = stats
        self.players = players
        self.games = games
        self.tx = tx
        self.limits = settings.stat_limits
        self.log = bind_service_logger(logger, "stats")

    async def upsert_stat_line(self, line: PlayerStatLine) -> PlayerStatLine:
        """
        Record a player's stat line for a game, replacing any existing line for the pair.

        Raises:
            InvalidInputError: out-of-range counters, or unknown player/game
        """
        start = time.perf_counter()
        try:
            validate_stat_line(line, self.limits)
        except InvalidInputError as e:
            self.log.debug(
                "stat_line_validation_failed",
                stage="structure",
                player_id=line.player_id,
                game_id=line.game_id,
                field_errors=dump_field_errors(e.field_errors),
            )
            raise

        async def work(session: AsyncSession) -> PlayerStatLine:
            players = self.players(session)
            games = self.games(session)
            missing = await collect_missing(
                [
                    ExistenceCheck(
                        "player_id", "player does not exist", lambda: players.exists(line.player_id)
                    ),
                    ExistenceCheck(
                        "game_id", "game does not exist", lambda: games.exists(line.game_id)
                    ),
                ]
            )
            if missing:
                self.log.debug(
                    "stat_line_validation_failed",
                    stage="existence",
                    player_id=line.player_id,
                    game_id=line.game_id,
                    field_errors=dump_field_errors(missing),
                )
            raise_if_any(missing)
            return await self.stats(session).upsert_stat_line(line)

        try:
            stored = await self.tx.within_transaction(work)
        except InvalidInputError:
            raise
        except DomainError as e:
            self.log.error(
                "upsert_stat_line_failed",
                player_id=line.player_id,
                game_id=line.game_id,
                error=e.code,
                detail=e.message,
            )
            raise

        self.log.info("stat_line_upserted", stat_line_id=stored.id, took_ms=elapsed_ms(start))
        return stored

    async def list_stats_by_game(self, game_id: int) -> list[PlayerStatLine]:
        validate_id(game_id, field="game_id")
        try:
            return await self.tx.with_session(lambda s: self.stats(s).list_by_game(game_id))
        except DomainError as e:
            self.log.error(
                "list_stats_by_game_failed", game_id=game_id, error=e.code, detail=e.message
            )
            raise
