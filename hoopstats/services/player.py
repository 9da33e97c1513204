"""Player use cases."""

from __future__ import annotations

import time

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from hoopstats.errors import DomainError, InvalidInputError, NotFoundError, raise_if_any
from hoopstats.models import Page, PageResult, Player, PlayerAggregatedStats
from hoopstats.services.base import bind_service_logger, dump_field_errors, elapsed_ms
from hoopstats.services.validation import (
    ExistenceCheck,
    collect_missing,
    normalize_page,
    validate_aggregate_request,
    validate_id,
    validate_player,
)
from hoopstats.storage.contracts import PlayerStoreFactory, TeamStoreFactory
from hoopstats.storage.transaction import TransactionManager


class PlayerService:
    def __init__(
        self,
        players: PlayerStoreFactory,
        teams: TeamStoreFactory,
        tx: TransactionManager,
        logger: structlog.stdlib.BoundLogger,
    ):
        self.players = players
        self.teams = teams
        self.tx = tx
        self.log = bind_service_logger(logger, "player")

    async def create_player(
        self, team_id: int, first_name: str, last_name: str, position: str
    ) -> Player:
        """
        Create a player on an existing team.

        Structural problems are reported before storage is touched; a missing
        team is reported as a ``team_id`` field error from inside the write
        transaction.

        Raises:
            InvalidInputError: structural or existence violations, all of them
            ConflictError: the team vanished between the check and the insert
        """
        start = time.perf_counter()
        try:
            player = validate_player(team_id, first_name, last_name, position)
        except InvalidInputError as e:
            self.log.debug(
                "player_validation_failed",
                stage="structure",
                team_id=team_id,
                field_errors=dump_field_errors(e.field_errors),
            )
            raise

        async def work(session: AsyncSession) -> Player:
            teams = self.teams(session)
            missing = await collect_missing(
                [
                    ExistenceCheck(
                        "team_id", "team does not exist", lambda: teams.exists(team_id)
                    ),
                ]
            )
            if missing:
                self.log.debug(
                    "player_validation_failed",
                    stage="existence",
                    team_id=team_id,
                    field_errors=dump_field_errors(missing),
                )
            raise_if_any(missing)
            return await self.players(session).create(player)

        try:
            created = await self.tx.within_transaction(work)
        except InvalidInputError:
            raise
        except DomainError as e:
            self.log.error(
                "create_player_failed",
                team_id=team_id,
                first_name=player.first_name,
                last_name=player.last_name,
                error=e.code,
                detail=e.message,
            )
            raise

        self.log.info("player_created", player_id=created.id, took_ms=elapsed_ms(start))
        return created

    async def get_player(self, player_id: int) -> Player:
        validate_id(player_id)
        return await self.tx.with_session(lambda s: self.players(s).get_by_id(player_id))

    async def list_players_by_team(self, team_id: int, page: Page) -> PageResult[Player]:
        validate_id(team_id, field="team_id")
        p = normalize_page(page)
        try:
            return await self.tx.with_session(lambda s: self.players(s).list_by_team(team_id, p))
        except DomainError as e:
            self.log.error(
                "list_players_failed",
                team_id=team_id,
                limit=p.limit,
                offset=p.offset,
                error=e.code,
                detail=e.message,
            )
            raise

    async def get_player_aggregated_stats(
        self, player_id: int, season: str | None = None
    ) -> PlayerAggregatedStats:
        """
        Totals and per-game averages for a player, for one season or career.

        Raises:
            InvalidInputError: bad id or season format
            NotFoundError: player does not exist
        """
        season = validate_aggregate_request(player_id, season)

        async def work(session: AsyncSession) -> PlayerAggregatedStats:
            repo = self.players(session)
            if not await repo.exists(player_id):
                raise NotFoundError(f"player {player_id} not found")
            return await repo.get_aggregated_stats(player_id, season)

        try:
            return await self.tx.with_session(work)
        except NotFoundError:
            raise
        except DomainError as e:
            self.log.error(
                "player_aggregated_stats_failed",
                player_id=player_id,
                season=season,
                error=e.code,
                detail=e.message,
            )
            raise
