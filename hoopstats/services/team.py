"""Team use cases: validation and orchestration, no transport or SQL details."""

from __future__ import annotations

import time

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from hoopstats.errors import DomainError, InvalidInputError, NotFoundError
from hoopstats.models import Page, PageResult, Team, TeamAggregatedStats
from hoopstats.services.base import bind_service_logger, dump_field_errors, elapsed_ms
from hoopstats.services.validation import (
    normalize_page,
    validate_aggregate_request,
    validate_id,
    validate_team_name,
)
from hoopstats.storage.contracts import TeamStoreFactory
from hoopstats.storage.transaction import TransactionManager


class TeamService:
    def __init__(
        self,
        teams: TeamStoreFactory,
        tx: TransactionManager,
        logger: structlog.stdlib.BoundLogger,
    ):
        self.teams = teams
        self.tx = tx
        self.log = bind_service_logger(logger, "team")

    async def create_team(self, name: str) -> Team:
        """
        Create a team with a trimmed, length-checked name.

        Raises:
            InvalidInputError: name empty or outside 2-50 characters
            AlreadyExistsError: a team with that name already exists
        """
        start = time.perf_counter()
        try:
            clean = validate_team_name(name)
        except InvalidInputError as e:
            self.log.debug(
                "team_validation_failed",
                stage="structure",
                name_raw=name,
                field_errors=dump_field_errors(e.field_errors),
            )
            raise

        async def work(session: AsyncSession) -> Team:
            return await self.teams(session).create(Team(name=clean))

        try:
            team = await self.tx.within_transaction(work)
        except DomainError as e:
            self.log.error("create_team_failed", name=clean, error=e.code, detail=e.message)
            raise

        self.log.info("team_created", team_id=team.id, took_ms=elapsed_ms(start))
        return team

    async def get_team(self, team_id: int) -> Team:
        validate_id(team_id)
        return await self.tx.with_session(lambda s: self.teams(s).get_by_id(team_id))

    async def list_teams(self, page: Page) -> PageResult[Team]:
        p = normalize_page(page)
        try:
            return await self.tx.with_session(lambda s: self.teams(s).list(p))
        except DomainError as e:
            self.log.error(
                "list_teams_failed", limit=p.limit, offset=p.offset, error=e.code, detail=e.message
            )
            raise

    async def get_team_aggregated_stats(
        self, team_id: int, season: str | None = None
    ) -> TeamAggregatedStats:
        """
        Win/loss record and scoring over finished games.

        Args:
            team_id: Team to aggregate
            season: 'YYYY-YY' season, or None/blank for career

        Raises:
            InvalidInputError: bad id or season format
            NotFoundError: team does not exist
        """
        season = validate_aggregate_request(team_id, season)

        async def work(session: AsyncSession) -> TeamAggregatedStats:
            repo = self.teams(session)
            if not await repo.exists(team_id):
                raise NotFoundError(f"team {team_id} not found")
            return await repo.get_aggregated_stats(team_id, season)

        try:
            return await self.tx.with_session(work)
        except NotFoundError:
            raise
        except DomainError as e:
            self.log.error(
                "team_aggregated_stats_failed",
                team_id=team_id,
                season=season,
                error=e.code,
                detail=e.message,
            )
            raise
