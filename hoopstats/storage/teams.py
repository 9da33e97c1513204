"""Database operations for teams, including the team record aggregation."""

from __future__ import annotations

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hoopstats.aggregation import FinishedGameRow, aggregate_team_stats, compute_game_results
from hoopstats.errors import NotFoundError
from hoopstats.models import (
    Game,
    GameStatus,
    Page,
    PageResult,
    Player,
    PlayerStatLine,
    Team,
    TeamAggregatedStats,
)
from hoopstats.storage.base import sanitize_page, storage_errors

logger = structlog.get_logger(__name__)


class TeamRepository:
    """Handles all persistence operations for teams."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, team: Team) -> Team:
        """Insert a team. A duplicate name raises AlreadyExistsError."""
        with storage_errors():
            self.session.add(team)
            await self.session.flush()
        return team

    async def get_by_id(self, team_id: int) -> Team:
        with storage_errors():
            team = await self.session.get(Team, team_id)
        if team is None:
            raise NotFoundError(f"team {team_id} not found")
        return team

    async def list(self, page: Page) -> PageResult[Team]:
        page = sanitize_page(page)
        with storage_errors():
            total = (await self.session.execute(select(func.count(Team.id)))).scalar_one()
            result = await self.session.execute(
                select(Team).order_by(Team.id).limit(page.limit).offset(page.offset)
            )
            items = list(result.scalars().all())
        return PageResult(items=items, total=total)

    async def exists(self, team_id: int) -> bool:
        with storage_errors():
            result = await self.session.execute(select(Team.id).where(Team.id == team_id))
            return result.scalar_one_or_none() is not None

    async def get_aggregated_stats(self, team_id: int, season: str | None) -> TeamAggregatedStats:
        """
        Compute a team's record over finished games.

        Steps:
            1. Load the finished games the team played (optionally one season).
            2. Sum player points per (game, team) for those games. Players are
               attributed to their current team.
            3. Score each game and fold the results for ``team_id``.

        Args:
            team_id: Team to aggregate
            season: Season string e.g. '2023-24', or None for career
        """
        conditions = [
            Game.status == GameStatus.FINISHED.value,
            or_(Game.home_team_id == team_id, Game.away_team_id == team_id),
        ]
        if season is not None:
            conditions.append(Game.season == season)

        with storage_errors():
            games_result = await self.session.execute(
                select(Game.id, Game.home_team_id, Game.away_team_id)
                .where(*conditions)
                .order_by(Game.id)
            )
            games = [
                FinishedGameRow(game_id=row[0], home_team_id=row[1], away_team_id=row[2])
                for row in games_result.all()
            ]
            if not games:
                return TeamAggregatedStats()

            points_result = await self.session.execute(
                select(PlayerStatLine.game_id, Player.team_id, func.sum(PlayerStatLine.points))
                .join(Player, Player.id == PlayerStatLine.player_id)
                .join(Game, Game.id == PlayerStatLine.game_id)
                .where(*conditions)
                .group_by(PlayerStatLine.game_id, Player.team_id)
            )
            team_points = {(row[0], row[1]): int(row[2] or 0) for row in points_result.all()}

        results = compute_game_results(games, team_points)
        stats = aggregate_team_stats(team_id, results)
        logger.debug(
            "team_stats_aggregated",
            team_id=team_id,
            season=season,
            games=len(results),
            wins=stats.wins,
            losses=stats.losses,
        )
        return stats
