"""Database operations for players and their aggregated stat lines."""

from __future__ import annotations

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hoopstats.aggregation import StatLineRow, aggregate_player_stats
from hoopstats.errors import NotFoundError
from hoopstats.models import Game, Page, PageResult, Player, PlayerAggregatedStats, PlayerStatLine
from hoopstats.storage.base import sanitize_page, storage_errors

logger = structlog.get_logger(__name__)


class PlayerRepository:
    """Handles all persistence operations for players."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, player: Player) -> Player:
        """Insert a player. A missing team surfaces as ConflictError."""
        with storage_errors():
            self.session.add(player)
            await self.session.flush()
        return player

    async def get_by_id(self, player_id: int) -> Player:
        with storage_errors():
            player = await self.session.get(Player, player_id)
        if player is None:
            raise NotFoundError(f"player {player_id} not found")
        return player

    async def list_by_team(self, team_id: int, page: Page) -> PageResult[Player]:
        page = sanitize_page(page)
        with storage_errors():
            total = (
                await self.session.execute(
                    select(func.count(Player.id)).where(Player.team_id == team_id)
                )
            ).scalar_one()
            result = await self.session.execute(
                select(Player)
                .where(Player.team_id == team_id)
                .order_by(Player.id)
                .limit(page.limit)
                .offset(page.offset)
            )
            items = list(result.scalars().all())
        return PageResult(items=items, total=total)

    async def exists(self, player_id: int) -> bool:
        with storage_errors():
            result = await self.session.execute(select(Player.id).where(Player.id == player_id))
            return result.scalar_one_or_none() is not None

    async def get_aggregated_stats(
        self, player_id: int, season: str | None
    ) -> PlayerAggregatedStats:
        """
        Totals and per-game averages over the player's stat lines.

        Every stat line counts regardless of the game's status. ``season``
        restricts to games of that season; None aggregates the whole career.
        """
        query = (
            select(
                PlayerStatLine.points,
                PlayerStatLine.rebounds,
                PlayerStatLine.assists,
                PlayerStatLine.steals,
                PlayerStatLine.blocks,
            )
            .join(Game, Game.id == PlayerStatLine.game_id)
            .where(PlayerStatLine.player_id == player_id)
        )
        if season is not None:
            query = query.where(Game.season == season)

        with storage_errors():
            result = await self.session.execute(query)
            rows = [
                StatLineRow(
                    points=row.points,
                    rebounds=row.rebounds,
                    assists=row.assists,
                    steals=row.steals,
                    blocks=row.blocks,
                )
                for row in result.all()
            ]

        stats = aggregate_player_stats(rows)
        logger.debug(
            "player_stats_aggregated",
            player_id=player_id,
            season=season,
            games_played=stats.games_played,
        )
        return stats
