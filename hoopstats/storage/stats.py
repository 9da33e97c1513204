"""Database write and read operations for per-game player stat lines."""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from hoopstats.errors import StorageError
from hoopstats.models import PlayerStatLine, utc_now
from hoopstats.storage.base import storage_errors

logger = structlog.get_logger(__name__)

_CONFLICT_KEYS = ("player_id", "game_id")
_IMMUTABLE_COLUMNS = ("id", "created_at", *_CONFLICT_KEYS)


class StatsRepository:
    """Handles persistence of player stat lines keyed by (player_id, game_id)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _insert(self):
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise StorageError(f"upsert not supported for dialect {dialect!r}")

    async def upsert_stat_line(self, line: PlayerStatLine) -> PlayerStatLine:
        """
        Insert or overwrite the stat line for ``(line.player_id, line.game_id)``.

        On conflict every counting stat is replaced and ``updated_at`` is
        refreshed; ``id`` and ``created_at`` of the existing row are kept.

        Returns:
            The stored row as it is after the write.
        """
        now = utc_now()
        values = {
            "player_id": line.player_id,
            "game_id": line.game_id,
            "points": line.points,
            "rebounds": line.rebounds,
            "assists": line.assists,
            "steals": line.steals,
            "blocks": line.blocks,
            "fouls": line.fouls,
            "turnovers": line.turnovers,
            "minutes_played": line.minutes_played,
            "created_at": now,
            "updated_at": now,
        }

        stmt = self._insert()(PlayerStatLine).values(**values)
        set_ = {
            col.name: stmt.excluded[col.name]
            for col in PlayerStatLine.__table__.columns
            if col.name not in _IMMUTABLE_COLUMNS
        }
        stmt = stmt.on_conflict_do_update(
            index_elements=list(_CONFLICT_KEYS),
            set_=set_,
        ).returning(PlayerStatLine.id)

        with storage_errors():
            line_id = (await self.session.execute(stmt)).scalar_one()
            stored = await self.session.get(PlayerStatLine, line_id, populate_existing=True)

        if stored is None:
            raise StorageError(f"stat line {line_id} vanished after upsert")

        logger.debug(
            "stat_line_upserted",
            stat_line_id=stored.id,
            player_id=stored.player_id,
            game_id=stored.game_id,
        )
        return stored

    async def list_by_game(self, game_id: int) -> list[PlayerStatLine]:
        with storage_errors():
            result = await self.session.execute(
                select(PlayerStatLine)
                .where(PlayerStatLine.game_id == game_id)
                .order_by(PlayerStatLine.id)
            )
            return list(result.scalars().all())
