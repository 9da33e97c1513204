"""Database operations for games."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hoopstats.errors import NotFoundError
from hoopstats.models import Game, Page, PageResult
from hoopstats.storage.base import sanitize_page, storage_errors


class GameRepository:
    """Handles all persistence operations for games."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, game: Game) -> Game:
        with storage_errors():
            self.session.add(game)
            await self.session.flush()
        return game

    async def get_by_id(self, game_id: int) -> Game:
        with storage_errors():
            game = await self.session.get(Game, game_id)
        if game is None:
            raise NotFoundError(f"game {game_id} not found")
        return game

    async def list(self, page: Page) -> PageResult[Game]:
        """Page through games, newest tip-off first."""
        page = sanitize_page(page)
        with storage_errors():
            total = (await self.session.execute(select(func.count(Game.id)))).scalar_one()
            result = await self.session.execute(
                select(Game)
                .order_by(Game.date.desc(), Game.id.desc())
                .limit(page.limit)
                .offset(page.offset)
            )
            items = list(result.scalars().all())
        return PageResult(items=items, total=total)

    async def exists(self, game_id: int) -> bool:
        with storage_errors():
            result = await self.session.execute(select(Game.id).where(Game.id == game_id))
            return result.scalar_one_or_none() is not None
