"""Capability interfaces the services depend on.

Each repository is built from the session of the current unit of work, so
every call it makes runs on that explicit executor. Services receive
factories (usually the repository class itself) rather than instances.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from hoopstats.models import (
    Game,
    Page,
    PageResult,
    Player,
    PlayerAggregatedStats,
    PlayerStatLine,
    Team,
    TeamAggregatedStats,
)


class TeamStore(Protocol):
    async def create(self, team: Team) -> Team: ...

    async def get_by_id(self, team_id: int) -> Team: ...

    async def list(self, page: Page) -> PageResult[Team]: ...

    async def exists(self, team_id: int) -> bool: ...

    async def get_aggregated_stats(
        self, team_id: int, season: str | None
    ) -> TeamAggregatedStats: ...


class PlayerStore(Protocol):
    async def create(self, player: Player) -> Player: ...

    async def get_by_id(self, player_id: int) -> Player: ...

    async def list_by_team(self, team_id: int, page: Page) -> PageResult[Player]: ...

    async def exists(self, player_id: int) -> bool: ...

    async def get_aggregated_stats(
        self, player_id: int, season: str | None
    ) -> PlayerAggregatedStats: ...


class GameStore(Protocol):
    async def create(self, game: Game) -> Game: ...

    async def get_by_id(self, game_id: int) -> Game: ...

    async def list(self, page: Page) -> PageResult[Game]: ...

    async def exists(self, game_id: int) -> bool: ...


class StatsStore(Protocol):
    async def upsert_stat_line(self, line: PlayerStatLine) -> PlayerStatLine: ...

    async def list_by_game(self, game_id: int) -> list[PlayerStatLine]: ...


class Pinger(Protocol):
    async def ping(self) -> None: ...


TeamStoreFactory = Callable[[AsyncSession], TeamStore]
PlayerStoreFactory = Callable[[AsyncSession], PlayerStore]
GameStoreFactory = Callable[[AsyncSession], GameStore]
StatsStoreFactory = Callable[[AsyncSession], StatsStore]
