"""Game endpoints, including the per-game stat line listing."""

from fastapi import APIRouter, status

from hoopstats.api.deps import GameServiceDep, StatsServiceDep
from hoopstats.api.schemas import GameCreate, GamePage
from hoopstats.models import Game, Page, PlayerStatLine

router = APIRouter(prefix="/games", tags=["games"])


@router.post("", response_model=Game, status_code=status.HTTP_201_CREATED)
async def create_game(body: GameCreate, svc: GameServiceDep) -> Game:
    return await svc.create_game(
        body.season, body.date, body.home_team_id, body.away_team_id, body.status
    )


@router.get("", response_model=GamePage)
async def list_games(svc: GameServiceDep, limit: int = 0, offset: int = 0) -> GamePage:
    result = await svc.list_games(Page(limit=limit, offset=offset))
    return GamePage(items=result.items, total=result.total)


@router.get("/{game_id}", response_model=Game)
async def get_game(game_id: int, svc: GameServiceDep) -> Game:
    return await svc.get_game(game_id)


@router.get("/{game_id}/stats", response_model=list[PlayerStatLine])
async def list_game_stats(game_id: int, svc: StatsServiceDep) -> list[PlayerStatLine]:
    return await svc.list_stats_by_game(game_id)
