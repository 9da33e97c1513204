"""Stat line upsert endpoint."""

from fastapi import APIRouter

from hoopstats.api.deps import StatsServiceDep
from hoopstats.api.schemas import StatLineUpsert
from hoopstats.models import PlayerStatLine

router = APIRouter(prefix="/stats", tags=["stats"])


@router.post("", response_model=PlayerStatLine)
async def upsert_stat_line(body: StatLineUpsert, svc: StatsServiceDep) -> PlayerStatLine:
    """Create or replace the stat line for ``(player_id, game_id)``. Always answers 200."""
    return await svc.upsert_stat_line(body.to_stat_line())
