"""Player endpoints."""

import time

import structlog
from fastapi import APIRouter, Request, status

from hoopstats.api.aggregates import parse_bool_query, resolve_season, with_timeout
from hoopstats.api.deps import PlayerServiceDep, SettingsDep
from hoopstats.api.schemas import PlayerCreate
from hoopstats.errors import DomainError
from hoopstats.models import Player, PlayerAggregatedStats
from hoopstats.services.base import elapsed_ms

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/players", tags=["players"])


@router.post("", response_model=Player, status_code=status.HTTP_201_CREATED)
async def create_player(body: PlayerCreate, svc: PlayerServiceDep) -> Player:
    return await svc.create_player(body.team_id, body.first_name, body.last_name, body.position)


@router.get("/{player_id}", response_model=Player)
async def get_player(player_id: int, svc: PlayerServiceDep) -> Player:
    return await svc.get_player(player_id)


@router.get("/{player_id}/aggregates", response_model=PlayerAggregatedStats)
@router.get("/{player_id}/stats/aggregate", response_model=PlayerAggregatedStats)
async def get_player_aggregates(
    player_id: int,
    request: Request,
    svc: PlayerServiceDep,
    settings: SettingsDep,
    season: str | None = None,
    career: str | None = None,
) -> PlayerAggregatedStats:
    start = time.perf_counter()
    log = logger.bind(path=request.url.path, query=request.url.query, player_id=player_id)
    try:
        stats = await with_timeout(
            svc.get_player_aggregated_stats(player_id, resolve_season(season, career)),
            settings.server.request_timeout,
        )
    except DomainError as e:
        log.error("player_aggregates_failed", error=e.code, took_ms=elapsed_ms(start))
        raise

    log.info(
        "player_aggregates_retrieved", career=parse_bool_query(career), took_ms=elapsed_ms(start)
    )
    return stats
