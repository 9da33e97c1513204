"""Team endpoints, including the nested roster listing and team aggregates."""

import time

import structlog
from fastapi import APIRouter, Request, status

from hoopstats.api.aggregates import parse_bool_query, resolve_season, with_timeout
from hoopstats.api.deps import PlayerServiceDep, SettingsDep, TeamServiceDep
from hoopstats.api.schemas import PlayerPage, TeamCreate, TeamPage
from hoopstats.errors import DomainError
from hoopstats.models import Page, Team, TeamAggregatedStats
from hoopstats.services.base import elapsed_ms

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/teams", tags=["teams"])


@router.post("", response_model=Team, status_code=status.HTTP_201_CREATED)
async def create_team(body: TeamCreate, svc: TeamServiceDep) -> Team:
    return await svc.create_team(body.name)


@router.get("", response_model=TeamPage)
async def list_teams(svc: TeamServiceDep, limit: int = 0, offset: int = 0) -> TeamPage:
    result = await svc.list_teams(Page(limit=limit, offset=offset))
    return TeamPage(items=result.items, total=result.total)


@router.get("/{team_id}", response_model=Team)
async def get_team(team_id: int, svc: TeamServiceDep) -> Team:
    return await svc.get_team(team_id)


@router.get("/{team_id}/players", response_model=PlayerPage)
async def list_team_players(
    team_id: int, svc: PlayerServiceDep, limit: int = 0, offset: int = 0
) -> PlayerPage:
    result = await svc.list_players_by_team(team_id, Page(limit=limit, offset=offset))
    return PlayerPage(items=result.items, total=result.total)


@router.get("/{team_id}/aggregates", response_model=TeamAggregatedStats)
@router.get("/{team_id}/stats/aggregate", response_model=TeamAggregatedStats)
async def get_team_aggregates(
    team_id: int,
    request: Request,
    svc: TeamServiceDep,
    settings: SettingsDep,
    season: str | None = None,
    career: str | None = None,
) -> TeamAggregatedStats:
    """Win/loss record over finished games. Pass ``season`` (YYYY-YY) or ``career``, not both."""
    start = time.perf_counter()
    log = logger.bind(path=request.url.path, query=request.url.query, team_id=team_id)
    try:
        stats = await with_timeout(
            svc.get_team_aggregated_stats(team_id, resolve_season(season, career)),
            settings.server.request_timeout,
        )
    except DomainError as e:
        log.error("team_aggregates_failed", error=e.code, took_ms=elapsed_ms(start))
        raise

    log.info(
        "team_aggregates_retrieved", career=parse_bool_query(career), took_ms=elapsed_ms(start)
    )
    return stats
