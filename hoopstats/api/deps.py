"""FastAPI dependencies resolving the services wired up in the app lifespan."""

from typing import Annotated

from fastapi import Depends, Request

from hoopstats.config import Settings
from hoopstats.database import Database
from hoopstats.services import GameService, PlayerService, StatsService, TeamService


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_team_service(request: Request) -> TeamService:
    return request.app.state.team_service


def get_player_service(request: Request) -> PlayerService:
    return request.app.state.player_service


def get_game_service(request: Request) -> GameService:
    return request.app.state.game_service


def get_stats_service(request: Request) -> StatsService:
    return request.app.state.stats_service


SettingsDep = Annotated[Settings, Depends(get_settings_dep)]
DatabaseDep = Annotated[Database, Depends(get_database)]
TeamServiceDep = Annotated[TeamService, Depends(get_team_service)]
PlayerServiceDep = Annotated[PlayerService, Depends(get_player_service)]
GameServiceDep = Annotated[GameService, Depends(get_game_service)]
StatsServiceDep = Annotated[StatsService, Depends(get_stats_service)]
