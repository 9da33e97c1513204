"""Request and response bodies for the HTTP API."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from hoopstats.models import Game, GameStatus, Player, PlayerStatLine, Team
from hoopstats.services.validation import MAX_INT


class TeamCreate(SQLModel):
    name: str = ""


class PlayerCreate(SQLModel):
    team_id: int = Field(default=0, le=MAX_INT)
    first_name: str = ""
    last_name: str = ""
    position: str = ""


class GameCreate(SQLModel):
    """New game. ``date`` is an ISO 8601 timestamp; naive values are read as UTC."""

    season: str = ""
    date: datetime | None = None
    home_team_id: int = Field(default=0, le=MAX_INT)
    away_team_id: int = Field(default=0, le=MAX_INT)
    status: str = GameStatus.SCHEDULED.value


class StatLineUpsert(SQLModel):
    player_id: int = Field(default=0, le=MAX_INT)
    game_id: int = Field(default=0, le=MAX_INT)
    points: int = Field(default=0, le=MAX_INT)
    rebounds: int = Field(default=0, le=MAX_INT)
    assists: int = Field(default=0, le=MAX_INT)
    steals: int = Field(default=0, le=MAX_INT)
    blocks: int = Field(default=0, le=MAX_INT)
    fouls: int = Field(default=0, le=MAX_INT)
    turnovers: int = Field(default=0, le=MAX_INT)
    minutes_played: float = 0.0

    def to_stat_line(self) -> PlayerStatLine:
        return PlayerStatLine(**self.model_dump())


class TeamPage(SQLModel):
    items: list[Team]
    total: int


class PlayerPage(SQLModel):
    items: list[Player]
    total: int


class GamePage(SQLModel):
    items: list[Game]
    total: int


class FieldErrorBody(SQLModel):
    field: str
    message: str


class ErrorBody(SQLModel):
    """Error envelope returned for every failed request."""

    error: str
    message: str | None = None
    field_errors: list[FieldErrorBody] | None = None


class HealthStatus(SQLModel):
    status: str
