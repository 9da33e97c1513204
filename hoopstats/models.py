"""SQLModel database schema definitions and derived stat shapes."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Generic, TypeVar

from sqlalchemy import Column, DateTime, Index, UniqueConstraint
from sqlmodel import Field, SQLModel

T = TypeVar("T")


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(UTC)


class Position(str, Enum):
    """Player position. Stored uppercase."""

    PG = "PG"
    SG = "SG"
    SF = "SF"
    PF = "PF"
    C = "C"


class GameStatus(str, Enum):
    """Game lifecycle status. Stored lowercase."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class Team(SQLModel, table=True):
    """Basketball team."""

    __tablename__ = "teams"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=50, unique=True, index=True, description="Team name")

    created_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=utc_now,
        description="Record creation time",
    )
    updated_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=utc_now,
        description="Record last update time",
    )


class Player(SQLModel, table=True):
    """Athlete on a team's roster."""

    __tablename__ = "players"

    id: int | None = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="teams.id", index=True, description="Owning team")
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    position: str = Field(max_length=2, description="PG, SG, SF, PF or C")

    created_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=utc_now,
    )
    updated_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=utc_now,
    )


class Game(SQLModel, table=True):
    """A scheduled, in-progress or finished game between two teams."""

    __tablename__ = "games"

    id: int | None = Field(default=None, primary_key=True)
    season: str = Field(max_length=7, description="Season string e.g. '2023-24'")
    date: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Tip-off time",
    )
    home_team_id: int = Field(foreign_key="teams.id", index=True)
    away_team_id: int = Field(foreign_key="teams.id", index=True)
    status: str = Field(
        default=GameStatus.SCHEDULED.value,
        max_length=16,
        description="scheduled, in_progress or finished",
    )

    created_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=utc_now,
    )
    updated_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=utc_now,
    )

    __table_args__ = (
        Index("ix_games_season_status", "season", "status"),
    )


class PlayerStatLine(SQLModel, table=True):
    """One player's counting stats for one game.

    Exactly one row per (player, game); writes go through an upsert keyed on
    that pair.
    """

    __tablename__ = "player_stats"

    id: int | None = Field(default=None, primary_key=True)
    player_id: int = Field(foreign_key="players.id", index=True)
    game_id: int = Field(foreign_key="games.id", index=True)

    points: int = Field(default=0)
    rebounds: int = Field(default=0)
    assists: int = Field(default=0)
    steals: int = Field(default=0)
    blocks: int = Field(default=0)
    fouls: int = Field(default=0)
    turnovers: int = Field(default=0)
    minutes_played: float = Field(default=0.0)

    created_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=utc_now,
    )
    updated_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=utc_now,
    )

    __table_args__ = (
        UniqueConstraint("player_id", "game_id", name="uq_player_stats_player_game"),
    )


class PlayerAggregatedStats(SQLModel):
    """Totals and per-game averages for a player (season or career). Never persisted."""

    games_played: int = 0
    total_points: int = 0
    total_rebounds: int = 0
    total_assists: int = 0
    total_steals: int = 0
    total_blocks: int = 0
    avg_points: float = 0.0
    avg_rebounds: float = 0.0
    avg_assists: float = 0.0


class TeamAggregatedStats(SQLModel):
    """Win/loss record and scoring for a team over finished games. Never persisted."""

    wins: int = 0
    losses: int = 0
    total_points_scored: int = 0
    total_points_allowed: int = 0
    avg_points_scored: float = 0.0
    avg_points_allowed: float = 0.0


@dataclass(frozen=True)
class Page:
    """Limit/offset window for listing operations."""

    limit: int = 50
    offset: int = 0


@dataclass
class PageResult(Generic[T]):
    """One page of items plus the total number of matching rows."""

    items: list[T] = field(default_factory=list)
    total: int = 0
