"""
Input normalization and validation for the service layer.

Validation runs in two phases:
    1. Structural checks here, without touching storage. Every violation is
       collected and raised together as one InvalidInputError.
    2. Existence checks against storage (``collect_missing``), run by the
       services inside the write transaction. Missing references become
       field errors; any other storage failure aborts the operation.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from hoopstats.config import StatLineLimits
from hoopstats.errors import FieldError, raise_if_any
from hoopstats.models import Game, GameStatus, Page, Player, PlayerStatLine, Position

DEFAULT_LIMIT = 50
MAX_LIMIT = 100

# Largest value an INTEGER column holds
MAX_INT = 2**31 - 1

TEAM_NAME_MIN = 2
TEAM_NAME_MAX = 50
PLAYER_NAME_MAX = 50

_SEASON_RE = re.compile(r"^\d{4}-\d{2}$", re.ASCII)

_POSITIONS = {p.value for p in Position}
_STATUSES = {s.value for s in GameStatus}

_COUNTERS = ("points", "rebounds", "assists", "steals", "blocks", "turnovers")


def normalize_page(page: Page) -> Page:
    """Default the limit to 50, cap it at 100 and clamp the offset into [0, MAX_INT]."""
    limit = page.limit
    if limit <= 0:
        limit = DEFAULT_LIMIT
    elif limit > MAX_LIMIT:
        limit = MAX_LIMIT
    return Page(limit=limit, offset=min(max(page.offset, 0), MAX_INT))


def normalize_position(position: str) -> str:
    return position.strip().upper()


def normalize_status(status: str) -> str:
    return status.strip().lower()


def is_valid_season(season: str) -> bool:
    """Check ``season`` matches YYYY-YY, e.g. '2023-24'. Surrounding whitespace is ignored."""
    return bool(_SEASON_RE.match(season.strip()))


def _check_id(field: str, value: int, errors: list[FieldError]) -> None:
    if value <= 0:
        errors.append(FieldError(field, "must be > 0"))
    elif value > MAX_INT:
        errors.append(FieldError(field, f"must be <= {MAX_INT}"))


def validate_id(value: int, field: str = "id") -> int:
    errors: list[FieldError] = []
    _check_id(field, value, errors)
    raise_if_any(errors)
    return value


def validate_team_name(name: str) -> str:
    """Return the trimmed team name or raise with the violated rule."""
    trimmed = name.strip()
    errors: list[FieldError] = []
    if not trimmed:
        errors.append(FieldError("name", "must not be empty"))
    elif not TEAM_NAME_MIN <= len(trimmed) <= TEAM_NAME_MAX:
        errors.append(
            FieldError("name", f"length must be between {TEAM_NAME_MIN} and {TEAM_NAME_MAX}")
        )
    raise_if_any(errors)
    return trimmed


def _person_name(field: str, value: str, errors: list[FieldError]) -> str:
    trimmed = value.strip()
    if not trimmed:
        errors.append(FieldError(field, "must not be empty"))
    elif len(trimmed) > PLAYER_NAME_MAX:
        errors.append(FieldError(field, f"length must be at most {PLAYER_NAME_MAX}"))
    return trimmed


def validate_player(team_id: int, first_name: str, last_name: str, position: str) -> Player:
    """Build an unsaved, normalized Player or raise with every structural violation."""
    errors: list[FieldError] = []
    _check_id("team_id", team_id, errors)
    first = _person_name("first_name", first_name, errors)
    last = _person_name("last_name", last_name, errors)
    pos = normalize_position(position)
    if pos not in _POSITIONS:
        errors.append(FieldError("position", "must be one of PG|SG|SF|PF|C"))
    raise_if_any(errors)
    return Player(team_id=team_id, first_name=first, last_name=last, position=pos)


def validate_game(
    season: str,
    date: datetime | None,
    home_team_id: int,
    away_team_id: int,
    status: str,
) -> Game:
    """
    Build an unsaved, normalized Game or raise with every structural violation.

    Naive datetimes are taken as UTC. The ``teams`` error is reported
    whenever both ids are positive and equal, whether or not they exist.
    """
    errors: list[FieldError] = []
    _check_id("home_team_id", home_team_id, errors)
    _check_id("away_team_id", away_team_id, errors)
    if home_team_id > 0 and away_team_id > 0 and home_team_id == away_team_id:
        errors.append(FieldError("teams", "home and away must differ"))
    if date is None:
        errors.append(FieldError("date", "must be set"))
    elif date.tzinfo is None:
        date = date.replace(tzinfo=UTC)
    season_trimmed = season.strip()
    if not is_valid_season(season_trimmed):
        errors.append(FieldError("season", "invalid format, expected YYYY-YY"))
    status_norm = normalize_status(status)
    if status_norm not in _STATUSES:
        errors.append(FieldError("status", "must be one of scheduled|in_progress|finished"))
    raise_if_any(errors)
    return Game(
        season=season_trimmed,
        date=date,
        home_team_id=home_team_id,
        away_team_id=away_team_id,
        status=status_norm,
    )


def validate_stat_line(line: PlayerStatLine, limits: StatLineLimits) -> PlayerStatLine:
    """Check ids, non-negative counters and the foul and minute ceilings in ``limits``."""
    errors: list[FieldError] = []
    _check_id("player_id", line.player_id, errors)
    _check_id("game_id", line.game_id, errors)
    for name in _COUNTERS:
        value = getattr(line, name)
        if value < 0:
            errors.append(FieldError(name, "must be >= 0"))
        elif value > MAX_INT:
            errors.append(FieldError(name, f"must be <= {MAX_INT}"))
    if not 0 <= line.fouls <= limits.max_fouls:
        errors.append(FieldError("fouls", f"must be between 0 and {limits.max_fouls}"))
    if not 0 <= line.minutes_played <= limits.max_minutes:
        errors.append(
            FieldError("minutes_played", f"must be between 0 and {limits.max_minutes:g}")
        )
    raise_if_any(errors)
    return line


def validate_aggregate_request(entity_id: int, season: str | None) -> str | None:
    """
    Validate an aggregate-stats lookup.

    Returns:
        The trimmed season, or None for career (``season`` absent or blank)
    """
    errors: list[FieldError] = []
    _check_id("id", entity_id, errors)
    normalized = season.strip() if season is not None else None
    if not normalized:
        normalized = None
    elif not is_valid_season(normalized):
        errors.append(FieldError("season", "must be in YYYY-YY format"))
    raise_if_any(errors)
    return normalized


@dataclass(frozen=True)
class ExistenceCheck:
    """A referenced id to confirm, and the field error to report when it is missing."""

    field: str
    message: str
    exists: Callable[[], Awaitable[bool]]


async def collect_missing(checks: Sequence[ExistenceCheck]) -> list[FieldError]:
    """
    Run every check in order and collect a field error for each missing reference.

    Storage errors raised by a check propagate immediately.
    """
    errors: list[FieldError] = []
    for check in checks:
        if not await check.exists():
            errors.append(FieldError(check.field, check.message))
    return errors
