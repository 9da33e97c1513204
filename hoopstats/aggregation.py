"""Aggregated player and team statistics computed from raw stat rows.

The repositories load raw rows (already restricted by season and, for
teams, to finished games) and hand them to the folds below. Keeping the
arithmetic here makes the win/loss attribution rules explicit:

- a team's score in a game is the sum of its players' points, 0 when none
  of its players have a stat line;
- the home team wins only when it outscores the away team and loses
  otherwise. A tie therefore credits the away team with the win and the
  home team with the loss; every game has exactly one winner and one loser.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from hoopstats.models import PlayerAggregatedStats, TeamAggregatedStats


@dataclass(frozen=True)
class StatLineRow:
    """Counting stats of one stat line, as read for player aggregation."""

    points: int
    rebounds: int
    assists: int
    steals: int
    blocks: int


@dataclass(frozen=True)
class FinishedGameRow:
    """A finished game's participants."""

    game_id: int
    home_team_id: int
    away_team_id: int


@dataclass(frozen=True)
class GameResult:
    """Final score and attribution for one finished game."""

    game_id: int
    home_team_id: int
    away_team_id: int
    home_points: int
    away_points: int

    @property
    def winner_id(self) -> int:
        return self.home_team_id if self.home_points > self.away_points else self.away_team_id

    @property
    def loser_id(self) -> int:
        return self.home_team_id if self.home_points <= self.away_points else self.away_team_id

    def involves(self, team_id: int) -> bool:
        return team_id in (self.home_team_id, self.away_team_id)

    def points_for(self, team_id: int) -> int:
        return self.home_points if self.home_team_id == team_id else self.away_points

    def points_against(self, team_id: int) -> int:
        return self.away_points if self.home_team_id == team_id else self.home_points


def _mean(total: int, count: int) -> float:
    return total / count if count else 0.0


def round_half_up(value: float, places: int = 2) -> float:
    """Round like SQL ROUND on numerics (halves away from zero), not banker's rounding."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def aggregate_player_stats(lines: Iterable[StatLineRow]) -> PlayerAggregatedStats:
    """Fold a player's matching stat lines into totals and per-game averages.

    An empty input yields all zeros.
    """
    games = points = rebounds = assists = steals = blocks = 0
    for line in lines:
        games += 1
        points += line.points
        rebounds += line.rebounds
        assists += line.assists
        steals += line.steals
        blocks += line.blocks

    return PlayerAggregatedStats(
        games_played=games,
        total_points=points,
        total_rebounds=rebounds,
        total_assists=assists,
        total_steals=steals,
        total_blocks=blocks,
        avg_points=_mean(points, games),
        avg_rebounds=_mean(rebounds, games),
        avg_assists=_mean(assists, games),
    )


def compute_game_results(
    games: Iterable[FinishedGameRow],
    team_points: Mapping[tuple[int, int], int],
) -> list[GameResult]:
    """
    Attach final scores to finished games.

    Args:
        games: Finished games to score
        team_points: Summed player points keyed by (game_id, team_id). Pairs
            without an entry score 0.
    """
    return [
        GameResult(
            game_id=g.game_id,
            home_team_id=g.home_team_id,
            away_team_id=g.away_team_id,
            home_points=team_points.get((g.game_id, g.home_team_id), 0),
            away_points=team_points.get((g.game_id, g.away_team_id), 0),
        )
        for g in games
    ]


def aggregate_team_stats(team_id: int, results: Iterable[GameResult]) -> TeamAggregatedStats:
    """Fold game results into one team's record. Games the team did not play are ignored."""
    wins = losses = scored = allowed = played = 0
    for result in results:
        if not result.involves(team_id):
            continue
        played += 1
        if result.winner_id == team_id:
            wins += 1
        if result.loser_id == team_id:
            losses += 1
        scored += result.points_for(team_id)
        allowed += result.points_against(team_id)

    return TeamAggregatedStats(
        wins=wins,
        losses=losses,
        total_points_scored=scored,
        total_points_allowed=allowed,
        avg_points_scored=round_half_up(_mean(scored, played)),
        avg_points_allowed=round_half_up(_mean(allowed, played)),
    )
