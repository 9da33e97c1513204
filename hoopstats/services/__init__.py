"""Use-case services for teams, players, games and stat lines."""

from hoopstats.services.game import GameService
from hoopstats.services.player import PlayerService
from hoopstats.services.stats import StatsService
from hoopstats.services.team import TeamService

__all__ = ["GameService", "PlayerService", "StatsService", "TeamService"]
