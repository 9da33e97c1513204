"""Storage layer: repositories and the transaction coordinator."""

from hoopstats.storage.games import GameRepository
from hoopstats.storage.players import PlayerRepository
from hoopstats.storage.stats import StatsRepository
from hoopstats.storage.teams import TeamRepository
from hoopstats.storage.transaction import TransactionManager

__all__ = [
    "GameRepository",
    "PlayerRepository",
    "StatsRepository",
    "TeamRepository",
    "TransactionManager",
]
