"""Basketball teams, players, games and per-game stat lines with aggregated statistics."""

__version__ = "0.1.0"
