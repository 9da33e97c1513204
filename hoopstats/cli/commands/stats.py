"""Aggregated statistics commands."""

import asyncio
from typing import NoReturn

import structlog
import typer
from rich.table import Table

from hoopstats.cli.runtime import console, load_settings, open_database
from hoopstats.config import Settings
from hoopstats.errors import DomainError, InvalidInputError

app = typer.Typer(help="Aggregated player and team statistics")

SEASON_OPTION = typer.Option(
    None,
    "--season",
    help="Season e.g. '2023-24' (default: career)",
)


@app.command("player")
def player(
    player_id: int = typer.Argument(..., help="Player id"),
    season: str | None = SEASON_OPTION,
) -> None:
    """Show a player's totals and per-game averages.

    Examples:
        hoopstats stats player 12
        hoopstats stats player 12 --season 2023-24
    """
    settings = load_settings()
    asyncio.run(_player_async(settings, player_id, season))


async def _player_async(settings: Settings, player_id: int, season: str | None) -> None:
    from hoopstats.services import PlayerService
    from hoopstats.storage import PlayerRepository, TeamRepository, TransactionManager

    async with open_database(settings) as db:
        log = structlog.get_logger("hoopstats.cli")
        svc = PlayerService(
            PlayerRepository, TeamRepository, TransactionManager(db.session_maker, log), log
        )
        try:
            stats = await svc.get_player_aggregated_stats(player_id, season)
        except DomainError as e:
            _fail(e)

    scope = season or "career"
    table = Table(title=f"Player {player_id} ({scope})")
    table.add_column("Stat", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column("Per game", justify="right")
    table.add_row("Games played", str(stats.games_played), "")
    table.add_row("Points", str(stats.total_points), f"{stats.avg_points:.2f}")
    table.add_row("Rebounds", str(stats.total_rebounds), f"{stats.avg_rebounds:.2f}")
    table.add_row("Assists", str(stats.total_assists), f"{stats.avg_assists:.2f}")
    table.add_row("Steals", str(stats.total_steals), "")
    table.add_row("Blocks", str(stats.total_blocks), "")
    console.print(table)


@app.command("team")
def team(
    team_id: int = typer.Argument(..., help="Team id"),
    season: str | None = SEASON_OPTION,
) -> None:
    """Show a team's record and scoring over finished games.

    Examples:
        hoopstats stats team 3 --season 2023-24
    """
    settings = load_settings()
    asyncio.run(_team_async(settings, team_id, season))


async def _team_async(settings: Settings, team_id: int, season: str | None) -> None:
    from hoopstats.services import TeamService
    from hoopstats.storage import TeamRepository, TransactionManager

    async with open_database(settings) as db:
        log = structlog.get_logger("hoopstats.cli")
        svc = TeamService(TeamRepository, TransactionManager(db.session_maker, log), log)
        try:
            stats = await svc.get_team_aggregated_stats(team_id, season)
        except DomainError as e:
            _fail(e)

    scope = season or "career"
    table = Table(title=f"Team {team_id} ({scope})")
    table.add_column("Stat", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Record", f"{stats.wins}-{stats.losses}")
    table.add_row("Points scored", str(stats.total_points_scored))
    table.add_row("Points allowed", str(stats.total_points_allowed))
    table.add_row("Avg scored", f"{stats.avg_points_scored:.2f}")
    table.add_row("Avg allowed", f"{stats.avg_points_allowed:.2f}")
    console.print(table)


def _fail(error: DomainError) -> NoReturn:
    console.print(f"[red]✗ {error.code}: {error.message}[/red]")
    if isinstance(error, InvalidInputError):
        for fe in error.field_errors:
            console.print(f"  [red]{fe.field}[/red]: {fe.message}")
    raise typer.Exit(code=1) from error
