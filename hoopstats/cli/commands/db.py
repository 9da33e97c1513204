"""Database management commands."""

import asyncio

import typer

from hoopstats.cli.runtime import console, load_settings, open_database
from hoopstats.errors import StorageError

app = typer.Typer(help="Database management")


@app.command("init")
def init() -> None:
    """Create any missing tables. Existing tables and data are left alone.

    Examples:
        hoopstats db init
    """
    settings = load_settings()
    console.print(f"\n[bold cyan]Initializing database[/bold cyan] {settings.database.safe_url()}\n")
    asyncio.run(_init_async(settings))


async def _init_async(settings) -> None:
    async with open_database(settings) as db:
        await db.init_db()
    console.print("[green]✓ Schema ready[/green]\n")


@app.command("ping")
def ping() -> None:
    """Check the database answers. Exits 1 when it does not."""
    settings = load_settings()
    asyncio.run(_ping_async(settings))


async def _ping_async(settings) -> None:
    async with open_database(settings) as db:
        try:
            await db.ping()
        except StorageError as e:
            console.print(f"[red]✗ {settings.database.safe_url()}: {e.message}[/red]")
            raise typer.Exit(code=1) from e
    console.print(f"[green]✓ {settings.database.safe_url()} is reachable[/green]")
