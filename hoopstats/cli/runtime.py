"""Settings, logging and database bootstrapping shared by CLI commands."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import typer
from pydantic import ValidationError
from rich.console import Console

from hoopstats.config import Settings, get_settings
from hoopstats.database import Database
from hoopstats.logging_setup import configure_logging

console = Console()


def load_settings() -> Settings:
    """Load settings and configure logging, exiting with code 2 when configuration is invalid."""
    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        console.print("Set DATABASE_URL, e.g. sqlite+aiosqlite:///./hoopstats.db")
        raise typer.Exit(code=2) from e
    configure_logging(settings)
    return settings


@asynccontextmanager
async def open_database(settings: Settings) -> AsyncIterator[Database]:
    db = Database(settings.database, structlog.get_logger("hoopstats.cli"))
    try:
        yield db
    finally:
        await db.close()
