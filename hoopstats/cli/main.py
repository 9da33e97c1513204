"""Main CLI entry point using Typer."""

import typer

from hoopstats.cli.commands import db, serve, stats

app = typer.Typer(
    name="hoopstats",
    help="Basketball stats service - teams, players, games and aggregated statistics",
    add_completion=False,
)

app.command("serve")(serve.serve)
app.add_typer(db.app, name="db", help="Database management")
app.add_typer(stats.app, name="stats", help="Aggregated player and team statistics")


@app.callback()
def callback():
    """
    Basketball stats service

    Records teams, players, games and per-game stat lines, and computes
    season and career aggregates.
    """


if __name__ == "__main__":
    app()
