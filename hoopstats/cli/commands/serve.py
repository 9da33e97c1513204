"""Run the HTTP API with uvicorn."""

import typer
import uvicorn

from hoopstats.cli.runtime import console, load_settings


def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default: SERVER_HOST)"),
    port: int | None = typer.Option(None, "--port", help="Bind port (default: SERVER_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes (development)"),
) -> None:
    """Serve the API until interrupted."""
    settings = load_settings()
    bind_host = host or settings.server.host
    bind_port = port or settings.server.port

    console.print(
        f"\n[bold cyan]hoopstats API[/bold cyan] on http://{bind_host}:{bind_port}"
        f"{settings.server.api_prefix}  (docs at /docs)\n"
    )
    uvicorn.run(
        "hoopstats.api.app:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_config=None,
    )
