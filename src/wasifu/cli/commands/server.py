"""Server command to start API."""

import os
from pathlib import Path

import typer
import uvicorn

from wasifu.config.loader import CONFIG_ENV_VAR, ConfigLoader

app = typer.Typer(help="Start API server")


@app.callback(invoke_without_command=True)
def start_server(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to wasifu.yaml", exists=True
    ),
    host: str = typer.Option("0.0.0.0", "--host", "-h"),
    port: int = typer.Option(8000, "--port", "-p"),
    reload: bool = typer.Option(False, "--reload"),
):
    """Start the Wasifu API server."""

    if config is not None:
        try:
            ConfigLoader.load(config)
        except Exception as e:
            typer.echo(f"Invalid config: {e}", err=True)
            raise typer.Exit(1)

        # The server process loads config from env
        os.environ[CONFIG_ENV_VAR] = str(config.absolute())

    typer.echo(f"Starting Wasifu Server on http://{host}:{port}")
    typer.echo(f"   Config: {config or 'defaults'}")

    try:
        uvicorn.run(
            "wasifu.server.api:app",
            host=host,
            port=port,
            reload=reload,
            log_level="info",
        )
    except Exception as e:
        typer.echo(f"Server failed: {e}", err=True)
        raise typer.Exit(1)
