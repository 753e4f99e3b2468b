"""Main CLI entry point for Wasifu"""

import typer

from wasifu.__version__ import __version__
from wasifu.cli.commands import chat as chat_module
from wasifu.cli.commands import data as data_module
from wasifu.cli.commands import server as server_module

app = typer.Typer(
    name="wasifu",
    help="Wasifu - language, name and location intake dialogue",
    add_completion=False,
)

app.add_typer(chat_module.app, name="chat", help="Start an interactive intake session")
app.add_typer(server_module.app, name="server", help="Start the Wasifu API server")
app.add_typer(data_module.app, name="data", help="Inspect county reference data")


def version_callback(value: bool) -> None:
    """Print version and exit"""
    if value:
        typer.echo(f"Wasifu version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Wasifu - language, name and location intake dialogue"""
    pass


def cli() -> None:
    """Entry point for CLI"""
    app()


if __name__ == "__main__":
    cli()
