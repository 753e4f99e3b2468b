"""Reference data commands."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from wasifu.core.errors import ReferenceDataError
from wasifu.reference.counties import load_counties

app = typer.Typer(help="Inspect county reference data")


@app.command("check")
def check_data(
    path: Path | None = typer.Argument(
        None, help="County JSON file (defaults to the packaged data set)"
    ),
    show: bool = typer.Option(False, "--show", "-s", help="Print the county table"),
) -> None:
    """Validate a county reference data file."""
    try:
        counties = load_counties(path)
    except ReferenceDataError as e:
        typer.echo(f"Invalid reference data: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"OK: {len(counties)} counties")

    if show:
        table = Table(title="Counties")
        table.add_column("Code")
        table.add_column("Name")
        table.add_column("Capital")
        table.add_column("Sub-counties", justify="right")
        for county in counties:
            table.add_row(county.code, county.name, county.capital, str(len(county.sub_counties)))
        Console().print(table)
