"""Info command: summarize the current scan report in the terminal."""

import json

import typer
from rich.table import Table

from ..logging_config import setup_logging
from ..report.loader import load_report
from ..scanner.config import require_config_path
from ..scanner.status import check_scan_report
from . import app
from ._common import cli_errors, console, warning_box


@app.command()
def info(
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the normalized report as JSON",
    ),
    top: int = typer.Option(
        10,
        "--top",
        "-n",
        min=1,
        help="Number of components to list",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
):
    """
    Show a summary of the existing scan report.
    """
    setup_logging(verbose=verbose, quiet=json_output)

    with cli_errors(verbose):
        config_path = require_config_path()
        status = check_scan_report(config_path.parent)
        if not status.exists:
            warning_box(
                "No Scan Report",
                "Run [bold]react-scanner-studio scan[/bold] to generate one.",
            )
            raise typer.Exit(1)

        report = load_report(status.path)

        if json_output:
            typer.echo(json.dumps(report.to_dict(), indent=2))
            return

        console.print(
            f"[bold]Report:[/bold] {status.path}  "
            f"[dim]({report.format.value}, {status.describe_age()})[/dim]"
        )
        console.print(
            f"  {report.total_unique_components} components  "
            f"{report.total_instances} instances  "
            f"{report.total_unique_props} props  "
            f"{report.total_files} files"
        )

        table = Table(title="Most used components", show_lines=False)
        table.add_column("Component", style="cyan")
        table.add_column("Instances", justify="right")
        table.add_column("Props", justify="right")
        for component in report.components[:top]:
            table.add_row(component.name, str(component.instances), str(len(component.props)))
        console.print(table)

        if report.zombie_props:
            console.print(
                f"\n[yellow]{len(report.zombie_props)} props are used only once[/yellow] "
                "[dim](candidates for removal)[/dim]"
            )
