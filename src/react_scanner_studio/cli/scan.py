"""Scan command: run react-scanner with the project's config."""

import typer

from ..config import load_settings
from ..logging_config import setup_logging
from ..scanner.config import require_config_path
from . import app
from ._common import check_scanner_installed, cli_errors, console, execute_scan, info_box


@app.command()
def scan(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
):
    """
    Scan your codebase for component usage using react-scanner.

    The report is written wherever the scanner config's processor
    [bold]outputTo[/bold] points.
    """
    setup_logging(verbose=verbose)

    with cli_errors(verbose):
        config_path = require_config_path()
        settings = load_settings(project_dir=config_path.parent)
        check_scanner_installed(config_path.parent, settings)

        info_box("React Scanner Studio", "Scanning your codebase for component usage...")
        result = execute_scan(config_path, settings)
        if verbose and result.stdout.strip():
            console.print(result.stdout.rstrip(), markup=False, highlight=False)
