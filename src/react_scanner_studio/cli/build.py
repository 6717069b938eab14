"""Build command: export the dashboard as a static site."""

from pathlib import Path
from typing import Optional

import typer

from ..config import load_settings
from ..export import build_static_site
from ..logging_config import setup_logging
from ..report.loader import locate_report, read_scan_data
from ..report.parser import normalize_document
from ..scanner.config import require_config_path
from . import app
from ._common import (
    check_scanner_installed,
    cli_errors,
    console,
    info_box,
    prepare_report,
    success_box,
)


@app.command()
def build(
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output directory (default: .react-scanner-studio/dist)",
        file_okay=False,
        dir_okay=True,
    ),
    ci: bool = typer.Option(
        False,
        "--ci",
        help="Never prompt: reuse an existing report if there is one",
    ),
    rescan: bool = typer.Option(
        False,
        "--rescan",
        help="Always run a fresh scan before building",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
):
    """
    Build a static version of the dashboard with the report embedded.

    The result needs no server-side code and can be hosted from any
    static file server.
    """
    setup_logging(verbose=verbose)

    with cli_errors(verbose):
        config_path = require_config_path()
        project_dir = config_path.parent
        settings = load_settings(project_dir=project_dir)
        check_scanner_installed(project_dir, settings)

        info_box("React Scanner Studio", "Building static dashboard...")
        prepare_report(config_path, settings, ci=ci, rescan=rescan)

        data = read_scan_data(locate_report(project_dir))
        report = normalize_document(data)
        target = output.resolve() if output else settings.resolve_build_dir(project_dir)

        with console.status("[cyan]Writing static site...[/cyan]"):
            site = build_static_site(target, {"data": data, "error": None}, report)

        success_box(
            "Build Complete",
            f"Output: [cyan]{site.output_dir}[/cyan]\n"
            f"Components: {report.total_unique_components}  "
            f"Instances: {report.total_instances}\n\n"
            "[bold]Preview locally:[/bold]\n"
            f"  python -m http.server --directory {site.output_dir}\n"
            f"  npx serve {site.output_dir}",
        )
