"""Start command: serve the dashboard for the current project."""

from typing import Optional

import typer

from ..config import load_settings
from ..logging_config import setup_logging
from ..scanner.config import require_config_path
from ..server.port import get_server_port
from . import app
from ._common import (
    check_scanner_installed,
    cli_errors,
    confirm,
    console,
    info_box,
    prepare_report,
)


@app.command()
def start(
    port: Optional[int] = typer.Option(
        None,
        "--port",
        "-p",
        min=1,
        max=65535,
        help="Port to serve on (default: 3000)",
    ),
    host: Optional[str] = typer.Option(
        None,
        "--host",
        help="Interface to bind (default: 127.0.0.1)",
    ),
    exact_port: bool = typer.Option(
        False,
        "--exact-port",
        help="Fail instead of picking another port when the port is busy",
    ),
    ci: bool = typer.Option(
        False,
        "--ci",
        help="Never prompt: reuse an existing report and accept a different port",
    ),
    open_browser: bool = typer.Option(
        False,
        "--open",
        help="Open the dashboard in a browser",
    ),
    rescan: bool = typer.Option(
        False,
        "--rescan",
        help="Always run a fresh scan before serving",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug and server logs"),
):
    """
    Start the React Scanner Studio dashboard.

    [bold cyan]Examples:[/bold cyan]

      react-scanner-studio start

      react-scanner-studio start --port 4000 --exact-port

      react-scanner-studio start --ci --rescan
    """
    setup_logging(verbose=verbose)

    with cli_errors(verbose):
        config_path = require_config_path()
        project_dir = config_path.parent
        settings = load_settings(project_dir=project_dir, port=port, host=host)
        check_scanner_installed(project_dir, settings)

        info_box("React Scanner Studio", "Starting the dashboard...")
        status = prepare_report(config_path, settings, ci=ci, rescan=rescan)

        chosen = get_server_port(
            settings.port,
            settings.host,
            exact_port=exact_port,
            max_attempts=settings.max_port_attempts,
        )
        if chosen != settings.port:
            if ci:
                console.print(
                    f"[yellow]Port {settings.port} is not available. "
                    f"Using port {chosen} instead.[/yellow]"
                )
            elif not confirm(
                f"Port {settings.port} is not available. "
                f"Would you like to run on port {chosen} instead?"
            ):
                console.print("[dim]Exiting.[/dim]")
                raise typer.Exit(1)

        from ..server.lifecycle import launch_server

        launch_server(
            project_dir,
            console,
            host=settings.host,
            port=chosen,
            open_in_browser=open_browser,
            status=status,
            verbose=verbose,
        )
