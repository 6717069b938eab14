"""Server lifecycle: startup banner, serving, and shutdown on SIGINT/SIGTERM."""

from __future__ import annotations

import logging
import signal
import threading
import webbrowser
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..scanner.status import ScanReportStatus

logger = logging.getLogger(__name__)

BROWSER_DELAY_SECONDS = 1.0


def _format_status_display(
    url: str,
    project_dir: Path,
    status: Optional[ScanReportStatus],
) -> Panel:
    """Build the panel shown while the server runs."""
    table = Table(show_header=False, show_edge=False, box=None, padding=(0, 1))
    table.add_column("key", style="bold", width=12)
    table.add_column("value")

    table.add_row("Local:", f"[link={url}]{url}[/link]")
    table.add_row("Project:", str(project_dir))
    if status is not None and status.exists:
        table.add_row("Report:", str(status.path))
        table.add_row(
            "Scanned:",
            f"{status.describe_age()} ({status.component_count} components)",
        )
    else:
        table.add_row("Report:", "[yellow]not found[/yellow]")
    table.add_row("", "[dim]Press Ctrl+C to stop the server.[/dim]")

    return Panel(
        table,
        title="[bold green]Server Running[/bold green]",
        border_style="green",
    )


def open_browser(url: str, delay: float = BROWSER_DELAY_SECONDS) -> threading.Timer:
    """Open *url* in the default browser after *delay* seconds."""

    def _open() -> None:
        if not webbrowser.open(url):
            logger.warning("Could not open browser automatically. Please visit: %s", url)

    timer = threading.Timer(delay, _open)
    timer.daemon = True
    timer.start()
    return timer


def launch_server(
    project_dir: Path,
    console: Console,
    host: str = "127.0.0.1",
    port: int = 3000,
    open_in_browser: bool = False,
    status: Optional[ScanReportStatus] = None,
    verbose: bool = False,
) -> None:
    """Serve the dashboard until interrupted.

    *port* must already have been chosen with
    :func:`~react_scanner_studio.server.port.get_server_port`; this is the
    one place the port is actually bound.
    """
    import uvicorn

    from .app import create_app

    url = f"http://{host}:{port}"
    asgi_app = create_app(project_dir=project_dir)

    config = uvicorn.Config(
        asgi_app,
        host=host,
        port=port,
        log_level="info" if verbose else "warning",
    )
    server = uvicorn.Server(config)

    console.print(_format_status_display(url, project_dir, status))
    if open_in_browser:
        open_browser(url)

    # Installed before server.run() so shutdown goes through should_exit
    original_sigint = signal.getsignal(signal.SIGINT)
    original_sigterm = signal.getsignal(signal.SIGTERM)

    def _signal_handler(signum, frame):
        sig_name = signal.Signals(signum).name
        logger.info("Received %s, initiating shutdown...", sig_name)
        server.should_exit = True

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    try:
        server.run()
    finally:
        try:
            signal.signal(signal.SIGINT, original_sigint)
            signal.signal(signal.SIGTERM, original_sigterm)
        except (OSError, ValueError):
            pass  # May fail if not in main thread
        console.print("\n[dim]Shutting down...[/dim]")
        console.print("  [green]OK[/green] Server stopped cleanly")
