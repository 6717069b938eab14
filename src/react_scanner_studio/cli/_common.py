"""Shared CLI helpers: console, message boxes, error handling, report preparation."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from ..config import StudioSettings
from ..exceptions import (
    ReportNotFoundError,
    ScanCancelledError,
    ScanError,
    ScannerStudioError,
)
from ..report.loader import locate_report
from ..scanner.dependencies import SCANNER_PACKAGE, is_scanner_installed
from ..scanner.runner import DEFAULT_SCANNER_COMMAND, ScanResult, run_scan
from ..scanner.status import ScanReportStatus, check_scan_report

console = Console()

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


def _box(title: str, content: Optional[str], color: str) -> None:
    body = f"[bold {color}]{title}[/bold {color}]"
    if content:
        body += f"\n\n{content}"
    console.print(Panel(body, border_style=color, padding=(1, 2), expand=False))


def info_box(title: str, content: Optional[str] = None) -> None:
    _box(title, content, "cyan")


def success_box(title: str, content: Optional[str] = None) -> None:
    _box(title, content, "green")


def warning_box(title: str, content: Optional[str] = None) -> None:
    _box(title, content, "yellow")


def error_box(title: str, content: Optional[str] = None) -> None:
    _box(title, content, "red")


def install_instructions(package: str = SCANNER_PACKAGE) -> None:
    console.print(
        Panel(
            f"[bold]npm:[/bold]  npm install {package}\n[bold]yarn:[/bold] yarn add {package}",
            title="[bold yellow]Install Required[/bold yellow]",
            border_style="yellow",
            expand=False,
        )
    )


def confirm(question: str) -> bool:
    """Yes/no prompt defaulting to yes."""
    return typer.confirm(question, default=True)


@contextmanager
def cli_errors(verbose: bool = False) -> Iterator[None]:
    """Turn library errors into a short diagnostic and a non-zero exit."""
    try:
        yield
    except (typer.Exit, typer.Abort):
        raise
    except ScanCancelledError:
        console.print("[yellow]Scan cancelled[/yellow]")
        raise typer.Exit(130)
    except ScanError as e:
        error_box("Scan Error", escape(e.message))
        raise typer.Exit(1)
    except ScannerStudioError as e:
        logger.debug("%s: %s", e.__class__.__name__, e)
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


def check_scanner_installed(project_dir: Path, settings: StudioSettings) -> None:
    """Exit with install instructions when the default launcher cannot find react-scanner."""
    if tuple(settings.scanner_command) != DEFAULT_SCANNER_COMMAND:
        return
    if not is_scanner_installed(project_dir):
        error_box(
            f'Missing Dependency: "{SCANNER_PACKAGE}"',
            f"{SCANNER_PACKAGE} is not installed.\n"
            "This package is required to analyze your React components.",
        )
        install_instructions()
        raise typer.Exit(1)


def execute_scan(config_path: Path, settings: StudioSettings) -> ScanResult:
    """Run the scan behind a spinner and report the outcome."""
    label = "[cyan]Running react-scanner...[/cyan]"
    with console.status(label) as spinner:

        def _show_line(stream: str, line: str) -> None:
            if line.strip():
                spinner.update(f"{label} [dim]{escape(line.strip()[:60])}[/dim]")

        try:
            result = run_scan(
                config_path,
                command=settings.scanner_command,
                on_output=_show_line,
            )
        except ScanCancelledError:
            raise
        except ScanError:
            console.print("[red]✖ Scan failed[/red]")
            raise

    console.print(f"[green]✔ Scan completed successfully[/green] [dim]({result.duration_seconds:.1f}s)[/dim]")
    return result


def prepare_report(
    config_path: Path,
    settings: StudioSettings,
    ci: bool = False,
    rescan: bool = False,
    ask: Confirm = confirm,
) -> ScanReportStatus:
    """Make sure a usable report exists, scanning when needed.

    An existing report is reused in CI mode and offered for reuse
    otherwise; ``rescan`` always runs a fresh scan.

    Raises:
        ReportNotFoundError: The scan finished but left no usable report
    """
    project_dir = config_path.parent
    status = check_scan_report(project_dir)

    if status.exists and not rescan:
        question = (
            f"Found a scan report from {status.describe_age()} "
            f"({status.component_count} components). Use it?"
        )
        if ci or ask(question):
            logger.debug("Reusing report at %s", status.path)
            return status

    execute_scan(config_path, settings)
    status = check_scan_report(project_dir)
    if not status.exists:
        raise ReportNotFoundError(status.path or locate_report(project_dir))
    return status
