"""Init command: prepare a React project for scanning."""

from pathlib import Path

import typer

from ..logging_config import setup_logging
from ..scanner.config import CONFIG_FILENAMES
from ..scanner.dependencies import SCANNER_PACKAGE, install_scanner, is_scanner_installed
from ..scanner.project import (
    SCAN_SCRIPT_NAME,
    STUDIO_DIR,
    add_package_script,
    ensure_gitignored,
    write_config,
)
from . import app
from ._common import (
    cli_errors,
    confirm,
    console,
    error_box,
    info_box,
    install_instructions,
    success_box,
)


@app.command()
def init(
    crawl_from: str = typer.Option(
        "./src",
        "--crawl-from",
        help="Directory react-scanner starts crawling from",
    ),
    imported_from: str = typer.Option(
        "PLACEHOLDER_FOR_IMPORTED_FROM",
        "--imported-from",
        help="Package or path your design-system components are imported from",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Answer yes to every prompt",
    ),
    gitignore: bool = typer.Option(
        True,
        "--gitignore/--no-gitignore",
        help=f"Add {STUDIO_DIR}/ to .gitignore",
    ),
    scripts: bool = typer.Option(
        True,
        "--scripts/--no-scripts",
        help=f"Add a '{SCAN_SCRIPT_NAME}' script to package.json",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
):
    """
    Initialize React Scanner Studio in the current project.

    Installs react-scanner if needed and writes a starter
    [bold]react-scanner.config.js[/bold].
    """
    setup_logging(verbose=verbose)
    project_dir = Path.cwd()

    with cli_errors(verbose):
        info_box("React Scanner Studio", "Initializing your project...")

        if is_scanner_installed(project_dir):
            console.print(f"[green]✔[/green] {SCANNER_PACKAGE} is already installed")
        else:
            console.print(f"[yellow]{SCANNER_PACKAGE} is required but not installed.[/yellow]")
            if not (yes or confirm("Would you like to install it now?")):
                error_box(
                    "Installation Required",
                    f"{SCANNER_PACKAGE} is required to use React Scanner Studio.",
                )
                install_instructions()
                raise typer.Exit(1)
            with console.status(f"[cyan]Installing {SCANNER_PACKAGE}...[/cyan]"):
                install_scanner(project_dir)
            console.print(f"[green]✔[/green] {SCANNER_PACKAGE} installed")

        created = write_config(project_dir, crawl_from=crawl_from, imported_from=imported_from)
        if created is None:
            console.print("[dim]Scanner config already exists, leaving it unchanged[/dim]")
        else:
            console.print(f"[green]✔[/green] Created {created.name}")

        if gitignore and ensure_gitignored(project_dir):
            console.print(f"[green]✔[/green] Added {STUDIO_DIR}/ to .gitignore")
        if scripts and add_package_script(project_dir):
            console.print(f"[green]✔[/green] Added '{SCAN_SCRIPT_NAME}' script to package.json")

        next_steps = "Run [bold]react-scanner-studio start[/bold] to scan and open the dashboard."
        if created is not None and imported_from == "PLACEHOLDER_FOR_IMPORTED_FROM":
            next_steps = (
                f"Edit [bold]{CONFIG_FILENAMES[0]}[/bold] and set [bold]importedFrom[/bold] "
                "to your component library.\n" + next_steps
            )
        success_box("Initialization Complete", next_steps)
