"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="react-scanner-studio",
    help="React Scanner Studio - explore react-scanner reports in a local dashboard",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        is_eager=True,
    ),
):
    """
    Scan React component usage and browse the results.

    [bold cyan]Examples:[/bold cyan]

      react-scanner-studio init

      react-scanner-studio start --open

      react-scanner-studio build --ci
    """
    if version:
        console.print(f"react-scanner-studio {__version__}")
        raise typer.Exit(0)


# Import subcommands to register them
from .init import init as _init  # noqa: F401, E402
from .scan import scan as _scan  # noqa: F401, E402
from .start import start as _start  # noqa: F401, E402
from .build import build as _build  # noqa: F401, E402
from .info import info as _info  # noqa: F401, E402


def main() -> None:
    app()
