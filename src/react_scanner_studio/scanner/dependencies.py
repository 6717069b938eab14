"""Detect and install the react-scanner package in the scanned project."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Optional

from ..exceptions import ScannerStudioError

logger = logging.getLogger(__name__)

SCANNER_PACKAGE = "react-scanner"

_INSTALL_TIMEOUT_SECONDS = 600


def is_scanner_installed(start: Optional[Path] = None) -> bool:
    """True if ``node_modules/react-scanner`` exists at or above *start*."""
    directory = Path(start or Path.cwd()).resolve()
    while True:
        if (directory / "node_modules" / SCANNER_PACKAGE / "package.json").is_file():
            return True
        if directory.parent == directory:
            return False
        directory = directory.parent


def _is_workspace_root(project_dir: Path) -> bool:
    package_json = project_dir / "package.json"
    if not package_json.is_file():
        return False
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return False
    return isinstance(data, dict) and bool(data.get("workspaces"))


def install_command(project_dir: Path) -> list[str]:
    """The package manager command that adds react-scanner as a dev dependency."""
    if (project_dir / "yarn.lock").exists():
        command = ["yarn", "add", SCANNER_PACKAGE, "--dev", "--ignore-engines"]
        if _is_workspace_root(project_dir):
            command.append("-W")
        return command
    return ["npm", "install", SCANNER_PACKAGE, "--save-dev"]


def install_scanner(project_dir: Path) -> None:
    """Install react-scanner into *project_dir*.

    Raises:
        ScannerStudioError: The package manager is missing or the install failed
    """
    command = install_command(project_dir)
    logger.debug("Installing with: %s", " ".join(command))
    try:
        result = subprocess.run(
            command,
            cwd=str(project_dir),
            capture_output=True,
            text=True,
            timeout=_INSTALL_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise ScannerStudioError(f"Could not install {SCANNER_PACKAGE}: {e}")

    if result.returncode != 0:
        raise ScannerStudioError(
            f"Could not install {SCANNER_PACKAGE}",
            details={"exit_code": str(result.returncode), "output": result.stderr.strip()[-500:]},
        )
