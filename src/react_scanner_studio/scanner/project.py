"""Project setup performed by ``react-scanner-studio init``."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from ..exceptions import ScannerStudioError
from .config import CONFIG_FILENAMES

logger = logging.getLogger(__name__)

STUDIO_DIR = ".react-scanner-studio"
DEFAULT_REPORT_PATH = f"./{STUDIO_DIR}/scan-report.json"
SCAN_SCRIPT_NAME = "scan:components"
SCAN_SCRIPT = "react-scanner-studio scan"

CONFIG_TEMPLATE = """module.exports = {{
  crawlFrom: {crawl_from},
  includeSubComponents: true,
  importedFrom: {imported_from},
  processors: [
    ['raw-report', {{ outputTo: {output_to} }}],
  ],
}};
"""


def render_config(
    crawl_from: str = "./src",
    imported_from: str = "PLACEHOLDER_FOR_IMPORTED_FROM",
    output_to: str = DEFAULT_REPORT_PATH,
) -> str:
    # json.dumps yields valid JavaScript string literals
    return CONFIG_TEMPLATE.format(
        crawl_from=json.dumps(crawl_from),
        imported_from=json.dumps(imported_from),
        output_to=json.dumps(output_to),
    )


def write_config(
    project_dir: Path,
    crawl_from: str = "./src",
    imported_from: str = "PLACEHOLDER_FOR_IMPORTED_FROM",
) -> Optional[Path]:
    """Create ``react-scanner.config.js`` in *project_dir*.

    Returns the new path, or None if a config already exists there.
    """
    for name in CONFIG_FILENAMES:
        if (project_dir / name).exists():
            logger.debug("%s already exists, leaving it alone", name)
            return None

    path = project_dir / CONFIG_FILENAMES[0]
    try:
        path.write_text(render_config(crawl_from, imported_from), encoding="utf-8")
    except OSError as e:
        raise ScannerStudioError(f"Failed to create {path.name}: {e}")
    return path


def ensure_gitignored(project_dir: Path, entry: str = f"{STUDIO_DIR}/") -> bool:
    """Append *entry* to ``.gitignore``. Returns True if the file changed."""
    gitignore = project_dir / ".gitignore"
    existing = gitignore.read_text(encoding="utf-8") if gitignore.exists() else ""
    stripped = {line.strip().rstrip("/") for line in existing.splitlines()}
    if entry.rstrip("/") in stripped or f"/{entry.rstrip('/')}" in stripped:
        return False

    prefix = "" if not existing or existing.endswith("\n") else "\n"
    with open(gitignore, "a", encoding="utf-8") as f:
        f.write(f"{prefix}{entry}\n")
    return True


def add_package_script(
    project_dir: Path, name: str = SCAN_SCRIPT_NAME, command: str = SCAN_SCRIPT
) -> bool:
    """Add a script to ``package.json``. Returns True if the file changed.

    Existing scripts with the same name are never overwritten; a project
    without ``package.json`` is left untouched.
    """
    package_json = project_dir / "package.json"
    if not package_json.is_file():
        return False

    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ScannerStudioError(f"Could not read {package_json}: {e}")
    if not isinstance(data, dict):
        raise ScannerStudioError(f"Unexpected package.json content in {package_json}")

    scripts = data.setdefault("scripts", {})
    if name in scripts:
        return False
    scripts[name] = command

    package_json.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return True
