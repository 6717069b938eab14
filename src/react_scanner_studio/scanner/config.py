"""Locate and read the react-scanner configuration.

The config is searched for by walking upward from the working directory,
so commands run from inside a monorepo package still find the project
config. It is read fresh on every call; nothing here caches.
"""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from ..exceptions import ConfigNotFoundError, InvalidScannerConfigError, OutputNotConfiguredError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("react-scanner.config.js", "react-scanner.config.json")

REPORT_PROCESSORS = ("count-components", "count-components-and-props", "raw-report")

# Prints the config module's export as JSON. Dynamic import handles both
# CommonJS (module.exports) and ESM (export default) configs.
_NODE_LOADER = """
const { pathToFileURL } = require("url");
import(pathToFileURL(process.argv[1]).href)
  .then((mod) => {
    const config = mod && mod.default !== undefined ? mod.default : mod;
    process.stdout.write(JSON.stringify(config));
  })
  .catch((err) => {
    process.stderr.write(String((err && err.message) || err));
    process.exit(1);
  });
"""

_NODE_TIMEOUT_SECONDS = 30


@dataclass(frozen=True)
class ScannerConfig:
    """The parts of a react-scanner config this tool reads."""

    crawl_from: Optional[str] = None
    include_sub_components: bool = False
    imported_from: Optional[str] = None
    processors: tuple[tuple[str, Mapping[str, Any]], ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ScannerConfig:
        processors = []
        for entry in data.get("processors") or []:
            if isinstance(entry, str):
                processors.append((entry, {}))
            elif isinstance(entry, (list, tuple)) and entry and isinstance(entry[0], str):
                options = entry[1] if len(entry) > 1 and isinstance(entry[1], dict) else {}
                processors.append((entry[0], dict(options)))
            else:
                logger.debug("Ignoring unsupported processor entry: %r", entry)

        imported_from = data.get("importedFrom")
        return cls(
            crawl_from=data.get("crawlFrom"),
            include_sub_components=bool(data.get("includeSubComponents", False)),
            imported_from=imported_from if isinstance(imported_from, str) else None,
            processors=tuple(processors),
        )


def find_config_path(start: Optional[Path] = None) -> Optional[Path]:
    """Return the nearest scanner config at or above *start*, or ``None``."""
    directory = Path(start or Path.cwd()).resolve()
    while True:
        for name in CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        if directory.parent == directory:
            return None
        directory = directory.parent


def require_config_path(start: Optional[Path] = None) -> Path:
    """Like :func:`find_config_path` but raise when nothing is found."""
    path = find_config_path(start)
    if path is None:
        raise ConfigNotFoundError(Path(start or Path.cwd()).resolve())
    return path


def get_config_dir(start: Optional[Path] = None) -> Optional[Path]:
    """Directory holding the scanner config; relative output paths resolve against it."""
    path = find_config_path(start)
    return path.parent if path is not None else None


def load_scanner_config(path: Path) -> ScannerConfig:
    """Read and parse the config at *path*.

    JSON configs are parsed directly. JavaScript configs are evaluated by
    ``node``, the runtime react-scanner itself loads them with.

    Raises:
        InvalidScannerConfigError: If the file cannot be read or evaluated,
            or does not export an object
    """
    if path.suffix == ".json":
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvalidScannerConfigError(path, str(e))
    else:
        data = _evaluate_with_node(path)

    if not isinstance(data, dict):
        raise InvalidScannerConfigError(path, "config must export an object")
    return ScannerConfig.from_dict(data)


def _evaluate_with_node(path: Path) -> Any:
    try:
        result = subprocess.run(
            ["node", "-e", _NODE_LOADER, str(path)],
            capture_output=True,
            text=True,
            timeout=_NODE_TIMEOUT_SECONDS,
            cwd=str(path.parent),
        )
    except FileNotFoundError:
        raise InvalidScannerConfigError(path, "node is required to read JavaScript configs")
    except subprocess.TimeoutExpired:
        raise InvalidScannerConfigError(path, "timed out evaluating config")

    if result.returncode != 0:
        raise InvalidScannerConfigError(path, result.stderr.strip() or "node exited with an error")

    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise InvalidScannerConfigError(path, f"config is not JSON serializable: {e}")


def get_output_file(config: ScannerConfig) -> Optional[str]:
    """Return the ``outputTo`` of the first report processor that declares one."""
    for name, options in config.processors:
        output = options.get("outputTo")
        if name in REPORT_PROCESSORS and isinstance(output, str) and output:
            return output
    return None


def resolve_output_path(config_path: Path) -> Path:
    """Resolve the configured report file against the config's directory.

    Raises:
        InvalidScannerConfigError: If the config cannot be loaded
        OutputNotConfiguredError: If no report processor declares ``outputTo``
    """
    config = load_scanner_config(config_path)
    output = get_output_file(config)
    if output is None:
        raise OutputNotConfiguredError(config_path)
    return (config_path.parent / output).resolve()
