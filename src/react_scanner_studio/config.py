"""Settings for React Scanner Studio itself.

These are the knobs of this tool, not of react-scanner (whose config lives
in ``react-scanner.config.js`` and is handled by :mod:`.scanner.config`).
Sources are merged in priority order:
    1. Defaults (defined in StudioSettings)
    2. Project settings (``react-scanner-studio.toml`` next to the scanner config)
    3. Explicit settings file (if given)
    4. Environment variables (REACT_SCANNER_STUDIO_* prefix)
    5. CLI overrides (passed as kwargs)

Example:
    >>> settings = load_settings(port=4000)
    >>> settings.port
    4000
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from .exceptions import InvalidSettingsError, ScannerStudioError

SETTINGS_FILENAME = "react-scanner-studio.toml"
ENV_PREFIX = "REACT_SCANNER_STUDIO_"
MAX_PORT = 65535


@dataclass(frozen=True)
class StudioSettings:
    """Runtime settings for scanning, serving and building.

    Attributes:
        host: Interface the dashboard server binds to
        port: Preferred dashboard port
        scanner_command: Command used to launch react-scanner; ``--config``
            and the config path are appended
        build_dir: Static site output directory, relative to the scanner
            config directory unless absolute
        max_port_attempts: How many ports to probe when the preferred one is busy
    """

    host: str = "127.0.0.1"
    port: int = 3000
    scanner_command: tuple[str, ...] = field(default=("npx", "react-scanner"))
    build_dir: str = ".react-scanner-studio/dist"
    max_port_attempts: int = 100

    def __post_init__(self) -> None:
        if not 1 <= self.port <= MAX_PORT:
            raise InvalidSettingsError("port", self.port, f"must be between 1 and {MAX_PORT}")
        if self.max_port_attempts < 1:
            raise InvalidSettingsError(
                "max_port_attempts", self.max_port_attempts, "must be at least 1"
            )
        if not self.scanner_command:
            raise InvalidSettingsError("scanner_command", self.scanner_command, "must not be empty")
        if not self.host:
            raise InvalidSettingsError("host", self.host, "must not be empty")

    def resolve_build_dir(self, base: Path) -> Path:
        """Return the absolute build directory for a project rooted at *base*."""
        path = Path(self.build_dir)
        return path if path.is_absolute() else (base / path).resolve()


def load_settings(
    project_dir: Optional[Path] = None,
    settings_file: Optional[Path] = None,
    **overrides: Any,
) -> StudioSettings:
    """Load settings with discovery and merging.

    Args:
        project_dir: Directory searched for ``react-scanner-studio.toml``
            (defaults to the current directory)
        settings_file: Optional explicit TOML file
        **overrides: Direct overrides, typically from CLI flags; ``None``
            values are ignored

    Raises:
        ScannerStudioError: If a settings file is missing or invalid
        InvalidSettingsError: If a merged value fails validation
    """
    merged: dict[str, Any] = {}

    project_settings = (project_dir or Path.cwd()) / SETTINGS_FILENAME
    if project_settings.exists():
        merged.update(_load_toml_section(project_settings))

    if settings_file is not None:
        if not settings_file.exists():
            raise ScannerStudioError(f"Settings file not found: {settings_file}")
        merged.update(_load_toml_section(settings_file))

    merged.update(_load_env_vars())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    if "scanner_command" in merged:
        merged["scanner_command"] = _coerce_command(merged["scanner_command"])

    known = {f.name for f in fields(StudioSettings)}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise ScannerStudioError(f"Unknown settings: {', '.join(unknown)}")

    return StudioSettings(**merged)


def _coerce_command(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(value.split())
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise InvalidSettingsError("scanner_command", value, "expected a string or list of strings")


def _load_env_vars() -> dict[str, Any]:
    """Load settings from REACT_SCANNER_STUDIO_* environment variables.

    Supported variables:
        REACT_SCANNER_STUDIO_HOST: str
        REACT_SCANNER_STUDIO_PORT: int
        REACT_SCANNER_STUDIO_SCANNER_COMMAND: whitespace separated command
        REACT_SCANNER_STUDIO_BUILD_DIR: str
        REACT_SCANNER_STUDIO_MAX_PORT_ATTEMPTS: int
    """
    result: dict[str, Any] = {}

    for f in fields(StudioSettings):
        env_key = f"{ENV_PREFIX}{f.name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        if f.name in ("port", "max_port_attempts"):
            try:
                result[f.name] = int(env_value)
            except ValueError:
                raise InvalidSettingsError(f.name, env_value, f"{env_key} must be an integer")
        elif f.name == "scanner_command":
            result[f.name] = tuple(env_value.split())
        else:
            result[f.name] = env_value

    return result


def _load_toml_section(path: Path) -> dict[str, Any]:
    """Load a settings TOML file.

    Values may sit at the top level or under a ``[studio]`` table.
    """
    if sys.version_info >= (3, 11):
        import tomllib
    else:
        import tomli as tomllib

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ScannerStudioError(f"Invalid settings file '{path}': {e}")

    section = data.get("studio", data)
    if not isinstance(section, dict):
        raise ScannerStudioError(f"Invalid settings file '{path}': [studio] must be a table")
    return dict(section)
