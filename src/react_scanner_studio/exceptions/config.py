"""Configuration exceptions: scanner config discovery and tool settings."""

from pathlib import Path
from typing import Any

from .base import ScannerStudioError

CONFIG_HINT = "Run `react-scanner-studio init` first to create the configuration."


class ConfigurationError(ScannerStudioError):
    """Base class for configuration-related errors."""

    pass


class ConfigNotFoundError(ConfigurationError):
    """Raised when no scanner config exists in the directory or any ancestor."""

    def __init__(self, start: Path):
        super().__init__(
            "No react-scanner.config.js found",
            details={"searched_from": str(start), "hint": CONFIG_HINT},
        )
        self.start = start


class InvalidScannerConfigError(ConfigurationError):
    """Raised when the scanner config exists but cannot be loaded."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Failed to read scanner config: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class OutputNotConfiguredError(ConfigurationError):
    """Raised when no report processor in the config declares ``outputTo``."""

    def __init__(self, path: Path):
        super().__init__(
            "Could not find output file in config. Configure a count-components, "
            "count-components-and-props or raw-report processor with outputTo.",
            details={"path": str(path)},
        )
        self.path = path


class InvalidSettingsError(ConfigurationError):
    """Raised when a tool setting has an invalid value."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid setting for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason
