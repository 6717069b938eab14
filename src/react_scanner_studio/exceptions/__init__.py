"""Exception hierarchy for React Scanner Studio."""

from .base import ScannerStudioError
from .config import (
    ConfigNotFoundError,
    ConfigurationError,
    InvalidScannerConfigError,
    InvalidSettingsError,
    OutputNotConfiguredError,
)
from .port import PortError, PortSearchExhaustedError, PortUnavailableError
from .report import (
    ReportError,
    ReportNotFoundError,
    ReportParseError,
    UnrecognizedFormatError,
)
from .scan import ScanCancelledError, ScanError, ScanExitError, ScanSpawnError

__all__ = [
    "ScannerStudioError",
    "ConfigurationError",
    "ConfigNotFoundError",
    "InvalidScannerConfigError",
    "OutputNotConfiguredError",
    "InvalidSettingsError",
    "ScanError",
    "ScanSpawnError",
    "ScanExitError",
    "ScanCancelledError",
    "ReportError",
    "ReportNotFoundError",
    "ReportParseError",
    "UnrecognizedFormatError",
    "PortError",
    "PortUnavailableError",
    "PortSearchExhaustedError",
]
