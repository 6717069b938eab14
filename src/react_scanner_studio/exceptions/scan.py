"""Scan process exceptions: spawn failures, non-zero exits, cancellation."""

from typing import Optional

from .base import ScannerStudioError


class ScanError(ScannerStudioError):
    """Base class for errors raised while running react-scanner."""

    pass


class ScanSpawnError(ScanError):
    """Raised when the scanner process cannot be started at all."""

    def __init__(self, command: str, reason: str):
        super().__init__(
            f"Could not execute react-scanner.\n{reason}",
            details={"command": command},
        )
        self.command = command
        self.reason = reason


class ScanExitError(ScanError):
    """Raised when the scanner exits with a non-zero status."""

    def __init__(self, returncode: int, output: str):
        super().__init__(
            output,
            details={"exit_code": str(returncode)},
        )
        self.returncode = returncode
        self.output = output


class ScanCancelledError(ScanError):
    """Raised when a scan is interrupted by a signal."""

    def __init__(self, signal_name: Optional[str] = None):
        details = {"signal": signal_name} if signal_name else None
        super().__init__("Scan cancelled", details=details)
        self.signal_name = signal_name
