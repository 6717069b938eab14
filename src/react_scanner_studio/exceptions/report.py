"""Report exceptions: unreadable, malformed or unrecognized scan output."""

from pathlib import Path
from typing import Optional

from .base import ScannerStudioError


class ReportError(ScannerStudioError):
    """Base class for scan report errors."""

    pass


class ReportNotFoundError(ReportError):
    """Raised when the configured report file does not exist."""

    def __init__(self, path: Path):
        super().__init__(
            f"Scan data file not found: {path}",
            details={"hint": "Run `react-scanner-studio scan` to generate scan data."},
        )
        self.path = path


class ReportParseError(ReportError):
    """Raised when the report is not valid JSON or carries no data."""

    def __init__(self, reason: str, path: Optional[Path] = None):
        details = {"reason": reason}
        if path is not None:
            details["path"] = str(path)
        super().__init__("Invalid JSON. Please check your report file and try again.", details)
        self.reason = reason
        self.path = path


class UnrecognizedFormatError(ReportError):
    """Raised when JSON matches none of the supported report shapes."""

    def __init__(self, supported: tuple):
        super().__init__(
            "Unrecognized report format. Expected output from react-scanner using "
            f"{', '.join(supported[:-1])}, or {supported[-1]} processor."
        )
        self.supported = supported
