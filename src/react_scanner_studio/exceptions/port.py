"""Port allocation exceptions."""

from .base import ScannerStudioError


class PortError(ScannerStudioError):
    """Base class for port allocation errors."""

    pass


class PortUnavailableError(PortError):
    """Raised when an exact port was requested and it is busy."""

    def __init__(self, port: int, host: str):
        super().__init__(f"Port {port} is not available.", details={"host": host})
        self.port = port
        self.host = host


class PortSearchExhaustedError(PortError):
    """Raised when no free port was found within the attempt budget."""

    def __init__(self, start: int, attempts: int, host: str):
        super().__init__(
            f"No available port found starting from {start}",
            details={"attempts": str(attempts), "host": host},
        )
        self.start = start
        self.attempts = attempts
        self.host = host
