"""Answer "is there already a report to show?" without running a scan."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from ..exceptions import ScannerStudioError
from ..report.parser import load_json, unwrap_envelope
from .config import require_config_path, resolve_output_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanReportStatus:
    """Metadata about the report file on disk."""

    exists: bool
    path: Optional[Path] = None
    modified_at: Optional[datetime] = None
    size_bytes: int = 0
    component_count: Optional[int] = None

    @property
    def age(self) -> Optional[timedelta]:
        if self.modified_at is None:
            return None
        return datetime.now(timezone.utc) - self.modified_at

    def describe_age(self, now: Optional[datetime] = None) -> str:
        """Human readable age, e.g. ``"5 minutes ago"``."""
        if self.modified_at is None:
            return "never"
        seconds = int(((now or datetime.now(timezone.utc)) - self.modified_at).total_seconds())
        if seconds < 60:
            return "just now"
        for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
            if seconds >= size:
                count = seconds // size
                return f"{count} {unit}{'s' if count != 1 else ''} ago"
        return "just now"

    def to_dict(self) -> dict:
        return {
            "exists": self.exists,
            "path": str(self.path) if self.path else None,
            "modified_at": self.modified_at.isoformat() if self.modified_at else None,
            "size_bytes": self.size_bytes,
            "component_count": self.component_count,
        }


MISSING = ScanReportStatus(exists=False)


def check_scan_report(start: Optional[Path] = None) -> ScanReportStatus:
    """Inspect the configured report file.

    Never raises: a missing config, an unconfigured output, a missing,
    unreadable or unparseable file all report ``exists=False``.
    """
    try:
        path = resolve_output_path(require_config_path(start))
    except ScannerStudioError as e:
        logger.debug("No report location: %s", e)
        return MISSING

    try:
        stat = path.stat()
        doc = unwrap_envelope(load_json(path.read_text(encoding="utf-8")))
    except (OSError, UnicodeDecodeError, ScannerStudioError) as e:
        logger.debug("Report at %s not usable: %s", path, e)
        return ScanReportStatus(exists=False, path=path)

    if not isinstance(doc, dict):
        return ScanReportStatus(exists=False, path=path)

    return ScanReportStatus(
        exists=True,
        path=path,
        modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        size_bytes=stat.st_size,
        component_count=len(doc),
    )
