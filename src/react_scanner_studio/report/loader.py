"""Read the scan report named by the scanner config.

Everything here re-resolves the config and re-reads the report on every
call: the scan file may be regenerated between requests.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from ..exceptions import ReportNotFoundError, ReportParseError, ScannerStudioError
from ..scanner.config import require_config_path, resolve_output_path
from .models import NormalizedReport
from .parser import load_json, normalize_document, unwrap_envelope

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> Any:
    if not path.is_file():
        raise ReportNotFoundError(path)
    try:
        return load_json(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ReportParseError(str(e), path)
    except ReportParseError as e:
        raise ReportParseError(e.reason, path)


def read_scan_data(path: Path) -> Any:
    """Load the raw scan document at *path*, unwrapping a ``{data, error}`` envelope.

    Raises:
        ReportNotFoundError: The file does not exist
        ReportParseError: The file is not valid JSON
    """
    return unwrap_envelope(_read_json(path))


def locate_report(start: Optional[Path] = None) -> Path:
    """Find the scanner config from *start* and return its report path."""
    return resolve_output_path(require_config_path(start))


def load_report(path: Path) -> NormalizedReport:
    """Read and normalize the report file at *path*."""
    return normalize_document(_read_json(path))


def get_scan_data(start: Optional[Path] = None) -> dict[str, Any]:
    """Return the ``{"data": ..., "error": ...}`` envelope for the current project.

    Failures are reported in ``error`` rather than raised; this is the
    payload of ``GET /api/scan-data`` and of the static build's JSON file.
    """
    try:
        data = read_scan_data(locate_report(start))
    except ScannerStudioError as e:
        logger.debug("Scan data unavailable: %s", e)
        return {"data": None, "error": str(e)}
    if data is None:
        return {"data": None, "error": "Scan data file contains no report."}
    return {"data": data, "error": None}


def get_report_payload(start: Optional[Path] = None) -> dict[str, Any]:
    """Return ``{"report": ..., "error": ...}`` with the normalized report."""
    try:
        report = load_report(locate_report(start))
    except ScannerStudioError as e:
        logger.debug("Report unavailable: %s", e)
        return {"report": None, "error": str(e)}
    return {"report": report.to_dict(), "error": None}
