"""Scanner config discovery, scan execution and report status."""

from .config import (
    CONFIG_FILENAMES,
    REPORT_PROCESSORS,
    ScannerConfig,
    find_config_path,
    get_config_dir,
    get_output_file,
    load_scanner_config,
    require_config_path,
    resolve_output_path,
)
from .runner import ScanResult, build_scan_command, extract_error_message, run_scan
from .status import ScanReportStatus, check_scan_report

__all__ = [
    "CONFIG_FILENAMES",
    "REPORT_PROCESSORS",
    "ScannerConfig",
    "find_config_path",
    "require_config_path",
    "get_config_dir",
    "load_scanner_config",
    "get_output_file",
    "resolve_output_path",
    "ScanResult",
    "build_scan_command",
    "extract_error_message",
    "run_scan",
    "ScanReportStatus",
    "check_scan_report",
]
