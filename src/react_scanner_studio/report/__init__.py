"""Scan report parsing and normalization."""

from .loader import get_report_payload, get_scan_data, load_report, locate_report, read_scan_data
from .models import NormalizedComponent, NormalizedReport, Occurrence, ReportFormat, ZombieProp
from .parser import (
    DecodedDocument,
    decode_document,
    detect_format,
    normalize,
    normalize_document,
    parse_report,
    unwrap_envelope,
)

__all__ = [
    "ReportFormat",
    "NormalizedComponent",
    "NormalizedReport",
    "Occurrence",
    "ZombieProp",
    "DecodedDocument",
    "detect_format",
    "decode_document",
    "normalize",
    "normalize_document",
    "parse_report",
    "unwrap_envelope",
    "read_scan_data",
    "locate_report",
    "load_report",
    "get_scan_data",
    "get_report_payload",
]
