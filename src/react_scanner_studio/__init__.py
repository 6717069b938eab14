"""
React Scanner Studio - component usage dashboard for react-scanner reports.

Runs react-scanner against a codebase, normalizes whichever report format
it produced, and serves the result as a local dashboard or a static site.
"""

__version__ = "0.3.0"

from .report import NormalizedComponent, NormalizedReport, ReportFormat, ZombieProp, parse_report

__all__ = [
    "parse_report",
    "NormalizedReport",
    "NormalizedComponent",
    "ReportFormat",
    "ZombieProp",
]
