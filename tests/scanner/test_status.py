"""Tests for the existing-report status check."""

from datetime import datetime, timedelta, timezone

import pytest

from react_scanner_studio.scanner.status import MISSING, ScanReportStatus, check_scan_report


class TestCheckScanReport:
    def test_existing_report(self, make_project, raw_report_doc):
        project = make_project(report=raw_report_doc)
        status = check_scan_report(project)
        assert status.exists is True
        assert status.component_count == 2
        assert status.size_bytes > 0
        assert status.path.name == "scan-report.json"
        assert status.modified_at.tzinfo is not None

    def test_enveloped_report(self, make_project, counts_doc):
        project = make_project(report={"data": counts_doc, "error": None})
        assert check_scan_report(project).component_count == 2

    def test_no_config(self, tmp_path):
        assert check_scan_report(tmp_path) == MISSING

    def test_output_not_configured(self, make_project):
        assert check_scan_report(make_project(output=None)).exists is False

    def test_report_missing(self, make_project):
        status = check_scan_report(make_project())
        assert status.exists is False
        assert status.path is not None

    @pytest.mark.parametrize(
        "content", ["{broken", "[1, 2]", '{"data": null, "error": "x"}', '{"Button": NaN}']
    )
    def test_unusable_report(self, make_project, content):
        project = make_project(report=content)
        assert check_scan_report(project).exists is False


class TestDescribeAge:
    NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "delta,expected",
        [
            (timedelta(seconds=5), "just now"),
            (timedelta(minutes=1), "1 minute ago"),
            (timedelta(minutes=42), "42 minutes ago"),
            (timedelta(hours=3, minutes=5), "3 hours ago"),
            (timedelta(days=2), "2 days ago"),
        ],
    )
    def test_labels(self, delta, expected):
        status = ScanReportStatus(exists=True, modified_at=self.NOW - delta)
        assert status.describe_age(now=self.NOW) == expected

    def test_missing_report(self):
        assert MISSING.describe_age() == "never"
        assert MISSING.age is None

    def test_to_dict(self):
        status = ScanReportStatus(exists=True, modified_at=self.NOW, size_bytes=10)
        data = status.to_dict()
        assert data["exists"] is True
        assert data["modified_at"] == "2024-06-01T12:00:00+00:00"
        assert data["path"] is None
