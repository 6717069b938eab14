"""Tests for reading reports from the configured location."""

import pytest

from react_scanner_studio.exceptions import (
    ConfigNotFoundError,
    ReportNotFoundError,
    ReportParseError,
)
from react_scanner_studio.report.loader import (
    get_report_payload,
    get_scan_data,
    load_report,
    locate_report,
    read_scan_data,
)


class TestLocateReport:
    def test_resolves_against_config_dir(self, make_project):
        project = make_project()
        path = locate_report(project)
        assert path == (project / ".react-scanner-studio" / "scan-report.json").resolve()

    def test_from_subdirectory(self, make_project):
        project = make_project()
        nested = project / "src" / "components"
        nested.mkdir(parents=True)
        assert locate_report(nested) == locate_report(project)

    def test_no_config(self, tmp_path):
        with pytest.raises(ConfigNotFoundError):
            locate_report(tmp_path)


class TestReadScanData:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ReportNotFoundError):
            read_scan_data(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "report.json"
        path.write_text("{oops")
        with pytest.raises(ReportParseError):
            read_scan_data(path)

    def test_unwraps_envelope(self, tmp_path, counts_doc):
        path = tmp_path / "report.json"
        path.write_text('{"data": {"Button": 12, "Text": 4}, "error": null}')
        assert read_scan_data(path) == counts_doc


class TestGetScanData:
    def test_returns_envelope(self, make_project, counts_doc):
        project = make_project(processor="count-components", report=counts_doc)
        assert get_scan_data(project) == {"data": counts_doc, "error": None}

    def test_missing_report_reported_as_error(self, make_project):
        project = make_project()
        envelope = get_scan_data(project)
        assert envelope["data"] is None
        assert "Scan data file not found" in envelope["error"]

    def test_missing_output_reported_as_error(self, make_project):
        project = make_project(output=None)
        envelope = get_scan_data(project)
        assert envelope["data"] is None
        assert envelope["error"]

    def test_invalid_json_reported_as_error(self, make_project):
        project = make_project(report="not json")
        envelope = get_scan_data(project)
        assert envelope["data"] is None
        assert "Invalid JSON" in envelope["error"]

    def test_reads_fresh_each_time(self, make_project, write_report):
        project = make_project(processor="count-components", report={"Button": 1})
        assert get_scan_data(project)["data"] == {"Button": 1}
        write_report(project, {"Button": 2})
        assert get_scan_data(project)["data"] == {"Button": 2}


class TestReportPayload:
    def test_normalized_payload(self, make_project, raw_report_doc):
        project = make_project(report=raw_report_doc)
        payload = get_report_payload(project)
        assert payload["error"] is None
        assert payload["report"]["total_instances"] == 3

    def test_unrecognized_format(self, make_project):
        project = make_project(report={"Button": "x"})
        payload = get_report_payload(project)
        assert payload["report"] is None
        assert "Unrecognized report format" in payload["error"]

    def test_non_standard_json_reported_as_error(self, make_project):
        project = make_project(report='{"Button": Infinity}')
        payload = get_report_payload(project)
        assert payload["report"] is None
        assert "Invalid JSON" in payload["error"]

    def test_load_report(self, make_project, raw_report_doc):
        project = make_project(report=raw_report_doc)
        report = load_report(locate_report(project))
        assert report.get_component("Text").instances == 1
