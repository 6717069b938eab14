"""Shared fixtures for React Scanner Studio tests."""

import json

import pytest

REPORT_OUTPUT = "./.react-scanner-studio/scan-report.json"


@pytest.fixture
def raw_report_doc():
    """raw-report output: two Button instances and one Text instance."""
    return {
        "Button": {
            "instances": [
                {
                    "importInfo": {"imported": "Button", "local": "Button"},
                    "props": {"variant": "primary", "disabled": None},
                    "propsSpread": False,
                    "location": {"file": "src/App.tsx", "start": {"line": 10, "column": 4}},
                },
                {
                    "importInfo": {"imported": "Button", "local": "Button"},
                    "props": {"variant": "secondary"},
                    "propsSpread": True,
                    "location": {"file": "src/Form.tsx", "start": {"line": 3, "column": 8}},
                },
            ]
        },
        "Text": {
            "instances": [
                {
                    "props": {"size": 14},
                    "propsSpread": False,
                    "location": {"file": "src/App.tsx", "start": {"line": 12, "column": 6}},
                }
            ]
        },
    }


@pytest.fixture
def counts_doc():
    """count-components output."""
    return {"Button": 12, "Text": 4}


@pytest.fixture
def make_project(tmp_path):
    """Factory for a project directory with a JSON scanner config.

    Pass ``output=None`` to write a config without any ``outputTo``.
    """

    def _make(output=REPORT_OUTPUT, processor="raw-report", report=None, root=None):
        project = root or tmp_path
        project.mkdir(parents=True, exist_ok=True)
        options = {"outputTo": output} if output else {}
        config = {
            "crawlFrom": "./src",
            "importedFrom": "my-design-system",
            "processors": [[processor, options]],
        }
        (project / "react-scanner.config.json").write_text(json.dumps(config))
        if report is not None:
            _write_report(project, report, output)
        return project

    return _make


@pytest.fixture
def write_report():
    """Write a document (or raw text) to the report location of a project."""
    return _write_report


def _write_report(project, doc, output=REPORT_OUTPUT):
    path = (project / output).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(doc if isinstance(doc, str) else json.dumps(doc))
    return path
