"""Tests for report format detection and normalization."""

import json

import pytest

from react_scanner_studio.exceptions import ReportParseError, UnrecognizedFormatError
from react_scanner_studio.report import ReportFormat, parse_report
from react_scanner_studio.report.parser import (
    BOOLEAN_VALUE,
    decode_document,
    detect_format,
    format_prop_value,
    normalize,
    normalize_document,
    unwrap_envelope,
)

# ── Format detection ──────────────────────────────────────────────


class TestDetectFormat:
    def test_count_components(self, counts_doc):
        assert detect_format(counts_doc) is ReportFormat.COUNT_COMPONENTS

    def test_count_components_and_props(self):
        doc = {"Button": {"instances": 3, "props": {"variant": 2}}}
        assert detect_format(doc) is ReportFormat.COUNT_COMPONENTS_AND_PROPS

    def test_raw_report(self, raw_report_doc):
        assert detect_format(raw_report_doc) is ReportFormat.RAW_REPORT

    def test_mixed_document_prefers_raw_report(self):
        doc = {
            "Button": {"instances": 2, "props": {}},
            "Text": {"instances": [{"props": {}}]},
        }
        assert detect_format(doc) is ReportFormat.RAW_REPORT

    def test_counts_with_props_beat_bare_counts(self):
        doc = {"Button": 3, "Text": {"instances": 1, "props": {}}}
        assert detect_format(doc) is ReportFormat.COUNT_COMPONENTS_AND_PROPS

    @pytest.mark.parametrize(
        "doc",
        [
            {},
            [],
            "Button",
            42,
            None,
            {"Button": "twelve"},
            {"Button": True},
            {"Button": {"props": {}}},
            {"Button": 3, "Text": "4"},
            {"Button": float("inf")},
            {"Button": float("nan")},
        ],
    )
    def test_unrecognized(self, doc):
        assert detect_format(doc) is None

    def test_decode_document_names_all_formats(self):
        with pytest.raises(UnrecognizedFormatError) as exc_info:
            decode_document({"Button": "x"})
        message = str(exc_info.value)
        for fmt in ReportFormat:
            assert fmt.value in message

    def test_decode_document_tags_entries(self, counts_doc):
        decoded = decode_document(counts_doc)
        assert decoded.format is ReportFormat.COUNT_COMPONENTS
        assert decoded.entries == counts_doc


# ── Normalization ─────────────────────────────────────────────────


class TestCountComponents:
    def test_scalar_counts(self, counts_doc):
        report = normalize_document(counts_doc)
        assert report.format is ReportFormat.COUNT_COMPONENTS
        assert report.total_unique_components == 2
        assert report.total_instances == 16
        assert report.zombie_props == ()
        assert report.total_unique_props == 0
        assert report.total_files == 0

    def test_sorted_by_instances_descending(self):
        report = normalize_document({"Text": 4, "Button": 12, "Icon": 7})
        assert [c.name for c in report.components] == ["Button", "Icon", "Text"]

    def test_ties_keep_document_order(self):
        report = normalize_document({"B": 1, "A": 1, "C": 1})
        assert [c.name for c in report.components] == ["B", "A", "C"]

    def test_float_counts_become_ints(self):
        report = normalize_document({"Button": 3.0})
        assert report.components[0].instances == 3
        assert isinstance(report.components[0].instances, int)


class TestCountComponentsAndProps:
    def test_props_carried_over(self):
        doc = {
            "Button": {"instances": 5, "props": {"variant": 5, "size": 1}},
            "Text": {"instances": 2, "props": {}},
        }
        report = normalize_document(doc)
        button = report.get_component("Button")
        assert button.instances == 5
        assert dict(button.props) == {"variant": 5, "size": 1}
        assert button.prop_values == {}
        assert button.files == ()
        assert report.total_unique_props == 2

    def test_zombie_props(self):
        doc = {
            "Button": {"instances": 5, "props": {"variant": 5, "size": 1}},
            "Card": {"instances": 1, "props": {"elevated": 1}},
        }
        report = normalize_document(doc)
        pairs = [(z.component, z.prop) for z in report.zombie_props]
        assert pairs == [("Button", "size"), ("Card", "elevated")]
        assert all(z.usage_count == 1 for z in report.zombie_props)

    def test_missing_props_treated_as_empty(self):
        report = normalize_document({"Button": {"instances": 2}})
        assert report.components[0].props == {}


class TestRawReport:
    def test_aggregates_instances(self, raw_report_doc):
        report = normalize_document(raw_report_doc)
        button = report.get_component("Button")
        assert button.instances == 2
        assert dict(button.props) == {"variant": 2, "disabled": 1}
        assert button.props_spread_count == 1
        assert [(o.file, o.line, o.column) for o in button.files] == [
            ("src/App.tsx", 10, 4),
            ("src/Form.tsx", 3, 8),
        ]

    def test_totals(self, raw_report_doc):
        report = normalize_document(raw_report_doc)
        assert report.total_instances == 3
        assert report.total_unique_components == 2
        assert report.total_unique_props == 3
        assert report.total_files == 2

    def test_prop_value_distribution(self):
        doc = {
            "Button": {
                "instances": [
                    {"props": {"color": "red"}},
                    {"props": {"color": "blue"}},
                ]
            }
        }
        report = normalize_document(doc)
        button = report.get_component("Button")
        assert button.props["color"] == 2
        assert dict(button.prop_values["color"]) == {"red": 1, "blue": 1}
        assert report.zombie_props == ()

    def test_single_use_prop_is_zombie(self, raw_report_doc):
        report = normalize_document(raw_report_doc)
        pairs = {(z.component, z.prop) for z in report.zombie_props}
        assert pairs == {("Button", "disabled"), ("Text", "size")}

    def test_boolean_shorthand_bucket(self, raw_report_doc):
        report = normalize_document(raw_report_doc)
        button = report.get_component("Button")
        assert dict(button.prop_values["disabled"]) == {BOOLEAN_VALUE: 1}

    def test_instances_without_location_still_counted(self):
        doc = {"Icon": {"instances": [{"props": {}}, {"props": {}, "location": "bogus"}]}}
        icon = normalize_document(doc).get_component("Icon")
        assert icon.instances == 2
        assert icon.files == ()

    def test_counted_entry_inside_raw_report(self):
        doc = {
            "Button": {"instances": [{"props": {"a": 1}}]},
            "Text": {"instances": 4, "props": {"size": 4}},
        }
        report = normalize_document(doc)
        assert report.format is ReportFormat.RAW_REPORT
        assert report.get_component("Text").instances == 4
        assert report.total_instances == 5


class TestReportInvariants:
    def test_total_instances_is_sum(self, raw_report_doc):
        report = normalize_document(raw_report_doc)
        assert report.total_instances == sum(c.instances for c in report.components)
        assert report.total_unique_components == len(report.components)

    def test_zombie_props_are_exactly_single_uses(self, raw_report_doc):
        report = normalize_document(raw_report_doc)
        expected = {
            (c.name, prop) for c in report.components for prop, n in c.props.items() if n == 1
        }
        assert {(z.component, z.prop) for z in report.zombie_props} == expected

    def test_normalizing_twice_is_identical(self, raw_report_doc):
        first = normalize_document(raw_report_doc)
        second = normalize_document(json.loads(json.dumps(raw_report_doc)))
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_normalize_with_explicit_format(self, counts_doc):
        report = normalize(counts_doc, ReportFormat.COUNT_COMPONENTS)
        assert report.total_instances == 16


# ── Prop values ───────────────────────────────────────────────────


class TestFormatPropValue:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, BOOLEAN_VALUE),
            (True, BOOLEAN_VALUE),
            (False, BOOLEAN_VALUE),
            ("primary", "primary"),
            (14, "14"),
            (2.0, "2"),
            (1.5, "1.5"),
            ({"b": 1, "a": 2}, '{"a":2,"b":1}'),
            ([1, 2], "[1,2]"),
        ],
    )
    def test_labels(self, value, expected):
        assert format_prop_value(value) == expected


# ── Envelope and text parsing ─────────────────────────────────────


class TestEnvelope:
    def test_unwrap(self, counts_doc):
        assert unwrap_envelope({"data": counts_doc, "error": None}) == counts_doc

    def test_component_named_data_is_not_an_envelope(self):
        doc = {"data": 3}
        assert unwrap_envelope(doc) is doc

    def test_normalize_enveloped_report(self, counts_doc):
        report = normalize_document({"data": counts_doc, "error": None})
        assert report.total_instances == 16

    def test_empty_envelope_raises(self):
        with pytest.raises(ReportParseError):
            normalize_document({"data": None, "error": "Scan data file not found"})


class TestParseReport:
    def test_parse_text(self, counts_doc):
        report = parse_report(json.dumps(counts_doc))
        assert report.total_instances == 16

    def test_malformed_json(self):
        with pytest.raises(ReportParseError) as exc_info:
            parse_report("{not json")
        assert "Invalid JSON" in str(exc_info.value)

    @pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
    def test_non_standard_constants_rejected(self, token):
        with pytest.raises(ReportParseError):
            parse_report(f'{{"Button": {token}}}')

    @pytest.mark.parametrize("token", ["NaN", "Infinity"])
    def test_non_standard_constants_in_props(self, token):
        with pytest.raises(ReportParseError):
            parse_report(f'{{"Button": {{"instances": 2, "props": {{"size": {token}}}}}}}')

    def test_unrecognized_shape(self):
        with pytest.raises(UnrecognizedFormatError):
            parse_report('{"Button": "twelve"}')

    def test_to_dict_shape(self, raw_report_doc):
        data = parse_report(json.dumps(raw_report_doc)).to_dict()
        assert data["format"] == "raw-report"
        assert data["components"][0]["name"] == "Button"
        assert data["components"][0]["files"][0] == {
            "file": "src/App.tsx",
            "line": 10,
            "column": 4,
        }
        json.dumps(data)
