"""Detect and normalize the three react-scanner report formats.

count-components::

    {"Text": 10, "Button": 5}

count-components-and-props::

    {"Text": {"instances": 17, "props": {"margin": 6, "color": 4}}}

raw-report::

    {"Text": {"instances": [
        {"props": {"margin": "2"}, "propsSpread": false,
         "location": {"file": "src/App.tsx", "start": {"line": 3, "column": 5}}}
    ]}}

A report written by ``react-scanner-studio build`` is wrapped as
``{"data": <report>, "error": null}``; it is unwrapped before detection.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from ..exceptions import ReportParseError, UnrecognizedFormatError
from .models import (
    FORMAT_PRIORITY,
    NormalizedComponent,
    NormalizedReport,
    Occurrence,
    ReportFormat,
    ZombieProp,
)

BOOLEAN_VALUE = "(boolean)"

_ENVELOPE_KEYS = frozenset({"data", "error"})


@dataclass(frozen=True)
class DecodedDocument:
    """A raw scan document tagged with the format it was recognized as."""

    format: ReportFormat
    entries: Mapping[str, Any]


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _reject_constant(token: str) -> Any:
    raise ReportParseError(f"non-standard JSON constant {token}")


def load_json(text: str) -> Any:
    """Decode report JSON, rejecting the NaN and Infinity extensions.

    Raises:
        ReportParseError: Malformed or non-standard JSON
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ReportParseError(str(e))


def _entry_instances(value: Any) -> Any:
    if isinstance(value, dict):
        return value.get("instances")
    return None


def _has_instance_lists(doc: Mapping[str, Any]) -> bool:
    return any(isinstance(_entry_instances(v), list) for v in doc.values())


def _has_instance_counts(doc: Mapping[str, Any]) -> bool:
    return any(_is_number(_entry_instances(v)) for v in doc.values())


def _all_counts(doc: Mapping[str, Any]) -> bool:
    return all(_is_number(v) for v in doc.values())


_MATCHERS: dict[ReportFormat, Callable[[Mapping[str, Any]], bool]] = {
    ReportFormat.RAW_REPORT: _has_instance_lists,
    ReportFormat.COUNT_COMPONENTS_AND_PROPS: _has_instance_counts,
    ReportFormat.COUNT_COMPONENTS: _all_counts,
}


def is_envelope(doc: Any) -> bool:
    return isinstance(doc, dict) and set(doc) == _ENVELOPE_KEYS


def unwrap_envelope(doc: Any) -> Any:
    """Return the report inside a ``{data, error}`` envelope, or *doc* unchanged."""
    if is_envelope(doc):
        return doc["data"]
    return doc


def detect_format(doc: Any) -> Optional[ReportFormat]:
    """Return the report format of *doc*, or None when no shape matches."""
    if not isinstance(doc, dict) or not doc:
        return None
    for fmt in FORMAT_PRIORITY:
        if _MATCHERS[fmt](doc):
            return fmt
    return None


def decode_document(doc: Any) -> DecodedDocument:
    """Tag *doc* with its format.

    Raises:
        UnrecognizedFormatError: If *doc* matches none of the formats
    """
    fmt = detect_format(doc)
    if fmt is None:
        raise UnrecognizedFormatError(tuple(f.value for f in FORMAT_PRIORITY))
    return DecodedDocument(format=fmt, entries=doc)


def format_prop_value(value: Any) -> str:
    """Bucket label for a prop value in the value distribution.

    Boolean shorthand props arrive as ``null``; ``true``, ``false`` and
    ``null`` all land in the same ``(boolean)`` bucket.
    """
    if value is None or isinstance(value, bool):
        return BOOLEAN_VALUE
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, separators=(",", ":"), sort_keys=True)


def _count_props(raw: Any) -> dict[str, int]:
    if not isinstance(raw, dict):
        return {}
    return {name: int(count) for name, count in raw.items() if _is_number(count)}


def _normalize_count_components(entries: Mapping[str, Any]) -> list[NormalizedComponent]:
    return [
        NormalizedComponent(name=name, instances=int(value))
        for name, value in entries.items()
        if _is_number(value)
    ]


def _normalize_counted_entry(name: str, entry: Mapping[str, Any]) -> NormalizedComponent:
    instances = entry.get("instances")
    return NormalizedComponent(
        name=name,
        instances=int(instances) if _is_number(instances) else 0,
        props=_count_props(entry.get("props")),
    )


def _normalize_count_components_and_props(
    entries: Mapping[str, Any],
) -> list[NormalizedComponent]:
    return [
        _normalize_counted_entry(name, value)
        for name, value in entries.items()
        if isinstance(value, dict)
    ]


def _occurrence(location: Any) -> Optional[Occurrence]:
    if not isinstance(location, dict):
        return None
    file = location.get("file")
    start = location.get("start")
    if not file or not isinstance(start, dict):
        return None
    return Occurrence(file=str(file), line=start.get("line", 0), column=start.get("column", 0))


def _normalize_raw_entry(name: str, instances: list) -> NormalizedComponent:
    prop_counts: dict[str, int] = {}
    prop_values: dict[str, dict[str, int]] = {}
    files: list[Occurrence] = []
    spread_count = 0

    for instance in instances:
        if not isinstance(instance, dict):
            continue

        props = instance.get("props")
        if isinstance(props, dict):
            for prop_name, prop_value in props.items():
                prop_counts[prop_name] = prop_counts.get(prop_name, 0) + 1
                bucket = prop_values.setdefault(prop_name, {})
                label = format_prop_value(prop_value)
                bucket[label] = bucket.get(label, 0) + 1

        occurrence = _occurrence(instance.get("location"))
        if occurrence is not None:
            files.append(occurrence)

        if instance.get("propsSpread"):
            spread_count += 1

    return NormalizedComponent(
        name=name,
        instances=len(instances),
        props=prop_counts,
        prop_values=prop_values,
        files=tuple(files),
        props_spread_count=spread_count,
    )


def _normalize_raw_report(entries: Mapping[str, Any]) -> list[NormalizedComponent]:
    components = []
    for name, value in entries.items():
        if not isinstance(value, dict):
            continue
        instances = value.get("instances")
        if isinstance(instances, list):
            components.append(_normalize_raw_entry(name, instances))
        else:
            # Mixed document: a counted entry inside a raw report
            components.append(_normalize_counted_entry(name, value))
    return components


_NORMALIZERS: dict[ReportFormat, Callable[[Mapping[str, Any]], list[NormalizedComponent]]] = {
    ReportFormat.COUNT_COMPONENTS: _normalize_count_components,
    ReportFormat.COUNT_COMPONENTS_AND_PROPS: _normalize_count_components_and_props,
    ReportFormat.RAW_REPORT: _normalize_raw_report,
}


def _find_zombie_props(components: list[NormalizedComponent]) -> list[ZombieProp]:
    zombies = [
        ZombieProp(component=component.name, prop=prop, usage_count=count)
        for component in components
        for prop, count in component.props.items()
        if count == 1
    ]
    zombies.sort(key=lambda z: z.component)
    return zombies


def normalize(doc: Mapping[str, Any], fmt: ReportFormat) -> NormalizedReport:
    """Build the normalized report for *doc* already known to be *fmt*."""
    components = _NORMALIZERS[fmt](doc)
    # sort() is stable, so equal counts keep document order
    components.sort(key=lambda c: c.instances, reverse=True)

    all_props = set()
    all_files = set()
    for component in components:
        all_props.update(component.props)
        all_files.update(occ.file for occ in component.files)

    return NormalizedReport(
        format=fmt,
        components=tuple(components),
        total_instances=sum(c.instances for c in components),
        total_unique_components=len(components),
        total_unique_props=len(all_props),
        total_files=len(all_files),
        zombie_props=tuple(_find_zombie_props(components)),
    )


def normalize_document(doc: Any) -> NormalizedReport:
    """Unwrap, decode and normalize an already parsed JSON document.

    Raises:
        ReportParseError: If *doc* is an envelope without data
        UnrecognizedFormatError: If *doc* matches none of the formats
    """
    if is_envelope(doc):
        if doc["data"] is None:
            raise ReportParseError(doc["error"] or "report envelope contains no data")
        doc = doc["data"]
    decoded = decode_document(doc)
    return normalize(decoded.entries, decoded.format)


def parse_report(text: str) -> NormalizedReport:
    """Parse report JSON text into a :class:`NormalizedReport`.

    Raises:
        ReportParseError: Malformed JSON
        UnrecognizedFormatError: JSON that matches none of the formats
    """
    return normalize_document(load_json(text))
