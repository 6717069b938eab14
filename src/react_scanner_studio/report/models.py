"""Normalized component usage model shared by the server, CLI and static build."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class ReportFormat(str, Enum):
    """The react-scanner processors whose output can be normalized."""

    COUNT_COMPONENTS = "count-components"
    COUNT_COMPONENTS_AND_PROPS = "count-components-and-props"
    RAW_REPORT = "raw-report"


# Detection priority: the richer format wins when signals conflict.
FORMAT_PRIORITY = (
    ReportFormat.RAW_REPORT,
    ReportFormat.COUNT_COMPONENTS_AND_PROPS,
    ReportFormat.COUNT_COMPONENTS,
)


@dataclass(frozen=True)
class Occurrence:
    """Where one component instance was found."""

    file: str
    line: int
    column: int

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "line": self.line, "column": self.column}


@dataclass(frozen=True)
class NormalizedComponent:
    """Usage aggregate for one component across the scanned codebase.

    ``prop_values``, ``files`` and ``props_spread_count`` are only populated
    from raw-report input; the count formats do not carry them.
    """

    name: str
    instances: int
    props: Mapping[str, int] = field(default_factory=dict)
    prop_values: Mapping[str, Mapping[str, int]] = field(default_factory=dict)
    files: tuple[Occurrence, ...] = ()
    props_spread_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "instances": self.instances,
            "props": dict(self.props),
            "prop_values": {prop: dict(values) for prop, values in self.prop_values.items()},
            "files": [occ.to_dict() for occ in self.files],
            "props_spread_count": self.props_spread_count,
        }


@dataclass(frozen=True)
class ZombieProp:
    """A (component, prop) pair used exactly once in the whole codebase."""

    component: str
    prop: str
    usage_count: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {"component": self.component, "prop": self.prop, "usage_count": self.usage_count}


@dataclass(frozen=True)
class NormalizedReport:
    """Format-independent view of a react-scanner report."""

    format: ReportFormat
    components: tuple[NormalizedComponent, ...]
    total_instances: int
    total_unique_components: int
    total_unique_props: int
    total_files: int
    zombie_props: tuple[ZombieProp, ...]

    def get_component(self, name: str) -> NormalizedComponent | None:
        for component in self.components:
            if component.name == name:
                return component
        return None

    def to_dict(self) -> dict[str, Any]:
        """JSON payload served to the dashboard as ``/api/report``."""
        return {
            "format": self.format.value,
            "components": [c.to_dict() for c in self.components],
            "total_instances": self.total_instances,
            "total_unique_components": self.total_unique_components,
            "total_unique_props": self.total_unique_props,
            "total_files": self.total_files,
            "zombie_props": [z.to_dict() for z in self.zombie_props],
        }
