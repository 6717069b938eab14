"""Freeze a report and the dashboard bundle into a self-contained static site.

The live server answers ``/api/scan-data`` and ``/api/report``. A static
site has no server, so both payloads are written next to the bundle and a
small script in ``index.html`` redirects fetches aimed at the API routes
to those files.
"""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from ..exceptions import ScannerStudioError
from ..report.models import NormalizedReport
from ..server.app import REPORT_ROUTE, SCAN_DATA_ROUTE, UI_DIR

logger = logging.getLogger(__name__)

SCAN_DATA_FILENAME = "scan-data.json"
REPORT_FILENAME = "report.json"
INDEX_FILENAME = "index.html"

EMBEDDED_ROUTES = {
    SCAN_DATA_ROUTE: SCAN_DATA_FILENAME,
    REPORT_ROUTE: REPORT_FILENAME,
}

_INTERCEPTOR_MARKER = "data-react-scanner-studio-static"

_INTERCEPTOR_TEMPLATE = """<script {marker}>
  (function () {{
    var routes = {routes};
    var originalFetch = window.fetch.bind(window);
    window.fetch = function (input, init) {{
      var url = typeof input === "string" ? input : (input && input.url) || "";
      var path = url.split(/[?#]/)[0];
      for (var route in routes) {{
        if (path === route || path.slice(-route.length) === route) {{
          return originalFetch(routes[route], init);
        }}
      }}
      return originalFetch(input, init);
    }};
  }})();
</script>
"""


@dataclass(frozen=True)
class StaticSite:
    """Paths of a finished static build."""

    output_dir: Path
    index: Path
    scan_data: Path
    report: Path


def render_interceptor(routes: Mapping[str, str] = EMBEDDED_ROUTES) -> str:
    mapping = {route: f"./{filename}" for route, filename in routes.items()}
    return _INTERCEPTOR_TEMPLATE.format(marker=_INTERCEPTOR_MARKER, routes=json.dumps(mapping))


def inject_fetch_interceptor(html: str, routes: Mapping[str, str] = EMBEDDED_ROUTES) -> str:
    """Insert the fetch interceptor before ``</head>``.

    Documents without a head get the script prepended. Already patched
    documents are returned unchanged.
    """
    if _INTERCEPTOR_MARKER in html:
        return html
    snippet = render_interceptor(routes)
    index = html.lower().find("</head>")
    if index == -1:
        return snippet + html
    return html[:index] + snippet + html[index:]


def _write_json(path: Path, payload: Any) -> None:
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def build_static_site(
    output_dir: Path,
    envelope: Mapping[str, Any],
    report: Optional[NormalizedReport] = None,
    ui_dir: Optional[Path] = None,
) -> StaticSite:
    """Write the dashboard bundle plus embedded report data to *output_dir*.

    *output_dir* is emptied first.

    Args:
        output_dir: Destination directory
        envelope: ``{"data": ..., "error": ...}`` as served by ``/api/scan-data``
        report: Normalized report served as ``/api/report``; when omitted
            the embedded report payload carries an error instead
        ui_dir: Bundle to copy (defaults to the packaged dashboard)

    Raises:
        ScannerStudioError: The bundle is missing or the output cannot be written
    """
    source = ui_dir or UI_DIR
    if not (source / INDEX_FILENAME).is_file():
        raise ScannerStudioError(f"Dashboard bundle not found: {source / INDEX_FILENAME}")
    if set(envelope) != {"data", "error"}:
        raise ScannerStudioError("Scan data must be a {data, error} envelope")

    try:
        if output_dir.exists():
            shutil.rmtree(output_dir)
        shutil.copytree(source, output_dir)

        scan_data_path = output_dir / SCAN_DATA_FILENAME
        _write_json(scan_data_path, dict(envelope))

        report_path = output_dir / REPORT_FILENAME
        payload = {"report": report.to_dict() if report else None, "error": envelope["error"]}
        if report is None and payload["error"] is None:
            payload["error"] = "No normalized report was embedded in this build."
        _write_json(report_path, payload)

        index_path = output_dir / INDEX_FILENAME
        html = index_path.read_text(encoding="utf-8")
        index_path.write_text(inject_fetch_interceptor(html), encoding="utf-8")
    except OSError as e:
        raise ScannerStudioError(f"Failed to write static site to {output_dir}: {e}")

    logger.debug("Static site written to %s", output_dir)
    return StaticSite(
        output_dir=output_dir,
        index=index_path,
        scan_data=scan_data_path,
        report=report_path,
    )
