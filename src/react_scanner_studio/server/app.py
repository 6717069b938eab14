"""Starlette ASGI application for the live dashboard.

The data routes are answered here; every other path falls through to the
packaged dashboard bundle. Nothing is cached between requests: each one
re-resolves the scanner config and re-reads the report.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

from ..report.loader import get_report_payload, get_scan_data
from ..scanner.status import check_scan_report

logger = logging.getLogger(__name__)

UI_DIR = Path(__file__).parent / "static"

SCAN_DATA_ROUTE = "/api/scan-data"
REPORT_ROUTE = "/api/report"
STATUS_ROUTE = "/api/status"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def create_app(project_dir: Optional[Path] = None, ui_dir: Optional[Path] = None) -> Starlette:
    """Build the Starlette application.

    Args:
        project_dir: Directory the scanner config is searched from on each
            request (defaults to the current directory at request time)
        ui_dir: Dashboard bundle to serve (defaults to the packaged one)
    """

    async def api_scan_data(request: Request) -> JSONResponse:
        payload = await run_in_threadpool(get_scan_data, project_dir)
        return JSONResponse(payload, headers=NO_CACHE_HEADERS)

    async def api_report(request: Request) -> JSONResponse:
        payload = await run_in_threadpool(get_report_payload, project_dir)
        if payload["error"]:
            logger.warning("Report unavailable: %s", payload["error"])
        return JSONResponse(payload, headers=NO_CACHE_HEADERS)

    async def api_status(request: Request) -> JSONResponse:
        status = await run_in_threadpool(check_scan_report, project_dir)
        return JSONResponse(status.to_dict(), headers=NO_CACHE_HEADERS)

    routes = [
        Route(SCAN_DATA_ROUTE, api_scan_data),
        Route(REPORT_ROUTE, api_report),
        Route(STATUS_ROUTE, api_status),
        Mount("/", app=StaticFiles(directory=str(ui_dir or UI_DIR), html=True), name="ui"),
    ]

    return Starlette(routes=routes)
