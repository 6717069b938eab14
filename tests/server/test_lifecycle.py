"""Tests for server startup and shutdown handling."""

import io
import signal
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

from rich.console import Console

from react_scanner_studio.scanner.status import ScanReportStatus
from react_scanner_studio.server.lifecycle import (
    _format_status_display,
    launch_server,
    open_browser,
)


def _render(renderable) -> str:
    console = Console(file=io.StringIO(), width=120)
    console.print(renderable)
    return console.file.getvalue()


class TestStatusDisplay:
    def test_with_report(self, tmp_path):
        status = ScanReportStatus(
            exists=True,
            path=tmp_path / "scan-report.json",
            modified_at=datetime.now(timezone.utc),
            component_count=7,
        )
        text = _render(_format_status_display("http://127.0.0.1:3000", tmp_path, status))
        assert "http://127.0.0.1:3000" in text
        assert "7 components" in text

    def test_without_report(self, tmp_path):
        text = _render(_format_status_display("http://127.0.0.1:3000", tmp_path, None))
        assert "not found" in text


class TestOpenBrowser:
    def test_opens_after_delay(self):
        with patch("react_scanner_studio.server.lifecycle.webbrowser.open") as opener:
            timer = open_browser("http://127.0.0.1:3000", delay=0)
            timer.join(timeout=5)
        opener.assert_called_once_with("http://127.0.0.1:3000")


class TestLaunchServer:
    def test_runs_and_restores_handlers(self, tmp_path):
        before_int = signal.getsignal(signal.SIGINT)
        before_term = signal.getsignal(signal.SIGTERM)
        server = MagicMock()
        console = Console(file=io.StringIO())

        with patch("uvicorn.Server", return_value=server) as server_cls, patch(
            "uvicorn.Config"
        ) as config_cls:
            launch_server(Path(tmp_path), console, host="127.0.0.1", port=4321)

        server.run.assert_called_once()
        assert config_cls.call_args[1]["port"] == 4321
        assert server_cls.call_count == 1
        assert signal.getsignal(signal.SIGINT) == before_int
        assert signal.getsignal(signal.SIGTERM) == before_term
        assert "Server stopped cleanly" in console.file.getvalue()

    def test_sigterm_requests_shutdown(self, tmp_path):
        server = MagicMock()
        server.should_exit = False

        def _run():
            handler = signal.getsignal(signal.SIGTERM)
            handler(signal.SIGTERM, None)

        server.run.side_effect = _run
        with patch("uvicorn.Server", return_value=server), patch("uvicorn.Config"):
            launch_server(Path(tmp_path), Console(file=io.StringIO()), port=4321)

        assert server.should_exit is True
