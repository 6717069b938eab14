"""Tests for dashboard port selection."""

import os
import socket

import pytest

from react_scanner_studio.exceptions import PortSearchExhaustedError, PortUnavailableError
from react_scanner_studio.server import port as port_module
from react_scanner_studio.server.port import check_port, find_available_port, get_server_port


@pytest.fixture
def busy_ports(monkeypatch):
    """Replace the bind probe with a fixed set of occupied ports."""
    busy = set()
    probed = []

    def _check(port, host="127.0.0.1"):
        probed.append(port)
        return port not in busy

    monkeypatch.setattr(port_module, "check_port", _check)
    return busy, probed


# ── Real socket probe ─────────────────────────────────────────────


class TestCheckPort:
    def test_listening_port_is_busy(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("127.0.0.1", 0))
            sock.listen(1)
            taken = sock.getsockname()[1]
            assert check_port(taken, "127.0.0.1") is False

    def test_released_port_is_free(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("127.0.0.1", 0))
            free = sock.getsockname()[1]
        assert check_port(free, "127.0.0.1") is True

    def test_unresolvable_host(self):
        assert check_port(3000, "no-such-host.invalid") is False

    @pytest.mark.skipif(os.name != "posix", reason="TIME_WAIT reuse is POSIX behaviour")
    def test_port_in_time_wait_is_free(self):
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        port = listener.getsockname()[1]
        client = socket.create_connection(("127.0.0.1", port))
        conn, _ = listener.accept()
        # Server side closes first, so the server port lingers in TIME_WAIT
        conn.close()
        client.close()
        listener.close()

        assert check_port(port, "127.0.0.1") is True

    def test_probe_releases_port(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("127.0.0.1", 0))
            free = sock.getsockname()[1]
        assert check_port(free) is True
        assert check_port(free) is True


# ── Search ────────────────────────────────────────────────────────


class TestFindAvailablePort:
    def test_first_free(self, busy_ports):
        busy, _ = busy_ports
        busy.update({3000, 3001, 3002})
        assert find_available_port(3000) == 3003

    def test_last_allowed_probe_can_succeed(self, busy_ports):
        busy, probed = busy_ports
        busy.update({3000, 3001, 3002, 3003})
        assert find_available_port(3000, max_attempts=5) == 3004
        assert probed == [3000, 3001, 3002, 3003, 3004]

    def test_gives_up_after_max_attempts(self, busy_ports):
        busy, probed = busy_ports
        busy.update(range(3000, 3010))
        assert find_available_port(3000, max_attempts=5) is None
        assert probed == [3000, 3001, 3002, 3003, 3004]

    def test_stops_at_highest_port(self, busy_ports):
        busy, probed = busy_ports
        busy.update({65534, 65535})
        assert find_available_port(65534, max_attempts=100) is None
        assert probed == [65534, 65535]


class TestGetServerPort:
    def test_requested_port_free(self, busy_ports):
        assert get_server_port(3000) == 3000

    def test_falls_back_to_next_free(self, busy_ports):
        busy, _ = busy_ports
        busy.update({3000, 3001, 3002, 3003})
        assert get_server_port(3000) == 3004

    def test_exact_port_busy(self, busy_ports):
        busy, probed = busy_ports
        busy.add(3000)
        with pytest.raises(PortUnavailableError, match="Port 3000 is not available."):
            get_server_port(3000, exact_port=True)
        assert probed == [3000]

    def test_exact_port_free(self, busy_ports):
        assert get_server_port(4000, exact_port=True) == 4000

    def test_search_exhausted(self, busy_ports):
        busy, _ = busy_ports
        busy.update(range(3000, 3200))
        with pytest.raises(PortSearchExhaustedError):
            get_server_port(3000, max_attempts=10)
