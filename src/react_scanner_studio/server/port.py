"""Port selection for the dashboard server.

Availability is decided by actually binding the port on the target host
and releasing it again. There is a window between the probe and the real
bind in which another process could take the port; for a single
developer machine that is acceptable.
"""

from __future__ import annotations

import logging
import os
import socket
from typing import Optional

from ..exceptions import PortSearchExhaustedError, PortUnavailableError

logger = logging.getLogger(__name__)

# Matches the listening server, which may reuse ports still in TIME_WAIT.
_REUSE_ADDR = os.name == "posix"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_MAX_ATTEMPTS = 100
MAX_PORT = 65535


def check_port(port: int, host: str = DEFAULT_HOST) -> bool:
    """Return True if a listening socket can be bound to (host, port)."""
    try:
        family = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)[0][0]
    except (socket.gaierror, OverflowError, ValueError):
        return False

    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        if _REUSE_ADDR:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(1)
        return True
    except (OSError, OverflowError) as exc:
        logger.debug("Port %d on %s not bindable: %s", port, host, exc)
        return False
    finally:
        sock.close()


def find_available_port(
    start: int,
    host: str = DEFAULT_HOST,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Optional[int]:
    """Probe ``start, start+1, ...`` and return the first free port.

    Stops after *max_attempts* probes or once the port number passes 65535.
    Returns None if nothing was free.
    """
    for port in range(start, min(start + max_attempts, MAX_PORT + 1)):
        if check_port(port, host):
            return port
    return None


def get_server_port(
    requested: int = DEFAULT_PORT,
    host: str = DEFAULT_HOST,
    exact_port: bool = False,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> int:
    """Pick the port the dashboard server should listen on.

    Returns *requested* when it is free. When it is busy, *exact_port*
    makes that fatal; otherwise the search continues from ``requested + 1``.

    Raises:
        PortUnavailableError: Requested port busy and *exact_port* set
        PortSearchExhaustedError: No free port within *max_attempts*
    """
    if check_port(requested, host):
        return requested

    if exact_port:
        raise PortUnavailableError(requested, host)

    port = find_available_port(requested + 1, host, max_attempts)
    if port is None:
        raise PortSearchExhaustedError(requested + 1, max_attempts, host)

    logger.info("Port %d in use, selected %d", requested, port)
    return port
