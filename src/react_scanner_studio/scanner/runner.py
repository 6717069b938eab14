"""Run react-scanner as a supervised child process.

The child's stdout and stderr are drained on two threads while the caller
waits for exit. SIGINT/SIGTERM received during the run terminate the
child and turn the outcome into a cancellation; the handlers are removed
again as soon as the child is gone.

Exactly one outcome is produced per run:
    - ScanResult (exit code 0)
    - ScanCancelledError (signal received while running)
    - ScanExitError (non-zero exit)
    - ScanSpawnError (process could not be started)
"""

from __future__ import annotations

import logging
import os
import shlex
import signal
import subprocess
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Callable, Iterator, Optional, Sequence

from ..exceptions import ScanCancelledError, ScanExitError, ScanSpawnError

logger = logging.getLogger(__name__)

DEFAULT_SCANNER_COMMAND = ("npx", "react-scanner")
DEFAULT_CANCEL_SIGNALS = (signal.SIGINT, signal.SIGTERM)
UNKNOWN_ERROR = "Unknown error occurred"

# Seconds to wait for a terminated child before killing it.
_TERMINATE_GRACE = 5.0
_POLL_INTERVAL = 0.1

_POSIX = os.name == "posix"

OutputCallback = Callable[[str, str], None]


@dataclass(frozen=True)
class ScanResult:
    """Output of a scan that exited successfully."""

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str
    duration_seconds: float


def build_scan_command(
    config_path: Path, command: Sequence[str] = DEFAULT_SCANNER_COMMAND
) -> list[str]:
    return [*command, "--config", str(config_path)]


def filter_package_manager_warnings(text: str) -> str:
    """Drop ``npm warn`` lines that npx prints around the scanner's own output."""
    lines = [line for line in text.splitlines() if not line.lower().startswith("npm warn")]
    return "\n".join(lines).strip()


def extract_error_message(stdout: str, stderr: str) -> str:
    """Pick the diagnostic for a failed scan: stderr, then stdout, then a fallback."""
    return (
        filter_package_manager_warnings(stderr)
        or filter_package_manager_warnings(stdout)
        or UNKNOWN_ERROR
    )


def _terminate(proc: subprocess.Popen, force: bool = False) -> None:
    """Signal the scanner and anything it spawned (npx runs node underneath)."""
    if _POSIX:
        try:
            os.killpg(proc.pid, signal.SIGKILL if force else signal.SIGTERM)
            return
        except (ProcessLookupError, PermissionError):
            pass
    if force:
        proc.kill()
    else:
        proc.terminate()


class _CancelState:
    def __init__(self) -> None:
        self.event = threading.Event()
        self.signal_name: Optional[str] = None


@contextmanager
def _cancel_on_signals(
    proc: subprocess.Popen, signals: Sequence[int]
) -> Iterator[_CancelState]:
    """Terminate *proc* on any of *signals* for the duration of the block.

    Previous handlers are restored on every exit path. Signal handlers can
    only be installed from the main thread; elsewhere the block runs
    without cancellation support.
    """
    state = _CancelState()

    def _handler(signum, frame):
        if proc.poll() is not None:
            return
        state.signal_name = signal.Signals(signum).name
        state.event.set()
        logger.info("Received %s, terminating react-scanner (pid %d)", state.signal_name, proc.pid)
        _terminate(proc)

    previous = {}
    try:
        for signum in signals:
            try:
                previous[signum] = signal.signal(signum, _handler)
            except ValueError:
                logger.debug("Cannot install handler for %s outside the main thread", signum)
        yield state
    finally:
        for signum, handler in previous.items():
            try:
                signal.signal(signum, handler)
            except (OSError, ValueError):
                logger.debug("Could not restore handler for %s", signum)


def _drain(stream: IO[str], name: str, sink: list[str], on_output: Optional[OutputCallback]):
    for line in stream:
        sink.append(line)
        if on_output is not None:
            try:
                on_output(name, line.rstrip("\n"))
            except Exception:
                logger.debug("Output callback failed", exc_info=True)
    stream.close()


def _wait(proc: subprocess.Popen, cancelled: threading.Event) -> int:
    deadline: Optional[float] = None
    while True:
        try:
            return proc.wait(timeout=_POLL_INTERVAL)
        except subprocess.TimeoutExpired:
            pass
        if not cancelled.is_set():
            continue
        if deadline is None:
            deadline = time.monotonic() + _TERMINATE_GRACE
        elif time.monotonic() > deadline:
            logger.warning("react-scanner did not exit after SIGTERM, killing it")
            _terminate(proc, force=True)
            return proc.wait()


def _reap(proc: subprocess.Popen) -> None:
    """Stop a child that is being abandoned so it does not outlive the caller."""
    if proc.poll() is not None:
        return
    _terminate(proc)
    try:
        proc.wait(timeout=_TERMINATE_GRACE)
    except subprocess.TimeoutExpired:
        _terminate(proc, force=True)
        proc.wait()


def run_scan(
    config_path: Path,
    *,
    command: Sequence[str] = DEFAULT_SCANNER_COMMAND,
    cwd: Optional[Path] = None,
    on_output: Optional[OutputCallback] = None,
    signals: Sequence[int] = DEFAULT_CANCEL_SIGNALS,
) -> ScanResult:
    """Run the scanner against *config_path* and wait for it to finish.

    The scanner writes its report wherever the config tells it to; this
    function never writes files and never retries.

    Args:
        config_path: Resolved scanner config passed as ``--config``
        command: Scanner launcher, defaults to ``npx react-scanner``
        cwd: Working directory for the child, defaults to the config directory
        on_output: Called as ``on_output(stream_name, line)`` for each line
            of output, from a reader thread
        signals: Signals that cancel the run

    Raises:
        ScanSpawnError: The process could not be started
        ScanCancelledError: One of *signals* arrived while the scan ran
        ScanExitError: The scanner exited with a non-zero status
    """
    argv = build_scan_command(config_path, command)
    workdir = cwd or config_path.parent
    logger.debug("Running %s in %s", shlex.join(argv), workdir)

    stdout_lines: list[str] = []
    stderr_lines: list[str] = []

    started = time.monotonic()
    try:
        proc = subprocess.Popen(
            argv,
            cwd=str(workdir),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            stdin=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            start_new_session=_POSIX,
        )
    except OSError as exc:
        raise ScanSpawnError(shlex.join(argv), str(exc))

    try:
        with _cancel_on_signals(proc, signals) as cancel:
            readers = [
                threading.Thread(
                    target=_drain,
                    args=(proc.stdout, "stdout", stdout_lines, on_output),
                    name="scan-stdout",
                    daemon=True,
                ),
                threading.Thread(
                    target=_drain,
                    args=(proc.stderr, "stderr", stderr_lines, on_output),
                    name="scan-stderr",
                    daemon=True,
                ),
            ]
            for reader in readers:
                reader.start()
            returncode = _wait(proc, cancel.event)
    except BaseException:
        logger.debug("Scan interrupted, stopping react-scanner (pid %d)", proc.pid)
        _reap(proc)
        raise

    for reader in readers:
        reader.join(timeout=_TERMINATE_GRACE if cancel.event.is_set() else None)

    stdout = "".join(stdout_lines)
    stderr = "".join(stderr_lines)
    duration = time.monotonic() - started

    if cancel.event.is_set():
        raise ScanCancelledError(cancel.signal_name)

    if returncode != 0:
        logger.debug("react-scanner exited with code %d", returncode)
        raise ScanExitError(returncode, extract_error_message(stdout, stderr))

    logger.debug("react-scanner finished in %.2fs", duration)
    return ScanResult(
        command=tuple(argv),
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
        duration_seconds=duration,
    )
