"""Capabilities consumed by the lifecycle helpers.

The management client wire protocol and process launching live outside this
package; only the narrow interfaces needed to drive a server are defined here.
"""
from __future__ import annotations

import logging
import os
import signal
import subprocess
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from .operations import Operation

logger = logging.getLogger(__name__)


@runtime_checkable
class ManagementClient(Protocol):
    """Executes management operations against a running server.

    Implementations raise ``OSError`` (usually
    :class:`~wildfly_tools.core.exceptions.TransportError`) when the server
    cannot be reached, and return the raw response document otherwise.
    """

    def execute(self, operation: Operation) -> Mapping[str, Any]: ...


@runtime_checkable
class ProcessHandle(Protocol):
    """Liveness view of a launched server process."""

    def is_alive(self) -> bool: ...

    def exit_code(self) -> Optional[int]: ...

    def destroy(self) -> None: ...


def _signal_group(pid: int, sig: int) -> bool:
    """Signal the process group of ``pid``, falling back to the process alone."""
    if pid <= 0:
        return False
    if os.name == "posix":
        try:
            os.killpg(pid, sig)
            return True
        except OSError:
            pass
    try:
        os.kill(pid, sig)
        return True
    except OSError:
        return False


class PopenProcessHandle:
    """:class:`ProcessHandle` backed by a :class:`subprocess.Popen`.

    Servers are expected to be launched in their own session
    (``start_new_session=True``) so that ``destroy`` reaches the whole
    process group.
    """

    def __init__(self, process: subprocess.Popen[Any], *, destroy_timeout_seconds: float = 10.0) -> None:
        self._process = process
        self._destroy_timeout_seconds = destroy_timeout_seconds

    @property
    def pid(self) -> int:
        return self._process.pid

    def is_alive(self) -> bool:
        return self._process.poll() is None

    def exit_code(self) -> Optional[int]:
        return self._process.poll()

    def destroy(self) -> None:
        if self._process.poll() is not None:
            return
        pid = self._process.pid
        logger.info("Destroying server process %s", pid)
        if not _signal_group(pid, signal.SIGTERM):
            return
        try:
            self._process.wait(timeout=max(0.1, float(self._destroy_timeout_seconds)))
            return
        except subprocess.TimeoutExpired:
            logger.warning("Process %s did not exit after SIGTERM, killing it", pid)

        _signal_group(pid, getattr(signal, "SIGKILL", signal.SIGTERM))
        try:
            self._process.wait(timeout=max(0.1, float(self._destroy_timeout_seconds)))
        except subprocess.TimeoutExpired:
            logger.warning("Server process %s is still running after destroy", pid)


__all__ = ["ManagementClient", "PopenProcessHandle", "ProcessHandle"]
