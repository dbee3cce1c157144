"""Start, watch and stop standalone servers and managed domains.

Every check derives the current state from the server itself; nothing is
cached between calls. Probes used while waiting never raise on communication
failures: an unreachable server is simply "not running yet" (or, while
shutting down, "gone").
"""
from __future__ import annotations

import logging
import subprocess
import time
from concurrent.futures import CancelledError
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from wildfly_tools.core.config import LifecycleConfig
from wildfly_tools.core.exceptions import (
    OperationExecutionError,
    ProcessExitedError,
    ReloadError,
    ServerStartTimeoutError,
    WildFlyToolsError,
)
from wildfly_tools.core.management.client import ManagementClient, PopenProcessHandle, ProcessHandle
from wildfly_tools.core.management.operations import (
    EMPTY_ADDRESS,
    Address,
    CompositeOperationBuilder,
    Operation,
    create_address,
    create_operation,
    create_read_attribute_operation,
    is_successful_outcome,
    read_result,
)
from wildfly_tools.core.management.response import CompositeResponse, SuccessResponse, decode_response
from wildfly_tools.core.utils.assertions import require_not_none

from .container import lookup_container_description
from .models import (
    PROCESS_STATE_RELOAD_REQUIRED,
    ContainerDescription,
    DomainStatus,
    ServerIdentity,
    ServerStatus,
    Topology,
    is_running_state,
)

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 0.1

# Failures a probe treats as "not reachable yet" instead of an error.
_PROBE_ERRORS = (OSError, WildFlyToolsError)


class DomainShutdownPhase(str, Enum):
    STOPPING_MEMBERS = "stopping-members"
    MEMBERS_STOPPED = "members-stopped"
    HOST_SHUTTING_DOWN = "host-shutting-down"
    UNREACHABLE = "unreachable"


def is_valid_home_directory(path: Optional[Path | str]) -> bool:
    """True when ``path`` is an existing directory containing ``jboss-modules.jar``."""
    if path is None:
        return False
    home = Path(path)
    return home.is_dir() and (home / "jboss-modules.jar").exists()


def get_container_description(client: ManagementClient) -> ContainerDescription:
    return lookup_container_description(require_not_none("client", client))


# --- Topology and state probes --------------------------------------------


def launch_type(client: ManagementClient) -> str:
    """Return the server's ``launch-type`` or ``"unknown"`` if it cannot be read."""
    try:
        response = client.execute(create_read_attribute_operation(EMPTY_ADDRESS, "launch-type"))
        if is_successful_outcome(response):
            return str(read_result(response))
    except _PROBE_ERRORS as exc:
        logger.debug("Failed determining the launch type: %s", exc)
    return "unknown"


def determine_topology(client: ManagementClient) -> Topology:
    """Return STANDALONE, DOMAIN or UNKNOWN. Never raises on communication failure."""
    return Topology.from_launch_type(launch_type(client))


def _read_server_state(client: ManagementClient) -> str:
    try:
        response = client.execute(create_read_attribute_operation(EMPTY_ADDRESS, "server-state"))
        if is_successful_outcome(response):
            return str(read_result(response))
    except _PROBE_ERRORS as exc:
        logger.debug("Failed determining the server state: %s", exc)
    return "failed"


def server_state(client: ManagementClient) -> str:
    """Return the ``server-state`` of a standalone server.

    Returns ``"failed"`` if the state could not be read and ``"unknown"`` if
    the server is not a standalone server.
    """
    if determine_topology(client) is Topology.STANDALONE:
        return _read_server_state(client)
    return "unknown"


def is_standalone_running(client: ManagementClient) -> bool:
    try:
        response = client.execute(create_read_attribute_operation(EMPTY_ADDRESS, "server-state"))
        if is_successful_outcome(response):
            return is_running_state(str(read_result(response)))
    except _PROBE_ERRORS as exc:
        logger.debug("Failed determining if the standalone server is running: %s", exc)
    return False


def determine_host_address(client: ManagementClient) -> Address:
    """Return the address of the host controller the client is attached to.

    Raises:
        OSError: If the server cannot be reached.
        OperationExecutionError: If the host name cannot be read.
    """
    op = create_read_attribute_operation(EMPTY_ADDRESS, "local-host-name")
    response = client.execute(op)
    if is_successful_outcome(response):
        return create_address(("host", str(read_result(response))))
    raise OperationExecutionError(op, response, "Failed to determine the host address")


def _read_children(client: ManagementClient, op: Operation) -> Any:
    response = client.execute(op)
    if not is_successful_outcome(response):
        raise OperationExecutionError(op, response)
    return read_result(response)


def read_server_statuses(client: ManagementClient) -> Dict[ServerIdentity, ServerStatus]:
    """Read the status of every server configured on every host of a domain.

    Raises:
        OSError: If the domain cannot be reached.
        OperationExecutionError: If a roster read fails.
    """
    hosts = _read_children(client, create_operation("read-children-names", EMPTY_ADDRESS, **{"child-type": "host"}))
    statuses: Dict[ServerIdentity, ServerStatus] = {}
    for host in hosts or []:
        configs = _read_children(
            client,
            create_operation(
                "read-children-resources",
                create_address(("host", str(host))),
                **{"child-type": "server-config", "include-runtime": True},
            ),
        )
        if not isinstance(configs, Mapping):
            continue
        for name, config in configs.items():
            raw_status = config.get("status") if isinstance(config, Mapping) else None
            statuses[ServerIdentity(str(host), str(name))] = ServerStatus.parse(raw_status)
    return statuses


def _step_result(response: CompositeResponse, index: int) -> Optional[str]:
    step = response.step(index)
    if isinstance(step, SuccessResponse) and step.result is not None:
        return str(step.result)
    return None


def read_domain_status(client: ManagementClient) -> DomainStatus:
    """Take one snapshot of the controlling host and every domain member.

    Raises:
        OSError: If the domain cannot be reached.
        OperationExecutionError: If any of the reads fail.
    """
    host_address = determine_host_address(client)
    op = (
        CompositeOperationBuilder.create()
        .add_step(create_read_attribute_operation(host_address, "running-mode"))
        .add_step(create_read_attribute_operation(host_address, "host-state"))
        .build()
    )
    running_mode: Optional[str] = None
    host_state: Optional[str] = None
    decoded = decode_response(client.execute(op))
    if isinstance(decoded, CompositeResponse) and decoded.successful:
        running_mode = _step_result(decoded, 1)
        host_state = _step_result(decoded, 2)

    return DomainStatus(
        running_mode=running_mode,
        host_state=host_state,
        servers=read_server_statuses(client),
    )


def is_domain_running(client: ManagementClient) -> bool:
    """True when the domain is running.

    In admin-only mode the host controller's own state decides. Otherwise
    every server that is not disabled must be started; a FAILED member keeps
    the domain from running just like a STARTING one (see
    :attr:`DomainStatus.failed_members` to tell them apart).
    """
    try:
        status = read_domain_status(client)
    except _PROBE_ERRORS as exc:
        logger.debug("Failed determining if the domain is running: %s", exc)
        return False
    if not status.running and status.failed_members:
        logger.debug("Domain members failed: %s", ", ".join(map(str, status.failed_members)))
    return status.running


def is_running(client: ManagementClient, topology: Topology) -> bool:
    if topology is Topology.STANDALONE:
        return is_standalone_running(client)
    if topology is Topology.DOMAIN:
        return is_domain_running(client)
    return False


# --- Waiting ---------------------------------------------------------------


def wait_until_running(
    client: ManagementClient,
    topology: Topology,
    timeout_seconds: float,
    process: Optional[ProcessHandle] = None,
    *,
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
) -> int:
    """Poll until the server is running.

    Wall-clock time spent in each probe and each pause is deducted from
    ``timeout_seconds``, so slow probes consume the budget.

    Args:
        client: Client used to probe the server.
        topology: STANDALONE or DOMAIN.
        timeout_seconds: Budget for the whole wait.
        process: Optional handle of the launched server. If it exits the wait
            fails immediately; if the budget runs out it is destroyed.
        poll_interval_seconds: Pause between two probes.

    Returns:
        The number of probes made.

    Raises:
        ProcessExitedError: If ``process`` exited before the server was running.
        ServerStartTimeoutError: If the server was not running in time.
    """
    require_not_none("client", client)
    remaining = float(timeout_seconds)
    probes = 0
    while remaining > 0:
        started = time.monotonic()
        probes += 1
        if is_running(client, topology):
            logger.info("Server (%s) is running after %d probe(s)", topology.value, probes)
            return probes
        if process is not None and not process.is_alive():
            raise ProcessExitedError(process.exit_code())
        time.sleep(poll_interval_seconds)
        remaining -= time.monotonic() - started

    if process is not None:
        logger.warning("Server did not start within %s seconds, destroying the process", timeout_seconds)
        process.destroy()
    raise ServerStartTimeoutError(
        f"The server did not start within {timeout_seconds} seconds.",
        timeout_seconds=timeout_seconds,
    )


def wait_for_standalone(
    client: ManagementClient,
    timeout_seconds: float,
    process: Optional[ProcessHandle] = None,
    *,
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
) -> int:
    return wait_until_running(
        client, Topology.STANDALONE, timeout_seconds, process, poll_interval_seconds=poll_interval_seconds
    )


def wait_for_domain(
    client: ManagementClient,
    timeout_seconds: float,
    process: Optional[ProcessHandle] = None,
    *,
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
) -> int:
    return wait_until_running(
        client, Topology.DOMAIN, timeout_seconds, process, poll_interval_seconds=poll_interval_seconds
    )


# --- Shutdown --------------------------------------------------------------


def shutdown_standalone(client: ManagementClient, timeout: int = 0) -> None:
    """Shut down a standalone server and wait until it no longer runs.

    Args:
        timeout: Graceful shutdown timeout in seconds. ``0`` shuts down
            immediately, ``-1`` waits indefinitely for in-flight work.

    Raises:
        OSError: If the shutdown request cannot be sent.
        OperationExecutionError: If the server rejects the shutdown.
    """
    op = create_operation("shutdown", EMPTY_ADDRESS, timeout=timeout)
    response = client.execute(op)
    if not is_successful_outcome(response):
        raise OperationExecutionError(op, response, "Failed to shutdown server")

    logger.info("Shutdown acknowledged, waiting for the server to stop")
    while is_standalone_running(client):
        time.sleep(0)
    logger.info("Standalone server stopped")


def _is_domain_unreachable(client: ManagementClient) -> bool:
    try:
        return not read_server_statuses(client)
    except OSError as exc:
        logger.debug("Domain is no longer reachable: %s", exc)
        return True
    except WildFlyToolsError as exc:
        logger.debug("Domain still answering while shutting down: %s", exc)
        return False


def shutdown_domain(client: ManagementClient, timeout: int = 0) -> None:
    """Stop every domain server, then shut down the host controller.

    The two steps are sent as separate requests: bundling the host shutdown
    into a composite request races the channel teardown and fails spuriously.

    Args:
        timeout: Graceful shutdown timeout for the servers in seconds. ``0``
            stops immediately, ``-1`` waits indefinitely.

    Raises:
        OSError: If a request cannot be sent.
        OperationExecutionError: If stopping the servers or the host fails.
            The host is not shut down when stopping the servers failed.
    """
    logger.info("Domain shutdown phase: %s", DomainShutdownPhase.STOPPING_MEMBERS.value)
    stop_servers = create_operation("stop-servers", EMPTY_ADDRESS, blocking=True, timeout=timeout)
    response = client.execute(stop_servers)
    if not is_successful_outcome(response):
        raise OperationExecutionError(stop_servers, response, "Failed to stop servers")
    logger.info("Domain shutdown phase: %s", DomainShutdownPhase.MEMBERS_STOPPED.value)

    host_address = determine_host_address(client)
    shutdown = create_operation("shutdown", host_address)
    response = client.execute(shutdown)
    if not is_successful_outcome(response):
        raise OperationExecutionError(shutdown, response, "Failed to shutdown host")
    logger.info("Domain shutdown phase: %s", DomainShutdownPhase.HOST_SHUTTING_DOWN.value)

    while not _is_domain_unreachable(client):
        time.sleep(0)
    logger.info("Domain shutdown phase: %s", DomainShutdownPhase.UNREACHABLE.value)


# --- Reload ----------------------------------------------------------------


def _is_channel_closed(exc: BaseException) -> bool:
    if isinstance(exc, (ConnectionError, EOFError)):
        return True
    return isinstance(exc.__cause__, (CancelledError, ConnectionError, EOFError))


def execute_reload(client: ManagementClient, operation: Optional[Operation] = None) -> None:
    """Send a reload operation and return without waiting for the server.

    A dropped connection is expected here: the server may close the channel
    before the response arrives.

    Raises:
        ReloadError: If the server rejects the reload or cannot be reached.
    """
    op = operation or create_operation("reload")
    try:
        response = client.execute(op)
    except OSError as exc:
        if _is_channel_closed(exc):
            logger.debug("Channel closed while reloading: %s", exc)
            return
        raise ReloadError(f"Failed to reload the server with {op.to_dmr()}: {exc}") from exc
    if not is_successful_outcome(response):
        raise ReloadError(
            f"Failed to reload the server with {op.to_dmr()}: {response.get('failure-description')}",
            context={"response": dict(response)},
        )


def reload_if_required(
    client: ManagementClient,
    timeout_seconds: float,
    *,
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
) -> bool:
    """Reload a standalone server in ``reload-required`` state and wait for it.

    Returns:
        True if a reload was executed.

    Raises:
        ReloadError: If the reload fails or the server does not come back in time.
    """
    server_launch_type = launch_type(client)
    if Topology.from_launch_type(server_launch_type) is not Topology.STANDALONE:
        logger.warning("Server type %s is not supported for a reload.", server_launch_type)
        return False

    if _read_server_state(client).lower() != PROCESS_STATE_RELOAD_REQUIRED:
        return False

    logger.info("Server requires a reload, reloading")
    execute_reload(client, create_operation("reload"))
    try:
        wait_for_standalone(client, timeout_seconds, poll_interval_seconds=poll_interval_seconds)
    except ServerStartTimeoutError as exc:
        raise ReloadError("Failed to reload the server.") from exc
    return True


# --- Facade ------------------------------------------------------------------


@dataclass
class ServerController:
    """Lifecycle helpers bound to one client and one configuration."""

    client: ManagementClient
    config: LifecycleConfig = field(default_factory=LifecycleConfig)

    def __post_init__(self) -> None:
        require_not_none("client", self.client)

    def topology(self) -> Topology:
        return determine_topology(self.client)

    def is_running(self, topology: Optional[Topology] = None) -> bool:
        return is_running(self.client, topology or self.topology())

    def wait_until_running(
        self,
        topology: Topology,
        process: Optional[ProcessHandle] = None,
        *,
        timeout_seconds: Optional[float] = None,
    ) -> int:
        return wait_until_running(
            self.client,
            topology,
            self.config.startup_timeout_seconds if timeout_seconds is None else timeout_seconds,
            process,
            poll_interval_seconds=self.config.poll_interval_seconds,
        )

    def shutdown(self, *, timeout: Optional[int] = None) -> None:
        """Shut down the server using the shutdown sequence of its topology.

        Raises:
            WildFlyToolsError: If the topology cannot be determined.
        """
        grace = self.config.shutdown_timeout if timeout is None else timeout
        topology = self.topology()
        if topology is Topology.STANDALONE:
            shutdown_standalone(self.client, grace)
        elif topology is Topology.DOMAIN:
            shutdown_domain(self.client, grace)
        else:
            raise WildFlyToolsError("Cannot shut down a server whose launch type is unknown")

    def reload_if_required(self) -> bool:
        return reload_if_required(
            self.client,
            self.config.reload_timeout_seconds,
            poll_interval_seconds=self.config.poll_interval_seconds,
        )

    def container_description(self) -> ContainerDescription:
        return get_container_description(self.client)

    def track_process(self, process: subprocess.Popen[Any]) -> PopenProcessHandle:
        """Wrap a launched server process so waits can watch and destroy it."""
        return PopenProcessHandle(process, destroy_timeout_seconds=self.config.process_destroy_timeout_seconds)


__all__ = [
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "DomainShutdownPhase",
    "ServerController",
    "determine_host_address",
    "determine_topology",
    "execute_reload",
    "get_container_description",
    "is_domain_running",
    "is_running",
    "is_standalone_running",
    "is_valid_home_directory",
    "launch_type",
    "read_domain_status",
    "read_server_statuses",
    "reload_if_required",
    "server_state",
    "shutdown_domain",
    "shutdown_standalone",
    "wait_for_domain",
    "wait_for_standalone",
    "wait_until_running",
]
