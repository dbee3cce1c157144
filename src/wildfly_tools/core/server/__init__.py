"""Server lifecycle helpers.

Topology detection, readiness polling, orderly shutdown and reloads for
standalone servers and managed domains.
"""

from .container import lookup_container_description
from .lifecycle import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    DomainShutdownPhase,
    ServerController,
    determine_host_address,
    determine_topology,
    execute_reload,
    get_container_description,
    is_domain_running,
    is_running,
    is_standalone_running,
    is_valid_home_directory,
    launch_type,
    read_domain_status,
    read_server_statuses,
    reload_if_required,
    server_state,
    shutdown_domain,
    shutdown_standalone,
    wait_for_domain,
    wait_for_standalone,
    wait_until_running,
)
from .models import (
    ContainerDescription,
    DomainStatus,
    ModelVersion,
    ServerIdentity,
    ServerStatus,
    Topology,
    is_running_state,
)

__all__ = [
    "ContainerDescription",
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "DomainShutdownPhase",
    "DomainStatus",
    "ModelVersion",
    "ServerController",
    "ServerIdentity",
    "ServerStatus",
    "Topology",
    "determine_host_address",
    "determine_topology",
    "execute_reload",
    "get_container_description",
    "is_domain_running",
    "is_running",
    "is_running_state",
    "is_standalone_running",
    "is_valid_home_directory",
    "launch_type",
    "lookup_container_description",
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
