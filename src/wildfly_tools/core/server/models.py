from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from wildfly_tools.core.version import compare_versions

# Process states reported by ``server-state`` / ``host-state``.
PROCESS_STATE_STARTING = "starting"
PROCESS_STATE_STOPPING = "stopping"
PROCESS_STATE_RELOAD_REQUIRED = "reload-required"

RUNNING_MODE_ADMIN_ONLY = "ADMIN_ONLY"


class Topology(str, Enum):
    STANDALONE = "standalone"
    DOMAIN = "domain"
    UNKNOWN = "unknown"

    @classmethod
    def from_launch_type(cls, launch_type: Optional[str]) -> "Topology":
        normalized = str(launch_type or "").strip().upper()
        if normalized == "STANDALONE":
            return cls.STANDALONE
        if normalized == "DOMAIN":
            return cls.DOMAIN
        return cls.UNKNOWN


class ServerStatus(str, Enum):
    DISABLED = "DISABLED"
    STARTING = "STARTING"
    STARTED = "STARTED"
    STOPPING = "STOPPING"
    STOPPED = "STOPPED"
    FAILED = "FAILED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, raw: Any) -> "ServerStatus":
        try:
            return cls(str(raw or "").strip().upper())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True, order=True)
class ServerIdentity:
    """One member process of a managed domain."""

    host: str
    server_name: str

    def __str__(self) -> str:
        return f"{self.host}:{self.server_name}"


def is_running_state(state: Optional[str]) -> bool:
    """True when a reported process state is neither starting nor stopping.

    ``failed`` counts as running here: readiness and health are separate.
    """
    if state is None:
        return False
    return state not in (PROCESS_STATE_STARTING, PROCESS_STATE_STOPPING)


@dataclass(frozen=True)
class DomainStatus:
    """Snapshot of a managed domain taken at one poll instant."""

    running_mode: Optional[str] = None
    host_state: Optional[str] = None
    servers: Mapping[ServerIdentity, ServerStatus] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "servers", MappingProxyType(dict(self.servers)))

    @property
    def admin_only(self) -> bool:
        return self.running_mode == RUNNING_MODE_ADMIN_ONLY

    @property
    def running(self) -> bool:
        if self.admin_only and self.host_state is not None:
            return is_running_state(self.host_state)
        return all(
            status in (ServerStatus.STARTED, ServerStatus.DISABLED)
            for status in self.servers.values()
        )

    @property
    def failed_members(self) -> Tuple[ServerIdentity, ...]:
        """Members that reported FAILED. These keep the domain from running."""
        return tuple(sorted(i for i, s in self.servers.items() if s is ServerStatus.FAILED))

    @property
    def pending_members(self) -> Tuple[ServerIdentity, ...]:
        """Non-disabled members that are neither started nor failed."""
        return tuple(
            sorted(
                i
                for i, s in self.servers.items()
                if s not in (ServerStatus.STARTED, ServerStatus.DISABLED, ServerStatus.FAILED)
            )
        )


@dataclass(frozen=True)
class ModelVersion:
    major: int = 0
    minor: int = 0
    micro: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.micro}"


@dataclass(frozen=True)
class ContainerDescription:
    """Product and launch information of a running container."""

    product_name: str = "WildFly"
    product_version: Optional[str] = None
    release_version: Optional[str] = None
    model_version: ModelVersion = field(default_factory=ModelVersion)
    launch_type: Optional[str] = None

    @property
    def is_domain(self) -> bool:
        return str(self.launch_type or "").upper() == "DOMAIN"

    @property
    def topology(self) -> Topology:
        return Topology.from_launch_type(self.launch_type)

    def supports(self, minimum_release: str) -> bool:
        """True when the core release version is at least ``minimum_release``."""
        if self.release_version is None:
            return False
        return compare_versions(self.release_version, minimum_release) >= 0

    def __str__(self) -> str:
        result = self.product_name
        if self.product_version is not None:
            result += f" {self.product_version}"
            if self.release_version is not None:
                result += f" (WildFly Core {self.release_version})"
        elif self.release_version is not None:
            result += f" {self.release_version}"
        if self.launch_type is not None:
            result += f" - launch-type: {self.launch_type}"
        return result


__all__ = [
    "ContainerDescription",
    "DomainStatus",
    "ModelVersion",
    "ServerIdentity",
    "ServerStatus",
    "Topology",
    "is_running_state",
]
