"""Management operation builders and raw response helpers.

Operations are rendered to the management model's JSON (DMR) shape::

    {"operation": "read-attribute", "address": [{"host": "primary"}], "name": "host-state"}

and responses are plain mappings with an ``outcome`` and either a ``result``
or a ``failure-description``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from wildfly_tools.core.utils.assertions import require_not_empty

Address = Tuple[Tuple[str, str], ...]

EMPTY_ADDRESS: Address = ()

OUTCOME = "outcome"
SUCCESS = "success"
FAILED = "failed"
RESULT = "result"
FAILURE_DESCRIPTION = "failure-description"
COMPOSITE = "composite"
STEPS = "steps"


def create_address(*pairs: Tuple[str, str]) -> Address:
    """Build an address from ``(type, name)`` pairs.

    Example:
        >>> create_address(("host", "primary"), ("server-config", "server-one"))
        (('host', 'primary'), ('server-config', 'server-one'))
    """
    return tuple((str(key), str(value)) for key, value in pairs)


@dataclass(frozen=True)
class Operation:
    """A single management operation against one address."""

    name: str
    address: Address = EMPTY_ADDRESS
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        require_not_empty("name", self.name)
        object.__setattr__(self, "address", create_address(*self.address))
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    def with_parameters(self, **parameters: Any) -> "Operation":
        merged = dict(self.parameters)
        merged.update(parameters)
        return Operation(self.name, self.address, merged)

    def to_dmr(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "operation": self.name,
            "address": [{key: value} for key, value in self.address],
        }
        for key, value in self.parameters.items():
            payload[key] = _to_dmr_value(value)
        return payload


def _to_dmr_value(value: Any) -> Any:
    if isinstance(value, Operation):
        return value.to_dmr()
    if isinstance(value, Mapping):
        return {k: _to_dmr_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_dmr_value(v) for v in value]
    return value


def create_operation(name: str, address: Address = EMPTY_ADDRESS, **parameters: Any) -> Operation:
    return Operation(name, address, parameters)


def create_read_attribute_operation(address: Address, attribute: str) -> Operation:
    return Operation("read-attribute", address, {"name": attribute})


def create_read_resource_operation(address: Address = EMPTY_ADDRESS, *, include_runtime: bool = False) -> Operation:
    parameters: Dict[str, Any] = {}
    if include_runtime:
        parameters["include-runtime"] = True
    return Operation("read-resource", address, parameters)


class CompositeOperationBuilder:
    """Bundle several operations into a single ``composite`` request.

    Each step's response is nested in the composite result under ``step-N``
    (1-based, in insertion order).
    """

    def __init__(self) -> None:
        self._steps: List[Operation] = []

    @classmethod
    def create(cls) -> "CompositeOperationBuilder":
        return cls()

    def add_step(self, operation: Operation) -> "CompositeOperationBuilder":
        self._steps.append(operation)
        return self

    def build(self) -> Operation:
        if not self._steps:
            raise ValueError("A composite operation requires at least one step")
        return Operation(COMPOSITE, EMPTY_ADDRESS, {STEPS: list(self._steps)})


def step_key(index: int) -> str:
    """Return the result key of the 1-based composite step ``index``."""
    return f"step-{index}"


def is_successful_outcome(response: Optional[Mapping[str, Any]]) -> bool:
    return isinstance(response, Mapping) and response.get(OUTCOME) == SUCCESS


def read_result(response: Mapping[str, Any]) -> Any:
    """Return the ``result`` value of a response, or None when undefined."""
    return response.get(RESULT)


def get_failure_description(response: Mapping[str, Any]) -> Any:
    return response.get(FAILURE_DESCRIPTION)


__all__ = [
    "Address",
    "CompositeOperationBuilder",
    "EMPTY_ADDRESS",
    "Operation",
    "create_address",
    "create_operation",
    "create_read_attribute_operation",
    "create_read_resource_operation",
    "get_failure_description",
    "is_successful_outcome",
    "read_result",
    "step_key",
]
