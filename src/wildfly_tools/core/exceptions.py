from __future__ import annotations

from typing import Any, Dict, Mapping


class WildFlyToolsError(Exception):
    """Base exception for WildFly tools."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class TransportError(WildFlyToolsError, OSError):
    """Raised by management clients when the remote endpoint cannot be reached."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        WildFlyToolsError.__init__(self, message, context=context)
        OSError.__init__(self, message)


class ResponseFormatError(WildFlyToolsError, ValueError):
    """Raised when a management response document cannot be decoded."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        WildFlyToolsError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class OperationExecutionError(WildFlyToolsError):
    """Raised when the server accepted an operation but reported a failure."""

    def __init__(
        self,
        operation: Any,
        response: Mapping[str, Any] | None,
        message: str | None = None,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.operation = operation
        self.response = response
        ctx = dict(context or {})
        ctx["operation"] = _render(operation)
        if response is not None:
            ctx["response"] = dict(response)
        if message is None:
            message = f"Failed to execute {ctx['operation']}"
        description = _failure_description(response)
        if description is not None:
            message = f"{message}: {description}"
        super().__init__(message, context=ctx)


class DeploymentError(WildFlyToolsError):
    """Raised when a failed operation result is asserted to be successful."""


class ServerStartTimeoutError(WildFlyToolsError, TimeoutError):
    """Raised when a server does not reach a running state within its budget."""

    def __init__(self, message: str = "", *, timeout_seconds: float | None = None) -> None:
        ctx: Dict[str, Any] = {}
        if timeout_seconds is not None:
            ctx["timeout_seconds"] = timeout_seconds
        WildFlyToolsError.__init__(self, message, context=ctx)
        TimeoutError.__init__(self, message)
        self.timeout_seconds = timeout_seconds


class ProcessExitedError(WildFlyToolsError, RuntimeError):
    """Raised when the tracked server process exits before it was running."""

    def __init__(self, exit_code: int | None) -> None:
        message = f"The process has unexpectedly exited with code {exit_code}"
        WildFlyToolsError.__init__(self, message, context={"exit_code": exit_code})
        RuntimeError.__init__(self, message)
        self.exit_code = exit_code


class ReloadError(WildFlyToolsError, RuntimeError):
    """Raised when a server reload could not be executed or awaited."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        WildFlyToolsError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class ConfigError(WildFlyToolsError, ValueError):
    """Raised when lifecycle configuration is invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        WildFlyToolsError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


def _render(operation: Any) -> Any:
    to_dmr = getattr(operation, "to_dmr", None)
    if callable(to_dmr):
        return to_dmr()
    return operation


def _failure_description(response: Mapping[str, Any] | None) -> Any:
    if not isinstance(response, Mapping):
        return None
    return response.get("failure-description")


__all__ = [
    "WildFlyToolsError",
    "TransportError",
    "ResponseFormatError",
    "OperationExecutionError",
    "DeploymentError",
    "ServerStartTimeoutError",
    "ProcessExitedError",
    "ReloadError",
    "ConfigError",
]
