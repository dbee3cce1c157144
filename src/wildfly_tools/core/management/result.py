from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping, Optional

from wildfly_tools.core.exceptions import DeploymentError

from .response import decode_response, first_failure_message

DEFAULT_FAILURE_MESSAGE = "Operation failed"


@dataclass(frozen=True)
class OperationResult:
    """The success or failure verdict of one executed management operation.

    A failed result always carries a message; a successful one never does.
    Build instances with :meth:`from_response` or :meth:`from_message`.
    """

    successful: bool
    failure_message: Optional[str] = None
    raw_document: Optional[Mapping[str, Any]] = field(default=None, repr=False)

    SUCCESSFUL: ClassVar["OperationResult"]

    def __post_init__(self) -> None:
        if self.successful and self.failure_message is not None:
            raise ValueError("A successful result cannot carry a failure message")
        if not self.successful and not self.failure_message:
            raise ValueError("A failed result requires a failure message")

    @classmethod
    def from_response(cls, document: Optional[Mapping[str, Any]]) -> "OperationResult":
        decoded = decode_response(document)
        if decoded is None:
            return cls.SUCCESSFUL
        if decoded.successful:
            return cls(successful=True, raw_document=document)
        message = first_failure_message(decoded) or DEFAULT_FAILURE_MESSAGE
        return cls(successful=False, failure_message=message, raw_document=document)

    @classmethod
    def from_message(cls, message: str, *args: Any) -> "OperationResult":
        if args:
            message = message % args
        return cls(successful=False, failure_message=message)

    def assert_success(self) -> None:
        """Raise :class:`DeploymentError` if this result is a failure."""
        if not self.successful:
            raise DeploymentError(
                self.failure_message or DEFAULT_FAILURE_MESSAGE,
                context={"response": dict(self.raw_document)} if self.raw_document is not None else None,
            )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"successful": self.successful}
        if self.failure_message is not None:
            payload["failure_message"] = self.failure_message
        if self.raw_document is not None:
            payload["response"] = dict(self.raw_document)
        return payload

    def __bool__(self) -> bool:
        return self.successful


OperationResult.SUCCESSFUL = OperationResult(successful=True)


__all__ = ["DEFAULT_FAILURE_MESSAGE", "OperationResult"]
