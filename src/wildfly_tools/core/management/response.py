"""Typed decoding of management response documents.

The wire format is a loosely shaped tree. Responses are decoded once into
one of three shapes so callers never probe the raw tree:

- ``SuccessResponse``: a single successful operation
- ``FailureResponse``: a single failed operation
- ``CompositeResponse``: a multi-step operation whose ``result`` nests one
  response document per ``step-N`` key
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Union

from wildfly_tools.core.exceptions import ResponseFormatError

from .operations import FAILURE_DESCRIPTION, OUTCOME, RESULT, SUCCESS


@dataclass(frozen=True)
class SuccessResponse:
    result: Any
    raw: Mapping[str, Any] = field(repr=False)

    @property
    def successful(self) -> bool:
        return True


@dataclass(frozen=True)
class FailureResponse:
    failure_description: Any
    raw: Mapping[str, Any] = field(repr=False)

    @property
    def successful(self) -> bool:
        return False


@dataclass(frozen=True)
class CompositeResponse:
    successful: bool
    steps: Mapping[str, "DecodedResponse"]
    failure_description: Any = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False)

    def step(self, index: int) -> Optional["DecodedResponse"]:
        return self.steps.get(f"step-{index}")


DecodedResponse = Union[SuccessResponse, FailureResponse, CompositeResponse]


def _is_step_key(key: Any) -> bool:
    return isinstance(key, str) and key.startswith("step-")


def _looks_like_steps(result: Any) -> bool:
    if not isinstance(result, Mapping) or not result:
        return False
    return all(_is_step_key(k) and isinstance(v, Mapping) and OUTCOME in v for k, v in result.items())


def decode_response(raw: Optional[Mapping[str, Any]]) -> Optional[DecodedResponse]:
    """Decode a raw response document.

    Returns None for an undefined document (no response body). Any outcome
    other than ``success`` decodes as a failure, including ``cancelled`` on
    the steps of a rolled back composite.

    Raises:
        ResponseFormatError: If the document is not a mapping or has no outcome.
    """
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise ResponseFormatError(
            f"Response document must be a mapping, got {type(raw).__name__}",
            context={"response": repr(raw)},
        )

    outcome = raw.get(OUTCOME)
    if not isinstance(outcome, str) or not outcome:
        raise ResponseFormatError(
            f"Response document has no valid outcome: {outcome!r}",
            context={"response": dict(raw)},
        )

    result = raw.get(RESULT)
    if _looks_like_steps(result):
        steps = {key: decode_response(value) for key, value in result.items()}
        return CompositeResponse(
            successful=outcome == SUCCESS,
            steps=MappingProxyType(steps),
            failure_description=raw.get(FAILURE_DESCRIPTION),
            raw=raw,
        )
    if outcome == SUCCESS:
        return SuccessResponse(result=result, raw=raw)
    return FailureResponse(failure_description=raw.get(FAILURE_DESCRIPTION), raw=raw)


def iter_failure_descriptions(response: DecodedResponse) -> Iterator[Any]:
    """Yield failure descriptions in document order, parents before steps."""
    if isinstance(response, FailureResponse):
        if response.failure_description is not None:
            yield response.failure_description
        return
    if isinstance(response, CompositeResponse):
        if response.failure_description is not None:
            yield response.failure_description
        for step in response.steps.values():
            if step is not None:
                yield from iter_failure_descriptions(step)


def first_failure_message(response: DecodedResponse) -> Optional[str]:
    """Return the most specific failure message of a decoded response.

    Plain string descriptions win in document order. Structured descriptions
    (such as a composite's summary of failed steps) are only used when no step
    carries a plain message.
    """
    structured: Any = None
    for description in iter_failure_descriptions(response):
        if isinstance(description, str):
            return description
        if structured is None:
            structured = description
    if structured is None:
        return None
    return json.dumps(structured, sort_keys=True, default=str)


__all__ = [
    "CompositeResponse",
    "DecodedResponse",
    "FailureResponse",
    "SuccessResponse",
    "decode_response",
    "first_failure_message",
    "iter_failure_descriptions",
]
