"""Management model primitives.

This package provides:
- Operation builders rendering the management JSON shape
- Typed decoding of response documents
- ``OperationResult``: a success/failure verdict with a failure message
- Protocols for the management client and the server process handle
"""

from .client import ManagementClient, PopenProcessHandle, ProcessHandle
from .operations import (
    EMPTY_ADDRESS,
    Address,
    CompositeOperationBuilder,
    Operation,
    create_address,
    create_operation,
    create_read_attribute_operation,
    create_read_resource_operation,
    get_failure_description,
    is_successful_outcome,
    read_result,
)
from .response import (
    CompositeResponse,
    DecodedResponse,
    FailureResponse,
    SuccessResponse,
    decode_response,
)
from .result import OperationResult

__all__ = [
    "Address",
    "CompositeOperationBuilder",
    "CompositeResponse",
    "DecodedResponse",
    "EMPTY_ADDRESS",
    "FailureResponse",
    "ManagementClient",
    "Operation",
    "OperationResult",
    "PopenProcessHandle",
    "ProcessHandle",
    "SuccessResponse",
    "create_address",
    "create_operation",
    "create_read_attribute_operation",
    "create_read_resource_operation",
    "decode_response",
    "get_failure_description",
    "is_successful_outcome",
    "read_result",
]
