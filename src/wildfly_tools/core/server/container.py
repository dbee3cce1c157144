from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from wildfly_tools.core.exceptions import OperationExecutionError
from wildfly_tools.core.management.client import ManagementClient
from wildfly_tools.core.management.operations import (
    EMPTY_ADDRESS,
    create_read_resource_operation,
    is_successful_outcome,
    read_result,
)
from wildfly_tools.core.utils.assertions import require_not_none

from .models import ContainerDescription, ModelVersion

logger = logging.getLogger(__name__)


def _get_value(model: Mapping[str, Any], attribute: str, default: Optional[str] = None) -> Optional[str]:
    value = model.get(attribute)
    if value is None:
        return default
    return str(value)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def lookup_container_description(client: ManagementClient) -> ContainerDescription:
    """Query the root resource of a running container and describe it.

    Raises:
        OSError: If the container cannot be reached.
        OperationExecutionError: If the read operation fails.
    """
    require_not_none("client", client)
    op = create_read_resource_operation(EMPTY_ADDRESS, include_runtime=True)
    response = client.execute(op)
    if not is_successful_outcome(response):
        raise OperationExecutionError(op, response, "Failed to read the container description")

    model = read_result(response)
    if not isinstance(model, Mapping):
        model = {}
    description = ContainerDescription(
        product_name=_get_value(model, "product-name", "WildFly") or "WildFly",
        product_version=_get_value(model, "product-version"),
        release_version=_get_value(model, "release-version"),
        model_version=ModelVersion(
            major=_as_int(model.get("management-major-version")),
            minor=_as_int(model.get("management-minor-version")),
            micro=_as_int(model.get("management-micro-version")),
        ),
        launch_type=_get_value(model, "launch-type"),
    )
    logger.debug("Container description: %s", description)
    return description


__all__ = ["lookup_container_description"]
