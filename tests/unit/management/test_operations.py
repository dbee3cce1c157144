"""Tests for operation builders and raw response helpers."""
from __future__ import annotations

import pytest

from wildfly_tools.core.management.operations import (
    EMPTY_ADDRESS,
    CompositeOperationBuilder,
    Operation,
    create_address,
    create_operation,
    create_read_attribute_operation,
    create_read_resource_operation,
    get_failure_description,
    is_successful_outcome,
    read_result,
    step_key,
)


def test_read_attribute_renders_management_json() -> None:
    op = create_read_attribute_operation(create_address(("host", "primary")), "host-state")

    assert op.to_dmr() == {
        "operation": "read-attribute",
        "address": [{"host": "primary"}],
        "name": "host-state",
    }


def test_read_resource_with_runtime() -> None:
    assert create_read_resource_operation(include_runtime=True).to_dmr() == {
        "operation": "read-resource",
        "address": [],
        "include-runtime": True,
    }
    assert "include-runtime" not in create_read_resource_operation().to_dmr()


def test_operation_parameters_are_read_only() -> None:
    op = create_operation("shutdown", timeout=5)

    with pytest.raises(TypeError):
        op.parameters["timeout"] = 10  # type: ignore[index]


def test_with_parameters_returns_new_operation() -> None:
    op = create_operation("stop-servers", blocking=True)
    updated = op.with_parameters(timeout=30)

    assert dict(updated.parameters) == {"blocking": True, "timeout": 30}
    assert dict(op.parameters) == {"blocking": True}


def test_operation_name_is_required() -> None:
    with pytest.raises(ValueError):
        Operation("")


def test_composite_nests_steps_in_order() -> None:
    address = create_address(("host", "primary"))
    op = (
        CompositeOperationBuilder.create()
        .add_step(create_read_attribute_operation(address, "running-mode"))
        .add_step(create_read_attribute_operation(address, "host-state"))
        .build()
    )

    rendered = op.to_dmr()
    assert rendered["operation"] == "composite"
    assert [step["name"] for step in rendered["steps"]] == ["running-mode", "host-state"]
    assert rendered["steps"][0]["address"] == [{"host": "primary"}]


def test_composite_requires_a_step() -> None:
    with pytest.raises(ValueError):
        CompositeOperationBuilder.create().build()


def test_response_helpers() -> None:
    ok = {"outcome": "success", "result": "running"}
    failed = {"outcome": "failed", "failure-description": "WFLYCTL0216: not found"}

    assert is_successful_outcome(ok)
    assert not is_successful_outcome(failed)
    assert not is_successful_outcome(None)
    assert read_result(ok) == "running"
    assert read_result({"outcome": "success"}) is None
    assert get_failure_description(failed) == "WFLYCTL0216: not found"
    assert step_key(2) == "step-2"
    assert EMPTY_ADDRESS == ()
