"""Tests for readiness polling with a wall-clock budget."""
from __future__ import annotations

import pytest

from helpers.management import FakeManagementClient, script_domain, success, unreachable
from helpers.processes import FakeProcess
from wildfly_tools.core.exceptions import ProcessExitedError, ServerStartTimeoutError
from wildfly_tools.core.server import Topology, wait_for_domain, wait_for_standalone, wait_until_running


def test_standalone_running_after_third_probe(client: FakeManagementClient) -> None:
    client.respond(
        "read-attribute:server-state",
        unreachable(),
        success("starting"),
        success("running"),
    )

    probes = wait_for_standalone(client, 5.0, poll_interval_seconds=0)

    assert probes == 3
    assert client.keys == ["read-attribute:server-state"] * 3


def test_running_on_first_probe_does_not_touch_process(client: FakeManagementClient) -> None:
    client.respond("read-attribute:server-state", success("running"))
    process = FakeProcess()

    assert wait_until_running(client, Topology.STANDALONE, 5.0, process, poll_interval_seconds=0) == 1
    assert not process.destroyed


def test_exited_process_fails_fast(client: FakeManagementClient) -> None:
    client.respond("read-attribute:server-state", unreachable())
    process = FakeProcess(alive=False, exit_code=1)

    with pytest.raises(ProcessExitedError) as exc_info:
        wait_for_standalone(client, 30.0, process, poll_interval_seconds=0)

    assert exc_info.value.exit_code == 1
    assert "unexpectedly exited with code 1" in str(exc_info.value)
    assert len(client.operations) == 1


def test_timeout_destroys_process(client: FakeManagementClient) -> None:
    client.respond("read-attribute:server-state", success("starting"))
    process = FakeProcess()

    with pytest.raises(ServerStartTimeoutError) as exc_info:
        wait_for_standalone(client, 0.05, process, poll_interval_seconds=0.01)

    assert process.destroy_calls == 1
    assert exc_info.value.timeout_seconds == 0.05
    assert isinstance(exc_info.value, TimeoutError)


def test_timeout_without_process(client: FakeManagementClient) -> None:
    client.respond("read-attribute:server-state", success("starting"))

    with pytest.raises(ServerStartTimeoutError):
        wait_for_standalone(client, 0.05, poll_interval_seconds=0.01)


def test_exhausted_budget_sends_no_probe(client: FakeManagementClient) -> None:
    process = FakeProcess()

    with pytest.raises(ServerStartTimeoutError):
        wait_for_standalone(client, 0, process)

    assert client.operations == []
    assert process.destroyed


def test_slow_probes_consume_the_budget(client: FakeManagementClient, monkeypatch: pytest.MonkeyPatch) -> None:
    from wildfly_tools.core.server import lifecycle

    clock = {"now": 0.0}

    def _slow_state(_operation):
        clock["now"] += 2.0
        return success("starting")

    client.respond("read-attribute:server-state", _slow_state)
    monkeypatch.setattr(lifecycle.time, "monotonic", lambda: clock["now"])
    monkeypatch.setattr(lifecycle.time, "sleep", lambda _seconds: None)

    with pytest.raises(ServerStartTimeoutError):
        wait_for_standalone(client, 5.0, poll_interval_seconds=0.1)

    assert len(client.operations) == 3


def test_domain_waits_for_every_member(client: FakeManagementClient) -> None:
    script_domain(client, {"primary": {"server-one": "STARTED"}})
    client.respond(
        "read-children-names:host",
        unreachable(),
        success(["primary"]),
    )

    assert wait_for_domain(client, 5.0, poll_interval_seconds=0) == 2
