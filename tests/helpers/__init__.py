"""Test helper modules for the wildfly_tools test suite.

- management: scripted management client and response document builders
- processes: process handle double
- io_utils: YAML and text file writers
"""
from __future__ import annotations

from helpers.io_utils import write_text, write_yaml
from helpers.management import (
    FakeManagementClient,
    composite,
    failure,
    operation_key,
    script_domain,
    success,
    unreachable,
)
from helpers.processes import FakeProcess

__all__ = [
    "FakeManagementClient",
    "FakeProcess",
    "composite",
    "failure",
    "operation_key",
    "script_domain",
    "success",
    "unreachable",
    "write_text",
    "write_yaml",
]
