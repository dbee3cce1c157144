import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'wildfly_tools' and tests/ as 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from wildfly_tools.core.utils.stdlib_logging import reset_stdlib_logging_for_tests
from wildfly_tools.data import read_yaml


@pytest.fixture(autouse=True)
def _isolate_wildfly_tools_env(monkeypatch: pytest.MonkeyPatch):
    """Drop WILDFLY_TOOLS_* overrides leaking in from the developer shell."""
    for key in list(os.environ):
        if key.startswith("WILDFLY_TOOLS_"):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture(autouse=True)
def _reset_caches_and_logging():
    yield
    read_yaml.cache_clear()
    reset_stdlib_logging_for_tests()


@pytest.fixture
def client():
    from helpers.management import FakeManagementClient

    return FakeManagementClient()
