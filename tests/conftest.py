"""
Pytest configuration and shared fixtures for allowlist engine tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Isolates tests from ALLOWLIST_* environment variables
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

CHECKSUMMED_ADDRESSES = _common.CHECKSUMMED_ADDRESSES
make_addresses = _common.make_addresses


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

_ENV_VARS = [
    "ALLOWLIST_HASH_FUNCTION",
    "ALLOWLIST_INVALID_POLICY",
    "ALLOWLIST_PATH",
    "ALLOWLIST_TREE_PATH",
    "ALLOWLIST_LOG_LEVEL",
    "ALLOWLIST_LOG_FILE",
    "ALLOWLIST_OUTPUT_FORMAT",
]


@pytest.fixture(autouse=True)
def clean_allowlist_env(monkeypatch):
    """Keep a developer's .env or shell settings out of the tests."""
    from core.config.runtime import set_default_config

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


@pytest.fixture
def checksummed_addresses():
    """EIP-55 reference addresses."""
    return list(CHECKSUMMED_ADDRESSES)


@pytest.fixture
def addresses():
    """Ten deterministic lowercase addresses."""
    return make_addresses(10)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
