"""
Pytest configuration file for the functional toolkit tests.

This file ensures that the parent directory is in the Python path
so that test files can import the toolkit modules.
"""

import sys
from pathlib import Path

# Add the parent directory to the Python path
parent_dir = Path(__file__).parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))

import pytest

from cancel import CancelToken
from utils import reset_settings

# Upper bound for any blocking call in the tests
WAIT_TIMEOUT = 5.0


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Make every test read settings from a clean environment"""
    monkeypatch.delenv("FUNCTIONAL_DEFAULT_SIZE_HINT", raising=False)
    monkeypatch.delenv("FUNCTIONAL_LOG_LEVEL", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def canceled():
    token = CancelToken()
    token.cancel()
    return token


@pytest.fixture
def values():
    return [4, 9, 13]
