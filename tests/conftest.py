"""
Shared pytest fixtures for pullserver tests.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import tempfile
from unittest.mock import AsyncMock, MagicMock

import pytest

from preoccupied.pullserver import config as config_module
from preoccupied.pullserver.config import ServerConfig


@pytest.fixture
def temp_dir():
    """
    Create a temporary directory for tests.
    """

    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def server_config():
    """
    Create a ServerConfig with default settings.
    """

    return ServerConfig()


@pytest.fixture
def fresh_config(monkeypatch):
    """
    Discard any cached configuration before and after the test.
    """

    monkeypatch.setattr(config_module, '_config', None)
    yield
    config_module._config = None


@pytest.fixture
def mock_env_vars(monkeypatch):
    """
    Clear and optionally set environment variables for testing.
    """

    env_vars_to_clear = [
        'PULLSERVER_HOST',
        'PULLSERVER_PORT',
        'PULLSERVER_NOOP_STATUS',
        'PULLSERVER_CHANGE_DETECTION',
        'PULLSERVER_PULL_ON_STARTUP',
        'PULLSERVER_PULL_INTERVAL',
        'PULLSERVER_LOG_LEVEL',
    ]

    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)

    return monkeypatch


@pytest.fixture
def mock_process_factory():
    """
    Create a factory for mock asyncio subprocesses that have already
    finished with the given output and exit status.
    """

    def make_process(stdout=b'', stderr=b'', returncode=0):
        process = MagicMock()
        process.returncode = returncode
        process.communicate = AsyncMock(return_value=(stdout, stderr))
        return process

    return make_process


# The end.
