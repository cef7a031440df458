"""
Unit tests for the command line entry point.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import logging
from unittest.mock import patch

from preoccupied.pullserver import app
from preoccupied.pullserver.__main__ import main
from preoccupied.pullserver.config import ServerConfig


def test_main_runs_uvicorn():
    config = ServerConfig(host='0.0.0.0', port=8080, log_level='warning')
    root = logging.getLogger()
    level = root.level

    try:
        with patch('preoccupied.pullserver.__main__.get_config', return_value=config), \
             patch('preoccupied.pullserver.__main__.uvicorn.run') as mock_run:
            main()

        assert root.level == logging.WARNING
    finally:
        root.setLevel(level)

    mock_run.assert_called_once_with(app, host='0.0.0.0', port=8080, log_level='warning')


def test_main_default_address():
    with patch('preoccupied.pullserver.__main__.get_config', return_value=ServerConfig()), \
         patch('preoccupied.pullserver.__main__.uvicorn.run') as mock_run:
        main()

    assert mock_run.call_args[1]['host'] == '127.0.0.1'
    assert mock_run.call_args[1]['port'] == 10000


# The end.
