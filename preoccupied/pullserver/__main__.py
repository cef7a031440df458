"""
Command line entry point for the pullserver service.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import logging

import uvicorn

from .app import app
from .config import get_config


logger = logging.getLogger(__name__)


def main():
    """
    Run the pullserver app on the configured address
    """

    config = get_config()
    logging.getLogger().setLevel(config.log_level)

    logger.info(f'Starting pullserver on {config.host}:{config.port}')
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == '__main__':
    main()


# The end.
