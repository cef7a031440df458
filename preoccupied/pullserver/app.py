"""
FastAPI application for the pullserver service.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response

from .config import ServerConfig, get_config
from .pull import FAILED


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def pull_loop(config: ServerConfig):
    """
    Pull changes every pull_interval seconds until cancelled
    """

    while True:
        await asyncio.sleep(config.pull_interval)
        try:
            outcome = await config.pull()
        except Exception as e:
            logger.error(f'Scheduled pull failed: {e}', exc_info=True)
            continue

        if outcome.kind == FAILED:
            logger.error(f'Scheduled pull failed: {outcome.body}')
        else:
            logger.info(f'Scheduled pull: {outcome.body or outcome.kind}')


async def app_startup():
    """
    Startup event handler for the app. Returns the background pull task,
    if one was started.
    """

    # fetch configuration for the first time
    try:
        config = get_config()
    except Exception as e:
        logger.error(f'Failed to load configuration: {e}', exc_info=True)
        raise

    if config.pull_on_startup:
        logger.info('Pulling changes on startup...')
        try:
            outcome = await config.pull()
            logger.info(f'Startup pull finished: {outcome.kind}')
        except Exception as e:
            logger.error(f'Failed to pull changes on startup: {e}', exc_info=True)

    if not config.pull_interval:
        return None

    logger.info(f'Pulling changes every {config.pull_interval} seconds')
    return asyncio.create_task(pull_loop(config))


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """
    Lifespan event handler for the app
    """

    logger.info('Starting up...')

    task = await app_startup()

    try:
        yield
    finally:

        logger.info('Shutting down...')

        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass


app = FastAPI(lifespan=app_lifespan)


@app.get('/')
async def pull():
    """
    Pull changes into the working copy and report whether any were applied
    """

    outcome = await get_config().pull()

    if outcome.status_code == 204:
        return Response(status_code=204)

    return PlainTextResponse(outcome.body, status_code=outcome.status_code)


# The end.
