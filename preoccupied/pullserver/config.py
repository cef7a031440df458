"""
Configuration model and loading for the pullserver application.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import logging
import os
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .pull import PullOutcome, pull_changes


logger = logging.getLogger(__name__)


CONFIG_PATH = os.environ.get('CONFIG_PATH', '/config/pullserver.yaml')

LOG_LEVELS = ('CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG')


_config: Optional['ServerConfig'] = None


class ServerConfig(BaseModel):
    """
    Server configuration settings
    """

    host: str = '127.0.0.1'
    port: int = Field(default=10000, ge=1, le=65535)

    noop_status: Literal[204, 208] = 208
    change_detection: Literal['marker', 'head'] = 'marker'

    pull_on_startup: bool = False
    pull_interval: Optional[float] = Field(default=None, ge=0)

    log_level: str = 'INFO'


    @field_validator('noop_status', mode='before')
    def coerce_noop_status(cls, v: Any) -> Any:
        """
        Accept the status as a numeric string, as it arrives from the
        environment.
        """

        if isinstance(v, str) and v.strip().isdigit():
            return int(v)
        return v


    @field_validator('log_level')
    def check_log_level(cls, v: str) -> str:
        """
        Normalize and validate the logging level name.
        """

        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f'Unknown log level: {v}')
        return level


    async def pull(self) -> PullOutcome:
        """
        Pull changes into the current working directory.
        """

        return await pull_changes(
            noop_status=self.noop_status,
            change_detection=self.change_detection,
        )


def _config_from_env() -> Dict[str, Any]:
    """
    Build configuration dictionary from PULLSERVER_* environment variables.
    """

    pairs = (
        ('PULLSERVER_HOST', 'host'),
        ('PULLSERVER_PORT', 'port'),
        ('PULLSERVER_NOOP_STATUS', 'noop_status'),
        ('PULLSERVER_CHANGE_DETECTION', 'change_detection'),
        ('PULLSERVER_PULL_ON_STARTUP', 'pull_on_startup'),
        ('PULLSERVER_PULL_INTERVAL', 'pull_interval'),
        ('PULLSERVER_LOG_LEVEL', 'log_level'))

    result = {}
    for env_var, config_key in pairs:
        value = os.environ.get(env_var)
        if value is not None:
            result[config_key] = value

    return result


def get_config() -> ServerConfig:
    """
    Get the global config object.
    """

    global _config

    if _config is None:
        config_data = {}

        if os.path.exists(CONFIG_PATH):
            with open(CONFIG_PATH, 'r') as f:
                config_data = yaml.safe_load(f) or {}

        config_data.update(_config_from_env())

        _config = ServerConfig.model_validate(config_data)
        logger.info(f'Loaded configuration, listening on {_config.host}:{_config.port}')

    return _config


# The end.
