"""
HTTP service that pulls upstream changes into a working copy on request.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

from preoccupied.pullserver.app import app
from preoccupied.pullserver.config import get_config


__all__ = ['app', 'get_config']


# The end.
