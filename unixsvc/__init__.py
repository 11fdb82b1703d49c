"""
unixsvc - run any script as a managed background service on Unix hosts.
"""

from loguru import logger

__version__ = "0.1.0"
__logo__ = "⚙"

logger.disable("unixsvc")
