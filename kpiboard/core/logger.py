"""
Logging setup.

Every module gets its logger through ``setup_logger(__name__)``; all of them
share one stream handler installed on the package root logger.
"""

import logging
import sys

from kpiboard.core.config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ROOT_LOGGER_NAME = "kpiboard"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(get_settings().LOG_LEVEL.upper())
    return root


def setup_logger(name: str) -> logging.Logger:
    """Return a logger under the package root, configuring the root once."""
    root = _configure_root()
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return root.getChild(name)


logger = setup_logger(ROOT_LOGGER_NAME)
