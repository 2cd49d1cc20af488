"""Logging setup for scribo.

Modules log through ``logging.getLogger(__name__)``; everything lives under
the ``scribo`` logger. Nothing is printed until configure_logging() attaches
a handler, so library users keep control of their own logging.

SCRIBO_LOG_LEVEL selects the level (DEBUG, INFO, WARNING, ERROR):
    - DEBUG: block counts, links that found no document, skipped project files
    - WARNING: link position drift, unreadable stylesheet overrides
"""

import logging
import os
import sys

PACKAGE_LOGGER = "scribo"
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _env_level() -> int:
    name = os.environ.get("SCRIBO_LOG_LEVEL", "INFO").upper()
    return getattr(logging, name, logging.INFO)


def configure_logging() -> None:
    """Attach a stderr handler to the scribo logger (once; later calls do nothing)."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.handlers:
        return

    level = _env_level()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)

    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    # Records stop here; the CLI owns stderr
    package_logger.propagate = False


def set_quiet_mode(quiet: bool) -> None:
    """Raise the threshold to ERROR, or go back to SCRIBO_LOG_LEVEL."""
    level = logging.ERROR if quiet else _env_level()
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    for handler in package_logger.handlers:
        handler.setLevel(level)
