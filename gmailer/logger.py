"""Logging helper for gmailer.

The package never installs handlers; configure logging (level, handlers,
format) in the application's entry point, e.g. with ``logging.basicConfig()``.

Example:
    from gmailer.logger import get_logger

    logger = get_logger("gmailer.app")
    logger.info("Message queued")
"""

import logging


def get_logger(name: str = "Gmailer") -> logging.Logger:
    """Return the standard library logger bound to ``name``."""
    return logging.getLogger(name)
