"""
Logging helpers.

Every module gets its logger through `get_logger(__name__)`; the root
handler is configured once at startup by `setup_logging(config)`.
"""

import logging
import sys

from app.config import Config

_configured = False


def setup_logging(config: Config) -> None:
    """Configure root logging from LOG_LEVEL / LOG_FORMAT."""
    global _configured
    level = getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    if not _configured:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
        root.addHandler(handler)
        _configured = True
    # pymongo is chatty at DEBUG
    logging.getLogger("pymongo").setLevel(max(level, logging.INFO))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
