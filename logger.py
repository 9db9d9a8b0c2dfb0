"""
Logging for the storefront API.

Every module logs through a child of the ``stylique`` logger
(``get_logger("checkout")`` -> ``stylique.checkout``); ``configure_logging``
attaches the single stdout handler once, at application import.
"""
import logging
import sys
from typing import Optional

from config import settings

ROOT_LOGGER = "stylique"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel((level or settings.log_level).upper())
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
    # uvicorn installs its own root handlers
    root.propagate = False
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if name:
        return logging.getLogger(f"{ROOT_LOGGER}.{name}")
    return logging.getLogger(ROOT_LOGGER)
