"""Utility helpers shared across :mod:`contsuite`."""

from .log_config import logger, setup_logging

__all__ = ["logger", "setup_logging"]
