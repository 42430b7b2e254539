"""Logging configuration."""

import logging
import sys

from keel_config.settings import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> None:
    """Configure logging for keel packages.

    Sets up console output with timestamps and module names. The level
    comes from the argument, or from settings (LOG_LEVEL) when omitted.
    """
    log_level_str = (level or get_settings().log_level).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    logging.getLogger("keel_auth").setLevel(log_level)
    logging.getLogger("keel_config").setLevel(log_level)
