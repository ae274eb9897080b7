"""
Logging setup for the command-line interface.

Library code only ever calls logging.getLogger(__name__); handlers and
levels are the application's business. The CLI is such an application.
"""

import logging
import sys


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "WARNING") -> None:
    """Send log records to stderr at the given level name."""
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stderr,
    )

    logging.getLogger("simplehttp").setLevel(numeric_level)
