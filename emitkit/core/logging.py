# Logging configuration for the emitkit package logger.

import logging
import sys
from typing import Optional, TextIO

from emitkit.settings import Settings

PACKAGE_LOGGER = "emitkit"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Default level if LOG_LEVEL env var is not set
DEFAULT_LOG_LEVEL = "INFO"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EmitkitHandler(logging.StreamHandler):
    """Stream handler installed by ``setup_logging``; tagged so a later call can replace it."""


def setup_logging(
    level: Optional[str] = None, stream: Optional[TextIO] = None, propagate: Optional[bool] = None
) -> logging.Logger:
    """Send the emitter's log records to a stream.

    Only the ``emitkit`` logger is configured; the root logger and its handlers are left
    untouched. Calling this again replaces the handler installed by the previous call
    instead of adding a second one, and keeps handlers attached by anyone else.

    Args:
        level: Level name for the ``emitkit`` logger. Defaults to the LOG_LEVEL setting.
            An unknown name falls back to INFO with a notice on stderr.
        stream: Where records are written. Defaults to stderr.
        propagate: When given, whether records also reach ancestor (root) handlers.

    Returns:
        The configured ``emitkit`` logger.
    """
    level_name = (level or Settings().get_log_level(default=DEFAULT_LOG_LEVEL)).upper()
    if level_name not in VALID_LOG_LEVELS:
        print(
            f"WARNING: Invalid LOG_LEVEL '{level_name}'. "
            f"Defaulting to {DEFAULT_LOG_LEVEL}. "
            f"Valid levels are: {', '.join(VALID_LOG_LEVELS)}",
            file=sys.stderr,
        )
        level_name = DEFAULT_LOG_LEVEL

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(logging.getLevelName(level_name))
    if propagate is not None:
        package_logger.propagate = propagate

    for handler in list(package_logger.handlers):
        if isinstance(handler, EmitkitHandler):
            package_logger.removeHandler(handler)
            handler.close()

    handler = EmitkitHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)

    package_logger.debug(f"emitkit logging configured with level {level_name}.")
    return package_logger
