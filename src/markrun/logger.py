"""Logging configuration for markrun with custom verbosity levels."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

# Define custom levels between standard logging levels
SCOPES_LEVEL = 25  # Between INFO (20) and WARNING (30) - for verbosity level 1
TAGS_LEVEL = 15  # Between DEBUG (10) and INFO (20) - for verbosity level 2

logging.addLevelName(SCOPES_LEVEL, "SCOPES")
logging.addLevelName(TAGS_LEVEL, "TAGS")

# Verbosity level constants for external use
VERBOSITY_SILENT = 0  # Only errors
VERBOSITY_SCOPES = 1  # Show scope pushes/pops and registrations
VERBOSITY_TAGS = 2  # Show every tag dispatch decision
VERBOSITY_DEBUG = 3  # Full debug output


class MarkrunLogger(logging.Logger):
    """Custom logger with semantic verbosity methods.

    Provides methods that correspond to verbosity levels:
    - scopes(): verbosity level 1 - style scope changes and registrations
    - tags(): verbosity level 2 - how each tag body was dispatched
    - debug(): verbosity level 3 - gradient tables, placeholder requests
    """

    def scopes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log scope changes (verbosity level 1)."""
        if self.isEnabledFor(SCOPES_LEVEL):
            self._log(SCOPES_LEVEL, msg, args, **kwargs)

    def tags(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log tag dispatch (verbosity level 2)."""
        if self.isEnabledFor(TAGS_LEVEL):
            self._log(TAGS_LEVEL, msg, args, **kwargs)


def get_logger() -> MarkrunLogger:
    """Get the markrun logger instance (singleton).

    Returns the same logger instance on every call. Use setup_logger()
    to configure it before first use.

    Returns:
        The markrun logger singleton instance
    """
    logging.setLoggerClass(MarkrunLogger)
    logger = logging.getLogger("markrun")
    assert isinstance(logger, MarkrunLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the markrun logger with verbosity level.

    Can be called multiple times to reconfigure the logger.

    Args:
        verbosity: 0=silent (errors only), 1=scopes, 2=tags, 3=debug
        stream: Optional output stream (defaults to sys.stderr, useful for testing)
    """
    logger = get_logger()

    logger.handlers.clear()

    level_map = {
        0: logging.ERROR,
        1: SCOPES_LEVEL,
        2: TAGS_LEVEL,
        3: logging.DEBUG,
    }
    logger.setLevel(level_map.get(verbosity, logging.ERROR))

    output_stream = stream if stream is not None else sys.stderr

    # Handler with clean formatting (no level prefix)
    handler = logging.StreamHandler(output_stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Reset the logger to clean state.

    Useful for testing to ensure clean state between tests.
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)


def scopes_enabled() -> bool:
    """Check if scope-level logging is enabled (verbosity >= 1)."""
    return get_logger().isEnabledFor(SCOPES_LEVEL)


def debug_enabled() -> bool:
    """Check if debug-level logging is enabled (verbosity >= 3)."""
    return get_logger().isEnabledFor(logging.DEBUG)
