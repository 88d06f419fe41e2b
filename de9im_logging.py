"""
Logging Utilities

Console logging setup for the relationship engine. Library modules log
through ``logging.getLogger(__name__)`` and never configure handlers;
applications call ``setup_logger`` once, usually with the level from
``De9imGlobalConfig.log_level``.
"""

import logging
import sys
from typing import Optional


LOG_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}

# Loggers of the library packages share this parent name
ROOT_LOGGERS = ('geom_base', 'robust_kernel', 'relate_engine', 'de9im')


class LogFormatter(logging.Formatter):
    """Formatter with optional ANSI colouring of the level name."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m',
    }

    def __init__(self, use_color: bool = True):
        super().__init__(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.use_color = use_color

    def format(self, record):
        if self.use_color and sys.stderr.isatty() and record.levelname in self.COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


def resolve_level(level: str) -> int:
    """
    Map a level name to its ``logging`` constant.

    Raises:
        ValueError: for an unknown level name
    """
    try:
        return LOG_LEVELS[level.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level {level!r}; expected one of {', '.join(LOG_LEVELS)}")


def setup_logger(name: str = 'de9im', level: str = 'WARNING',
                 stream=None, use_color: bool = True) -> logging.Logger:
    """
    Attach a single console handler to a logger.

    Calling again replaces the previous handler instead of stacking a
    second one.

    Args:
        name: Logger name
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Output stream, default stderr
        use_color: Colour level names on a terminal

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(LogFormatter(use_color=use_color))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def configure_library_logging(level: str = 'WARNING', stream=None) -> None:
    """Set up every package logger of the engine at the same level."""
    for name in ROOT_LOGGERS:
        setup_logger(name, level, stream=stream)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the named logger, default the engine's top-level one."""
    return logging.getLogger(name or 'de9im')
