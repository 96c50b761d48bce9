"""
Centralized logging configuration.
One stdout handler on the root logger; modules log through get_logger(__name__).
"""

import logging
import sys
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Client libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "asyncpg")


class ColoredFormatter(logging.Formatter):
    """Colors the level name; the record itself is left untouched for other handlers."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname)
        if not color:
            return super().format(record)
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def setup_logging(
    level: Union[str, int] = "INFO",
    format_string: Optional[str] = None,
    use_colors: Optional[bool] = None
) -> None:
    """
    Configure application logging.

    Args:
        level: Logging level name or number
        format_string: Custom format string (optional)
        use_colors: Force colored level names on or off; by default only on a TTY
    """
    if use_colors is None:
        use_colors = sys.stdout.isatty()

    formatter_cls = ColoredFormatter if use_colors else logging.Formatter
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter_cls(format_string or DEFAULT_FORMAT, datefmt="%H:%M:%S"))

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Usage:
        from core.logging import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)


def log_error(logger: logging.Logger, error: Exception, context: str = None):
    """Log an exception with traceback, prefixed by context (e.g. the request path)."""
    msg = f"{type(error).__name__}: {error}"
    if context:
        msg = f"[{context}] {msg}"
    logger.error(msg, exc_info=error)
