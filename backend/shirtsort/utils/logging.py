"""
ShirtSort Structured Logging
Centralized loguru configuration plus a small wrapper for logging with extras.
"""
import sys
from typing import Dict, Any, Optional

from loguru import logger

from shirtsort.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message} | {extra}"


def configure_logging(level: Optional[str] = None, serialize: Optional[bool] = None) -> None:
    """Replace loguru's default handler with the service handler."""
    logger.remove()
    logger.add(
        sys.stdout,
        format=LOG_FORMAT,
        level=level or config.LOG_LEVEL,
        serialize=config.LOG_JSON if serialize is None else serialize
    )


class StructuredLogger:
    """Logs messages with optional structured extras (request id, timings)."""

    def __init__(self, level: Optional[str] = None):
        configure_logging(level)

    def _log(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        target = logger.bind(**extra) if extra else logger
        target.opt(depth=2).log(level, message)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("ERROR", message, extra)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("DEBUG", message, extra)


# Global logger instance
_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create global logger instance."""
    global _logger
    if _logger is None:
        _logger = StructuredLogger()
    return _logger
