"""
Centralized logging utilities with scoped loggers and decorators.
Provides structured logging with consistent field names across services.
"""

import functools
import logging
import sys
import time
from typing import Any, Callable
from enum import Enum

import structlog

from shared_utils.constants import LogScope


_SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]

# Loggers resolve the configuration on every call (no first-use caching),
# so configure_logging() also applies to loggers created at import time.
structlog.configure(
    processors=_SHARED_PROCESSORS + [structlog.processors.JSONRenderer()],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=False,
)


class LogLevel(str, Enum):
    """Log level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def configure_logging(environment: str = "production", level: str = LogLevel.INFO.value) -> None:
    """Configure the stdlib root logger and the structlog renderer.

    Production emits one JSON object per line; development emits
    console-friendly text.
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if environment == "production"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=_SHARED_PROCESSORS + [renderer],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )


def get_scoped_logger(scope: str) -> structlog.BoundLogger:
    """Get a scoped logger for a specific service/component.

    Args:
        scope: LogScope value (config_loader, api, ingestion, query_service, ...)

    Returns:
        Lazy structured logger named after and bound to scope.
    """
    return structlog.get_logger(scope, scope=scope)


def log_execution(scope: str = LogScope.API, level: str = LogLevel.INFO.value):
    """Decorator to automatically log function execution time and results.

    Args:
        scope: Log scope identifier
        level: Log level used for the start/success events

    Example:
        @log_execution(scope=LogScope.ADAPTER)
        def load(path):
            return json.load(open(path))
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            logger = get_scoped_logger(scope)
            log = getattr(logger, level.lower(), logger.info)
            start_time = time.time()

            log(
                f"{func.__name__}_start",
                func_name=func.__name__,
                args_count=len(args),
                kwargs_keys=list(kwargs.keys())
            )

            try:
                result = func(*args, **kwargs)
                elapsed = time.time() - start_time

                log(
                    f"{func.__name__}_success",
                    func_name=func.__name__,
                    elapsed_seconds=elapsed,
                    result_type=type(result).__name__
                )
                return result

            except Exception as e:
                elapsed = time.time() - start_time
                logger.error(
                    f"{func.__name__}_failed",
                    func_name=func.__name__,
                    elapsed_seconds=elapsed,
                    error_type=type(e).__name__,
                    error_message=str(e)
                )
                raise

        return wrapper
    return decorator


class ContextualLogger:
    """Helper class for managing contextual logging within a scope."""

    def __init__(self, scope: str):
        self.scope = scope
        self.logger = get_scoped_logger(scope)

    def info(self, event_name: str, **kwargs):
        """Log info message with scope."""
        self.logger.info(event_name, **kwargs)

    def debug(self, event_name: str, **kwargs):
        """Log debug message with scope."""
        self.logger.debug(event_name, **kwargs)

    def warning(self, event_name: str, **kwargs):
        """Log warning message with scope."""
        self.logger.warning(event_name, **kwargs)

    def error(self, event_name: str, **kwargs):
        """Log error message with scope."""
        self.logger.error(event_name, **kwargs)

    def critical(self, event_name: str, **kwargs):
        """Log critical message with scope."""
        self.logger.critical(event_name, **kwargs)
