"""Structured logging configuration for GitHabit."""

import inspect
import logging
import os
import sys
import time
from collections.abc import Callable
from functools import lru_cache, wraps
from typing import Any, TypeVar

import structlog
from structlog.types import EventDict, Processor

F = TypeVar("F", bound=Callable[..., Any])


def _tag_app(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["app"] = "githabit"
    return event_dict


def _renderers(debug: bool) -> list[Processor]:
    """Readable console output while developing, one JSON object per line otherwise."""
    if debug or os.getenv("ENV", "development") == "development":
        return [structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


@lru_cache(maxsize=1)
def configure_logging(level: str = "INFO") -> None:
    """Configure structured logging. Call once at application startup."""
    from .config import get_settings

    # stderr keeps the console surface on stdout readable
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            _tag_app,
            *_renderers(get_settings().debug),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]


# =============================================================================
# Context Management
# =============================================================================


class LogContext:
    """
    Context manager for temporary log context.

    Tasks created inside the block copy the bound variables, so both halves
    of a fetch cycle log with the same trigger id.

    Usage:
        with LogContext(trigger=3, handle="octocat"):
            logger.info("starting")  # Includes trigger and handle
        logger.info("done")  # Does not include trigger or handle
    """

    def __init__(self, **kwargs: Any):
        self.kwargs = kwargs
        self._keys = list(kwargs.keys())

    def __enter__(self):
        structlog.contextvars.bind_contextvars(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        structlog.contextvars.unbind_contextvars(*self._keys)
        return False


# =============================================================================
# Decorators
# =============================================================================


def log_timing(
    operation: str, logger: structlog.stdlib.BoundLogger | None = None
) -> Callable[[F], F]:
    """
    Decorator to log function timing. Works on plain and async functions.

    Usage:
        @log_timing("fetch_cycle")
        async def run_cycle():
            ...
    """

    def decorator(func: F) -> F:
        _logger = logger or get_logger(func.__module__)

        def _done(start: float) -> None:
            elapsed = time.perf_counter() - start
            _logger.debug(
                "operation_complete", operation=operation, duration_seconds=round(elapsed, 3)
            )

        def _failed(start: float, e: BaseException) -> None:
            elapsed = time.perf_counter() - start
            _logger.error(
                "operation_failed",
                operation=operation,
                duration_seconds=round(elapsed, 3),
                error=str(e),
            )

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                start = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _failed(start, e)
                    raise
                _done(start)
                return result

            return async_wrapper  # type: ignore

        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _failed(start, e)
                raise
            _done(start)
            return result

        return wrapper  # type: ignore

    return decorator


# =============================================================================
# Lazy-loaded Module Loggers
# =============================================================================


class _LazyLogger:
    """Module-level logger resolved on first attribute access, after configuration."""

    def __init__(self, name: str):
        self._name = name
        self._bound: structlog.stdlib.BoundLogger | None = None

    def __getattr__(self, attr: str):
        if self._bound is None:
            self._bound = get_logger(self._name)
        return getattr(self._bound, attr)


# Pre-configured loggers (lazy-loaded)
github_logger = _LazyLogger("github")
store_logger = _LazyLogger("store")
sync_logger = _LazyLogger("handle_sync")
fetch_logger = _LazyLogger("fetch")
cli_logger = _LazyLogger("cli")


__all__ = [
    "configure_logging",
    "get_logger",
    "LogContext",
    "log_timing",
    "github_logger",
    "store_logger",
    "sync_logger",
    "fetch_logger",
    "cli_logger",
]
