"""
Simple, standardized error handling for the application.

This module provides the error handling utilities shared by the WebSocket
client and the command-line scripts:

1. ``log_exception`` logs any escaping exception with its traceback
2. ``retry_on_failure`` retries transient network failures with backoff
3. ``safe_call`` isolates callers from exceptions raised by user callbacks
"""

import asyncio
import functools
import time
from typing import Any, Callable, Tuple, Type

import structlog
from websockets.exceptions import InvalidHandshake

logger = structlog.get_logger(__name__)

# Transient failures worth another attempt. TimeoutError and
# ConnectionError are both OSError subclasses.
RETRYABLE_EXCEPTIONS = (
    OSError,
    InvalidHandshake,
)


def log_exception(func: Callable) -> Callable:
    """
    Decorator to log exceptions with full traceback information.

    Any exception raised by the wrapped function is logged before being
    re-raised.
    """

    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            logger.error(
                f"Exception in {func.__name__}: {str(e)}",
                exc_info=True,
                func_name=func.__name__,
            )
            raise

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.error(
                f"Exception in {func.__name__}: {str(e)}",
                exc_info=True,
                func_name=func.__name__,
            )
            raise

    return async_wrapper if asyncio.iscoroutinefunction(func) else sync_wrapper


def retry_on_failure(
    max_retries: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    retryable_exceptions: Tuple[Type[Exception], ...] = RETRYABLE_EXCEPTIONS,
):
    """
    Decorator to retry a function on failure.

    Args:
        max_retries: Maximum number of retry attempts
        delay: Initial delay between retries in seconds
        backoff: Multiplier applied to delay after each retry
        retryable_exceptions: Tuple of exceptions that should trigger retries
    """

    def decorator(func: Callable) -> Callable:
        def _should_retry(attempt: int, error: Exception) -> bool:
            if attempt < max_retries:
                logger.warning(
                    f"Retryable error in {func.__name__} (attempt {attempt + 1}/{max_retries + 1}): {error}"
                )
                return True
            logger.error(
                f"Function {func.__name__} failed after {max_retries + 1} attempts: {error}",
                exc_info=True,
            )
            return False

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            current_delay = delay
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except retryable_exceptions as e:
                    if not _should_retry(attempt, e):
                        raise
                await asyncio.sleep(current_delay)
                current_delay *= backoff
                attempt += 1

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            current_delay = delay
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except retryable_exceptions as e:
                    if not _should_retry(attempt, e):
                        raise
                time.sleep(current_delay)
                current_delay *= backoff
                attempt += 1

        return async_wrapper if asyncio.iscoroutinefunction(func) else sync_wrapper

    return decorator


def safe_call(func: Callable, *args, **kwargs) -> Tuple[bool, Any]:
    """
    Safely call a function and return (success, result_or_exception).

    Returns:
        tuple: (success: bool, result: Any)
            - If successful: (True, result)
            - If failed: (False, exception)
    """
    try:
        return True, func(*args, **kwargs)
    except Exception as e:
        name = getattr(func, "__name__", repr(func))
        logger.error(
            f"Safe call failed for {name}: {str(e)}",
            exc_info=True,
            func_name=name,
        )
        return False, e
