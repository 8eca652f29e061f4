"""
Decorators for common functionality.
"""

import asyncio
import functools
import time
import logging
from typing import Callable, Any

logger = logging.getLogger(__name__)


def async_retry(
    max_attempts: int = 3,
    delay_seconds: float = 1.0,
    backoff_multiplier: float = 2.0,
    exceptions: tuple = (Exception,),
):
    """
    Retry decorator for async functions.

    Args:
        max_attempts: Maximum number of attempts
        delay_seconds: Initial delay between retries
        backoff_multiplier: Multiplier for exponential backoff
        exceptions: Tuple of exceptions to catch

    Example:
        @async_retry(max_attempts=3, delay_seconds=1.0)
        async def fetch_data():
            return await api.get_data()
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            attempt = 0
            current_delay = delay_seconds

            while True:
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    attempt += 1
                    if attempt >= max_attempts:
                        logger.error(
                            f"{func.__name__} failed after {max_attempts} attempts: {e}"
                        )
                        raise

                    logger.warning(
                        f"{func.__name__} failed (attempt {attempt}/{max_attempts}), "
                        f"retrying in {current_delay:.1f}s: {e}"
                    )
                    await asyncio.sleep(current_delay)
                    current_delay *= backoff_multiplier

        return wrapper

    return decorator


def timing(func: Callable) -> Callable:
    """
    Log how long a coroutine took, at DEBUG level.

    Example:
        @timing
        async def run():
            await asyncio.sleep(1)
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs) -> Any:
        start = time.monotonic()
        try:
            return await func(*args, **kwargs)
        finally:
            logger.debug(f"{func.__name__} took {time.monotonic() - start:.3f}s")

    return wrapper
