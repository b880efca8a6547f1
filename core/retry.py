"""Retry decorator for transient network failures."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any

logger = logging.getLogger(__name__)


def retry_on_failure(
    max_attempts: int = 3,
    delay: float = 1.0,
    exceptions: tuple = (Exception,),
):
    """Retry a coroutine with exponential backoff.

    The n-th retry waits ``delay * 2**(n - 1)`` seconds. Exceptions not
    listed in ``exceptions`` propagate at once.

    Args:
        max_attempts: Total number of calls, first one included.
        delay: Wait before the first retry, in seconds.
        exceptions: Exception types worth retrying.

    Example:
        @retry_on_failure(max_attempts=3, exceptions=(aiohttp.ClientError,))
        async def get(url):
            ...
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_attempts:
                        logger.error(
                            f"{func.__name__} failed after {attempt} "
                            f"attempt(s): {e}"
                        )
                        raise

                    wait_time = delay * 2 ** (attempt - 1)
                    logger.warning(
                        f"{func.__name__} attempt {attempt}/{max_attempts} "
                        f"failed: {e}. Retrying in {wait_time:.1f}s"
                    )
                    await asyncio.sleep(wait_time)
                    attempt += 1

        return wrapper

    return decorator
