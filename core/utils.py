"""
Core utility functions for the bot.
Provides common functionality used across multiple modules.
"""
import asyncio
import functools
from typing import Optional, Callable, TypeVar, Tuple

from core.logger import get_logger

logger = get_logger(__name__)

# Type variable for generic async function return type
T = TypeVar('T')


def async_retry(
    max_retries: int = 3,
    base_delay: float = 1.0,
    exponential: bool = True,
    retryable_exceptions: Tuple[type, ...] = (Exception,),
    fail_fast_exceptions: Tuple[type, ...] = (),
    on_retry: Optional[Callable[[int, Exception], None]] = None,
):
    """
    Decorator for async functions with retry logic and exponential backoff.

    Args:
        max_retries: Maximum number of attempts (including the first)
        base_delay: Base delay in seconds between retries
        exponential: If True, uses exponential backoff (2^(attempt-1) * base_delay)
        retryable_exceptions: Tuple of exception types to retry on
        fail_fast_exceptions: Tuple of exception types to fail immediately on
        on_retry: Optional callback function called on each retry (attempt, exception)

    Returns:
        Decorated async function with retry logic
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            last_exception = None

            for attempt in range(1, max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except fail_fast_exceptions:
                    raise
                except retryable_exceptions as e:
                    last_exception = e

                    if attempt >= max_retries:
                        raise

                    if exponential:
                        delay = calculate_exponential_backoff(attempt, base_delay)
                    else:
                        delay = base_delay

                    if on_retry:
                        on_retry(attempt, e)

                    logger.warning(
                        f"[RETRY] {func.__name__} failed (Attempt {attempt}/{max_retries}). "
                        f"Retrying in {delay}s... Error: {e}"
                    )

                    await asyncio.sleep(delay)

            if last_exception:
                raise last_exception
            raise RuntimeError(f"Unexpected retry loop exit in {func.__name__}")

        return wrapper
    return decorator


def calculate_exponential_backoff(attempt: int, base_delay: float = 1.0) -> float:
    """
    Calculate exponential backoff delay.

    Args:
        attempt: Current attempt number (1-indexed)
        base_delay: Base delay in seconds

    Returns:
        Delay in seconds
    """
    return base_delay * (2 ** (attempt - 1))


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Truncate text to max length with suffix, for log previews.

    Args:
        text: Text to truncate
        max_length: Maximum allowed length including suffix
        suffix: Suffix to append when truncating

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
