"""Retry logic with exponential backoff for SharePoint API throttling.

SharePoint answers with 429 (and sometimes 503) when a client is
throttled. Those responses are retried with exponential backoff
(1s, 2s, 4s); every other error fails fast.
"""

import time
import logging
from typing import Callable, TypeVar
from functools import wraps

from .errors import APIAccessError

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_RETRIES = 3


def retry_on_rate_limit(func: Callable[..., T], *args, **kwargs) -> T:
    """Retry function on throttling responses with exponential backoff.

    Args:
        func: The function to execute with retry logic
        *args: Positional arguments to pass to the function
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The return value of the function

    Raises:
        APIAccessError: If throttling persists after 3 retries
        Other exceptions: Passed through immediately without retry

    Example:
        >>> result = retry_on_rate_limit(api.get_list_item_fields, page_ref, ["Title"])
    """
    for retry_num in range(MAX_RETRIES + 1):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not _is_rate_limit_error(e):
                raise

            if retry_num >= MAX_RETRIES:
                logger.error(
                    f"Throttling persisted after {MAX_RETRIES} retries, giving up"
                )
                raise APIAccessError() from e

            wait_time = 2 ** retry_num
            logger.warning(
                f"Request throttled, retrying in {wait_time}s "
                f"(retry {retry_num + 1}/{MAX_RETRIES})"
            )
            time.sleep(wait_time)

    # unreachable, keeps type checkers happy
    raise APIAccessError()


def as_decorator(func: Callable[..., T]) -> Callable[..., T]:
    """Decorator version of retry_on_rate_limit.

    Example:
        >>> @as_decorator
        ... def fetch_fields(page_ref: str):
        ...     return api.get_list_item_fields(page_ref, ["CanvasContent1"])
    """
    @wraps(func)
    def wrapper(*args, **kwargs) -> T:
        return retry_on_rate_limit(func, *args, **kwargs)

    return wrapper


def _is_rate_limit_error(exception: Exception) -> bool:
    """Check if an exception represents a throttling (429/503) response."""
    error_msg = str(exception).lower()
    rate_limit_patterns = [
        '429',
        'too many requests',
        'rate limit exceeded',
        'throttled',
    ]
    if any(pattern in error_msg for pattern in rate_limit_patterns):
        return True

    if getattr(exception, 'status_code', None) in (429, 503):
        return True

    response = getattr(exception, 'response', None)
    if response is not None and getattr(response, 'status_code', None) in (429, 503):
        return True

    return False
