"""Retry logic with exponential backoff for Confluence API rate limits.

Only HTTP 429 responses are retried (1s, 2s, 4s). Every other error is
raised to the caller on the first attempt.
"""

import re
import time
import logging
from typing import Callable, Optional, TypeVar

from .errors import APIAccessError

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_RETRIES = 3

RATE_LIMIT_PATTERNS = (
    r'\b429\b',
    'too many requests',
    'rate limit exceeded',
    'rate limited',
)


def retry_on_rate_limit(func: Callable[..., T], *args, **kwargs) -> T:
    """Call ``func`` and retry it while Confluence answers with a rate limit.

    Args:
        func: The function to execute with retry logic
        *args: Positional arguments to pass to the function
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The return value of the function

    Raises:
        APIAccessError: If rate limit persists after MAX_RETRIES retries
        Other exceptions: Passed through immediately without retry
    """
    for attempt in range(MAX_RETRIES + 1):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not _is_rate_limit_error(e):
                raise

            if attempt >= MAX_RETRIES:
                logger.error(f"Rate limit persisted after {MAX_RETRIES} retries, giving up")
                raise APIAccessError(
                    f"Confluence API failure (after {MAX_RETRIES} retries)"
                ) from e

            wait_time = 2 ** attempt
            logger.info(
                f"Rate limit hit, retrying in {wait_time}s "
                f"(retry {attempt + 1}/{MAX_RETRIES})"
            )
            time.sleep(wait_time)

    raise APIAccessError(f"Confluence API failure (after {MAX_RETRIES} retries)")


def get_status_code(exception: Exception) -> Optional[int]:
    """HTTP status of a failed request, or None when the exception carries none."""
    status_code = getattr(exception, 'status_code', None)
    if status_code is None:
        response = getattr(exception, 'response', None)
        if response is not None:
            status_code = getattr(response, 'status_code', None)
    return status_code if isinstance(status_code, int) else None


def _is_rate_limit_error(exception: Exception) -> bool:
    """Check if an exception represents a rate limit (429) error.

    A known status code decides alone; the message is only consulted for
    exceptions without one.
    """
    status_code = get_status_code(exception)
    if status_code is not None:
        return status_code == 429

    error_msg = str(exception).lower()
    return any(re.search(pattern, error_msg) for pattern in RATE_LIMIT_PATTERNS)
