"""Retry with exponential backoff for rate-limited transfer requests.

Image hosts answer bursts of uploads or hot-linked downloads with HTTP 429
(and sometimes 503). Such requests are retried up to 3 times, waiting 1s,
2s then 4s, or the host's Retry-After value when it sends one. Every other
error fails fast.
"""

import logging
import time
from typing import Callable, Optional, TypeVar

from .errors import APIAccessError

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_RETRIES = 3
MAX_RETRY_AFTER = 30  # seconds

RETRYABLE_STATUS_CODES = frozenset({429, 503})

RATE_LIMIT_PHRASES = (
    '429 client error',
    '503 server error',
    'too many requests',
    'rate limit exceeded',
    'rate limited',
)


def retry_on_rate_limit(func: Callable[..., T], *args, **kwargs) -> T:
    """Call func, retrying while the host reports rate limiting.

    Args:
        func: Callable performing one request
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Whatever func returns

    Raises:
        APIAccessError: If the host still rate limits after 3 retries
        Exception: Any other error from func, unchanged and without retry

    Example:
        >>> response = retry_on_rate_limit(session.get, url, timeout=30)
    """
    attempt = 0
    while True:
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not _is_rate_limit_error(e):
                raise
            if attempt == MAX_RETRIES:
                logger.error(f"Still rate limited after {MAX_RETRIES} retries: {e}")
                raise APIAccessError()

            delay = _retry_delay(e, attempt)
            attempt += 1
            logger.info(f"Rate limited by image host, retry {attempt}/{MAX_RETRIES} in {delay}s")
            time.sleep(delay)


def _status_code(exception: Exception) -> Optional[int]:
    status = getattr(exception, 'status_code', None)
    if status is None:
        # requests.HTTPError keeps the status on its response
        status = getattr(getattr(exception, 'response', None), 'status_code', None)
    return status if isinstance(status, int) else None


def _is_rate_limit_error(exception: Exception) -> bool:
    """Whether an exception means the host asked us to slow down."""
    if _status_code(exception) in RETRYABLE_STATUS_CODES:
        return True
    # Specific phrases only; a bare "rate limit" can appear in unrelated messages
    message = str(exception).lower()
    return any(phrase in message for phrase in RATE_LIMIT_PHRASES)


def _retry_delay(exception: Exception, attempt: int) -> int:
    """Seconds to wait before the next attempt.

    A numeric Retry-After header wins, capped at MAX_RETRY_AFTER; otherwise
    the backoff doubles from 1s.
    """
    response = getattr(exception, 'response', None)
    headers = getattr(response, 'headers', None)
    if headers:
        retry_after = str(headers.get('Retry-After', '')).strip()
        if retry_after.isdigit():
            return min(int(retry_after), MAX_RETRY_AFTER)
    return 2 ** attempt
