"""Exponential backoff for store adapters.

Only transient transport errors should be retried; HTTP status errors are
final and are mapped by the adapter itself.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_BACKOFF = 1.0  # seconds
DEFAULT_MAX_BACKOFF = 30.0  # seconds
DEFAULT_BACKOFF_MULTIPLIER = 2.0


def retry_with_backoff(
    func: Callable[[], T],
    retryable_exceptions: tuple[type[Exception], ...],
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
    max_backoff: float = DEFAULT_MAX_BACKOFF,
) -> T:
    """Call ``func``, retrying ``retryable_exceptions`` with doubling delays.

    Args:
        func: Zero-argument call to attempt.
        retryable_exceptions: Exception types worth another attempt.
        max_retries: Attempts after the first one.
        initial_backoff: Delay before the first retry, in seconds.
        max_backoff: Upper bound on any single delay.

    Returns:
        Whatever ``func`` returns on its first successful attempt.

    Raises:
        The error from the final attempt once retries are used up.
    """
    delay = initial_backoff
    attempt = 0
    while True:
        try:
            return func()
        except retryable_exceptions as e:
            if attempt >= max_retries:
                logger.error(f"Giving up after {attempt + 1} attempts: {e}")
                raise
            attempt += 1
            logger.warning(f"Attempt {attempt} failed: {e}. Retrying in {delay:.1f}s")
            time.sleep(delay)
            delay = min(delay * DEFAULT_BACKOFF_MULTIPLIER, max_backoff)
