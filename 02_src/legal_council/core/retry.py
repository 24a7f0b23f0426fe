"""Bounded exponential-backoff retry around fallible inference calls."""

import logging
import time
from typing import Callable, TypeVar

from .vlm_client import RetryableInferenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRIES = 3
DEFAULT_BASE_DELAY_S = 2.0


def with_retry(
    operation: Callable[[], T],
    retries: int = DEFAULT_RETRIES,
    base_delay_s: float = DEFAULT_BASE_DELAY_S,
    description: str = "API call",
) -> T:
    """Run operation, retrying retryable failures with doubling delay.

    Only RetryableInferenceError (rate limited, service unavailable,
    transport failure) is retried; everything else propagates unchanged.

    The first call is made immediately; up to `retries` further calls follow,
    sleeping base_delay_s, 2*base_delay_s, 4*base_delay_s, ... in between.

    Args:
        operation: Zero-argument callable to execute
        retries: Number of retries after the first attempt
        base_delay_s: Delay before the first retry, in seconds
        description: Label used in log messages

    Returns:
        Result of the first successful call

    Raises:
        Exception: Any non-retryable error immediately, or the last
            retryable error once the retry budget is spent
    """
    attempts_left = retries
    delay = base_delay_s

    while True:
        try:
            return operation()
        except RetryableInferenceError as e:
            if attempts_left <= 0:
                logger.error(f"{description} failed, retries exhausted: {e}")
                raise

            logger.warning(
                f"{description} failed. Retrying in {delay:.1f}s... "
                f"({attempts_left} attempts left): {e}"
            )
            time.sleep(delay)
            attempts_left -= 1
            delay *= 2
