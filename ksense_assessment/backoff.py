"""
Wait schedules and the retry loop shared by every upstream call.

Delays are in seconds:

- rate limited (429):        min(3 * 2**attempt, 12)
- service unavailable (503): 2 * 1.5**attempt
- generic failure:           1 * 1.5**attempt

plus up to one second of random jitter so callers that were throttled
together do not come back together.
"""

import logging
import random
import time

from .errors import ErrorClass, FetchExhausted, TransientUpstreamError, TransportError

logger = logging.getLogger(__name__)

RETRYABLE = (TransientUpstreamError, TransportError)

MAX_RATE_LIMIT_DELAY = 12.0
MAX_JITTER = 1.0


def compute_delay(error_class: ErrorClass, attempt: int, jitter: bool = True) -> float:
    if error_class is ErrorClass.RATE_LIMITED:
        delay = min(3.0 * 2**attempt, MAX_RATE_LIMIT_DELAY)
    elif error_class is ErrorClass.SERVICE_UNAVAILABLE:
        delay = 2.0 * 1.5**attempt
    else:
        delay = 1.0 * 1.5**attempt
    if jitter:
        delay += random.uniform(0, MAX_JITTER)
    return delay


def inter_page_delay(page: int, jitter: bool = True) -> float:
    """Pause taken before requesting `page` during bulk collection (4s, then +2s per page)."""
    delay = 4.0 + (page - 1) * 2.0
    if jitter:
        delay += random.uniform(0, MAX_JITTER)
    return delay


def retry_with_backoff(operation, max_retries, *, label="request", sleep=time.sleep, jitter=True):
    """
    Call `operation()` until it succeeds or `max_retries` attempts fail.

    Only transient upstream errors and transport errors are retried; the
    wait before the next attempt comes from `compute_delay` for the error's
    class. Anything else propagates immediately. When the attempts are used
    up, FetchExhausted is raised from the last error seen.
    """
    if max_retries < 1:
        raise ValueError(f"max_retries must be at least 1, got {max_retries}")

    last_error = None
    for attempt in range(max_retries):
        try:
            return operation()
        except RETRYABLE as e:
            last_error = e
            if attempt == max_retries - 1:
                break
            delay = compute_delay(e.error_class, attempt, jitter=jitter)
            logger.warning(
                "%s: attempt %d/%d failed (%s), waiting %.1fs",
                label, attempt + 1, max_retries, e, delay,
            )
            sleep(delay)

    raise FetchExhausted(label, max_retries, last_error) from last_error
