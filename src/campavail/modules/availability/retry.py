"""Bounded exponential-backoff retry for store-backed reads."""

from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from campavail.errors import is_permission_denied

logger = logging.getLogger(__name__)

T = TypeVar("T")


def with_retry(
    operation: Callable[[], T],
    max_retries: int = 3,
    *,
    base_delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``operation`` up to ``max_retries`` times.

    Waits ``base_delay * 2**attempt`` seconds between attempts (1s, 2s, 4s...)
    and not after the last one. Authorization failures are re-raised at once.
    When every attempt fails the last error propagates unchanged; there is no
    fallback result.
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    for attempt in range(max_retries):
        try:
            return operation()
        except Exception as exc:
            if is_permission_denied(exc):
                logger.error("Permission denied, not retrying: %s", exc)
                raise
            if attempt == max_retries - 1:
                logger.error("Giving up after %d attempts: %s", max_retries, exc)
                raise
            delay = base_delay * (2 ** attempt)
            logger.warning(
                "Attempt %d/%d failed (%s), retrying in %.1fs",
                attempt + 1, max_retries, exc, delay,
            )
            sleep(delay)
    raise AssertionError("unreachable")
