from __future__ import annotations

import logging
import time
from typing import Callable

from .base import NavigationError, PageSession

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY_SECONDS = 3.0


def fetch_with_retry(
    session: PageSession,
    url: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    retry_delay: float = DEFAULT_RETRY_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Navigate to ``url``, retrying with a fixed delay between attempts.

    The last NavigationError is re-raised once ``max_attempts`` is exhausted.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    for attempt in range(1, max_attempts + 1):
        try:
            session.navigate(url)
            return
        except NavigationError as exc:
            logger.warning("Attempt %d/%d failed for %s: %s", attempt, max_attempts, url, exc)
            if attempt == max_attempts:
                raise
            sleep(retry_delay)
