"""Bounded retry-until-true polling used to confirm state transitions."""
from __future__ import annotations

import logging
import time
from typing import Callable

from .config import LifecycleConfig
from .exceptions import PollTimeoutError

logger = logging.getLogger(__name__)

Predicate = Callable[[], bool]


def wait_for_specific(
    predicate: Predicate, max_attempts: int, wait_interval: float
) -> None:
    """Evaluate *predicate* until it returns True.

    Sleeps *wait_interval* seconds after each miss, for at most
    *max_attempts* evaluations.  An exception raised by the predicate is a
    miss, not a failure; the last one is attached to the timeout error.

    Raises:
        PollTimeoutError: If no attempt succeeded.
    """
    last_error: Exception | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            if predicate():
                return
        except Exception as exc:  # noqa: BLE001
            last_error = exc
            logger.debug("Poll attempt %d/%d failed: %s", attempt, max_attempts, exc)
        if attempt < max_attempts:
            time.sleep(wait_interval)

    raise PollTimeoutError(max_attempts, last_error) from last_error


def wait_for(predicate: Predicate, config: LifecycleConfig | None = None) -> None:
    """Wait for *predicate* using the configured polling budget."""
    cfg = config or LifecycleConfig()
    wait_for_specific(predicate, cfg.poll_max_attempts, cfg.poll_interval_seconds)
