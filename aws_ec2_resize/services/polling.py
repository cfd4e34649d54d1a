"""
Bounded polling for remote state transitions.
"""
import logging
import time
from typing import Callable, Optional

from ..core.exceptions import WaitTimeoutError


logger = logging.getLogger(__name__)


def wait_until(
    predicate: Callable[[], bool],
    interval: float,
    timeout: float,
    on_attempt: Optional[Callable[[int], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Poll ``predicate`` every ``interval`` seconds until it returns True.

    Each attempt first calls ``on_attempt`` with the 1-based attempt number,
    then checks the budget, sleeps, and evaluates the predicate. The wait
    fails once the accumulated sleep would exceed ``timeout``.

    Args:
        predicate: Zero-argument check, re-evaluated after every sleep
        interval: Seconds to sleep between checks
        timeout: Total seconds of sleep allowed
        on_attempt: Optional callback invoked before every check
        sleep: Sleep function, replaceable in tests

    Returns:
        Number of attempts it took for the predicate to pass

    Raises:
        WaitTimeoutError: If the predicate is still False when the budget runs out
        ValueError: If interval or timeout is not positive
    """
    if interval <= 0 or timeout <= 0:
        raise ValueError("interval and timeout must be positive")

    waited = 0.0
    attempt = 0
    while True:
        attempt += 1
        if on_attempt is not None:
            on_attempt(attempt)

        if waited + interval > timeout:
            logger.debug(f"Wait budget of {timeout}s exhausted after {attempt - 1} checks")
            raise WaitTimeoutError(f"Condition not met within {timeout} seconds")

        sleep(interval)
        waited += interval

        if predicate():
            return attempt
