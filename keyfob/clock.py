"""
clock.py - Wall-clock sources and the one bounded wait for a valid clock.
"""

import logging
import time

from keyfob.config import SYNC_TIMEOUT_S
from keyfob.otp_core import clock_is_valid

logger = logging.getLogger(__name__)


class SystemClock:
    """Host wall clock, whole seconds."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to. Starts unsynced at 0."""

    def __init__(self, now: int = 0):
        self._now = int(now)

    def now(self) -> int:
        return self._now

    def set(self, now: int):
        self._now = int(now)

    def advance(self, seconds: int):
        self._now += int(seconds)


def wait_for_valid_clock(clock, timeout_s: float = SYNC_TIMEOUT_S, poll_s: float = 0.5,
                         sleep=time.sleep, monotonic=time.monotonic) -> bool:
    """
    Wait up to timeout_s for clock.now() to pass the validity threshold.

    No retries after the timeout: a False return means codes stay withheld
    for the rest of the run.
    """
    deadline = monotonic() + timeout_s
    while True:
        if clock_is_valid(clock.now()):
            logger.info("Clock is valid: %d", clock.now())
            return True
        if monotonic() >= deadline:
            logger.warning("Clock not valid after %ss; passcodes will be withheld", timeout_s)
            return False
        logger.debug("Waiting for clock (now=%d)", clock.now())
        sleep(poll_s)
