"""
ScamFusion Model Quota

Daily cap on secondary model calls.
"""

import logging
import threading
from datetime import date
from typing import Callable

logger = logging.getLogger(__name__)


class QuotaCounter:
    """
    Per-day call counter.

    The increment is atomic. Day rollover is a compare-and-set on the day
    anchor: every caller that notices a new date tries to swap the old anchor
    for today's, and only the one whose expected anchor still matches resets
    the count.

    Args:
        daily_limit: Calls allowed per calendar day
        today: Date source, injectable for tests
    """

    def __init__(self, daily_limit: int, today: Callable[[], date] = date.today):
        self.daily_limit = daily_limit
        self._today = today
        self._calls = 0
        self._day = today()
        self._lock = threading.Lock()
        self.resets = 0

    @property
    def day_anchor(self) -> date:
        return self._day

    @property
    def calls_today(self) -> int:
        self._maybe_roll()
        return self._calls

    @property
    def remaining(self) -> int:
        return max(0, self.daily_limit - self.calls_today)

    @property
    def exhausted(self) -> bool:
        return self.remaining == 0

    def _compare_and_set_day(self, expected: date, new: date) -> bool:
        with self._lock:
            if self._day != expected:
                return False
            self._day = new
            self._calls = 0
            self.resets += 1
        logger.info(f"Model quota reset for {new.isoformat()}")
        return True

    def _maybe_roll(self) -> None:
        anchor = self._day
        today = self._today()
        if today > anchor:
            self._compare_and_set_day(anchor, today)

    def try_acquire(self) -> bool:
        """
        Count one call.

        Returns:
            False when the incremented count exceeds the daily limit; the caller
            must not run inference.
        """
        self._maybe_roll()
        with self._lock:
            self._calls += 1
            count = self._calls
        if count > self.daily_limit:
            logger.warning(f"Model daily quota exhausted ({self.daily_limit})")
            return False
        return True
