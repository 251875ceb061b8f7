"""
Wait strategies between export/status attempts.

geodienste.ch asks clients to retry in a flat interval, so the production
strategy is a fixed one-minute delay rather than exponential backoff.
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Optional


class WaitStrategy(ABC):
    """Supplies the delay to sleep between two attempts"""

    @abstractmethod
    def get_wait_duration(self) -> timedelta:
        pass


class FixedWaitStrategy(WaitStrategy):
    """
    Always waits the same interval.

    Attributes:
        interval: Delay between attempts (default: one minute)
    """

    def __init__(self, interval: Optional[timedelta] = None):
        self.interval = interval if interval is not None else timedelta(minutes=1)
        if self.interval < timedelta(0):
            raise ValueError("Wait interval must not be negative")

    def get_wait_duration(self) -> timedelta:
        return self.interval


class NoWaitStrategy(FixedWaitStrategy):
    """Retries immediately; used to drive the retry loop in tests"""

    def __init__(self):
        super().__init__(timedelta(0))
