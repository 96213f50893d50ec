"""Common plumbing for scheduled jobs."""

import logging
import threading
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)


class ScheduledJob:
    """
    A job the scheduler calls on an interval.

    Calling the job runs `run()` unless a previous invocation of the same job
    is still in progress, in which case the call is skipped and returns None.
    """

    name = "job"

    def __init__(self, timezone: str = "America/Toronto", clock: Callable[[], datetime] | None = None):
        self.tz = ZoneInfo(timezone)
        self._clock = clock
        self._lock = threading.Lock()

    def now(self) -> datetime:
        """Current time in the job's reference timezone."""
        if self._clock is not None:
            current = self._clock()
            return current.astimezone(self.tz) if current.tzinfo else current
        return datetime.now(self.tz)

    def run(self):
        raise NotImplementedError

    def __call__(self):
        if not self._lock.acquire(blocking=False):
            logger.warning(f"{self.name} is still running, skipping this invocation")
            return None
        try:
            return self.run()
        finally:
            self._lock.release()
