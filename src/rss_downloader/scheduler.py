"""Check-time planning for feed watchers."""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from rss_downloader.rapid_window import is_rapid, last_rapid_start, next_rapid_start

DEFAULT_CHECK_INTERVAL = 3600
DEFAULT_RAPID_CHECK_INTERVAL = 60
DEFAULT_RAPID_CHECK_DURATION = 3600


@dataclass(frozen=True)
class CheckScheduler:
    """Plans when a feed is checked next.

    Checks run every ``rapid_interval`` seconds inside a feed's rapid window
    and every ``normal_interval`` seconds outside it. A planned check never
    lands after the start of the upcoming rapid window, so the first check of
    each window happens exactly at its start.
    """

    normal_interval: float = DEFAULT_CHECK_INTERVAL
    rapid_interval: float = DEFAULT_RAPID_CHECK_INTERVAL
    rapid_duration: float = DEFAULT_RAPID_CHECK_DURATION

    def is_rapid(self, moment: datetime, day_of_week: int, anchor_second: int) -> bool:
        """Whether moment falls inside the feed's rapid window."""
        return is_rapid(moment, day_of_week, anchor_second, self.rapid_duration)

    def next_check_time(
        self, last_check: datetime, day_of_week: int, anchor_second: int
    ) -> datetime:
        """Return the check that follows last_check."""
        if self.is_rapid(last_check, day_of_week, anchor_second):
            interval = self.rapid_interval
        else:
            interval = self.normal_interval

        check_time = last_check + timedelta(seconds=interval)
        return self._clamp(check_time, last_check, day_of_week, anchor_second)

    def first_check_time(
        self, start_time: datetime, day_of_week: int, anchor_second: int
    ) -> datetime:
        """Return the first check at or after start_time on the feed's grid.

        The grid starts at the rapid window start (rapid interval) or at its
        end (normal interval), so restarting the process doesn't shift the
        check phase.
        """
        base_time = last_rapid_start(start_time, day_of_week, anchor_second)
        if self.is_rapid(start_time, day_of_week, anchor_second):
            interval = self.rapid_interval
        else:
            base_time += timedelta(seconds=self.rapid_duration)
            interval = self.normal_interval

        elapsed = (start_time - base_time).total_seconds()
        offset = interval * math.ceil(elapsed / interval)
        check_time = base_time + timedelta(seconds=offset)
        return self._clamp(check_time, start_time, day_of_week, anchor_second)

    @staticmethod
    def _clamp(
        check_time: datetime, reference: datetime, day_of_week: int, anchor_second: int
    ) -> datetime:
        upcoming = next_rapid_start(reference, day_of_week, anchor_second)
        return min(check_time, upcoming)
