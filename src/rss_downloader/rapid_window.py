"""Weekly rapid-check window arithmetic.

Each feed has an anchor: a day of week and a second of that day, in local
wall-clock time. The rapid window starts at the anchor every week and lasts
for a configured number of seconds. Every instant in the window is "rapid";
everything else is "normal".

All datetimes here are naive local times.
"""

from datetime import datetime, timedelta

WEEK = timedelta(days=7)


def weekday(moment: datetime) -> int:
    """Day of week with Sunday as 0, matching the registry convention."""
    return (moment.weekday() + 1) % 7


def last_rapid_start(reference: datetime, day_of_week: int, anchor_second: int) -> datetime:
    """Return the most recent anchor occurrence at or before reference."""
    day_diff = day_of_week - weekday(reference)
    if day_diff > 0:
        day_diff -= 7

    midnight = datetime.combine(reference.date(), datetime.min.time())
    if day_diff == 0 and reference < midnight + timedelta(seconds=anchor_second):
        # Today's anchor hasn't happened yet.
        day_diff -= 7

    return midnight + timedelta(days=day_diff, seconds=anchor_second)


def next_rapid_start(reference: datetime, day_of_week: int, anchor_second: int) -> datetime:
    """Return the first anchor occurrence strictly after reference."""
    return last_rapid_start(reference + WEEK, day_of_week, anchor_second)


def is_rapid(
    reference: datetime, day_of_week: int, anchor_second: int, rapid_duration: float
) -> bool:
    """Whether reference falls in [window start, window start + rapid_duration)."""
    start = last_rapid_start(reference, day_of_week, anchor_second)
    return start <= reference < start + timedelta(seconds=rapid_duration)
