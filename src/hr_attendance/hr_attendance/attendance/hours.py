from __future__ import annotations

from datetime import date, datetime, time

from ..core.constants import HOURS_PRECISION


def worked_hours(check_in: time, check_out: time) -> float:
    """Hours between two punches on the same day, never below 0.

    A check-out earlier than the check-in yields 0.
    """

    start = datetime.combine(date.min, check_in)
    end = datetime.combine(date.min, check_out)
    hours = (end - start).total_seconds() / 3600
    return max(round(hours, HOURS_PRECISION), 0.0)
