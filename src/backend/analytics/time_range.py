"""
Resolution of symbolic dashboard time ranges into concrete lower bounds.

``day`` means the last 24 hours, not "since local midnight". Unknown or
missing names fall back to the 7-day window.
"""

import calendar
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TimeRangeName(Enum):
    day = "day"
    week = "week"
    month = "month"
    year = "year"


DEFAULT_TIME_RANGE = TimeRangeName.week


class TimeRangeWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: TimeRangeName = Field(..., description="Symbolic window name")
    lower_bound: datetime = Field(..., description="Inclusive lower bound on created_at")


def _shift_months(moment: datetime, months: int) -> datetime:
    """Move ``moment`` back by whole calendar months, clamping the day of month."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def resolve_time_range(range_name: Optional[str], now: datetime) -> TimeRangeWindow:
    """
    Map ``range_name`` to a window ending at ``now``.

    Args:
        range_name: One of ``day``, ``week``, ``month``, ``year``; anything else
            (including None and "") resolves to ``week``.
        now: Reference instant; the result depends only on the two arguments.

    Returns:
        TimeRangeWindow with the resolved name and its lower bound.
    """
    try:
        name = TimeRangeName(range_name)
    except ValueError:
        name = DEFAULT_TIME_RANGE

    if name is TimeRangeName.day:
        lower_bound = now - timedelta(days=1)
    elif name is TimeRangeName.week:
        lower_bound = now - timedelta(days=7)
    elif name is TimeRangeName.month:
        lower_bound = _shift_months(now, 1)
    else:
        lower_bound = _shift_months(now, 12)

    return TimeRangeWindow(name=name, lower_bound=lower_bound)
