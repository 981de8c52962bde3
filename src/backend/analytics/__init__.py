"""
Analytics engine: time range resolution and concurrent facet aggregation
over the analytics event store.
"""

from .aggregator import AggregationError, AnalyticsAggregator
from .time_range import TimeRangeName, TimeRangeWindow, resolve_time_range

__all__ = [
    "AggregationError",
    "AnalyticsAggregator",
    "TimeRangeName",
    "TimeRangeWindow",
    "resolve_time_range",
]
