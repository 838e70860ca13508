from __future__ import annotations

import math
from datetime import datetime, timezone

PRICE_BUCKETS = ("0-100", "101-500", "501-1000", "1000+")
_PRICE_UPPER_BOUNDS = ((100, "0-100"), (500, "101-500"), (1000, "501-1000"))

TODAY = "today"
THIS_WEEK = "this-week"
THIS_MONTH = "this-month"
THIS_YEAR = "this-year"
OLDER = "older"  # fallback only, never offered as a filter value

RECENCY_BUCKETS = (TODAY, THIS_WEEK, THIS_MONTH, THIS_YEAR)
_RECENCY_UPPER_DAYS = ((1, TODAY), (7, THIS_WEEK), (30, THIS_MONTH), (365, THIS_YEAR))

_SECONDS_PER_DAY = 24 * 60 * 60


def price_bucket(price: float) -> str:
    """Inclusive upper bounds: 100 -> "0-100", 500 -> "101-500", 1000 -> "501-1000"."""
    for upper, label in _PRICE_UPPER_BOUNDS:
        if price <= upper:
            return label
    return "1000+"


def naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def elapsed_days(timestamp: datetime, now: datetime) -> int:
    """Whole days between the two instants, rounded up; direction is ignored."""
    delta = abs((naive_utc(now) - naive_utc(timestamp)).total_seconds())
    return math.ceil(delta / _SECONDS_PER_DAY)


def recency_bucket(timestamp: datetime, now: datetime) -> str:
    days = elapsed_days(timestamp, now)
    for upper, label in _RECENCY_UPPER_DAYS:
        if days <= upper:
            return label
    return OLDER
