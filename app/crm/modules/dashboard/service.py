from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from app.crm.filtering.buckets import naive_utc


def start_of_month(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def dashboard_summary(
    customers: Sequence[dict[str, Any]],
    feedback: Sequence[dict[str, Any]],
    now: datetime,
    limit: int = 5,
) -> dict[str, Any]:
    """
    Headline counts plus the newest customers and feedback items.
    Both sequences are expected newest-first, as the store returns them.
    """
    month_start = start_of_month(naive_utc(now))
    new_this_month = sum(
        1 for c in customers if c.get("created_at") is not None and naive_utc(c["created_at"]) >= month_start
    )
    return {
        "stats": {
            "total": len(customers),
            "active": sum(1 for c in customers if c.get("status") == "active"),
            "new_this_month": new_this_month,
        },
        "recent_customers": list(customers[:limit]),
        "recent_feedback": list(feedback[:limit]),
    }
