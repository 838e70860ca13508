from __future__ import annotations

from datetime import date, datetime
from typing import Any


def record_json(record: dict[str, Any]) -> dict[str, Any]:
    """Copy of ``record`` with dates rendered as ISO strings."""
    out: dict[str, Any] = {}
    for k, v in record.items():
        if isinstance(v, (datetime, date)):
            out[k] = v.isoformat()
        else:
            out[k] = v
    return out
