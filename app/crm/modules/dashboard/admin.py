from __future__ import annotations

from datetime import datetime

from flask import Blueprint, current_app

from app.crm.db import db_session
from app.crm.modules.dashboard.service import dashboard_summary
from app.crm.serialize import record_json
from app.crm.store import SqlRecordStore

bp = Blueprint("dashboard", __name__)


@bp.get("/dashboard")
def dashboard():
    store = SqlRecordStore(db_session())
    summary = dashboard_summary(
        store.snapshot("customers"),
        store.snapshot("feedback"),
        datetime.utcnow(),
        limit=current_app.config.get("RECENT_LIMIT", 5),
    )
    summary["recent_customers"] = [
        record_json({k: c.get(k) for k in ("id", "name", "company", "status", "created_at")})
        for c in summary["recent_customers"]
    ]
    summary["recent_feedback"] = [
        record_json({k: f.get(k) for k in ("id", "title", "type", "priority", "status", "created_at", "business_name")})
        for f in summary["recent_feedback"]
    ]
    return summary
