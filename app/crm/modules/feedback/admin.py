from __future__ import annotations

from flask import Blueprint, request

from app.crm.db import db_session
from app.crm.modules.feedback.service import FeedbackBoard
from app.crm.modules.feedback.workflow import workflow_for
from app.crm.serialize import record_json
from app.crm.store import SqlRecordStore

bp = Blueprint("feedback", __name__)


def _actor_email() -> str | None:
    return (request.headers.get("X-Actor-Email") or "").strip().lower() or None


def _board() -> FeedbackBoard:
    return FeedbackBoard(SqlRecordStore(db_session(), actor_email=_actor_email()))


# ---------- List ----------
@bp.get("/feedback")
def feedback_list():
    board = _board()
    try:
        board.view.apply_args(request.args)
    except ValueError as e:
        return {"error": "invalid_filter", "message": str(e)}, 400
    board.refresh()
    visible = board.visible_records()

    return {
        "feedback": [record_json(r) for r in visible],
        "total": len(board.records),
        "showing": len(visible),
        "search": board.view.search_text,
        "filters": board.view.filters,
        "filters_active": board.view.has_active_facets,
        "filter_options": board.catalog.options(),
    }


# ---------- Workflows ----------
@bp.get("/feedback/workflows/<feedback_type>")
def feedback_workflow(feedback_type: str):
    wf = workflow_for(feedback_type)
    return {
        "type": wf.feedback_type,
        "initial": wf.initial,
        "statuses": [o.to_dict() for o in wf.options],
    }


# ---------- Detail ----------
@bp.get("/feedback/<int:feedback_id>")
def feedback_detail(feedback_id: int):
    board = _board()
    record = board.select(feedback_id)
    return {
        "feedback": record_json(record),
        "status_options": board.status_options(feedback_id),
    }


# ---------- Status ----------
@bp.post("/feedback/<int:feedback_id>/status")
def feedback_status_post(feedback_id: int):
    payload = request.get_json(silent=True) or request.form
    new_status = (payload.get("status") or "").strip()

    board = _board()
    board.select(feedback_id)
    record = board.transition_status(feedback_id, new_status)

    return {"feedback": record_json(record)}
