from __future__ import annotations

from flask import Blueprint, request

from app.crm.db import db_session
from app.crm.modules.customers.service import CustomerBoard
from app.crm.serialize import record_json
from app.crm.store import SqlRecordStore

bp = Blueprint("customers", __name__)


@bp.get("/customers")
def customers_list():
    board = CustomerBoard(SqlRecordStore(db_session()))
    try:
        board.view.apply_args(request.args)
    except ValueError as e:
        return {"error": "invalid_filter", "message": str(e)}, 400
    board.refresh()
    visible = board.visible_records()

    return {
        "customers": [record_json(r) for r in visible],
        "total": len(board.records),
        "showing": len(visible),
        "search": board.view.search_text,
        "filters": board.view.filters,
        "filters_active": board.view.has_active_facets,
        "filter_options": board.catalog.options(),
    }
