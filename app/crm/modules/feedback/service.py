from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from app.crm.errors import InvalidStatusError
from app.crm.filtering.board import ListBoard
from app.crm.modules.feedback.filters import FEEDBACK_CATALOG
from app.crm.modules.feedback.workflow import validate_status, workflow_for
from app.crm.store import Record, RecordStore

logger = logging.getLogger(__name__)

COLLECTION = "feedback"


def _stored_type(store: RecordStore, record_id: Any, records: Iterable[Record], selected: Record | None) -> str:
    for r in records:
        if r.get("id") == record_id:
            return r["type"]
    if selected is not None and selected.get("id") == record_id:
        return selected["type"]
    return store.get(COLLECTION, record_id)["type"]


def apply_transition(
    store: RecordStore,
    record_id: Any,
    new_status: str,
    feedback_type: str,
    *,
    records: Iterable[Record] = (),
    selected: Record | None = None,
) -> Record:
    """
    Validate ``new_status`` against the workflow of ``feedback_type``, which
    must also be the stored type of the record, persist it, then patch every
    in-memory copy of the record.

    Nothing in ``records`` or ``selected`` changes unless the store write
    succeeded. Errors are InvalidStatusError / UnknownWorkflowError (no write
    attempted), RecordNotFoundError and AdapterIOError.
    """
    records = list(records)
    validate_status(feedback_type, new_status)
    record_type = _stored_type(store, record_id, records, selected)
    if record_type != feedback_type:
        raise InvalidStatusError(new_status, record_type, workflow_for(record_type).statuses)

    written = store.update_field(COLLECTION, record_id, "status", new_status)

    updated: Record | None = None
    for r in records:
        if r.get("id") == record_id:
            r.update(written)
            updated = r
    if selected is not None and selected.get("id") == record_id:
        selected.update(written)
        updated = updated or selected

    logger.info("Feedback %s status -> %s (%s)", record_id, new_status, feedback_type)
    if updated is None:
        updated = store.get(COLLECTION, record_id)
    return updated


class FeedbackBoard(ListBoard):
    """The suggestion triage list: filtering, the open detail record and status changes."""

    collection = COLLECTION
    catalog = FEEDBACK_CATALOG

    def __init__(self, store: RecordStore, **kwargs: Any):
        super().__init__(store, **kwargs)
        self.selected: Record | None = None

    def replace_records(self, records: list[Record]) -> None:
        super().replace_records(records)
        if self.selected is not None:
            fresh = self.find(self.selected.get("id"))
            # Drop the open record when a new snapshot no longer has it.
            self.selected = dict(fresh) if fresh is not None else None

    def select(self, record_id: Any) -> Record:
        """Open a record for detail. The held reference is a copy of the list entry."""
        record = self.find(record_id)
        if record is None:
            record = self.store.get(COLLECTION, record_id)
        self.selected = dict(record)
        return self.selected

    def close(self) -> None:
        self.selected = None

    def transition_status(self, record_id: Any, new_status: str) -> Record:
        record = self.find(record_id)
        if record is None:
            if self.selected is not None and self.selected.get("id") == record_id:
                record = self.selected
            else:
                record = self.store.get(COLLECTION, record_id)
        return apply_transition(
            self.store,
            record_id,
            new_status,
            record["type"],
            records=self.records,
            selected=self.selected,
        )

    def status_options(self, record_id: Any) -> list[dict]:
        record = self.find(record_id) or self.store.get(COLLECTION, record_id)
        return [o.to_dict() for o in workflow_for(record["type"]).options]
