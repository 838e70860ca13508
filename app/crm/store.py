from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.crm.audit import record_event
from app.crm.errors import AdapterIOError, RecordNotFoundError
from app.crm.modules.customers.models import Customer
from app.crm.modules.feedback.models import Feedback

logger = logging.getLogger(__name__)

Record = dict[str, Any]
Listener = Callable[[list[Record]], None]

COLLECTIONS = {
    "customers": Customer,
    "feedback": Feedback,
}


class RecordStore:
    """
    Flat record access for the triage core: ordered snapshots and single-field writes.
    Records are plain dicts keyed by column name.
    """

    def snapshot(self, collection: str, order_by: str = "created_at", direction: str = "desc") -> list[Record]:
        raise NotImplementedError

    def get(self, collection: str, record_id: Any) -> Record:
        raise NotImplementedError

    def update_field(self, collection: str, record_id: Any, field: str, value: Any) -> Record:
        raise NotImplementedError

    def subscribe(
        self,
        collection: str,
        listener: Listener,
        *,
        order_by: str = "created_at",
        direction: str = "desc",
    ) -> Callable[[], None]:
        raise NotImplementedError


def row_to_record(row: Any) -> Record:
    return {col.key: getattr(row, col.key) for col in row.__mapper__.column_attrs}


class SqlRecordStore(RecordStore):
    def __init__(self, session: Session, *, actor_email: str | None = None):
        self.session = session
        self.actor_email = actor_email
        self._listeners: dict[str, list[tuple[str, str, Listener]]] = {}

    def _model(self, collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection {collection!r}.") from None

    def snapshot(self, collection: str, order_by: str = "created_at", direction: str = "desc") -> list[Record]:
        model = self._model(collection)
        column = getattr(model, order_by)
        if direction not in ("asc", "desc"):
            raise ValueError(f"Invalid sort direction {direction!r}.")
        stmt = select(model).order_by(column.desc() if direction == "desc" else column.asc(), model.id.desc())
        try:
            rows = self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Snapshot of %s failed: %s", collection, e)
            raise AdapterIOError(f"Could not load {collection}.") from e
        return [row_to_record(r) for r in rows]

    def get(self, collection: str, record_id: Any) -> Record:
        model = self._model(collection)
        try:
            row = self.session.get(model, record_id)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise AdapterIOError(f"Could not load {collection} record {record_id!r}.") from e
        if row is None:
            raise RecordNotFoundError(collection, record_id)
        return row_to_record(row)

    def update_field(self, collection: str, record_id: Any, field: str, value: Any) -> Record:
        """
        Write one field plus a server-assigned updated_at, audited in the same commit.
        Returns the persisted values of the written fields.
        """
        model = self._model(collection)
        try:
            row = self.session.get(model, record_id)
            if row is None:
                raise RecordNotFoundError(collection, record_id)
            old_value = getattr(row, field)
            now = datetime.utcnow()
            setattr(row, field, value)
            row.updated_at = now
            record_event(
                self.session,
                actor_email=self.actor_email,
                action=f"{collection}.{field}_change",
                entity_type=model.__name__,
                entity_id=str(record_id),
                metadata={field: {"old": _jsonable(old_value), "new": _jsonable(value)}},
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Write of %s.%s for %s failed: %s", collection, field, record_id, e)
            raise AdapterIOError(f"Could not update {collection} record {record_id!r}.") from e

        written = {field: value, "updated_at": now}
        self._notify(collection)
        return written

    def subscribe(
        self,
        collection: str,
        listener: Listener,
        *,
        order_by: str = "created_at",
        direction: str = "desc",
    ) -> Callable[[], None]:
        """
        Push a fresh snapshot to ``listener`` now and after every successful write
        to ``collection``. Returns an unsubscribe callable.
        """
        self._model(collection)
        records = self.snapshot(collection, order_by, direction)
        entry = (order_by, direction, listener)
        self._listeners.setdefault(collection, []).append(entry)
        listener(records)

        def _unsubscribe() -> None:
            entries = self._listeners.get(collection, [])
            if entry in entries:
                entries.remove(entry)

        return _unsubscribe

    def _notify(self, collection: str) -> None:
        for order_by, direction, listener in list(self._listeners.get(collection, [])):
            try:
                records = self.snapshot(collection, order_by, direction)
            except AdapterIOError:
                # Listener keeps its last known-good set.
                logger.exception("Live snapshot push for %s failed", collection)
                continue
            listener(records)


def _jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value
