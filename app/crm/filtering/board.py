from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from app.crm.errors import AdapterIOError
from app.crm.filtering.predicates import FacetCatalog
from app.crm.filtering.view import FilteredView
from app.crm.store import Record, RecordStore

logger = logging.getLogger(__name__)


class ListBoard:
    """
    Owns the in-memory record set for one collection plus its FilteredView.

    The record set changes only through ``refresh``/live pushes (full
    replacement) or through subclasses that write a single field after a
    successful store write.
    """

    collection = ""
    catalog: FacetCatalog

    def __init__(self, store: RecordStore, *, order_by: str = "created_at", direction: str = "desc"):
        self.store = store
        self.order_by = order_by
        self.direction = direction
        self.records: list[Record] = []
        self.view = FilteredView(self.catalog)
        self._unsubscribe: Callable[[], None] | None = None

    def refresh(self) -> list[Record]:
        """
        One-shot fetch. On AdapterIOError the last known-good records stay in
        place and the error propagates to the caller.
        """
        try:
            records = self.store.snapshot(self.collection, self.order_by, self.direction)
        except AdapterIOError:
            logger.warning("Refresh of %s failed; keeping %d cached records", self.collection, len(self.records))
            raise
        self.replace_records(records)
        return self.records

    def replace_records(self, records: list[Record]) -> None:
        self.records = records

    def follow(self) -> None:
        """Switch to push-based updates from the store."""
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(
                self.collection,
                self.replace_records,
                order_by=self.order_by,
                direction=self.direction,
            )

    def unfollow(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def find(self, record_id: Any) -> Record | None:
        for r in self.records:
            if r.get("id") == record_id:
                return r
        return None

    # Filter surface
    def set_search_text(self, text: str | None) -> None:
        self.view.set_search_text(text)

    def set_facet(self, name: str, value: str | None) -> None:
        self.view.set_facet(name, value)

    def reset_facets(self) -> None:
        self.view.reset_facets()

    def visible_records(self, now: datetime | None = None) -> list[Record]:
        return self.view.visible(self.records, now)
