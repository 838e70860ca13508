from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from app.crm.filtering.predicates import ALL, FacetCatalog, FilterSpec, has_active_facets, matches, tokenize_search


def visible_records(
    all_records: Sequence[Mapping[str, Any]],
    filter_spec: FilterSpec,
    search_text: str | None,
    catalog: FacetCatalog,
    now: datetime | None = None,
) -> list:
    """
    Recompute the visible subset from scratch. Order of ``all_records`` is kept
    and the returned items are the same objects, not copies.
    """
    tokens = tokenize_search(search_text)
    now = now or datetime.utcnow()
    return [r for r in all_records if matches(r, filter_spec, tokens, catalog, now)]


class FilteredView:
    """
    Search text and facet selections for one record list. Holds no derived
    state: ``visible(records)`` always filters the records it is given.
    """

    def __init__(self, catalog: FacetCatalog):
        self.catalog = catalog
        self.search_text = ""
        self.filters: dict[str, str] = catalog.default_spec()

    def set_search_text(self, text: str | None) -> None:
        self.search_text = text or ""

    def set_facet(self, name: str, value: str | None) -> None:
        self.filters[name] = self.catalog.validate(name, (value or ALL).strip() or ALL)

    def apply_args(self, args: Mapping[str, str]) -> None:
        """Load ``q`` and facet selections from a query-string style mapping."""
        self.set_search_text(args.get("q"))
        for name in self.catalog.names:
            if name in args:
                self.set_facet(name, args.get(name))

    def reset_facets(self) -> None:
        self.filters = self.catalog.default_spec()

    @property
    def has_active_facets(self) -> bool:
        return has_active_facets(self.filters)

    def visible(self, records: Sequence[Mapping[str, Any]], now: datetime | None = None) -> list:
        return visible_records(records, self.filters, self.search_text, self.catalog, now)
