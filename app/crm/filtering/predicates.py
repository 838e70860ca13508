"""
Record-level filter evaluation.

A record matches when it passes the free-text search and every facet whose
selection is not ``"all"``. Evaluation never mutates the record and treats a
missing optional field as a safe default instead of raising.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.crm.filtering.buckets import OLDER, price_bucket, recency_bucket

ALL = "all"

Record = Mapping[str, Any]
FilterSpec = Mapping[str, str]


def tokenize_search(text: str | None) -> list[str]:
    """Lower-case and split on whitespace. Blank input yields no tokens."""
    return (text or "").lower().split()


def _field_text(record: Record, name: str) -> str:
    value = record.get(name)
    if value is None:
        return ""
    return str(value).lower()


def matches_search(record: Record, search_tokens: Iterable[str], search_fields: Iterable[str]) -> bool:
    """Every token must be a substring of at least one searchable field."""
    tokens = list(search_tokens)
    if not tokens:
        return True
    haystack = [_field_text(record, name) for name in search_fields]
    return all(any(tok in text for text in haystack) for tok in tokens)


@dataclass(frozen=True)
class Facet:
    name: str
    options: tuple[str, ...]
    key: Callable[[Record, datetime], str]

    def value_of(self, record: Record, now: datetime) -> str:
        return self.key(record, now)


def categorical(name: str, field_name: str, options: Iterable[str]) -> Facet:
    return Facet(name, tuple(options), lambda record, _now: record.get(field_name))


def derived(name: str, fn: Callable[[Record], str], options: Iterable[str]) -> Facet:
    return Facet(name, tuple(options), lambda record, _now: fn(record))


def price_range(name: str, field_name: str, options: Iterable[str]) -> Facet:
    def _key(record: Record, _now: datetime) -> str:
        return price_bucket(record.get(field_name) or 0)

    return Facet(name, tuple(options), _key)


def parse_timestamp(value: str) -> datetime | None:
    """ISO-8601 string to datetime; a trailing "Z" means UTC. Unparseable input gives None."""
    value = value.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def recency(name: str, field_name: str, options: Iterable[str]) -> Facet:
    def _key(record: Record, now: datetime) -> str:
        ts = record.get(field_name)
        if ts is None:
            return OLDER
        if isinstance(ts, str):
            ts = parse_timestamp(ts)
            if ts is None:
                return OLDER
        return recency_bucket(ts, now)

    return Facet(name, tuple(options), _key)


@dataclass(frozen=True)
class FacetCatalog:
    """The facets and searchable fields one record list supports."""

    facets: tuple[Facet, ...]
    search_fields: tuple[str, ...]
    _by_name: dict[str, Facet] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_name", {f.name: f for f in self.facets})

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.facets)

    def facet(self, name: str) -> Facet:
        try:
            return self._by_name[name]
        except KeyError:
            raise ValueError(f"Unknown filter {name!r}. Must be one of: {', '.join(self.names)}") from None

    def default_spec(self) -> dict[str, str]:
        return {name: ALL for name in self.names}

    def validate(self, name: str, value: str) -> str:
        facet = self.facet(name)
        if value != ALL and value not in facet.options:
            raise ValueError(f"Invalid {name} filter {value!r}. Must be one of: all, {', '.join(facet.options)}")
        return value

    def options(self) -> dict[str, list[str]]:
        return {f.name: [ALL, *f.options] for f in self.facets}


def matches(
    record: Record,
    filter_spec: FilterSpec,
    search_tokens: Iterable[str],
    catalog: FacetCatalog,
    now: datetime | None = None,
) -> bool:
    if not matches_search(record, search_tokens, catalog.search_fields):
        return False
    now = now or datetime.utcnow()
    for facet in catalog.facets:
        selected = filter_spec.get(facet.name, ALL)
        if selected == ALL:
            continue
        if facet.value_of(record, now) != selected:
            return False
    return True


def has_active_facets(filter_spec: FilterSpec) -> bool:
    return any(v != ALL for v in filter_spec.values())
