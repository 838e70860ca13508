from __future__ import annotations

from app.crm.filtering.buckets import PRICE_BUCKETS, RECENCY_BUCKETS
from app.crm.filtering.predicates import FacetCatalog, categorical, derived, price_range, recency

CUSTOMER_STATUSES = ("active", "inactive")
PAYMENT_STATUSES = ("paid", "pending")

CUSTOMER_SEARCH_FIELDS = ("name", "email", "phone", "company", "notes")


def payment_status(record) -> str:
    return "paid" if record.get("has_paid") else "pending"


CUSTOMER_CATALOG = FacetCatalog(
    facets=(
        categorical("status", "status", CUSTOMER_STATUSES),
        derived("payment_status", payment_status, PAYMENT_STATUSES),
        price_range("price_range", "price", PRICE_BUCKETS),
        recency("date_added", "created_at", RECENCY_BUCKETS),
    ),
    search_fields=CUSTOMER_SEARCH_FIELDS,
)
