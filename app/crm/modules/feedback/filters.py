from __future__ import annotations

from app.crm.filtering.buckets import THIS_MONTH, THIS_WEEK, TODAY
from app.crm.filtering.predicates import FacetCatalog, categorical, recency
from app.crm.modules.feedback.workflow import FEEDBACK_TYPES, PRIORITIES, all_status_values

FEEDBACK_SEARCH_FIELDS = ("title", "description", "user_name", "user_email")

FEEDBACK_CATALOG = FacetCatalog(
    facets=(
        categorical("type", "type", FEEDBACK_TYPES),
        categorical("priority", "priority", PRIORITIES),
        categorical("status", "status", all_status_values()),
        recency("date_range", "created_at", (TODAY, THIS_WEEK, THIS_MONTH)),
    ),
    search_fields=FEEDBACK_SEARCH_FIELDS,
)
