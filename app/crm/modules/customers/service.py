from __future__ import annotations

from app.crm.filtering.board import ListBoard
from app.crm.modules.customers.filters import CUSTOMER_CATALOG


class CustomerBoard(ListBoard):
    collection = "customers"
    catalog = CUSTOMER_CATALOG
