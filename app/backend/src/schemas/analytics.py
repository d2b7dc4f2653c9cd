"""Analytics schemas."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .invoice import Money


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CustomerRollup(_CamelModel):
    """Billing totals for every invoice sharing a client name."""

    name: str
    invoice_count: int
    total_billed: Money
    last_invoice: date | None = None


class RevenueBucket(_CamelModel):
    """Paid revenue for a single calendar month."""

    key: str
    label: str
    total: Money


class RevenueSummary(_CamelModel):
    months: int
    buckets: list[RevenueBucket]
    total: Money


class DashboardStats(_CamelModel):
    total_invoices: int
    total_amount: Money
    paid_amount: Money
    pending_amount: Money
    overdue_amount: Money
