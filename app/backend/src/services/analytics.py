"""Invoice aggregations: customer rollups, revenue buckets and dashboard totals.

Every function here is a pure transformation of the invoice collection (plus
an anchor date for the revenue window). Malformed records never abort a
computation; field-level defaults are applied instead.
"""

from __future__ import annotations

from calendar import month_abbr
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from app.backend.src.schemas.analytics import (
    CustomerRollup,
    DashboardStats,
    RevenueBucket,
    RevenueSummary,
)

from .calculations import (
    as_record,
    coerce_amount,
    customer_name,
    invoices_frame,
    parse_due_date,
    round_money,
    sum_amounts,
)

PAID_STATUS = "paid"
DEFAULT_REVENUE_MONTHS = 6


def compute_customer_rollup(invoices: Iterable[Any]) -> dict[str, CustomerRollup]:
    """Group invoices by client name and total them.

    The result preserves first-seen order of customers. ``last_invoice`` is
    the latest parseable due date in the group, compared on its ISO-8601
    form.
    """

    groups: dict[str, dict[str, Any]] = {}
    for invoice in invoices:
        record = as_record(invoice)
        name = customer_name(record)
        amount = coerce_amount(record.get("amount"))
        due = parse_due_date(record.get("dueDate"))
        stamp = due.isoformat() if due is not None else None

        group = groups.get(name)
        if group is None:
            groups[name] = {"count": 1, "total": amount, "last": stamp}
            continue

        group["count"] += 1
        group["total"] += amount
        if stamp is not None and (group["last"] is None or stamp > group["last"]):
            group["last"] = stamp

    return {
        name: CustomerRollup(
            name=name,
            invoice_count=group["count"],
            total_billed=group["total"],
            last_invoice=date.fromisoformat(group["last"]) if group["last"] else None,
        )
        for name, group in groups.items()
    }


def _month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def month_window(months: int, anchor: date) -> list[tuple[int, int]]:
    """Return ``(year, month)`` pairs for the window ending at ``anchor``, oldest first."""

    anchor_index = anchor.year * 12 + (anchor.month - 1)
    window = []
    for offset in range(months - 1, -1, -1):
        index = anchor_index - offset
        window.append((index // 12, index % 12 + 1))
    return window


def _resolve_anchor(anchor: date | datetime | None) -> date:
    if anchor is None:
        return date.today()
    if isinstance(anchor, datetime):
        return anchor.date()
    return anchor


def compute_revenue_buckets(
    invoices: Iterable[Any],
    months: int = DEFAULT_REVENUE_MONTHS,
    anchor: date | datetime | None = None,
) -> list[RevenueBucket]:
    """Sum paid invoice amounts per calendar month over a trailing window.

    Invoices without a due date count towards the anchor month; invoices whose
    due date cannot be parsed are skipped.
    """

    if isinstance(months, bool) or not isinstance(months, int) or months < 1:
        raise ValueError(f"months must be a positive integer, got {months!r}")

    anchor_date = _resolve_anchor(anchor)
    window = month_window(months, anchor_date)
    sums: dict[str, Decimal] = {_month_key(year, month): Decimal(0) for year, month in window}

    for invoice in invoices:
        record = as_record(invoice)
        if record.get("status") != PAID_STATUS:
            continue

        raw_due = record.get("dueDate")
        if raw_due is None or raw_due == "":
            due = anchor_date
        else:
            due = parse_due_date(raw_due)
            if due is None:
                continue

        key = _month_key(due.year, due.month)
        if key in sums:
            sums[key] += coerce_amount(record.get("amount"))

    return [
        RevenueBucket(
            key=_month_key(year, month),
            label=month_abbr[month],
            total=round_money(sums[_month_key(year, month)]),
        )
        for year, month in window
    ]


def summarize_revenue(
    invoices: Iterable[Any],
    months: int = DEFAULT_REVENUE_MONTHS,
    anchor: date | datetime | None = None,
) -> RevenueSummary:
    """Return the revenue buckets together with their window total."""

    buckets = compute_revenue_buckets(invoices, months, anchor)
    total = sum((bucket.total for bucket in buckets), Decimal(0))
    return RevenueSummary(months=months, buckets=buckets, total=total)


def compute_dashboard_stats(invoices: Iterable[Any]) -> DashboardStats:
    """Return invoice count and amount totals overall and per status."""

    frame = invoices_frame(invoices)
    amounts = frame["amount"]
    statuses = frame["status"]

    return DashboardStats(
        total_invoices=len(frame),
        total_amount=sum_amounts(amounts),
        paid_amount=sum_amounts(amounts[statuses == "paid"]),
        pending_amount=sum_amounts(amounts[statuses == "pending"]),
        overdue_amount=sum_amounts(amounts[statuses == "overdue"]),
    )


__all__ = [
    "DEFAULT_REVENUE_MONTHS",
    "PAID_STATUS",
    "compute_customer_rollup",
    "compute_dashboard_stats",
    "compute_revenue_buckets",
    "month_window",
    "summarize_revenue",
]
