"""Calculation helpers shared by the invoice aggregations."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

import pandas as pd

UNKNOWN_CUSTOMER = "(Unknown)"
CENTS = Decimal("0.01")
# Larger amounts would overflow to infinity when written as JSON numbers.
MAX_AMOUNT_EXPONENT = 300
INVOICE_COLUMNS = ["id", "clientName", "amount", "status", "dueDate", "description"]


def as_record(invoice: Any) -> Mapping[str, Any]:
    """Return ``invoice`` when it is a mapping, otherwise an empty one."""

    if isinstance(invoice, Mapping):
        return invoice
    return {}


def coerce_amount(value: Any) -> Decimal:
    """Return ``value`` as a finite decimal; anything non-numeric becomes zero."""

    if value is None or isinstance(value, bool):
        return Decimal(0)

    if isinstance(value, Decimal):
        candidate = value
    elif isinstance(value, (int, float)):
        candidate = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return Decimal(0)
        try:
            candidate = Decimal(text)
        except InvalidOperation:
            return Decimal(0)
    else:
        return Decimal(0)

    if not candidate.is_finite() or candidate.adjusted() > MAX_AMOUNT_EXPONENT:
        return Decimal(0)
    return candidate


def round_money(value: Decimal) -> Decimal:
    """Round half-up to two decimal places.

    The working precision grows with the magnitude of ``value`` so that large
    amounts keep all of their integer digits.
    """

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_due_date(value: Any) -> date | None:
    """Parse an ISO-8601 date or timestamp; return ``None`` when unparseable."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def customer_name(invoice: Mapping[str, Any]) -> str:
    """Return the grouping name for an invoice."""

    value = invoice.get("clientName")
    if value is None:
        return UNKNOWN_CUSTOMER
    if not isinstance(value, str):
        value = str(value)
    return value or UNKNOWN_CUSTOMER


def days_until_due(due_date: Any, today: date | None = None) -> int | None:
    """Return whole days from ``today`` until ``due_date`` (negative when past)."""

    due = parse_due_date(due_date)
    if due is None:
        return None
    return (due - (today or date.today())).days


def is_overdue(due_date: Any, today: date | None = None) -> bool:
    remaining = days_until_due(due_date, today)
    return remaining is not None and remaining < 0


def invoices_frame(invoices: Iterable[Any]) -> pd.DataFrame:
    """Build a dataframe of invoices with amounts and dates normalised."""

    rows = []
    for invoice in invoices:
        record = as_record(invoice)
        rows.append(
            {
                "id": str(record.get("id") or ""),
                "clientName": str(record.get("clientName") or ""),
                "amount": coerce_amount(record.get("amount")),
                "status": str(record.get("status") or ""),
                "dueDate": parse_due_date(record.get("dueDate")),
                "description": str(record.get("description") or ""),
            }
        )
    return pd.DataFrame(rows, columns=INVOICE_COLUMNS)


def sum_amounts(amounts: pd.Series) -> Decimal:
    """Sum a column of decimal amounts, rounding once at the end."""

    return round_money(Decimal(str(amounts.sum())))
