"""Filtering helpers."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Any, Literal

from .calculations import as_record

SortOrder = Literal["asc", "desc"]


def _field_text(invoice: Any, field: str) -> str:
    value = as_record(invoice).get(field)
    if value is None:
        return ""
    return str(value)


def filter_and_search(invoices: Iterable[Any], query: str | None) -> list[Any]:
    """Keep invoices whose client name or id contains ``query``, ignoring case.

    An empty query returns every invoice in its original order.
    """

    if not query:
        return list(invoices)

    needle = query.lower()
    return [
        invoice
        for invoice in invoices
        if needle in _field_text(invoice, "clientName").lower()
        or needle in _field_text(invoice, "id").lower()
    ]


def filter_by_status(invoices: Iterable[Any], status: str | None) -> list[Any]:
    """Keep invoices whose status equals ``status``; no status keeps all."""

    if not status:
        return list(invoices)
    return [invoice for invoice in invoices if as_record(invoice).get("status") == status]


def _sort_key(value: Any) -> tuple[int, Any] | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return (0, value)
    if isinstance(value, str):
        return (1, value.lower())
    return None


def sort_invoices(
    invoices: Iterable[Any], field: str, order: SortOrder = "asc"
) -> list[Any]:
    """Stable sort on ``field``; records without a sortable value go last."""

    if order not in ("asc", "desc"):
        raise ValueError(f"Unsupported sort order: {order!r}")

    present: list[tuple[tuple[int, Any], Any]] = []
    missing: list[Any] = []
    for invoice in invoices:
        key = _sort_key(as_record(invoice).get(field))
        if key is None:
            missing.append(invoice)
        else:
            present.append((key, invoice))

    present.sort(key=lambda item: item[0], reverse=order == "desc")
    return [invoice for _, invoice in present] + missing
