"""Invoice collection operations and the service that persists them."""

from __future__ import annotations

import secrets
import string
import time
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

import structlog

from app.backend.src.core.storage import (
    InvoiceRecord,
    InvoiceRepository,
    StorageWriteError,
)
from app.backend.src.schemas.analytics import (
    CustomerRollup,
    DashboardStats,
    RevenueSummary,
)
from app.backend.src.schemas.invoice import InvoiceCreate, InvoiceUpdate

from .analytics import (
    DEFAULT_REVENUE_MONTHS,
    PAID_STATUS,
    compute_customer_rollup,
    compute_dashboard_stats,
    summarize_revenue,
)
from .calculations import as_record, days_until_due, is_overdue
from .filtering import SortOrder, filter_and_search, filter_by_status, sort_invoices
from .metrics import invoice_writes_total

LOGGER = structlog.get_logger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


class InvoiceNotFoundError(LookupError):
    """Raised when no invoice carries the requested identifier."""

    def __init__(self, invoice_id: str) -> None:
        super().__init__(f"Invoice {invoice_id!r} not found")
        self.invoice_id = invoice_id


def generate_invoice_id(prefix: str = "invoice") -> str:
    """Return ``<prefix>-<epoch ms>-<random suffix>``.

    Timestamp based; unique enough for a single writer, not across processes.
    """

    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


def _record_id(invoice: Any) -> Any:
    return as_record(invoice).get("id")


def upsert_invoice(invoices: Iterable[Any], record: Mapping[str, Any]) -> list[Any]:
    """Replace the invoice sharing ``record``'s id, or append it at the end."""

    updated = list(invoices)
    target = record.get("id")
    for index, invoice in enumerate(updated):
        if _record_id(invoice) == target:
            updated[index] = record
            return updated
    updated.append(record)
    return updated


def delete_invoice(invoices: Iterable[Any], invoice_id: str) -> list[Any]:
    """Drop the first invoice with ``invoice_id``; unchanged copy when absent."""

    updated = list(invoices)
    for index, invoice in enumerate(updated):
        if _record_id(invoice) == invoice_id:
            del updated[index]
            break
    return updated


def find_invoice(invoices: Iterable[Any], invoice_id: str) -> Any | None:
    for invoice in invoices:
        if _record_id(invoice) == invoice_id:
            return invoice
    return None


class InvoiceService:
    """Read-modify-write access to the invoice collection held by a repository.

    Every call re-reads storage; nothing derived is kept between calls.
    """

    def __init__(
        self,
        repository: InvoiceRepository,
        *,
        revenue_months: int = DEFAULT_REVENUE_MONTHS,
    ) -> None:
        self.repository = repository
        self.revenue_months = revenue_months

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list_invoices(
        self,
        *,
        query: str | None = None,
        status: str | None = None,
        sort: str | None = None,
        order: SortOrder = "asc",
    ) -> list[InvoiceRecord]:
        invoices = filter_and_search(self.repository.load(), query)
        invoices = filter_by_status(invoices, status)
        if sort:
            invoices = sort_invoices(invoices, sort, order)
        return invoices

    def get_invoice(self, invoice_id: str) -> InvoiceRecord:
        invoice = find_invoice(self.repository.load(), invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)
        return invoice

    def overdue_invoices(self, today: date | None = None) -> list[InvoiceRecord]:
        """Return unpaid invoices whose due date has passed, oldest due first.

        Each record gains a ``daysUntilDue`` value (negative: days past due).
        """

        overdue = []
        for invoice in self.repository.load():
            if invoice.get("status") == PAID_STATUS:
                continue
            due = invoice.get("dueDate")
            if is_overdue(due, today):
                overdue.append({**invoice, "daysUntilDue": days_until_due(due, today)})
        return sort_invoices(overdue, "daysUntilDue", "asc")

    def customer_rollup(self) -> dict[str, CustomerRollup]:
        return compute_customer_rollup(self.repository.load())

    def revenue(
        self, months: int | None = None, anchor: date | datetime | None = None
    ) -> RevenueSummary:
        return summarize_revenue(
            self.repository.load(), months or self.revenue_months, anchor
        )

    def dashboard_stats(self) -> DashboardStats:
        return compute_dashboard_stats(self.repository.load())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create_invoice(self, payload: InvoiceCreate) -> InvoiceRecord:
        record = payload.to_record(generate_invoice_id())
        self._persist("create", upsert_invoice(self.repository.load(), record))
        LOGGER.info("invoice_created", invoice_id=record["id"])
        return record

    def update_invoice(self, invoice_id: str, payload: InvoiceUpdate) -> InvoiceRecord:
        invoices = self.repository.load()
        existing = find_invoice(invoices, invoice_id)
        if existing is None:
            raise InvoiceNotFoundError(invoice_id)

        record = {**existing, **payload.changes(), "id": invoice_id}
        self._persist("update", upsert_invoice(invoices, record))
        LOGGER.info("invoice_updated", invoice_id=invoice_id)
        return record

    def delete_invoice(self, invoice_id: str) -> bool:
        """Delete ``invoice_id``; returns ``False`` without writing when absent."""

        invoices = self.repository.load()
        remaining = delete_invoice(invoices, invoice_id)
        if len(remaining) == len(invoices):
            return False
        self._persist("delete", remaining)
        LOGGER.info("invoice_deleted", invoice_id=invoice_id)
        return True

    def _persist(self, operation: str, invoices: list[Any]) -> None:
        try:
            self.repository.save(invoices)
        except StorageWriteError:
            invoice_writes_total.labels(operation=operation, status="failed").inc()
            raise
        invoice_writes_total.labels(operation=operation, status="ok").inc()


__all__ = [
    "InvoiceNotFoundError",
    "InvoiceService",
    "delete_invoice",
    "find_invoice",
    "generate_invoice_id",
    "upsert_invoice",
]
