"""Prometheus metric definitions for invoice storage."""

from __future__ import annotations

from prometheus_client import Counter

invoice_writes_total = Counter(
    "invoice_writes_total",
    "Invoice collection writes by operation and outcome.",
    labelnames=["operation", "status"],
)

__all__ = ["invoice_writes_total"]
