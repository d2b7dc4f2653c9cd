"""Unit tests for the invoice aggregations."""

from __future__ import annotations

import os
import sys
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[4]))

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_finance.db")

import pytest

from app.backend.src.schemas.analytics import CustomerRollup
from app.backend.src.services.analytics import (
    compute_customer_rollup,
    compute_dashboard_stats,
    compute_revenue_buckets,
    month_window,
    summarize_revenue,
)
from app.backend.src.services.calculations import coerce_amount


@pytest.fixture()
def acme_invoices() -> list[dict[str, object]]:
    return [
        {
            "id": "i1",
            "clientName": "Acme",
            "amount": 100,
            "status": "paid",
            "dueDate": "2025-01-15",
        },
        {
            "id": "i2",
            "clientName": "Acme",
            "amount": 50,
            "status": "pending",
            "dueDate": "2025-02-01",
        },
    ]


@pytest.fixture()
def messy_invoices() -> list[object]:
    return [
        {"id": "a", "clientName": "Globex", "amount": "19.99", "status": "paid", "dueDate": "2024-12-03"},
        {"id": "b", "clientName": "", "amount": "not a number", "status": "paid"},
        {"id": "c", "amount": None, "status": "overdue", "dueDate": "garbage"},
        {"id": "d", "clientName": "Globex", "amount": float("nan"), "status": "pending"},
        {"id": "e", "clientName": "Initech", "amount": True, "status": "paid", "dueDate": "2025-01-31T23:00:00Z"},
        {"id": "f", "clientName": "Initech", "amount": 12.5, "status": "Paid", "dueDate": "2025-01-02"},
        "not a record",
    ]


# ---------------------------------------------------------------------------
# Customer rollup
# ---------------------------------------------------------------------------
def test_customer_rollup_groups_by_client_name(acme_invoices: list[dict[str, object]]) -> None:
    rollup = compute_customer_rollup(acme_invoices)

    assert rollup == {
        "Acme": CustomerRollup(
            name="Acme",
            invoice_count=2,
            total_billed=Decimal("150"),
            last_invoice=date(2025, 2, 1),
        )
    }


def test_customer_rollup_total_matches_sum_of_amounts(messy_invoices: list[object]) -> None:
    rollup = compute_customer_rollup(messy_invoices)

    expected = sum(
        (coerce_amount(item.get("amount")) for item in messy_invoices if isinstance(item, dict)),
        Decimal(0),
    )
    assert sum((customer.total_billed for customer in rollup.values()), Decimal(0)) == expected
    assert sum(customer.invoice_count for customer in rollup.values()) == len(messy_invoices)


def test_customer_rollup_applies_defaults_to_malformed_records(messy_invoices: list[object]) -> None:
    rollup = compute_customer_rollup(messy_invoices)

    assert list(rollup) == ["Globex", "(Unknown)", "Initech"]
    unknown = rollup["(Unknown)"]
    assert unknown.invoice_count == 3
    assert unknown.total_billed == Decimal(0)
    assert unknown.last_invoice is None

    globex = rollup["Globex"]
    assert globex.total_billed == Decimal("19.99")
    assert globex.last_invoice == date(2024, 12, 3)


def test_customer_rollup_names_are_case_sensitive() -> None:
    rollup = compute_customer_rollup(
        [
            {"clientName": "acme", "amount": 1},
            {"clientName": "Acme", "amount": 2},
        ]
    )

    assert set(rollup) == {"acme", "Acme"}


def test_customer_rollup_keeps_latest_due_date_regardless_of_order() -> None:
    rollup = compute_customer_rollup(
        [
            {"clientName": "Umbrella", "amount": 1, "dueDate": "2025-03-10"},
            {"clientName": "Umbrella", "amount": 1, "dueDate": "2024-11-30"},
            {"clientName": "Umbrella", "amount": 1},
            {"clientName": "Umbrella", "amount": 1, "dueDate": "2025-03-10T08:00:00.000Z"},
        ]
    )

    assert rollup["Umbrella"].last_invoice == date(2025, 3, 10)
    assert rollup["Umbrella"].invoice_count == 4


def test_customer_rollup_of_empty_collection_is_empty() -> None:
    assert compute_customer_rollup([]) == {}


# ---------------------------------------------------------------------------
# Revenue buckets
# ---------------------------------------------------------------------------
def test_revenue_buckets_exclude_unpaid_invoices(acme_invoices: list[dict[str, object]]) -> None:
    buckets = compute_revenue_buckets(acme_invoices, 2, anchor=date(2025, 2, 1))

    assert [(bucket.label, bucket.total) for bucket in buckets] == [
        ("Jan", Decimal("100.00")),
        ("Feb", Decimal("0.00")),
    ]
    assert [bucket.key for bucket in buckets] == ["2025-01", "2025-02"]


@pytest.mark.parametrize("size", [0, 1, 5, 40])
def test_revenue_buckets_always_have_window_length(size: int) -> None:
    invoices = [
        {"id": str(i), "clientName": "C", "amount": i, "status": "paid", "dueDate": f"2025-{i % 12 + 1:02d}-01"}
        for i in range(size)
    ]

    buckets = compute_revenue_buckets(invoices, 6, anchor=date(2025, 6, 15))

    assert len(buckets) == 6
    if size == 0:
        assert all(bucket.total == 0 for bucket in buckets)


def test_revenue_window_crosses_year_boundary() -> None:
    buckets = compute_revenue_buckets([], 6, anchor=date(2025, 2, 20))

    assert [bucket.key for bucket in buckets] == [
        "2024-09",
        "2024-10",
        "2024-11",
        "2024-12",
        "2025-01",
        "2025-02",
    ]
    assert [bucket.label for bucket in buckets] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]


def test_revenue_single_month_window_uses_anchor_month() -> None:
    invoices = [
        {"amount": 10, "status": "paid", "dueDate": "2025-05-01"},
        {"amount": 99, "status": "paid", "dueDate": "2025-04-30"},
    ]

    buckets = compute_revenue_buckets(invoices, 1, anchor=datetime(2025, 5, 31, 12, 0))

    assert len(buckets) == 1
    assert buckets[0].key == "2025-05"
    assert buckets[0].total == Decimal("10.00")


def test_revenue_ignores_paid_invoices_outside_window() -> None:
    invoices = [
        {"amount": 500, "status": "paid", "dueDate": "2023-01-10"},
        {"amount": 700, "status": "paid", "dueDate": "2026-01-10"},
    ]

    buckets = compute_revenue_buckets(invoices, 3, anchor=date(2025, 3, 1))

    assert all(bucket.total == 0 for bucket in buckets)


def test_revenue_sums_before_rounding() -> None:
    invoices = [
        {"amount": 0.004, "status": "paid", "dueDate": "2025-03-02"},
        {"amount": "0.004", "status": "paid", "dueDate": "2025-03-03"},
        {"amount": 1.005, "status": "paid", "dueDate": "2025-02-03"},
    ]

    buckets = compute_revenue_buckets(invoices, 2, anchor=date(2025, 3, 1))

    assert buckets[0].total == Decimal("1.01")
    assert buckets[1].total == Decimal("0.01")


def test_revenue_dates_missing_due_date_at_anchor_and_skips_garbage() -> None:
    invoices = [
        {"amount": 40, "status": "paid"},
        {"amount": 60, "status": "paid", "dueDate": ""},
        {"amount": 1000, "status": "paid", "dueDate": "31/02/2025"},
        {"amount": "oops", "status": "paid", "dueDate": "2025-04-02"},
        {"amount": 25, "status": "PAID", "dueDate": "2025-04-02"},
    ]

    buckets = compute_revenue_buckets(invoices, 2, anchor=date(2025, 4, 18))

    assert buckets[-1].total == Decimal("100.00")
    assert buckets[0].total == Decimal("0.00")


def test_revenue_defaults_anchor_to_today() -> None:
    today = date.today()

    buckets = compute_revenue_buckets([{"amount": 5, "status": "paid", "dueDate": today.isoformat()}])

    assert len(buckets) == 6
    assert buckets[-1].key == f"{today.year:04d}-{today.month:02d}"
    assert buckets[-1].total == Decimal("5.00")


@pytest.mark.parametrize("months", [0, -3, True, 2.5])
def test_revenue_rejects_invalid_window(months: object) -> None:
    with pytest.raises(ValueError):
        compute_revenue_buckets([], months)  # type: ignore[arg-type]


def test_summarize_revenue_totals_rounded_buckets() -> None:
    invoices = [
        {"amount": 10.125, "status": "paid", "dueDate": "2025-01-05"},
        {"amount": 20.125, "status": "paid", "dueDate": "2025-02-05"},
    ]

    summary = summarize_revenue(invoices, 2, anchor=date(2025, 2, 10))

    assert summary.months == 2
    assert [bucket.total for bucket in summary.buckets] == [Decimal("10.13"), Decimal("20.13")]
    assert summary.total == Decimal("30.26")


def test_month_window_orders_oldest_first() -> None:
    assert month_window(3, date(2024, 1, 9)) == [(2023, 11), (2023, 12), (2024, 1)]


# ---------------------------------------------------------------------------
# Dashboard stats
# ---------------------------------------------------------------------------
def test_dashboard_stats_totals_by_status(messy_invoices: list[object]) -> None:
    stats = compute_dashboard_stats(messy_invoices)

    assert stats.total_invoices == 7
    assert stats.total_amount == Decimal("32.49")
    assert stats.paid_amount == Decimal("19.99")
    assert stats.pending_amount == Decimal("0.00")
    assert stats.overdue_amount == Decimal("0.00")


def test_very_large_amounts_do_not_break_aggregation(
    acme_invoices: list[dict[str, object]],
) -> None:
    invoices = acme_invoices + [
        {"id": "i9", "clientName": "Huge", "amount": "1e30", "status": "paid", "dueDate": "2025-01-20"}
    ]

    buckets = compute_revenue_buckets(invoices, 2, anchor=date(2025, 2, 1))
    stats = compute_dashboard_stats(invoices)

    assert [bucket.total for bucket in buckets] == [Decimal("1e30"), Decimal("0")]
    assert stats.paid_amount == Decimal("1e30")
    assert stats.total_invoices == 3
    assert compute_customer_rollup(invoices)["Huge"].total_billed == Decimal("1e30")


def test_amounts_beyond_float_range_count_as_zero() -> None:
    assert coerce_amount("1e400") == Decimal(0)
    assert coerce_amount(Decimal("-1e400")) == Decimal(0)
    assert coerce_amount("1e300") == Decimal("1e300")


def test_dashboard_stats_of_empty_collection() -> None:
    stats = compute_dashboard_stats([])

    assert stats.total_invoices == 0
    assert stats.total_amount == Decimal("0.00")
    assert stats.paid_amount == Decimal("0.00")
