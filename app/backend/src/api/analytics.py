"""Dashboard statistics endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from app.backend.src.schemas.analytics import DashboardStats, RevenueSummary
from app.backend.src.services.invoices import InvoiceService
from app.backend.src.services.repositories import get_invoice_service

router = APIRouter(prefix="/stats", tags=["analytics"])


@router.get("/summary", response_model=DashboardStats)
def get_summary(service: InvoiceService = Depends(get_invoice_service)) -> DashboardStats:
    """Return invoice totals overall and per status."""

    return service.dashboard_stats()


@router.get("/revenue", response_model=RevenueSummary)
def get_revenue(
    months: int | None = Query(default=None, ge=1, le=36),
    anchor: date | None = Query(default=None, description="Last month of the window"),
    service: InvoiceService = Depends(get_invoice_service),
) -> RevenueSummary:
    """Return paid revenue per month for the trailing window."""

    return service.revenue(months, anchor)
