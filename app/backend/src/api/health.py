"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from app.backend.src.core.config import get_settings
from app.backend.src.services.invoices import InvoiceService
from app.backend.src.services.repositories import get_invoice_service

router = APIRouter(tags=["health"])


@router.get("/health/live")
def liveness() -> dict[str, str]:
    """Return a liveness indicator."""

    return {"status": "live"}


@router.get("/health/ready")
def readiness(service: InvoiceService = Depends(get_invoice_service)) -> dict[str, object]:
    """Return readiness information, reading the invoice slot once."""

    return {
        "status": "ready",
        "backend": get_settings().storage_backend,
        "invoices": len(service.repository.load()),
    }


@router.get("/metrics")
def metrics() -> Response:
    """Expose Prometheus metrics."""

    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
