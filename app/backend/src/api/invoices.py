"""Invoice related endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.backend.src.schemas.invoice import InvoiceCreate, InvoiceStatus, InvoiceUpdate
from app.backend.src.services.calculations import invoices_frame
from app.backend.src.services.filtering import SortOrder
from app.backend.src.services.invoices import InvoiceNotFoundError, InvoiceService
from app.backend.src.services.repositories import get_invoice_service

router = APIRouter(prefix="/invoices", tags=["invoices"])


# --------------------------------------------------------------------------
# GET /invoices
# --------------------------------------------------------------------------
@router.get("")
def list_invoices(
    q: str | None = Query(default=None, description="Client name or id substring"),
    status_filter: InvoiceStatus | None = Query(default=None, alias="status"),
    sort: str | None = Query(default=None),
    order: SortOrder = Query(default="asc"),
    service: InvoiceService = Depends(get_invoice_service),
) -> list[dict[str, Any]]:
    """Return stored invoices, optionally searched, filtered and sorted."""

    return service.list_invoices(query=q, status=status_filter, sort=sort, order=order)


# --------------------------------------------------------------------------
# GET /invoices/export
# --------------------------------------------------------------------------
@router.get("/export")
def export_invoices(
    q: str | None = Query(default=None),
    status_filter: InvoiceStatus | None = Query(default=None, alias="status"),
    service: InvoiceService = Depends(get_invoice_service),
) -> Response:
    """Download the (filtered) invoice list as CSV."""

    invoices = service.list_invoices(query=q, status=status_filter)
    csv_body = invoices_frame(invoices).to_csv(index=False)
    return Response(
        content=csv_body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="invoices.csv"'},
    )


# --------------------------------------------------------------------------
# GET /invoices/overdue
# --------------------------------------------------------------------------
@router.get("/overdue")
def list_overdue_invoices(
    today: date | None = Query(default=None, description="Defaults to the current date"),
    service: InvoiceService = Depends(get_invoice_service),
) -> list[dict[str, Any]]:
    """Return unpaid invoices past their due date with days until due."""

    return service.overdue_invoices(today)


# --------------------------------------------------------------------------
# GET /invoices/{invoice_id}
# --------------------------------------------------------------------------
@router.get("/{invoice_id}")
def get_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
) -> dict[str, Any]:
    try:
        return service.get_invoice(invoice_id)
    except InvoiceNotFoundError:
        raise HTTPException(status_code=404, detail="Invoice not found") from None


# --------------------------------------------------------------------------
# POST /invoices
# --------------------------------------------------------------------------
@router.post("", status_code=status.HTTP_201_CREATED)
def create_invoice(
    payload: InvoiceCreate,
    service: InvoiceService = Depends(get_invoice_service),
) -> dict[str, Any]:
    """Create an invoice with a generated id and append it to the collection."""

    return service.create_invoice(payload)


# --------------------------------------------------------------------------
# PUT /invoices/{invoice_id}
# --------------------------------------------------------------------------
@router.put("/{invoice_id}")
def update_invoice(
    invoice_id: str,
    payload: InvoiceUpdate,
    service: InvoiceService = Depends(get_invoice_service),
) -> dict[str, Any]:
    try:
        return service.update_invoice(invoice_id, payload)
    except InvoiceNotFoundError:
        raise HTTPException(status_code=404, detail="Invoice not found") from None


# --------------------------------------------------------------------------
# DELETE /invoices/{invoice_id}
# --------------------------------------------------------------------------
@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
) -> Response:
    """Delete an invoice; deleting an unknown id is a no-op."""

    service.delete_invoice(invoice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
