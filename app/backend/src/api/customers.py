"""Customer rollup endpoints."""

from fastapi import APIRouter, Depends

from app.backend.src.schemas.analytics import CustomerRollup
from app.backend.src.services.invoices import InvoiceService
from app.backend.src.services.repositories import get_invoice_service

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=list[CustomerRollup])
def list_customers(
    service: InvoiceService = Depends(get_invoice_service),
) -> list[CustomerRollup]:
    """Return one rollup per client name, in first-seen order."""

    return list(service.customer_rollup().values())
