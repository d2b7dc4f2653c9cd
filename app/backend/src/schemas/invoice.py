"""Invoice schemas."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

InvoiceStatus = Literal["pending", "paid", "overdue"]

# Amounts are kept as decimals in Python and written as JSON numbers.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class InvoiceCreate(BaseModel):
    """Payload submitted by the invoice form."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    client_name: str = Field(alias="clientName", min_length=1, max_length=255)
    amount: Money = Field(ge=0, decimal_places=2)
    status: InvoiceStatus = "pending"
    due_date: date = Field(alias="dueDate")
    description: str = Field(default="", max_length=2000)

    def to_record(self, invoice_id: str) -> dict[str, Any]:
        """Return the stored representation with the given identifier."""

        payload = self.model_dump(by_alias=True, mode="json")
        return {"id": invoice_id, **payload}


class InvoiceUpdate(BaseModel):
    """Partial update; omitted fields keep their stored values."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    client_name: str | None = Field(
        default=None, alias="clientName", min_length=1, max_length=255
    )
    amount: Money | None = Field(default=None, ge=0, decimal_places=2)
    status: InvoiceStatus | None = None
    due_date: date | None = Field(default=None, alias="dueDate")
    description: str | None = Field(default=None, max_length=2000)

    @field_validator(
        "client_name", "amount", "status", "due_date", "description", mode="before"
    )
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("field may be omitted but not set to null")
        return value

    def changes(self) -> dict[str, Any]:
        """Return only the fields explicitly provided, keyed as stored."""

        return self.model_dump(by_alias=True, mode="json", exclude_unset=True)
