"""Invoice collection slot stored in a relational table."""

from __future__ import annotations

from sqlalchemy.orm import sessionmaker

from app.backend.src.core.storage import InvoiceRepository
from app.backend.src.models import Base, StorageSlot

from . import session_scope


class SqlInvoiceRepository(InvoiceRepository):
    """Keep the serialized collection in one ``storage_slots`` row."""

    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        key: str = "invoices",
        create_tables: bool = True,
    ) -> None:
        super().__init__(key)
        self.session_factory = session_factory
        if create_tables:
            Base.metadata.create_all(bind=session_factory.kw["bind"])

    def _read_raw(self) -> str | None:
        with session_scope(self.session_factory) as session:
            slot = session.get(StorageSlot, self.key)
            return slot.payload if slot is not None else None

    def _write_raw(self, payload: str) -> None:
        with session_scope(self.session_factory) as session:
            slot = session.get(StorageSlot, self.key)
            if slot is None:
                session.add(StorageSlot(key=self.key, payload=payload))
            else:
                slot.payload = payload


__all__ = ["SqlInvoiceRepository"]
