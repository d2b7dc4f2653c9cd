"""Construction of the configured invoice repository."""

from __future__ import annotations

from functools import lru_cache

import structlog

from app.backend.src.core.config import Settings, get_settings
from app.backend.src.core.redis_storage import RedisInvoiceRepository
from app.backend.src.core.storage import (
    InMemoryInvoiceRepository,
    InvoiceRepository,
    LocalFileInvoiceRepository,
)

from .invoices import InvoiceService

LOGGER = structlog.get_logger(__name__)


def build_invoice_repository(settings: Settings) -> InvoiceRepository:
    """Return the repository selected by ``settings.storage_backend``."""

    backend = settings.storage_backend
    key = settings.invoice_storage_key

    if backend == "memory":
        repository: InvoiceRepository = InMemoryInvoiceRepository(key=key)
    elif backend == "file":
        repository = LocalFileInvoiceRepository(settings.local_storage_path, key=key)
    elif backend == "redis":
        repository = RedisInvoiceRepository(settings.redis_url, key=key)
    elif backend == "database":
        from app.backend.src.db import SessionLocal
        from app.backend.src.db.repository import SqlInvoiceRepository

        repository = SqlInvoiceRepository(SessionLocal, key=key)
    else:
        raise ValueError(f"Unsupported storage backend: {backend!r}")

    LOGGER.info("invoice_repository_configured", backend=backend, key=key)
    return repository


@lru_cache()
def get_invoice_repository() -> InvoiceRepository:
    """Return the process-wide repository instance."""

    return build_invoice_repository(get_settings())


def get_invoice_service() -> InvoiceService:
    """FastAPI dependency returning a service bound to the shared repository."""

    return InvoiceService(
        get_invoice_repository(),
        revenue_months=get_settings().revenue_window_months,
    )


__all__ = [
    "build_invoice_repository",
    "get_invoice_repository",
    "get_invoice_service",
]
