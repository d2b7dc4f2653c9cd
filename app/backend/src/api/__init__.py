"""Public API routers exposed by the FastAPI application."""

from . import analytics, customers, health, invoices

__all__ = [
    "analytics",
    "customers",
    "health",
    "invoices",
]
