"""Entrypoint for the FastAPI application."""

import os

import structlog
from dotenv import load_dotenv

# Load .env locally only; deployments inject env vars
env_path = os.path.join(os.path.dirname(__file__), "../.env")
if os.path.exists(env_path):
    load_dotenv(dotenv_path=os.path.abspath(env_path))

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import analytics, customers, health, invoices
from .core.config import get_settings
from .core.logging import configure_logging
from .core.storage import StorageWriteError

LOGGER = structlog.get_logger(__name__)


async def storage_write_error_handler(request: Request, exc: StorageWriteError) -> JSONResponse:
    LOGGER.error("request_storage_write_failed", path=request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Failed to save invoices"})


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(title="Finance Dashboard", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StorageWriteError, storage_write_error_handler)

    app.include_router(health.router, prefix="/api")
    app.include_router(invoices.router, prefix="/api")
    app.include_router(customers.router, prefix="/api")
    app.include_router(analytics.router, prefix="/api")

    return app


app = create_app()
