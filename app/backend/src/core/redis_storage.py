"""Invoice collection slot backed by a Redis string key."""

from __future__ import annotations

from typing import Any

from redis import Redis

from .storage import InvoiceRepository


class RedisInvoiceRepository(InvoiceRepository):
    """Keep the serialized collection under ``<key_prefix>:<key>``."""

    def __init__(
        self,
        url: str | None = None,
        *,
        key: str = "invoices",
        key_prefix: str = "finance_dashboard",
        client: Any | None = None,
    ) -> None:
        super().__init__(key)
        if client is None:
            if url is None:
                raise ValueError("Either a Redis URL or a client is required")
            client = Redis.from_url(url)
        self.client = client
        self.key_prefix = key_prefix

    @property
    def redis_key(self) -> str:
        return f"{self.key_prefix}:{self.key}"

    def _read_raw(self) -> str | bytes | None:
        return self.client.get(self.redis_key)

    def _write_raw(self, payload: str) -> None:
        self.client.set(self.redis_key, payload)


__all__ = ["RedisInvoiceRepository"]
