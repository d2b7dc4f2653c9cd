"""Storage boundary for the invoice collection.

The whole collection lives as one JSON array under a single named slot.
Backends only move the serialized payload in and out of that slot; decoding,
degradation on bad data and change notification are shared here.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import structlog

LOGGER = structlog.get_logger(__name__)

InvoiceRecord = dict[str, Any]
InvoiceObserver = Callable[[list[InvoiceRecord]], None]


class StorageWriteError(RuntimeError):
    """Raised when the invoice collection could not be persisted."""


class InvoiceRepository:
    """Interface for reading and writing the invoice collection slot."""

    def __init__(self, key: str = "invoices") -> None:
        self.key = key
        self._observers: list[InvoiceObserver] = []

    # ------------------------------------------------------------------
    # Backend hooks
    # ------------------------------------------------------------------
    def _read_raw(self) -> str | bytes | None:
        raise NotImplementedError

    def _write_raw(self, payload: str) -> None:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Collection access
    # ------------------------------------------------------------------
    def load(self) -> list[InvoiceRecord]:
        """Return the stored collection, or an empty list when unreadable."""

        try:
            raw = self._read_raw()
        except Exception as exc:
            LOGGER.warning("invoice_storage_read_failed", key=self.key, error=str(exc))
            return []

        if not raw:
            return []

        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as exc:
            LOGGER.warning("invoice_storage_json_error", key=self.key, error=str(exc))
            return []

        return self._coerce_records(payload)

    def save(self, invoices: Iterable[Mapping[str, Any]]) -> list[InvoiceRecord]:
        """Persist the full collection and notify observers.

        Raises :class:`StorageWriteError` when the backend rejects the write.
        Observers are only notified after the write succeeded.
        """

        records = [dict(record) for record in invoices]
        try:
            serialized = json.dumps(records, default=str)
            self._write_raw(serialized)
        except Exception as exc:
            LOGGER.error("invoice_storage_write_failed", key=self.key, error=str(exc))
            raise StorageWriteError("Failed to save invoices") from exc

        self._notify(records)
        return records

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------
    def subscribe(self, observer: InvoiceObserver) -> Callable[[], None]:
        """Register ``observer`` and return a callable that unregisters it."""

        self._observers.append(observer)

        def dispose() -> None:
            self.unsubscribe(observer)

        return dispose

    def unsubscribe(self, observer: InvoiceObserver) -> None:
        try:
            self._observers.remove(observer)
        except ValueError:
            return

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def _notify(self, records: list[InvoiceRecord]) -> None:
        for observer in list(self._observers):
            try:
                observer(list(records))
            except Exception as exc:
                LOGGER.warning(
                    "invoice_observer_failed",
                    key=self.key,
                    observer=getattr(observer, "__name__", repr(observer)),
                    error=str(exc),
                )

    @staticmethod
    def _coerce_records(candidate: Any) -> list[InvoiceRecord]:
        if not isinstance(candidate, list):
            LOGGER.warning("invoice_storage_not_a_list", kind=type(candidate).__name__)
            return []

        records = [dict(item) for item in candidate if isinstance(item, Mapping)]
        dropped = len(candidate) - len(records)
        if dropped:
            LOGGER.warning("invoice_storage_records_dropped", dropped=dropped)
        return records


class InMemoryInvoiceRepository(InvoiceRepository):
    """Process-local storage used by tests and the ``memory`` backend."""

    def __init__(
        self,
        invoices: Iterable[Mapping[str, Any]] | None = None,
        *,
        key: str = "invoices",
    ) -> None:
        super().__init__(key)
        self._slots: dict[str, str] = {}
        if invoices is not None:
            self._slots[key] = json.dumps([dict(item) for item in invoices], default=str)

    def _read_raw(self) -> str | None:
        return self._slots.get(self.key)

    def _write_raw(self, payload: str) -> None:
        self._slots[self.key] = payload


class LocalFileInvoiceRepository(InvoiceRepository):
    """Store the collection as ``<directory>/<key>.json``."""

    def __init__(self, directory: str | Path, *, key: str = "invoices") -> None:
        super().__init__(key)
        self.directory = Path(directory)

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def _read_raw(self) -> str | None:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def _write_raw(self, payload: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        handle = NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.directory,
            prefix=f".{self.key}-",
            suffix=".tmp",
            delete=False,
        )
        try:
            with handle:
                handle.write(payload)
            os.replace(handle.name, self.path)
        except Exception:
            Path(handle.name).unlink(missing_ok=True)
            raise


__all__ = [
    "InMemoryInvoiceRepository",
    "InvoiceObserver",
    "InvoiceRecord",
    "InvoiceRepository",
    "LocalFileInvoiceRepository",
    "StorageWriteError",
]
