"""ORM models exposed for easy imports."""

from .base import Base
from .storage_slot import StorageSlot

__all__ = ["Base", "StorageSlot"]
