"""
Storage port for persisted carts.

A backend is a plain key-value slot store holding JSON text. Implementations
wrap their own failures in ``CartStorageError``.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional


class CartStorageError(Exception):
    """Raised when a storage backend cannot read, write or remove a slot."""


class CartStorage(ABC):
    """Durable key-value slots for cart snapshots."""
    
    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the stored value for ``key``, or None if the slot is empty."""
    
    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
    
    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete the slot. Removing a missing key is a no-op."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def slot_expired(updated_at: datetime, ttl: Optional[timedelta], now: datetime) -> bool:
    """True when a slot last written at ``updated_at`` is older than ``ttl``."""
    if ttl is None:
        return False
    if updated_at.tzinfo is None:
        updated_at = updated_at.replace(tzinfo=timezone.utc)
    return now - updated_at > ttl


def build_cart_key(prefix: str, session_id: str) -> str:
    """Namespaced slot key for one session's cart."""
    return f"{prefix}:{session_id}"
