from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple

from vetshop.services.storage.base import CartStorage, slot_expired, utcnow


class InMemoryCartStorage(CartStorage):
    """
    Dict-backed storage. Contents are lost with the process.

    With a ``ttl``, slots not written for longer than ``ttl`` read as absent
    and are evicted on the next read or write.
    """
    
    def __init__(
        self,
        initial: Optional[Dict[str, str]] = None,
        ttl: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.ttl = ttl
        self._clock = clock
        now = clock()
        self._slots: Dict[str, Tuple[str, datetime]] = {
            key: (value, now) for key, value in (initial or {}).items()
        }
    
    def read(self, key: str) -> Optional[str]:
        slot = self._slots.get(key)
        if slot is None:
            return None
        value, updated_at = slot
        if slot_expired(updated_at, self.ttl, self._clock()):
            del self._slots[key]
            return None
        return value
    
    def write(self, key: str, value: str) -> None:
        self.purge_expired()
        self._slots[key] = (value, self._clock())
    
    def remove(self, key: str) -> None:
        self._slots.pop(key, None)
    
    def purge_expired(self) -> int:
        """Drop every expired slot. Returns how many were removed."""
        if self.ttl is None:
            return 0
        now = self._clock()
        expired = [
            key for key, (_, updated_at) in self._slots.items()
            if slot_expired(updated_at, self.ttl, now)
        ]
        for key in expired:
            del self._slots[key]
        return len(expired)
    
    def keys(self):
        return [key for key in list(self._slots) if self.read(key) is not None]
    
    def __contains__(self, key: str) -> bool:
        return self.read(key) is not None


class NullCartStorage(CartStorage):
    """Storage that keeps nothing; carts live only in memory."""
    
    def read(self, key: str) -> Optional[str]:
        return None
    
    def write(self, key: str, value: str) -> None:
        pass
    
    def remove(self, key: str) -> None:
        pass
