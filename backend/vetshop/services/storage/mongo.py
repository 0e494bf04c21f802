from datetime import datetime, timedelta
from typing import Callable, Optional

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from vetshop.services.storage.base import CartStorage, CartStorageError, slot_expired, utcnow


class MongoCartStorage(CartStorage):
    """
    Slots stored as documents in a MongoDB collection.

    Each slot is ``{"_id": key, "value": <json text>, "updated_at": <utc>}``.
    With a ``ttl``, slots whose ``updated_at`` is older than ``ttl`` read as
    absent and are deleted.
    """
    
    def __init__(
        self,
        collection: Collection,
        ttl: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.collection = collection
        self.ttl = ttl
        self._clock = clock
    
    def read(self, key: str) -> Optional[str]:
        try:
            document = self.collection.find_one({"_id": key})
        except PyMongoError as e:
            raise CartStorageError(f"Could not read cart slot {key}: {e}") from e
        if not document:
            return None
        updated_at = document.get("updated_at")
        if updated_at is not None and slot_expired(updated_at, self.ttl, self._clock()):
            self.remove(key)
            return None
        return document.get("value")
    
    def write(self, key: str, value: str) -> None:
        try:
            self.collection.update_one(
                {"_id": key},
                {"$set": {
                    "value": value,
                    "updated_at": self._clock()
                }},
                upsert=True
            )
        except PyMongoError as e:
            raise CartStorageError(f"Could not write cart slot {key}: {e}") from e
    
    def remove(self, key: str) -> None:
        try:
            self.collection.delete_one({"_id": key})
        except PyMongoError as e:
            raise CartStorageError(f"Could not remove cart slot {key}: {e}") from e
