import logging
from datetime import timedelta
from typing import Optional

from vetshop.core.config import Settings
from vetshop.services.storage.base import CartStorage
from vetshop.services.storage.file_storage import JsonFileCartStorage
from vetshop.services.storage.memory import InMemoryCartStorage, NullCartStorage

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("file", "mongo", "memory", "none")


def cart_ttl(settings: Settings) -> Optional[timedelta]:
    """Slot lifetime from ``CART_TTL_DAYS``; None when expiry is disabled."""
    if settings.CART_TTL_DAYS <= 0:
        return None
    return timedelta(days=settings.CART_TTL_DAYS)


def build_storage(settings: Settings) -> CartStorage:
    """Create the cart storage backend selected by ``CART_STORAGE_BACKEND``."""
    backend = settings.CART_STORAGE_BACKEND.strip().lower()
    ttl = cart_ttl(settings)
    
    if backend == "file":
        storage = JsonFileCartStorage(settings.CART_FILE_DIR, ttl=ttl)
    elif backend == "mongo":
        # Only the mongo backend opens a connection
        from vetshop.core.database import connect_to_mongo
        from vetshop.services.storage.mongo import MongoCartStorage
        db = connect_to_mongo()
        storage = MongoCartStorage(db[settings.CART_COLLECTION], ttl=ttl)
    elif backend == "memory":
        storage = InMemoryCartStorage(ttl=ttl)
    elif backend == "none":
        storage = NullCartStorage()
    else:
        raise ValueError(
            f"Unknown CART_STORAGE_BACKEND {settings.CART_STORAGE_BACKEND!r}. "
            f"Expected one of: {', '.join(STORAGE_BACKENDS)}"
        )
    
    logger.info(f"Using {type(storage).__name__} for carts (ttl={ttl})")
    return storage
