from functools import lru_cache
from typing import Optional
from fastapi import Depends, Header, HTTPException, status

from vetshop.core.config import settings
from vetshop.services.cart_service import CartService
from vetshop.services.storage.base import CartStorage
from vetshop.services.storage.factory import build_storage


@lru_cache(maxsize=1)
def get_storage() -> CartStorage:
    """Dependency to get the configured cart storage backend (built once)."""
    return build_storage(settings)


def get_cart_service(storage: CartStorage = Depends(get_storage)) -> CartService:
    """Dependency to get the cart service bound to the storage backend."""
    return CartService(storage)


def get_cart_session(
    x_cart_session: Optional[str] = Header(default=None)
) -> str:
    """
    Dependency to get the cart session id from the ``X-Cart-Session`` header.
    
    Raises:
        HTTPException: If the header is missing or blank
    """
    if x_cart_session is None or not x_cart_session.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing X-Cart-Session header"
        )
    return x_cart_session.strip()
