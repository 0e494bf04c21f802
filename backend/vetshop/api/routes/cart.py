import logging
from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from vetshop.api.deps import get_cart_service, get_cart_session
from vetshop.models.cart_actions import LoadCart, parse_action
from vetshop.models.product import Product
from vetshop.schemas.cart import CartResponse, CartSummaryResponse, UpdateCartItemRequest
from vetshop.services.cart_service import CartService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=CartResponse)
def get_cart(
    session_id: str = Depends(get_cart_session),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Get the session's cart.
    
    Returns:
    - All cart lines with subtotals
    - Stock warnings (informational, never enforced)
    - Total, item count and low-stock product ids
    """
    store = cart_service.open_store(session_id)
    return cart_service.build_response(store.state)


@router.get("/summary", response_model=CartSummaryResponse)
def get_cart_summary(
    session_id: str = Depends(get_cart_session),
    cart_service: CartService = Depends(get_cart_service)
):
    """Get item count and total for the cart badge."""
    store = cart_service.open_store(session_id)
    return cart_service.build_summary(store.state)


@router.post("/items", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    product: Product,
    session_id: str = Depends(get_cart_session),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Add one unit of a product snapshot to the cart.
    
    If the product is already in the cart, its quantity increases by one.
    Stock and availability are not checked here.
    """
    store = cart_service.open_store(session_id)
    return cart_service.build_response(store.add_to_cart(product))


@router.put("/items/{product_id}", response_model=CartResponse)
def update_cart_item(
    product_id: str,
    request: UpdateCartItemRequest,
    session_id: str = Depends(get_cart_session),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Set the quantity of a cart item.
    
    A quantity of zero or less removes the item. Unknown items are ignored.
    """
    store = cart_service.open_store(session_id)
    return cart_service.build_response(store.update_quantity(product_id, request.quantity))


@router.delete("/items/{product_id}", response_model=CartResponse)
def remove_from_cart(
    product_id: str,
    session_id: str = Depends(get_cart_session),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Remove an item from the cart. Removing a missing item is not an error.
    """
    store = cart_service.open_store(session_id)
    return cart_service.build_response(store.remove_from_cart(product_id))


@router.delete("", response_model=CartResponse)
def clear_cart(
    session_id: str = Depends(get_cart_session),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Clear all items from the cart and erase its persisted copy.
    """
    store = cart_service.open_store(session_id)
    return cart_service.build_response(store.clear_cart())


@router.post("/actions", response_model=CartResponse)
def dispatch_action(
    payload: Dict[str, Any] = Body(...),
    session_id: str = Depends(get_cart_session),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Dispatch a tagged cart action as-is.
    
    Example body: ``{"type": "UPDATE_QUANTITY", "product_id": "p1", "quantity": 2}``
    """
    try:
        action = parse_action(payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors())
    
    if isinstance(action, LoadCart):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="LOAD_CART is only used when restoring a persisted cart"
        )
    
    store = cart_service.open_store(session_id)
    logger.debug(f"Dispatching {action.type} for cart session {session_id}")
    return cart_service.build_response(store.dispatch(action))
