"""
Pure cart reducer.

``cart_reducer(state, action)`` never mutates its inputs and never touches
storage; persistence is the store's job.
"""

import json
import logging
import math
from typing import Any, List

from pydantic import ValidationError

from vetshop.models.cart import CartLine, CartState
from vetshop.models.cart_actions import (
    AddToCart,
    CartAction,
    ClearCart,
    LoadCart,
    RemoveFromCart,
    UpdateQuantity,
)
from vetshop.models.product import Product

logger = logging.getLogger(__name__)

EMPTY_CART = CartState()


def is_valid_snapshot(product: Product) -> bool:
    """A product can enter the cart only with an id and a finite, non-negative price."""
    product_id = getattr(product, "id", None)
    price = getattr(product, "price", None)
    if not isinstance(product_id, str) or not product_id.strip():
        return False
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        return False
    return math.isfinite(price) and price >= 0


def state_from_snapshot(snapshot: Any) -> CartState:
    """
    Rebuild a cart from persisted data.

    Accepts a ``CartState``, a dict or its JSON text. Anything that is not an
    object with a ``lines`` list of valid, uniquely identified lines gives the
    empty cart.
    """
    if isinstance(snapshot, CartState):
        return snapshot
    if isinstance(snapshot, (str, bytes)):
        try:
            snapshot = json.loads(snapshot)
        except ValueError:
            logger.warning("Ignoring cart snapshot that is not valid JSON")
            return EMPTY_CART
    if not isinstance(snapshot, dict) or not isinstance(snapshot.get("lines"), list):
        logger.warning("Ignoring cart snapshot without a lines list")
        return EMPTY_CART
    try:
        return CartState.model_validate({"lines": snapshot["lines"]})
    except ValidationError as e:
        logger.warning(f"Ignoring malformed cart snapshot: {e.error_count()} validation error(s)")
        return EMPTY_CART


def _add(state: CartState, product: Product) -> CartState:
    if not is_valid_snapshot(product):
        logger.warning(f"Refusing to add invalid product snapshot: {getattr(product, 'id', None)!r}")
        return state
    
    lines: List[CartLine] = []
    found = False
    for line in state.lines:
        if line.id == product.id:
            line = line.model_copy(update={"quantity": line.quantity + 1})
            found = True
        lines.append(line)
    
    if not found:
        fields = product.model_dump()
        fields["quantity"] = 1
        lines.append(CartLine.model_validate(fields))
    
    return CartState(lines=lines)


def _remove(state: CartState, product_id: str) -> CartState:
    lines = [line for line in state.lines if line.id != product_id]
    if len(lines) == len(state.lines):
        return state
    return CartState(lines=lines)


def _update_quantity(state: CartState, product_id: str, quantity: int) -> CartState:
    if quantity <= 0:
        return _remove(state, product_id)
    if state.get_line(product_id) is None:
        return state
    lines = [
        line.model_copy(update={"quantity": quantity}) if line.id == product_id else line
        for line in state.lines
    ]
    return CartState(lines=lines)


def cart_reducer(state: CartState, action: CartAction) -> CartState:
    """Apply one action and return the resulting cart."""
    if isinstance(action, AddToCart):
        return _add(state, action.product)
    if isinstance(action, RemoveFromCart):
        return _remove(state, action.product_id)
    if isinstance(action, UpdateQuantity):
        return _update_quantity(state, action.product_id, action.quantity)
    if isinstance(action, ClearCart):
        return EMPTY_CART
    if isinstance(action, LoadCart):
        return state_from_snapshot(action.snapshot)
    raise TypeError(f"Unknown cart action: {type(action).__name__}")
