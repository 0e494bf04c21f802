"""
Cart store: current state, dispatch and persistence for one cart.

The store hydrates itself from its storage slot when created, runs every
action through ``cart_reducer`` and writes the result back after each
mutation. An empty cart is never persisted; its slot is removed instead.
"""

import logging
from typing import Any, Callable, Dict, List, Union

from pydantic import ValidationError

from vetshop.models.cart import CartState
from vetshop.models.cart_actions import (
    MUTATING_ACTIONS,
    AddToCart,
    CartAction,
    ClearCart,
    LoadCart,
    RemoveFromCart,
    UpdateQuantity,
)
from vetshop.models.product import Product
from vetshop.services.cart_reducer import EMPTY_CART, cart_reducer, state_from_snapshot
from vetshop.services.storage.base import CartStorage, CartStorageError

logger = logging.getLogger(__name__)

CartListener = Callable[[CartState], None]


class CartStore:
    """Single-owner cart backed by one durable storage slot."""
    
    def __init__(self, storage: CartStorage, key: str, hydrate: bool = True):
        self.storage = storage
        self.key = key
        self._state: CartState = EMPTY_CART
        self._listeners: List[CartListener] = []
        if hydrate:
            self.hydrate()
    
    @property
    def state(self) -> CartState:
        return self._state
    
    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """
        Register ``listener`` to be called with the new state after each change.

        Returns a function that unsubscribes it.
        """
        self._listeners.append(listener)
        
        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        
        return unsubscribe
    
    def dispatch(self, action: CartAction) -> CartState:
        """Apply ``action``, persist the result if it is a mutation, and notify listeners."""
        previous = self._state
        self._state = cart_reducer(previous, action)
        
        if isinstance(action, MUTATING_ACTIONS):
            # Clearing always erases the slot, even if the cart was already empty
            if isinstance(action, ClearCart) or self._state is not previous:
                self._persist()
        
        if self._state != previous:
            self._notify()
        return self._state
    
    def hydrate(self) -> CartState:
        """Load the persisted cart, falling back to an empty cart on any problem."""
        try:
            raw = self.storage.read(self.key)
        except CartStorageError as e:
            logger.error(f"Could not read cart {self.key}, starting empty: {e}")
            return self.dispatch(LoadCart(snapshot=EMPTY_CART))
        
        if raw is None:
            return self.dispatch(LoadCart(snapshot=EMPTY_CART))
        
        state = state_from_snapshot(raw)
        if state.is_empty:
            # Malformed or empty slots are dropped
            logger.warning(f"Discarding unusable persisted cart {self.key}")
            self._remove_slot()
        return self.dispatch(LoadCart(snapshot=state))
    
    # Convenience wrappers mirroring the action set
    
    def add_to_cart(self, product: Union[Product, Dict[str, Any]]) -> CartState:
        """
        Add one unit of ``product``.

        Raw snapshots (dicts in snapshot or catalog shape) are validated first;
        an invalid one is refused and the cart is returned unchanged.
        """
        if not isinstance(product, Product):
            try:
                product = Product.model_validate(product)
            except ValidationError as e:
                logger.warning(f"Refusing to add invalid product snapshot: {e.error_count()} validation error(s)")
                return self._state
        return self.dispatch(AddToCart(product=product))
    
    def remove_from_cart(self, product_id: str) -> CartState:
        return self.dispatch(RemoveFromCart(product_id=product_id))
    
    def update_quantity(self, product_id: str, quantity: int) -> CartState:
        return self.dispatch(UpdateQuantity(product_id=product_id, quantity=quantity))
    
    def clear_cart(self) -> CartState:
        return self.dispatch(ClearCart())
    
    def load_cart(self, snapshot) -> CartState:
        return self.dispatch(LoadCart(snapshot=snapshot))
    
    def _persist(self) -> None:
        if self._state.is_empty:
            self._remove_slot()
            return
        try:
            self.storage.write(self.key, self._state.model_dump_json(by_alias=True))
        except CartStorageError as e:
            logger.error(f"Could not persist cart {self.key}: {e}")
    
    def _remove_slot(self) -> None:
        try:
            self.storage.remove(self.key)
        except CartStorageError as e:
            logger.error(f"Could not remove persisted cart {self.key}: {e}")
    
    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._state)
