"""
Actions accepted by the cart reducer.

The set is closed: ``CartAction`` is a discriminated union on ``type`` and the
reducer handles every member explicitly.
"""

from typing import Annotated, Any, Literal, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from vetshop.models.product import Product


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class AddToCart(_Action):
    """Add one unit of a product, appending a line if needed."""
    type: Literal["ADD_TO_CART"] = "ADD_TO_CART"
    product: Product


class RemoveFromCart(_Action):
    """Drop the line for a product. No-op when absent."""
    type: Literal["REMOVE_FROM_CART"] = "REMOVE_FROM_CART"
    product_id: str


class UpdateQuantity(_Action):
    """Set a line's quantity; zero or below removes the line."""
    type: Literal["UPDATE_QUANTITY"] = "UPDATE_QUANTITY"
    product_id: str
    quantity: int


class ClearCart(_Action):
    type: Literal["CLEAR_CART"] = "CLEAR_CART"


class LoadCart(_Action):
    """Replace the cart with a persisted snapshot (hydration)."""
    type: Literal["LOAD_CART"] = "LOAD_CART"
    snapshot: Any = None


CartAction = Annotated[
    Union[AddToCart, RemoveFromCart, UpdateQuantity, ClearCart, LoadCart],
    Field(discriminator="type")
]

MUTATING_ACTIONS = (AddToCart, RemoveFromCart, UpdateQuantity, ClearCart)

cart_action_adapter = TypeAdapter(CartAction)


def parse_action(data: Any) -> Union[AddToCart, RemoveFromCart, UpdateQuantity, ClearCart, LoadCart]:
    """Validate a raw ``{"type": ..., ...}`` payload into an action."""
    return cart_action_adapter.validate_python(data)
