from typing import Optional

from vetshop.core.config import settings
from vetshop.models.cart import CartState
from vetshop.models.product import category_label
from vetshop.schemas.cart import CartLineResponse, CartResponse, CartSummaryResponse
from vetshop.services.cart_store import CartStore
from vetshop.services.storage.base import CartStorage, build_cart_key


class CartService:
    """Service for per-session cart operations."""
    
    def __init__(
        self,
        storage: CartStorage,
        key_prefix: Optional[str] = None,
        low_stock_threshold: Optional[int] = None
    ):
        self.storage = storage
        self.key_prefix = key_prefix or settings.CART_STORAGE_KEY_PREFIX
        self.low_stock_threshold = (
            settings.LOW_STOCK_THRESHOLD if low_stock_threshold is None else low_stock_threshold
        )
    
    def open_store(self, session_id: str) -> CartStore:
        """Get the hydrated cart store for a session."""
        return CartStore(self.storage, build_cart_key(self.key_prefix, session_id))
    
    def build_response(self, state: CartState) -> CartResponse:
        """Render a cart with per-line details and derived totals."""
        lines = [
            CartLineResponse(
                product_id=line.id,
                name=line.name,
                price=line.price,
                quantity=line.quantity,
                subtotal=line.subtotal,
                category=line.category,
                category_label=category_label(line.category),
                image=line.image,
                available=line.available,
                stock=line.stock,
                stock_warning=line.stock_warning
            )
            for line in state.lines
        ]
        
        return CartResponse(
            lines=lines,
            total=state.total,
            item_count=state.item_count,
            unique_items=state.unique_items,
            average_item_value=state.average_item_value,
            low_stock_product_ids=[
                line.id for line in state.low_stock_lines(self.low_stock_threshold)
            ]
        )
    
    @staticmethod
    def build_summary(state: CartState) -> CartSummaryResponse:
        return CartSummaryResponse(item_count=state.item_count, total=state.total)
