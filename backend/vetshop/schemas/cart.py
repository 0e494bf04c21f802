from typing import List, Optional
from pydantic import BaseModel, Field


class UpdateCartItemRequest(BaseModel):
    """Schema for updating cart item quantity. Zero or less removes the item."""
    quantity: int
    
    class Config:
        json_schema_extra = {
            "example": {
                "quantity": 3
            }
        }


class CartLineResponse(BaseModel):
    """Schema for cart line response."""
    product_id: str
    name: str
    price: float
    quantity: int
    subtotal: float
    category: str
    category_label: str
    image: Optional[str] = None
    available: bool = True
    stock: Optional[int] = None
    stock_warning: bool = False


class CartResponse(BaseModel):
    """Schema for cart response."""
    lines: List[CartLineResponse]
    total: float
    item_count: int = Field(alias="itemCount")
    unique_items: int
    average_item_value: float
    low_stock_product_ids: List[str] = []
    
    class Config:
        populate_by_name = True


class CartSummaryResponse(BaseModel):
    """Schema for the cart badge: item count and total only."""
    item_count: int = Field(alias="itemCount")
    total: float
    
    class Config:
        populate_by_name = True
