from typing import List
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from vetshop.models.product import Product


class CartLine(Product):
    """Product snapshot plus the quantity held in the cart."""
    quantity: int = Field(ge=1)
    
    @property
    def subtotal(self) -> float:
        return self.price * self.quantity
    
    @property
    def stock_warning(self) -> bool:
        """True when a known snapshot stock cannot cover the line. Informational only."""
        return self.stock is not None and self.stock < self.quantity


class CartState(BaseModel):
    """
    Cart contents in display order.

    ``total`` and ``itemCount`` are derived from ``lines`` every time they are
    read, so they cannot drift from the lines or be set on their own. Values
    for them found in input data are ignored.
    """
    lines: List[CartLine] = Field(default_factory=list)
    
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "lines": [
                    {
                        "id": "prod123",
                        "name": "Croquetas Premium 2kg",
                        "price": 45.5,
                        "category": "alimento",
                        "available": True,
                        "stock": 12,
                        "quantity": 2
                    }
                ],
                "total": 91.0,
                "itemCount": 2
            }
        }
    )
    
    @field_validator("lines")
    @classmethod
    def unique_product_ids(cls, lines: List[CartLine]) -> List[CartLine]:
        seen = set()
        for line in lines:
            if line.id in seen:
                raise ValueError(f"Duplicate cart line for product {line.id}")
            seen.add(line.id)
        return lines
    
    @computed_field
    @property
    def total(self) -> float:
        return sum((line.price * line.quantity for line in self.lines), 0.0)
    
    @computed_field(alias="itemCount")
    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)
    
    @property
    def unique_items(self) -> int:
        return len(self.lines)
    
    @property
    def is_empty(self) -> bool:
        return not self.lines
    
    @property
    def average_item_value(self) -> float:
        if self.item_count == 0:
            return 0.0
        return round(self.total / self.item_count, 2)
    
    def get_line(self, product_id: str):
        """Return the line for ``product_id`` or None."""
        for line in self.lines:
            if line.id == product_id:
                return line
        return None
    
    def low_stock_lines(self, threshold: int) -> List[CartLine]:
        """Lines whose known, non-zero snapshot stock is below ``threshold``."""
        return [
            line for line in self.lines
            if line.stock is not None and 0 < line.stock < threshold
        ]
    
    def to_snapshot(self) -> dict:
        """JSON-ready dict: ``{"lines": [...], "total": n, "itemCount": n}``."""
        return self.model_dump(mode="json", by_alias=True)
