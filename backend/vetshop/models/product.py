from enum import Enum
from typing import Any, Dict, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ProductCategory(str, Enum):
    """Catalog category tags."""
    ALIMENTO = "alimento"
    JUGUETES = "juguetes"
    MEDICAMENTOS = "medicamentos"
    ACCESORIOS = "accesorios"
    HIGIENE = "higiene"
    OTROS = "otros"


CATEGORY_LABELS: Dict[str, str] = {
    ProductCategory.ALIMENTO.value: "Alimento",
    ProductCategory.JUGUETES.value: "Juguetes",
    ProductCategory.MEDICAMENTOS.value: "Medicamentos",
    ProductCategory.ACCESORIOS.value: "Accesorios",
    ProductCategory.HIGIENE.value: "Higiene",
    ProductCategory.OTROS.value: "Otros",
}


def category_label(category: str) -> str:
    """Display label for a category tag, falling back to the tag itself."""
    return CATEGORY_LABELS.get(category, category.capitalize() if category else "")


class Product(BaseModel):
    """
    Product snapshot as seen by the cart.

    Accepts both the normalized field names and the catalog document names
    (``_id``, ``nombre``, ``precio``, ...) so catalog documents can be passed
    straight through ``from_catalog``.
    """
    id: str = Field(min_length=1, validation_alias=AliasChoices("id", "_id"))
    name: str = Field(default="", validation_alias=AliasChoices("name", "nombre"))
    description: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("description", "descripcion")
    )
    price: float = Field(ge=0, allow_inf_nan=False, validation_alias=AliasChoices("price", "precio"))
    category: str = Field(
        default=ProductCategory.OTROS.value,
        validation_alias=AliasChoices("category", "categoria")
    )
    image: Optional[str] = Field(default=None, validation_alias=AliasChoices("image", "imagen"))
    available: bool = Field(default=True, validation_alias=AliasChoices("available", "activo"))
    stock: Optional[int] = Field(default=None, ge=0)
    
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "prod123",
                "name": "Croquetas Premium 2kg",
                "price": 45.5,
                "category": "alimento",
                "image": "https://example.com/croquetas.jpg",
                "available": True,
                "stock": 12
            }
        }
    )
    
    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        # Catalog ids may arrive as ObjectId
        if value is not None and not isinstance(value, str):
            return str(value)
        return value
    
    @classmethod
    def from_catalog(cls, document: Dict[str, Any]) -> "Product":
        """Build a snapshot from a catalog document."""
        return cls.model_validate(document)
