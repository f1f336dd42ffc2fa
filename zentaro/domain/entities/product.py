"""Product entity model."""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from zentaro.core.order_math import to_money


class Product(BaseModel):
    """Catalog product, read-only from the storefront's perspective."""

    id: str = Field(..., min_length=1, description="Opaque product identifier")
    name: str = Field(..., description="Product name")
    brand: str = Field("", description="Brand name")
    category: str = Field("", description="Category slug")
    category_name: Optional[str] = Field(None, description="Human readable category")
    price: Decimal = Field(..., ge=0, description="Selling price")
    original_price: Optional[Decimal] = Field(None, ge=0, description="Price before discount")
    discount: int = Field(0, ge=0, le=100, description="Discount percent")
    rating: Optional[float] = Field(None, ge=0, le=5)
    reviews: int = Field(0, ge=0)
    image: Optional[str] = Field(None, description="Image URL")
    description: Optional[str] = None
    in_stock: bool = True
    delivery_days: Optional[int] = Field(None, ge=0)
    specifications: dict[str, str] = Field(default_factory=dict)

    class Config:
        """Pydantic config."""

        from_attributes = True

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> str:
        return str(v) if v is not None else v

    @field_validator("brand", "category", mode="before")
    @classmethod
    def blank_if_missing(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("price", "original_price", mode="before")
    @classmethod
    def coerce_money(cls, v: object) -> Decimal | None:
        if v is None:
            return None
        return to_money(v)

    @field_validator("discount", mode="before")
    @classmethod
    def default_discount(cls, v: object) -> int:
        return int(v or 0)

    @field_validator("specifications", mode="before")
    @classmethod
    def stringify_specs(cls, v: object) -> dict[str, str]:
        if not v:
            return {}
        return {str(key): str(value) for key, value in dict(v).items()}
