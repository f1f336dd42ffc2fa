"""Cart entity models."""
from __future__ import annotations

from decimal import Decimal

from pydantic import Field

from zentaro.core.order_math import calc_items_total, calc_line_total, calc_quantity

from .product import Product


class CartItem(Product):
    """Product snapshot plus a positive quantity."""

    quantity: int = Field(..., ge=1, description="Units in the cart")

    @property
    def line_total(self) -> Decimal:
        return calc_line_total(self.price, self.quantity)

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> CartItem:
        return cls(**product.model_dump(exclude={"quantity"}), quantity=quantity)


class CartSnapshot:
    """Immutable view over the cart at one point in time."""

    __slots__ = ("items",)

    def __init__(self, items: tuple[CartItem, ...]):
        self.items = items

    @property
    def total_items(self) -> int:
        return calc_quantity(self.items)

    @property
    def total_price(self) -> Decimal:
        return calc_items_total(self.items)
