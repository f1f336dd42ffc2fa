"""Cart repository for the remote per-user cart."""
from __future__ import annotations

from zentaro.domain.entities import CartItem

from .base import BaseRepository


class CartRepository(BaseRepository):
    """Repository for cart rows keyed by (user_id, product_id)."""

    def load_cart(self, user_id: str) -> list[CartItem]:
        """Get the user's cart joined with product data.

        Rows whose product no longer validates are dropped.

        Raises:
            DatabaseException: If database operation fails
        """
        rows = self._call("load_cart", self.db.get_cart_items, user_id)
        return self._to_models(CartItem, rows, "cart item")

    def upsert_item(self, user_id: str, product_id: str, quantity: int) -> None:
        """Write the absolute quantity for one product.

        Raises:
            DatabaseException: If database operation fails
        """
        if quantity <= 0:
            self.delete_item(user_id, product_id)
            return
        self._call("upsert_item", self.db.upsert_cart_item, user_id, product_id, int(quantity))

    def delete_item(self, user_id: str, product_id: str) -> None:
        self._call("delete_item", self.db.delete_cart_item, user_id, product_id)

    def clear(self, user_id: str) -> None:
        self._call("clear", self.db.clear_cart_items, user_id)
