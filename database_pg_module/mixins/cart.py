"""
Cart-related database operations.
"""
from __future__ import annotations

from typing import Any

from psycopg.rows import dict_row

from logging_config import logger

from .products import PRODUCT_COLUMNS


class CartMixin:
    """Mixin for per-user cart rows keyed by (user_id, product_id)."""

    def get_cart_items(self, user_id: str) -> list[dict[str, Any]]:
        """Get the user's cart rows joined with product data, oldest first."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                f"""
                SELECT ci.quantity, {PRODUCT_COLUMNS}
                FROM cart_items ci
                JOIN products p ON p.id = ci.product_id
                LEFT JOIN categories c ON p.category_id = c.id
                WHERE ci.user_id = %s
                ORDER BY ci.created_at ASC, ci.id ASC
            """,
                (user_id,),
            )
            return self._attach_specs(cursor, cursor.fetchall())

    def upsert_cart_item(self, user_id: str, product_id: str, quantity: int) -> None:
        """Insert or overwrite the quantity for one product."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO cart_items (user_id, product_id, quantity)
                VALUES (%s, %s, %s)
                ON CONFLICT (user_id, product_id) DO UPDATE SET
                    quantity = EXCLUDED.quantity
            """,
                (user_id, product_id, quantity),
            )

    def delete_cart_item(self, user_id: str, product_id: str) -> bool:
        """Remove one product from the user's cart."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM cart_items WHERE user_id = %s AND product_id = %s",
                (user_id, product_id),
            )
            return cursor.rowcount > 0

    def clear_cart_items(self, user_id: str) -> int:
        """Remove every cart row of the user."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM cart_items WHERE user_id = %s", (user_id,))
            removed = cursor.rowcount
            logger.info(f"Cleared {removed} cart rows for user {user_id}")
            return removed
