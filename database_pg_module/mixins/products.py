"""
Product catalog database operations (read-only).
"""
from __future__ import annotations

from typing import Any

from psycopg.rows import dict_row

PRODUCT_COLUMNS = """
    p.id,
    p.name,
    p.brand,
    p.price,
    p.original_price,
    p.discount,
    p.rating,
    p.reviews,
    p.image_url AS image,
    p.description,
    p.in_stock,
    p.delivery_days,
    c.slug AS category,
    c.name AS category_name
"""


class ProductMixin:
    """Mixin for product catalog queries."""

    def _attach_specs(self, cursor, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Attach a ``specifications`` mapping to every product row."""
        if not rows:
            return []
        product_ids = [row["id"] for row in rows]
        cursor.execute(
            """
            SELECT product_id, spec_key, spec_value
            FROM product_specs
            WHERE product_id = ANY(%s)
            ORDER BY id
        """,
            (product_ids,),
        )
        specs: dict[str, dict[str, str]] = {}
        for spec in cursor.fetchall():
            specs.setdefault(spec["product_id"], {})[spec["spec_key"]] = spec["spec_value"]

        result = []
        for row in rows:
            product = dict(row)
            product["specifications"] = specs.get(product["id"], {})
            result.append(product)
        return result

    def get_products(
        self, category: str | None = None, in_stock_only: bool = True, limit: int = 100
    ) -> list[dict[str, Any]]:
        """Get products with category slug and specifications."""
        conditions = []
        params: list[Any] = []
        if in_stock_only:
            conditions.append("p.in_stock = TRUE")
        if category:
            conditions.append("c.slug = %s")
            params.append(category)
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        params.append(limit)

        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products p
                LEFT JOIN categories c ON p.category_id = c.id
                {where}
                ORDER BY p.created_at DESC
                LIMIT %s
            """,
                params,
            )
            return self._attach_specs(cursor, cursor.fetchall())

    def get_product(self, product_id: str) -> dict[str, Any] | None:
        """Get a single product by id."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products p
                LEFT JOIN categories c ON p.category_id = c.id
                WHERE p.id = %s
            """,
                (product_id,),
            )
            row = cursor.fetchone()
            if not row:
                return None
            return self._attach_specs(cursor, [row])[0]
