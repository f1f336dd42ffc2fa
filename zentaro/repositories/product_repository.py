"""Product repository for catalog reads."""
from __future__ import annotations

from typing import Optional

import psycopg

from zentaro.core.constants import MAX_PRODUCTS_PAGE
from zentaro.core.db_retry import db_retry
from zentaro.domain.entities import Product

from .base import BaseRepository


class ProductRepository(BaseRepository):
    """Repository for read-only product operations."""

    @db_retry(max_attempts=3, exceptions=(psycopg.OperationalError,))
    def _fetch_products(self, category: Optional[str], limit: int):
        return self.db.get_products(category=category, in_stock_only=True, limit=limit)

    def list_products(self, category: Optional[str] = None, limit: int = 100) -> list[Product]:
        """List in-stock products, optionally filtered by category slug.

        Raises:
            DatabaseException: If database operation fails
        """
        limit = max(1, min(int(limit), MAX_PRODUCTS_PAGE))
        rows = self._call("list_products", self._fetch_products, category, limit)
        return self._to_models(Product, rows, "product")

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get product by id, or None when it does not exist or is malformed."""
        row = self._call("get_product", self.db.get_product, product_id)
        if not row:
            return None
        models = self._to_models(Product, [row], "product")
        return models[0] if models else None
