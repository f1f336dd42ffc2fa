"""
Database schema initialization.
"""
from __future__ import annotations

from logging_config import logger


class SchemaMixin:
    """Mixin for database schema initialization."""

    def init_db(self):
        """Initialize PostgreSQL database schema."""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            # Categories table
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS categories (
                    id SERIAL PRIMARY KEY,
                    slug TEXT UNIQUE NOT NULL,
                    name TEXT NOT NULL,
                    icon TEXT
                )
            """
            )

            # Products table (read-only for the storefront)
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS products (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    brand TEXT NOT NULL DEFAULT '',
                    category_id INTEGER REFERENCES categories(id),
                    price NUMERIC(12, 2) NOT NULL CHECK (price >= 0),
                    original_price NUMERIC(12, 2),
                    discount INTEGER NOT NULL DEFAULT 0,
                    rating REAL,
                    reviews INTEGER NOT NULL DEFAULT 0,
                    image_url TEXT,
                    description TEXT,
                    in_stock BOOLEAN NOT NULL DEFAULT TRUE,
                    delivery_days INTEGER,
                    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
            """
            )

            # Product specifications (key/value)
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS product_specs (
                    id SERIAL PRIMARY KEY,
                    product_id TEXT NOT NULL REFERENCES products(id) ON DELETE CASCADE,
                    spec_key TEXT NOT NULL,
                    spec_value TEXT NOT NULL,
                    UNIQUE (product_id, spec_key)
                )
            """
            )

            # Profiles mirrored from the identity provider
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS profiles (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL,
                    full_name TEXT,
                    avatar_url TEXT,
                    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
            """
            )

            # Delivery addresses
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS addresses (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    label TEXT NOT NULL,
                    full_name TEXT NOT NULL,
                    phone_number TEXT NOT NULL,
                    address_line1 TEXT NOT NULL,
                    address_line2 TEXT,
                    city TEXT NOT NULL,
                    state TEXT NOT NULL,
                    postal_code TEXT NOT NULL,
                    country TEXT NOT NULL DEFAULT 'India',
                    is_default BOOLEAN NOT NULL DEFAULT FALSE,
                    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
            """
            )

            # Cart rows, one per (user, product)
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS cart_items (
                    id SERIAL PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    product_id TEXT NOT NULL REFERENCES products(id) ON DELETE CASCADE,
                    quantity INTEGER NOT NULL CHECK (quantity > 0),
                    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                    UNIQUE (user_id, product_id)
                )
            """
            )

            # At most one default address per user
            cursor.execute(
                """
                CREATE UNIQUE INDEX IF NOT EXISTS idx_addresses_one_default
                ON addresses (user_id) WHERE is_default
            """
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_addresses_user ON addresses (user_id, created_at DESC)"
            )
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_products_category ON products (category_id)")

            logger.info("Database schema ready")
