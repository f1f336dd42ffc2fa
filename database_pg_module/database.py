"""
Main Database class combining all mixins.
"""
from __future__ import annotations

import os

from logging_config import logger

from .core import DatabaseCore
from .mixins import AddressMixin, CartMixin, ProductMixin, ProfileMixin
from .schema import SchemaMixin


class Database(
    DatabaseCore,
    SchemaMixin,
    ProductMixin,
    CartMixin,
    AddressMixin,
    ProfileMixin,
):
    """
    PostgreSQL Database for the Zentaro storefront.

    Combines all database functionality through mixins:
    - ProductMixin: Catalog reads with specifications
    - CartMixin: Per-user cart rows with upsert on (user_id, product_id)
    - AddressMixin: Addresses with atomic default demotion
    - ProfileMixin: Profiles mirrored from the identity provider
    """

    def __init__(self, database_url=None, skip_init: bool | None = None):
        """Initialize database with connection pool and schema."""
        super().__init__(database_url)
        if skip_init is None:
            skip_init = bool(os.getenv("SKIP_DB_INIT"))
        # Skip init_db for existing databases
        if not skip_init:
            self.init_db()
            logger.info("Database initialized with all mixins")
        else:
            logger.info("Skipping database initialization (SKIP_DB_INIT=1)")
