"""Address repository for delivery addresses."""
from __future__ import annotations

from typing import Any

from zentaro.core.exceptions import DatabaseException
from zentaro.domain.entities import Address

from .base import BaseRepository


class AddressRepository(BaseRepository):
    """Repository for address operations scoped by owner."""

    def list_addresses(self, user_id: str) -> list[Address]:
        """Get user's addresses, newest first.

        Raises:
            DatabaseException: If database operation fails
        """
        rows = self._call("list_addresses", self.db.get_addresses, user_id)
        return self._to_models(Address, rows, "address")

    def create_address(self, user_id: str, fields: dict[str, Any]) -> Address:
        """Insert an address (demoting other defaults atomically when needed).

        Args:
            user_id: Owner identity
            fields: Already validated address fields

        Raises:
            DatabaseException: If database operation fails
        """
        row = self._call("create_address", self.db.create_address, user_id, fields)
        if not row:
            raise DatabaseException("Database operation 'create_address' returned no row")
        return Address.model_validate(dict(row))

    def delete_address(self, address_id: str, user_id: str) -> bool:
        """Delete an owned address.

        Returns:
            False when no row matched the id and owner
        """
        return bool(self._call("delete_address", self.db.delete_address, address_id, user_id))
