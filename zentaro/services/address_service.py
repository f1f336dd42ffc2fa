"""Address Book: delivery addresses of the current identity.

The remote store is authoritative here. The local list only changes after a
write succeeded, unlike the cart which is updated first.
"""
from __future__ import annotations

from typing import Any, Optional

from logging_config import logger
from zentaro.core.async_db import AsyncDBProxy
from zentaro.core.constants import SUPPORTED_COUNTRY
from zentaro.core.exceptions import AddressNotFoundException, AuthenticationException
from zentaro.domain.entities import Address, AddressCreate, AuthUser
from zentaro.repositories.base import AddressRepositoryProtocol

from .auth_session import AuthSession


class AddressBook:
    """Create, list and delete addresses with a single default per user."""

    def __init__(
        self,
        session: AuthSession,
        repository: AddressRepositoryProtocol,
        *,
        supported_country: str = SUPPORTED_COUNTRY,
    ):
        self._session = session
        self._remote = AsyncDBProxy(repository)
        self._supported_country = supported_country
        self._addresses: list[Address] = []
        self._generation = 0
        self._unsubscribe = session.subscribe(self._on_identity_change)

    @property
    def addresses(self) -> list[Address]:
        return list(self._addresses)

    def get(self, address_id: str) -> Optional[Address]:
        for address in self._addresses:
            if address.id == address_id:
                return address
        return None

    def preferred_address(self) -> Optional[Address]:
        """Default address, else the newest one, else None."""
        for address in self._addresses:
            if address.is_default:
                return address
        return self._addresses[0] if self._addresses else None

    def _require_user(self) -> str:
        user_id = self._session.user_id
        if user_id is None:
            raise AuthenticationException("Sign in to manage delivery addresses")
        return user_id

    def _on_identity_change(self, previous: AuthUser | None, current: AuthUser | None) -> None:
        self._generation += 1
        self._addresses = []

    async def list_addresses(self) -> list[Address]:
        """Reload the current user's addresses, newest first."""
        user_id = self._require_user()
        generation = self._generation
        addresses = await self._remote.list_addresses(user_id)
        if generation == self._generation:
            self._addresses = list(addresses)
        return list(addresses)

    async def create_address(self, fields: dict[str, Any]) -> Address:
        """Validate and store a new address.

        Raises:
            ValidationException: before any I/O when a field is invalid
            AuthenticationException: when nobody is signed in
            DatabaseException: when the write fails (local list untouched)
        """
        payload = {"country": self._supported_country, **fields}
        if not payload.get("country"):
            payload["country"] = self._supported_country
        data = AddressCreate.parse(payload)
        user_id = self._require_user()

        generation = self._generation
        address = await self._remote.create_address(user_id, data.model_dump())
        logger.info(f"Address {address.id} created for user {user_id} (default={address.is_default})")

        if generation == self._generation:
            existing = self._addresses
            if address.is_default:
                existing = [a.model_copy(update={"is_default": False}) for a in existing]
            self._addresses = [address, *[a for a in existing if a.id != address.id]]
        return address

    async def delete_address(self, address_id: str) -> None:
        """Delete an owned address.

        Raises:
            AddressNotFoundException: unknown id or owned by someone else
        """
        user_id = self._require_user()
        generation = self._generation
        deleted = await self._remote.delete_address(address_id, user_id)
        if not deleted:
            raise AddressNotFoundException(address_id)
        if generation == self._generation:
            self._addresses = [a for a in self._addresses if a.id != address_id]

    def close(self) -> None:
        self._unsubscribe()
