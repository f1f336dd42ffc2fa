"""Base repository and the storage contracts the services depend on."""
from __future__ import annotations

from typing import Any, Callable, Iterable, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ValidationError

from logging_config import logger
from zentaro.core.exceptions import DatabaseException
from zentaro.domain.entities import Address, CartItem, Product

ModelT = TypeVar("ModelT", bound=BaseModel)


@runtime_checkable
class ProductRepositoryProtocol(Protocol):
    """Read access to the catalog."""

    def list_products(self, category: str | None = None, limit: int = 100) -> list[Product]:
        ...

    def get_product(self, product_id: str) -> Product | None:
        ...


@runtime_checkable
class CartRepositoryProtocol(Protocol):
    """Remote copy of the per-user cart."""

    def load_cart(self, user_id: str) -> list[CartItem]:
        ...

    def upsert_item(self, user_id: str, product_id: str, quantity: int) -> None:
        ...

    def delete_item(self, user_id: str, product_id: str) -> None:
        ...

    def clear(self, user_id: str) -> None:
        ...


@runtime_checkable
class AddressRepositoryProtocol(Protocol):
    """Authoritative store for delivery addresses."""

    def list_addresses(self, user_id: str) -> list[Address]:
        ...

    def create_address(self, user_id: str, fields: dict[str, Any]) -> Address:
        ...

    def delete_address(self, address_id: str, user_id: str) -> bool:
        ...


class BaseRepository:
    """Base repository class with common CRUD operations."""

    def __init__(self, db: Any) -> None:
        """Initialize repository with database instance.

        Args:
            db: Database instance exposing the mixin methods
        """
        self.db = db

    def _handle_db_error(self, operation: str, error: Exception) -> None:
        """Handle database errors consistently.

        Args:
            operation: Name of the operation that failed
            error: Original exception

        Raises:
            DatabaseException: Wrapped database error
        """
        raise DatabaseException(f"Database operation '{operation}' failed: {str(error)}") from error

    def _call(self, operation: str, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return func(*args)
        except DatabaseException:
            raise
        except Exception as e:
            self._handle_db_error(operation, e)

    @staticmethod
    def _to_models(model: type[ModelT], rows: Iterable[Any], entity: str) -> list[ModelT]:
        """Validate rows into typed records, skipping rows that do not fit."""
        result: list[ModelT] = []
        for row in rows or []:
            try:
                result.append(model.model_validate(dict(row)))
            except (ValidationError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed {entity} row: {e}")
        return result
