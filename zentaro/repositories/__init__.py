"""Repository layer for data access abstraction."""
from __future__ import annotations

from .address_repository import AddressRepository
from .base import (
    AddressRepositoryProtocol,
    BaseRepository,
    CartRepositoryProtocol,
    ProductRepositoryProtocol,
)
from .cart_repository import CartRepository
from .product_repository import ProductRepository
from .profile_repository import ProfileRepository

__all__ = [
    "BaseRepository",
    "AddressRepository",
    "AddressRepositoryProtocol",
    "CartRepository",
    "CartRepositoryProtocol",
    "ProductRepository",
    "ProductRepositoryProtocol",
    "ProfileRepository",
]
