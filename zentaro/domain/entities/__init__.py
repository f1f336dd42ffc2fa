"""Domain entities package."""

from .address import Address, AddressCreate
from .cart import CartItem, CartSnapshot
from .product import Product
from .user import AuthUser

__all__ = [
    "Address",
    "AddressCreate",
    "AuthUser",
    "CartItem",
    "CartSnapshot",
    "Product",
]
