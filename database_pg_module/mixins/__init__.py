"""Database mixins for modular database operations."""
from __future__ import annotations

from .addresses import AddressMixin
from .cart import CartMixin
from .products import ProductMixin
from .profiles import ProfileMixin

__all__ = [
    "AddressMixin",
    "CartMixin",
    "ProductMixin",
    "ProfileMixin",
]
