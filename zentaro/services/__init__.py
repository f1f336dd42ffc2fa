"""Business services orchestrating domain logic."""

from .address_service import AddressBook
from .auth_session import AuthProvider, AuthResult, AuthSession
from .cart_service import CartStore
from .checkout_service import CheckoutSession, OrderConfirmation
from .token_auth import SignedTokenAuthProvider

__all__ = [
    "AddressBook",
    "AuthProvider",
    "AuthResult",
    "AuthSession",
    "CartStore",
    "CheckoutSession",
    "OrderConfirmation",
    "SignedTokenAuthProvider",
]
