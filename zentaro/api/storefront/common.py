from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from fastapi import Depends, Header, HTTPException
from pydantic import BaseModel

from logging_config import logger
from zentaro.core.config import Settings
from zentaro.core.exceptions import DatabaseException
from zentaro.domain.entities import Address, AuthUser, CartItem, CartSnapshot
from zentaro.repositories.base import (
    AddressRepositoryProtocol,
    CartRepositoryProtocol,
    ProductRepositoryProtocol,
)
from zentaro.services.auth_session import AuthProvider


@dataclass
class ApiDependencies:
    """Collaborators wired into the API by ``create_api_app``."""

    settings: Settings
    products: ProductRepositoryProtocol
    cart: CartRepositoryProtocol
    addresses: AddressRepositoryProtocol
    auth_provider: AuthProvider
    db: Any = None


_deps: Optional[ApiDependencies] = None


def set_api_dependencies(deps: ApiDependencies) -> None:
    global _deps
    _deps = deps


def get_deps() -> ApiDependencies:
    if _deps is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return _deps


def get_settings(deps: ApiDependencies = Depends(get_deps)) -> Settings:
    return deps.settings


def get_product_repo(deps: ApiDependencies = Depends(get_deps)) -> ProductRepositoryProtocol:
    return deps.products


def get_cart_repo(deps: ApiDependencies = Depends(get_deps)) -> CartRepositoryProtocol:
    return deps.cart


def get_address_repo(deps: ApiDependencies = Depends(get_deps)) -> AddressRepositoryProtocol:
    return deps.addresses


def _extract_bearer(authorization: str | None) -> str | None:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[len("Bearer ") :].strip()
    return token or None


async def get_current_user(
    authorization: str | None = Header(default=None),
    deps: ApiDependencies = Depends(get_deps),
) -> AuthUser:
    """Resolve the bearer token through the external auth provider."""
    token = _extract_bearer(authorization)
    if token is None:
        raise HTTPException(status_code=401, detail="Missing authorization header")
    try:
        user = await deps.auth_provider.get_user(token)
    except DatabaseException:
        raise
    except Exception as e:
        logger.warning(f"Token verification failed: {e}")
        user = None
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return user


# =============================================================================
# Response models
# =============================================================================


class CartResponse(BaseModel):
    items: list[CartItem]
    total_items: int
    total_price: Decimal

    @classmethod
    def from_snapshot(cls, snapshot: CartSnapshot) -> CartResponse:
        return cls(
            items=list(snapshot.items),
            total_items=snapshot.total_items,
            total_price=snapshot.total_price,
        )


class QuantityIn(BaseModel):
    quantity: int


class CheckoutQuoteIn(BaseModel):
    coupon_code: Optional[str] = None
    address_id: Optional[str] = None


class CheckoutQuoteResponse(BaseModel):
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    coupon_code: Optional[str] = None
    coupon_valid: Optional[bool] = None
    coupon_message: Optional[str] = None
    can_place: bool
    blocked_reason: Optional[str] = None
    blocked_message: Optional[str] = None


class PlaceOrderIn(CheckoutQuoteIn):
    payment_method: str = "cod"


class OrderConfirmationResponse(BaseModel):
    reference: str
    address_id: str
    payment_method: str
    item_count: int
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    message: str


class AddressCreatedResponse(BaseModel):
    address: Address
    message: str = "Address saved."


__all__ = [
    "AddressCreatedResponse",
    "ApiDependencies",
    "CartResponse",
    "CheckoutQuoteIn",
    "CheckoutQuoteResponse",
    "OrderConfirmationResponse",
    "PlaceOrderIn",
    "QuantityIn",
    "get_address_repo",
    "get_cart_repo",
    "get_current_user",
    "get_deps",
    "get_product_repo",
    "get_settings",
    "set_api_dependencies",
]
