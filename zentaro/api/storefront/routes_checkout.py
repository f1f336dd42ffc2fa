from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from logging_config import logger
from zentaro.core.constants import ZERO
from zentaro.core.exceptions import ValidationException
from zentaro.domain.checkout_rules import validate_placement
from zentaro.domain.coupon_rules import CouponResult, evaluate_coupon
from zentaro.domain.entities import Address, AuthUser, CartSnapshot
from zentaro.domain.value_objects import PaymentMethod
from zentaro.services.checkout_service import confirm_order, price_checkout

from .common import (
    CheckoutQuoteIn,
    CheckoutQuoteResponse,
    OrderConfirmationResponse,
    PlaceOrderIn,
    get_address_repo,
    get_cart_repo,
    get_current_user,
    get_settings,
)

router = APIRouter(prefix="/checkout", tags=["checkout"])


def _resolve_address(addresses, user_id: str, address_id: Optional[str]) -> Optional[Address]:
    """Requested address if owned by the user, else the preferred one."""
    owned = addresses.list_addresses(user_id)
    if address_id:
        return next((a for a in owned if a.id == address_id), None)
    return next((a for a in owned if a.is_default), owned[0] if owned else None)


def _apply_coupon(code: Optional[str], snapshot: CartSnapshot) -> Optional[CouponResult]:
    if code is None or not code.strip():
        return None
    return evaluate_coupon(code, snapshot.total_price)


@router.post("/quote", response_model=CheckoutQuoteResponse)
def quote(
    body: CheckoutQuoteIn,
    user: AuthUser = Depends(get_current_user),
    cart=Depends(get_cart_repo),
    addresses=Depends(get_address_repo),
    settings=Depends(get_settings),
):
    """Totals and placement status for the caller's current cart."""
    snapshot = CartSnapshot(tuple(cart.load_cart(user.id)))
    coupon = _apply_coupon(body.coupon_code, snapshot)
    totals = price_checkout(snapshot.total_price, coupon.discount if coupon else ZERO)
    placement = validate_placement(
        item_count=snapshot.total_items,
        address=_resolve_address(addresses, user.id, body.address_id),
        supported_country=settings.supported_country,
    )
    return CheckoutQuoteResponse(
        subtotal=totals.subtotal,
        discount=totals.discount,
        total=totals.total,
        coupon_code=coupon.code if coupon else None,
        coupon_valid=coupon.valid if coupon else None,
        coupon_message=coupon.message if coupon else None,
        can_place=placement.allowed,
        blocked_reason=placement.reason,
        blocked_message=placement.message,
    )


@router.post("/place", response_model=OrderConfirmationResponse)
def place(
    body: PlaceOrderIn,
    user: AuthUser = Depends(get_current_user),
    cart=Depends(get_cart_repo),
    addresses=Depends(get_address_repo),
    settings=Depends(get_settings),
):
    """Validate, clear the cart and confirm. No order record is stored."""
    try:
        payment_method = PaymentMethod.parse(body.payment_method)
    except ValueError as e:
        raise ValidationException(
            "Unsupported payment method", {"payment_method": body.payment_method}
        ) from e

    snapshot = CartSnapshot(tuple(cart.load_cart(user.id)))
    coupon = _apply_coupon(body.coupon_code, snapshot)
    confirmation = confirm_order(
        user_id=user.id,
        snapshot=snapshot,
        address=_resolve_address(addresses, user.id, body.address_id),
        payment_method=payment_method,
        discount=coupon.discount if coupon else ZERO,
        supported_country=settings.supported_country,
    )
    cart.clear(user.id)

    logger.info(
        f"API: order {confirmation.reference} placed by {user.id} "
        f"({confirmation.item_count} item(s))"
    )
    return OrderConfirmationResponse(
        reference=confirmation.reference,
        address_id=confirmation.address_id,
        payment_method=confirmation.payment_method.value,
        item_count=confirmation.item_count,
        subtotal=confirmation.subtotal,
        discount=confirmation.discount,
        total=confirmation.total,
        message=confirmation.message,
    )
