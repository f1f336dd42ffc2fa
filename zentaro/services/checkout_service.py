"""Checkout Aggregator: coupon, payable total and order placement."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Optional

from logging_config import logger
from zentaro.core.constants import SUPPORTED_COUNTRY, ZERO
from zentaro.core.exceptions import (
    AuthenticationException,
    CheckoutBlockedException,
    ValidationException,
)
from zentaro.core.order_math import calc_final_total
from zentaro.domain.checkout_rules import PlacementValidationResult, validate_placement
from zentaro.domain.coupon_rules import CouponResult, evaluate_coupon, normalize_code
from zentaro.domain.entities import Address, CartSnapshot
from zentaro.domain.value_objects import CheckoutState, PaymentMethod

from .address_service import AddressBook
from .cart_service import CartStore

OrderListener = Callable[["OrderConfirmation"], None]


@dataclass(frozen=True)
class OrderConfirmation:
    """Terminal event of a checkout. Nothing is persisted."""

    reference: str
    user_id: str
    address_id: str
    payment_method: PaymentMethod
    item_count: int
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    placed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def message(self) -> str:
        return f"Your order is on the way via {self.payment_method.label}."


@dataclass(frozen=True)
class CheckoutTotals:
    subtotal: Decimal
    discount: Decimal
    total: Decimal


def price_checkout(subtotal: Decimal, discount: Decimal) -> CheckoutTotals:
    """Subtotal, applied discount (never above the subtotal) and payable total."""
    return CheckoutTotals(
        subtotal=subtotal,
        discount=min(max(ZERO, discount), subtotal),
        total=calc_final_total(subtotal, discount),
    )


def confirm_order(
    *,
    user_id: str,
    snapshot: CartSnapshot,
    address: Optional[Address],
    payment_method: PaymentMethod,
    discount: Decimal,
    supported_country: str,
) -> OrderConfirmation:
    """Run the placement guard and build the confirmation for ``snapshot``.

    Raises:
        CheckoutBlockedException: empty cart, no address or outside region
    """
    validate_placement(
        item_count=snapshot.total_items,
        address=address,
        supported_country=supported_country,
    ).raise_if_blocked()

    totals = price_checkout(snapshot.total_price, discount)
    return OrderConfirmation(
        reference=uuid.uuid4().hex[:12].upper(),
        user_id=user_id,
        address_id=address.id,
        payment_method=payment_method,
        item_count=snapshot.total_items,
        subtotal=totals.subtotal,
        discount=totals.discount,
        total=totals.total,
    )


class CheckoutSession:
    """Ephemeral checkout state for one visit to the checkout screen."""

    def __init__(
        self,
        cart: CartStore,
        address_book: AddressBook,
        *,
        supported_country: str = SUPPORTED_COUNTRY,
        payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY,
    ):
        self._cart = cart
        self._address_book = address_book
        self._supported_country = supported_country
        self._listeners: list[OrderListener] = []

        preferred = address_book.preferred_address()
        self.selected_address_id: Optional[str] = preferred.id if preferred else None
        self.payment_method = payment_method
        self.coupon_code: Optional[str] = None
        self.discount: Decimal = ZERO
        self.state = CheckoutState.OPEN
        self.confirmation: Optional[OrderConfirmation] = None

    @property
    def subtotal(self) -> Decimal:
        return self._cart.total_price

    @property
    def final_total(self) -> Decimal:
        return price_checkout(self.subtotal, self.discount).total

    @property
    def selected_address(self) -> Optional[Address]:
        if self.selected_address_id is None:
            return None
        return self._address_book.get(self.selected_address_id)

    def select_address(self, address_id: Optional[str]) -> None:
        if address_id is not None and self._address_book.get(address_id) is None:
            raise ValidationException(
                "Unknown delivery address", {"address_id": "Address not found or access denied"}
            )
        self.selected_address_id = address_id

    def set_payment_method(self, method: str | PaymentMethod) -> None:
        try:
            self.payment_method = PaymentMethod.parse(method)
        except ValueError as e:
            raise ValidationException(
                "Unsupported payment method", {"payment_method": str(method)}
            ) from e

    def apply_coupon(self, code: str) -> CouponResult:
        """Replace any earlier discount with the one for ``code``.

        Unknown codes reset the discount to zero and return an invalid result.

        Raises:
            ValidationException: for a blank code; nothing changes
        """
        normalize_code(code)
        result = evaluate_coupon(code, self.subtotal)
        self.discount = result.discount
        self.coupon_code = result.code if result.valid else None
        if result.valid:
            logger.info(f"Coupon {result.code} applied, discount={result.discount}")
        else:
            logger.info(f"Coupon {result.code} rejected")
        return result

    def validate_for_placement(self) -> PlacementValidationResult:
        return validate_placement(
            item_count=self._cart.total_items,
            address=self.selected_address,
            supported_country=self._supported_country,
        )

    def on_order_placed(self, listener: OrderListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def place_order(self) -> OrderConfirmation:
        """Emit the confirmation and clear the cart.

        Raises:
            CheckoutBlockedException: empty cart, no address, outside region,
                or the session was already confirmed
            AuthenticationException: when nobody is signed in
        """
        if self.state is CheckoutState.CONFIRMED:
            raise CheckoutBlockedException("This order has already been placed")
        user_id = self._cart.owner_id
        if user_id is None:
            raise AuthenticationException("Sign in to place an order")

        confirmation = confirm_order(
            user_id=user_id,
            snapshot=self._cart.snapshot(),
            address=self.selected_address,
            payment_method=self.payment_method,
            discount=self.discount,
            supported_country=self._supported_country,
        )

        self._cart.clear_cart()
        self.state = CheckoutState.CONFIRMED
        self.confirmation = confirmation
        logger.info(
            f"Order {confirmation.reference} placed by {user_id}: "
            f"{confirmation.item_count} item(s), total={confirmation.total}"
        )
        for listener in list(self._listeners):
            try:
                listener(confirmation)
            except Exception as e:
                logger.error(f"Order listener failed: {e}")
        return confirmation
