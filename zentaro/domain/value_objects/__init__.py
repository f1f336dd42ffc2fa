"""Value Objects for domain model."""
from __future__ import annotations

from enum import Enum


class PaymentMethod(str, Enum):
    """Payment methods offered at checkout."""

    CASH_ON_DELIVERY = "cod"
    UPI = "upi"
    CARD = "card"

    @property
    def label(self) -> str:
        return {
            PaymentMethod.CASH_ON_DELIVERY: "Cash on Delivery",
            PaymentMethod.UPI: "UPI",
            PaymentMethod.CARD: "Card",
        }[self]

    @classmethod
    def parse(cls, value: str | PaymentMethod) -> PaymentMethod:
        if isinstance(value, PaymentMethod):
            return value
        return cls(str(value).strip().lower())


class CheckoutState(str, Enum):
    """Checkout session lifecycle."""

    OPEN = "open"
    CONFIRMED = "confirmed"


class CartStatus(str, Enum):
    """Whether the cart reflects the current identity yet."""

    READY = "ready"
    LOADING = "loading"


__all__ = ["PaymentMethod", "CheckoutState", "CartStatus"]
