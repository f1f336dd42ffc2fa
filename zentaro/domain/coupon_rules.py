"""Coupon table and discount rules shared across layers."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping

from zentaro.core.constants import ZERO
from zentaro.core.exceptions import ValidationException
from zentaro.core.order_math import calc_percent_discount

INVALID_COUPON_MESSAGE = "This coupon code is not recognized."
EMPTY_COUPON_MESSAGE = "Enter a coupon code."


@dataclass(frozen=True, slots=True)
class CouponRule:
    code: str
    percent: int
    message: str


COUPONS: Mapping[str, CouponRule] = {
    "ZENTARO10": CouponRule("ZENTARO10", 10, "10% discount activated."),
    # Shipping is already free; the code is accepted but changes nothing.
    "FREESHIP": CouponRule("FREESHIP", 0, "Free shipping applied."),
}


@dataclass(frozen=True, slots=True)
class CouponResult:
    code: str
    valid: bool
    discount: Decimal
    message: str


def normalize_code(code: str | None) -> str:
    """Trim and upper-case a coupon code.

    Raises:
        ValidationException: if the code is blank
    """
    normalized = (code or "").strip().upper()
    if not normalized:
        raise ValidationException(EMPTY_COUPON_MESSAGE, {"code": EMPTY_COUPON_MESSAGE})
    return normalized


def evaluate_coupon(code: str | None, subtotal: Any) -> CouponResult:
    """Resolve a code against the coupon table for the given subtotal.

    Unknown codes produce an invalid result with a zero discount.
    """
    normalized = normalize_code(code)
    rule = COUPONS.get(normalized)
    if rule is None:
        return CouponResult(normalized, False, ZERO, INVALID_COUPON_MESSAGE)
    discount = calc_percent_discount(subtotal, rule.percent) if rule.percent else ZERO
    return CouponResult(normalized, True, discount, rule.message)
