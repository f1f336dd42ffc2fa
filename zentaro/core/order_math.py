"""Shared helpers for cart totals, coupon discounts and payable amounts."""
from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from zentaro.core.constants import MINOR_UNIT, ZERO


def to_money(value: Any) -> Decimal:
    """Coerce a price-like value to a Decimal rounded to the minor unit."""
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value if value is not None else 0))
        except (InvalidOperation, ValueError):
            return ZERO
    if not amount.is_finite():
        return ZERO
    return amount.quantize(MINOR_UNIT, rounding=ROUND_HALF_UP)


def calc_line_total(price: Any, quantity: int) -> Decimal:
    return to_money(to_money(price) * int(quantity))


def calc_items_total(items: Iterable[Any]) -> Decimal:
    """Sum of price * quantity over cart items (objects or dicts)."""
    total = ZERO
    for item in items:
        if isinstance(item, dict):
            price, qty = item.get("price"), item.get("quantity") or 0
        else:
            price, qty = item.price, item.quantity
        total += calc_line_total(price, qty)
    return to_money(total)


def calc_quantity(items: Iterable[Any]) -> int:
    qty_total = 0
    for item in items:
        qty = item.get("quantity") if isinstance(item, dict) else item.quantity
        qty_total += int(qty or 0)
    return qty_total


def calc_percent_discount(subtotal: Any, percent: int) -> Decimal:
    """Percent of subtotal, rounded half-up to the minor unit."""
    amount = to_money(subtotal) * Decimal(percent) / Decimal(100)
    return max(ZERO, amount.quantize(MINOR_UNIT, rounding=ROUND_HALF_UP))


def calc_final_total(subtotal: Any, discount: Any) -> Decimal:
    """Payable amount: the discount is clamped to the subtotal, never negative."""
    subtotal_amount = max(ZERO, to_money(subtotal))
    discount_amount = max(ZERO, to_money(discount))
    clamped = min(discount_amount, subtotal_amount)
    return max(ZERO, subtotal_amount - clamped)
