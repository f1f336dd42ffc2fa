"""Order placement preconditions (single source of truth)."""
from __future__ import annotations

from dataclasses import dataclass

from zentaro.core.exceptions import (
    AddressRequiredException,
    CheckoutBlockedException,
    EmptyCartException,
    OutsideServiceRegionException,
)
from zentaro.domain.entities import Address


@dataclass(frozen=True, slots=True)
class PlacementValidationResult:
    allowed: bool
    reason: str | None = None
    message: str | None = None
    error: CheckoutBlockedException | None = None

    def raise_if_blocked(self) -> None:
        if self.error is not None:
            raise self.error


def _blocked(error: CheckoutBlockedException) -> PlacementValidationResult:
    return PlacementValidationResult(False, error.reason, error.message, error)


def validate_placement(
    *,
    item_count: int,
    address: Address | None,
    supported_country: str,
) -> PlacementValidationResult:
    """Check cart, address and serviceable region, in that order."""
    if item_count <= 0:
        return _blocked(EmptyCartException())
    if address is None:
        return _blocked(AddressRequiredException())
    if not address.is_in_country(supported_country):
        return _blocked(OutsideServiceRegionException(address.country, supported_country))
    return PlacementValidationResult(True)
