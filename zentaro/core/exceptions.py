"""Custom exceptions for the Zentaro storefront."""
from __future__ import annotations


class ZentaroException(Exception):
    """Base exception for all storefront errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class DatabaseException(ZentaroException):
    """Database-related errors."""

    pass


class ValidationException(ZentaroException):
    """Input validation errors."""

    def __init__(self, message: str, errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or {}


class AuthenticationException(ZentaroException):
    """Sign-in, sign-up or token errors reported by the auth provider."""

    pass


class AddressNotFoundException(ZentaroException):
    """Address does not exist or belongs to another user.

    Both causes map to the same condition.
    """

    def __init__(self, address_id: str) -> None:
        super().__init__("Address not found or access denied")
        self.address_id = address_id


class CheckoutBlockedException(ZentaroException):
    """Order placement precondition failed."""

    reason = "blocked"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Order cannot be placed")


class EmptyCartException(CheckoutBlockedException):
    reason = "empty_cart"

    def __init__(self) -> None:
        super().__init__("Your cart is empty")


class AddressRequiredException(CheckoutBlockedException):
    reason = "address_required"

    def __init__(self) -> None:
        super().__init__("Select a delivery address before placing the order")


class OutsideServiceRegionException(CheckoutBlockedException):
    reason = "outside_service_region"

    def __init__(self, country: str, supported_country: str) -> None:
        super().__init__(f"Delivery is available only in {supported_country}")
        self.country = country
        self.supported_country = supported_country


class ConfigurationException(ZentaroException):
    """Configuration errors."""

    pass
