"""Application-wide constants and configuration values.

Centralizes magic numbers and configuration to avoid duplication
and make changes easier.
"""
from decimal import Decimal

# ============== REGION ==============
SUPPORTED_COUNTRY = "India"

# ============== MONEY ==============
MINOR_UNIT = Decimal("0.01")
ZERO = Decimal("0")

# ============== CART SYNC ==============
DEFAULT_CART_SYNC_ATTEMPTS = 3
DEFAULT_CART_SYNC_DELAY = 0.2  # seconds, doubled on each retry
CART_SYNC_MAX_DELAY = 5.0

# ============== ADDRESS LIMITS ==============
FULL_NAME_MIN = 2
FULL_NAME_MAX = 100
PHONE_MIN = 10
PHONE_MAX = 15
ADDRESS_LINE_MIN = 5
ADDRESS_LINE_MAX = 200
CITY_MIN = 2
CITY_MAX = 100
POSTAL_CODE_MIN = 5
POSTAL_CODE_MAX = 10

# ============== API ==============
DEFAULT_RATE_LIMIT = "100/minute"
MAX_PRODUCTS_PAGE = 100
