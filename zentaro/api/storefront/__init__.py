from __future__ import annotations

from fastapi import APIRouter

from . import (
    routes_addresses,
    routes_auth,
    routes_cart,
    routes_checkout,
    routes_products,
)
from .common import ApiDependencies, set_api_dependencies

router = APIRouter(prefix="/api", tags=["storefront"])

router.include_router(routes_products.router)
router.include_router(routes_auth.router)
router.include_router(routes_addresses.router)
router.include_router(routes_cart.router)
router.include_router(routes_checkout.router)

__all__ = ["ApiDependencies", "router", "set_api_dependencies"]
