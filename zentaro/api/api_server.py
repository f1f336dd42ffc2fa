"""
FastAPI server for the Zentaro storefront API.

Serves the catalog, cart, addresses and checkout endpoints on top of the
PostgreSQL database module.
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from logging_config import setup_logging
from zentaro.api.rate_limit import build_limiter
from zentaro.api.storefront import ApiDependencies, router, set_api_dependencies
from zentaro.core.config import Settings, load_settings
from zentaro.core.db_retry import DBHealthCheck
from zentaro.core.exceptions import (
    AddressNotFoundException,
    AuthenticationException,
    CheckoutBlockedException,
    ConfigurationException,
    DatabaseException,
    ValidationException,
)
from zentaro.repositories import (
    AddressRepository,
    CartRepository,
    ProductRepository,
    ProfileRepository,
)
from zentaro.services.token_auth import SignedTokenAuthProvider

logger = logging.getLogger(__name__)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationException)
    async def _validation(request: Request, exc: ValidationException):
        return JSONResponse(status_code=422, content={"message": exc.message, "errors": exc.errors})

    @app.exception_handler(AddressNotFoundException)
    async def _address_not_found(request: Request, exc: AddressNotFoundException):
        return JSONResponse(status_code=404, content={"message": exc.message})

    @app.exception_handler(AuthenticationException)
    async def _unauthenticated(request: Request, exc: AuthenticationException):
        return JSONResponse(status_code=401, content={"message": exc.message})

    @app.exception_handler(CheckoutBlockedException)
    async def _checkout_blocked(request: Request, exc: CheckoutBlockedException):
        return JSONResponse(status_code=409, content={"reason": exc.reason, "message": exc.message})

    @app.exception_handler(DatabaseException)
    async def _database_error(request: Request, exc: DatabaseException):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=503, content={"message": "Storage temporarily unavailable"})


def create_api_app(
    db: Any = None,
    *,
    settings: Settings | None = None,
    auth_provider: Any = None,
    products: Any = None,
    cart: Any = None,
    addresses: Any = None,
) -> FastAPI:
    """
    Create FastAPI application for the storefront.

    Args:
        db: Database instance; repositories are built on it unless given
        settings: Preloaded settings (read from the environment otherwise)
        auth_provider: Resolves bearer tokens to identities
        products, cart, addresses: Repository overrides
    """
    settings = settings or load_settings()

    if db is not None:
        products = products or ProductRepository(db)
        cart = cart or CartRepository(db)
        addresses = addresses or AddressRepository(db)

    if auth_provider is None and settings.auth_token_secret:
        profiles = ProfileRepository(db) if db is not None else None
        auth_provider = SignedTokenAuthProvider(settings.auth_token_secret, profiles)

    if None in (products, cart, addresses, auth_provider):
        logger.warning("API created without storage or auth provider; routes answer 503")
    else:
        set_api_dependencies(
            ApiDependencies(
                settings=settings,
                products=products,
                cart=cart,
                addresses=addresses,
                auth_provider=auth_provider,
                db=db,
            )
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Zentaro API starting...")
        yield
        logger.info("Zentaro API shutting down...")

    app = FastAPI(
        title="Zentaro Storefront API",
        description="Cart, address and checkout API for the Zentaro storefront",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.state.limiter = build_limiter(settings.api_rate_limit)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    _register_exception_handlers(app)
    app.include_router(router)

    @app.get("/health")
    def health():
        if db is None:
            return {"status": "ok", "database": "not configured"}
        if DBHealthCheck(db).is_healthy():
            return {"status": "ok", "database": "ok"}
        return JSONResponse(status_code=503, content={"status": "degraded", "database": "down"})

    @app.get("/")
    async def root():
        return {"service": "Zentaro Storefront API", "version": "1.0.0", "docs": "/api/docs"}

    return app


def main() -> None:
    """Run the API against DATABASE_URL."""
    from database_pg_module import Database

    settings = load_settings()
    setup_logging(settings.log_level)
    if not settings.has_database:
        raise ConfigurationException("DATABASE_URL is required to run the API")
    if not settings.auth_token_secret:
        logger.warning("AUTH_TOKEN_SECRET is not set; every authenticated route will answer 503")

    db = Database(settings.database_url, skip_init=settings.skip_db_init)
    app = create_api_app(db, settings=settings)

    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting Zentaro API on http://{host}:{port}")
    try:
        uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())
    finally:
        db.close()


if __name__ == "__main__":
    main()
