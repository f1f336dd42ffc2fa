"""Shared pytest fixtures: in-memory repositories, fake auth and the DB handle."""
from __future__ import annotations

import itertools
import os
import threading
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any
from urllib.parse import urlparse

import pytest

from zentaro.core.exceptions import DatabaseException
from zentaro.domain.entities import Address, AuthUser, CartItem, Product
from zentaro.services.auth_session import AuthResult


def make_product(product_id: str, price: str = "100.00", **overrides: Any) -> Product:
    data = {
        "id": product_id,
        "name": f"Product {product_id}",
        "brand": "Zentaro",
        "category": "electronics",
        "price": Decimal(price),
        "in_stock": True,
    }
    data.update(overrides)
    return Product(**data)


def make_user(user_id: str = "u1", email: str | None = None) -> AuthUser:
    return AuthUser(id=user_id, email=email or f"{user_id}@example.com", full_name=user_id.upper())


VALID_ADDRESS = {
    "label": "Home",
    "full_name": "Asha Rao",
    "phone_number": "9876543210",
    "address_line1": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "postal_code": "560001",
}


class FakeProductRepository:
    def __init__(self, products: list[Product] | None = None):
        self.products = {p.id: p for p in products or []}

    def list_products(self, category: str | None = None, limit: int = 100) -> list[Product]:
        items = [p for p in self.products.values() if p.in_stock]
        if category:
            items = [p for p in items if p.category == category]
        return items[:limit]

    def get_product(self, product_id: str) -> Product | None:
        return self.products.get(product_id)


class FakeCartRepository:
    """Thread-safe in-memory cart store; calls are recorded in order."""

    def __init__(self, catalog: list[Product] | None = None):
        self.catalog = {p.id: p for p in catalog or []}
        self.carts: dict[str, dict[str, CartItem]] = {}
        self.calls: list[tuple] = []
        self.fail_writes = 0
        self.fail_loads = 0
        self.load_gates: dict[str, threading.Event] = {}
        self._lock = threading.Lock()

    def seed(self, user_id: str, quantities: dict[str, int]) -> None:
        self.carts[user_id] = {
            pid: CartItem.from_product(self.catalog[pid], qty) for pid, qty in quantities.items()
        }

    def quantities(self, user_id: str) -> dict[str, int]:
        return {pid: item.quantity for pid, item in self.carts.get(user_id, {}).items()}

    @property
    def writes(self) -> list[tuple]:
        return [call for call in self.calls if call[0] != "load"]

    def _maybe_fail(self) -> None:
        with self._lock:
            if self.fail_writes > 0:
                self.fail_writes -= 1
                raise DatabaseException("remote write failed")

    def load_cart(self, user_id: str) -> list[CartItem]:
        self.calls.append(("load", user_id))
        gate = self.load_gates.get(user_id)
        if gate is not None:
            gate.wait(timeout=5)
        with self._lock:
            if self.fail_loads > 0:
                self.fail_loads -= 1
                raise DatabaseException("remote read failed")
        return list(self.carts.get(user_id, {}).values())

    def upsert_item(self, user_id: str, product_id: str, quantity: int) -> None:
        self.calls.append(("upsert", user_id, product_id, quantity))
        self._maybe_fail()
        if quantity <= 0:
            self.carts.get(user_id, {}).pop(product_id, None)
            return
        product = self.catalog.get(product_id) or make_product(product_id)
        self.carts.setdefault(user_id, {})[product_id] = CartItem.from_product(product, quantity)

    def delete_item(self, user_id: str, product_id: str) -> None:
        self.calls.append(("delete", user_id, product_id))
        self._maybe_fail()
        self.carts.get(user_id, {}).pop(product_id, None)

    def clear(self, user_id: str) -> None:
        self.calls.append(("clear", user_id))
        self._maybe_fail()
        self.carts[user_id] = {}


class FakeAddressRepository:
    """In-memory address table with the single-default rule."""

    def __init__(self):
        self.rows: list[Address] = []
        self.calls: list[tuple] = []
        self.fail_writes = False
        self._ids = itertools.count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def list_addresses(self, user_id: str) -> list[Address]:
        self.calls.append(("list", user_id))
        owned = [a for a in self.rows if a.user_id == user_id]
        return sorted(owned, key=lambda a: a.created_at, reverse=True)

    def create_address(self, user_id: str, fields: dict[str, Any]) -> Address:
        self.calls.append(("create", user_id))
        if self.fail_writes:
            raise DatabaseException("remote write failed")
        if fields.get("is_default"):
            self.rows = [
                a.model_copy(update={"is_default": False}) if a.user_id == user_id else a
                for a in self.rows
            ]
        self._clock += timedelta(seconds=1)
        address = Address(
            **fields, id=f"addr-{next(self._ids)}", user_id=user_id, created_at=self._clock
        )
        self.rows.append(address)
        return address

    def delete_address(self, address_id: str, user_id: str) -> bool:
        self.calls.append(("delete", user_id, address_id))
        before = len(self.rows)
        self.rows = [a for a in self.rows if not (a.id == address_id and a.user_id == user_id)]
        return len(self.rows) < before

    def defaults(self, user_id: str) -> list[str]:
        return [a.id for a in self.rows if a.user_id == user_id and a.is_default]


class FakeAuthProvider:
    """Token -> user table; passwords are accepted when they match ``password``."""

    def __init__(self, users: dict[str, AuthUser] | None = None):
        self.tokens: dict[str, AuthUser] = dict(users or {})
        self.signed_out: list[str] = []
        self.fail_sign_out = False

    async def sign_in(self, email: str, password: str) -> AuthResult:
        if password != "password":
            raise ValueError("Invalid credentials")
        user = AuthUser(id=email.split("@")[0], email=email)
        token = f"token-{user.id}"
        self.tokens[token] = user
        return AuthResult(user=user, token=token)

    async def sign_up(self, email: str, password: str, full_name: str) -> AuthResult:
        user = AuthUser(id=email.split("@")[0], email=email, full_name=full_name)
        token = f"token-{user.id}"
        self.tokens[token] = user
        return AuthResult(user=user, token=token)

    async def sign_out(self, token: str) -> None:
        self.signed_out.append(token)
        if self.fail_sign_out:
            raise RuntimeError("provider unavailable")

    async def get_user(self, token: str) -> AuthUser | None:
        return self.tokens.get(token)


class NoticeRecorder:
    def __init__(self):
        self.notices: list[tuple[str, str]] = []

    def __call__(self, level: str, message: str) -> None:
        self.notices.append((level, message))

    def messages(self, level: str) -> list[str]:
        return [message for lvl, message in self.notices if lvl == level]


@pytest.fixture()
def catalog() -> list[Product]:
    return [
        make_product("A", "250.00", name="Headphones"),
        make_product("B", "500.00", name="Keyboard"),
        make_product("C", "99.99", name="Cable"),
    ]


@pytest.fixture()
def cart_repo(catalog) -> FakeCartRepository:
    return FakeCartRepository(catalog)


@pytest.fixture()
def address_repo() -> FakeAddressRepository:
    return FakeAddressRepository()


@pytest.fixture()
def notices() -> NoticeRecorder:
    return NoticeRecorder()


# =============================================================================
# PostgreSQL
# =============================================================================


def _get_test_db_url() -> str | None:
    return os.getenv("TEST_DATABASE_URL")


def _is_safe_db_url(db_url: str) -> bool:
    """Allow only local/test hosts unless explicitly overridden."""
    parsed = urlparse(db_url)
    host = (parsed.hostname or "").lower()
    return host in {"localhost", "127.0.0.1", "postgres", "db"}


def _truncate_tables(db) -> None:
    with db.get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "TRUNCATE TABLE cart_items, addresses, profiles, product_specs, products, categories "
            "RESTART IDENTITY CASCADE"
        )


@pytest.fixture(scope="session")
def postgres_db():
    """Session-scoped PostgreSQL database handle for tests."""
    db_url = _get_test_db_url()
    if not db_url:
        pytest.skip("TEST_DATABASE_URL is required for DB tests")
    if not _is_safe_db_url(db_url) and os.getenv("ALLOW_TEST_DB_RESET") != "1":
        pytest.skip(
            "Refusing to run DB tests against non-local database. "
            "Set ALLOW_TEST_DB_RESET=1 to override."
        )

    from database_pg_module import Database

    os.environ.pop("SKIP_DB_INIT", None)
    db = Database(db_url)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def db(postgres_db):
    """Function-scoped database fixture with clean tables."""
    _truncate_tables(postgres_db)
    return postgres_db
