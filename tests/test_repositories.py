"""Tests for repository layer."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import psycopg
import pytest

from zentaro.core.exceptions import DatabaseException
from zentaro.domain.entities import AuthUser
from zentaro.repositories import (
    AddressRepository,
    CartRepository,
    ProductRepository,
    ProfileRepository,
)


def _product_row(product_id="p1", **overrides):
    row = {
        "id": product_id,
        "name": "Keyboard",
        "brand": "Zentaro",
        "price": Decimal("500.00"),
        "original_price": None,
        "discount": None,
        "rating": 4.5,
        "reviews": 12,
        "image": None,
        "description": None,
        "in_stock": True,
        "delivery_days": 2,
        "category": "electronics",
        "category_name": "Electronics",
        "specifications": {"Layout": "US"},
    }
    row.update(overrides)
    return row


def _address_row(address_id="a1", **overrides):
    row = {
        "id": address_id,
        "user_id": "u1",
        "label": "Home",
        "full_name": "Asha Rao",
        "phone_number": "9876543210",
        "address_line1": "12 MG Road",
        "address_line2": None,
        "city": "Bengaluru",
        "state": "Karnataka",
        "postal_code": "560001",
        "country": "India",
        "is_default": 1,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    row.update(overrides)
    return row


def test_product_repository_maps_rows_and_skips_malformed() -> None:
    db = MagicMock()
    db.get_products.return_value = [_product_row(), _product_row("p2", price="-1")]

    products = ProductRepository(db).list_products(category="electronics", limit=500)

    assert [p.id for p in products] == ["p1"]
    assert products[0].discount == 0
    assert products[0].specifications == {"Layout": "US"}
    db.get_products.assert_called_once_with(category="electronics", in_stock_only=True, limit=100)


def test_product_repository_retries_operational_errors(monkeypatch) -> None:
    monkeypatch.setattr("zentaro.core.db_retry.time.sleep", lambda _delay: None)
    db = MagicMock()
    db.get_products.side_effect = [psycopg.OperationalError("gone"), [_product_row()]]

    products = ProductRepository(db).list_products()

    assert len(products) == 1
    assert db.get_products.call_count == 2


def test_product_repository_get_missing_returns_none() -> None:
    db = MagicMock()
    db.get_product.return_value = None

    assert ProductRepository(db).get_product("nope") is None


def test_cart_repository_upsert_non_positive_deletes() -> None:
    db = MagicMock()
    repo = CartRepository(db)

    repo.upsert_item("u1", "p1", 0)
    repo.upsert_item("u1", "p2", 3)

    db.delete_cart_item.assert_called_once_with("u1", "p1")
    db.upsert_cart_item.assert_called_once_with("u1", "p2", 3)


def test_cart_repository_loads_items_with_quantity() -> None:
    db = MagicMock()
    db.get_cart_items.return_value = [
        {**_product_row(), "quantity": 2},
        {**_product_row("p2"), "quantity": 0},
    ]

    items = CartRepository(db).load_cart("u1")

    assert [(i.id, i.quantity) for i in items] == [("p1", 2)]
    assert items[0].line_total == Decimal("1000.00")


def test_driver_errors_are_wrapped() -> None:
    db = MagicMock()
    db.clear_cart_items.side_effect = RuntimeError("connection reset")

    with pytest.raises(DatabaseException) as exc:
        CartRepository(db).clear("u1")

    assert "clear" in exc.value.message
    assert isinstance(exc.value.__cause__, RuntimeError)


def test_address_repository_coerces_rows() -> None:
    db = MagicMock()
    db.get_addresses.return_value = [_address_row(), _address_row("a2", is_default=0)]
    db.create_address.return_value = _address_row("a3")
    db.delete_address.return_value = False
    repo = AddressRepository(db)

    listed = repo.list_addresses("u1")
    created = repo.create_address("u1", {"label": "Home"})

    assert [a.is_default for a in listed] == [True, False]
    assert created.id == "a3"
    assert repo.delete_address("a1", "u2") is False


def test_address_repository_create_without_row_fails() -> None:
    db = MagicMock()
    db.create_address.return_value = None

    with pytest.raises(DatabaseException):
        AddressRepository(db).create_address("u1", {})


def test_profile_repository_keeps_stored_name() -> None:
    db = MagicMock()
    db.upsert_profile.return_value = {
        "id": "u1",
        "email": "asha@example.com",
        "full_name": "Asha Rao",
        "avatar_url": None,
    }

    stored = ProfileRepository(db).save_profile(AuthUser(id="u1", email="asha@example.com"))

    assert stored.full_name == "Asha Rao"
    db.upsert_profile.assert_called_once_with("u1", "asha@example.com", None, None)
