from __future__ import annotations

import pytest

from zentaro.core.config import load_settings
from zentaro.core.exceptions import ConfigurationException


def test_defaults(monkeypatch) -> None:
    for name in ("CART_SYNC_ATTEMPTS", "CART_SYNC_DELAY", "SUPPORTED_COUNTRY", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.supported_country == "India"
    assert settings.cart_sync.attempts == 3
    assert settings.cart_sync.initial_delay == pytest.approx(0.2)
    assert "http://localhost:8080" in settings.cors_origins


def test_csv_origins_and_flags(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ORIGINS", "https://zentaro.shop, ,https://admin.zentaro.shop")
    monkeypatch.setenv("SKIP_DB_INIT", "yes")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.cors_origins == ["https://zentaro.shop", "https://admin.zentaro.shop"]
    assert settings.skip_db_init is True
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("name", "value"),
    [("CART_SYNC_ATTEMPTS", "zero"), ("CART_SYNC_ATTEMPTS", "0"), ("SUPPORTED_COUNTRY", " ")],
)
def test_invalid_values_raise(monkeypatch, name, value) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationException):
        load_settings()
