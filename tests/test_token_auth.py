from __future__ import annotations

import base64
import json
import time
from unittest.mock import MagicMock

import pytest

from zentaro.core.exceptions import AuthenticationException
from zentaro.repositories import ProfileRepository
from zentaro.services.token_auth import SignedTokenAuthProvider, sign_token, verify_token

SECRET = "zentaro-test-secret-0123456789abcdef"


def test_verify_token_accepts_valid_signature() -> None:
    token = sign_token({"sub": "u1", "email": "asha@example.com"}, SECRET)

    claims = verify_token(token, SECRET)

    assert claims["sub"] == "u1"


@pytest.mark.parametrize(
    "token",
    [
        "",
        "not.a.token",
        sign_token({"sub": "u1"}, "other-secret-0123456789abcdef-zentaro"),
        sign_token({"email": "no-subject@example.com"}, SECRET),
    ],
)
def test_verify_token_rejects_bad_tokens(token) -> None:
    assert verify_token(token, SECRET) is None


def test_verify_token_rejects_expired_token() -> None:
    token = sign_token({"sub": "u1", "exp": time.time() - 3600}, SECRET)
    assert verify_token(token, SECRET) is None


def test_verify_token_rejects_tampered_payload() -> None:
    header, _payload, signature = sign_token({"sub": "u1"}, SECRET).split(".")
    forged_payload = sign_token({"sub": "admin"}, SECRET).split(".")[1]

    assert verify_token(f"{header}.{forged_payload}.{signature}", SECRET) is None


def _segment(value) -> str:
    return base64.urlsafe_b64encode(json.dumps(value).encode()).rstrip(b"=").decode()


def test_verify_token_rejects_non_object_header() -> None:
    token = f"{_segment(['HS256'])}.{_segment({'sub': 'u1'})}.xx"

    assert verify_token(token, SECRET) is None


def test_verify_token_rejects_non_numeric_expiry() -> None:
    token = sign_token({"sub": "u1", "exp": "soon"}, SECRET)

    assert verify_token(token, SECRET) is None


def test_verify_token_tolerates_small_clock_skew() -> None:
    token = sign_token({"sub": "u1", "exp": int(time.time()) - 5}, SECRET)

    assert verify_token(token, SECRET)["sub"] == "u1"


@pytest.mark.asyncio
async def test_provider_resolves_user_from_claims() -> None:
    provider = SignedTokenAuthProvider(SECRET)
    token = sign_token({"sub": "u1", "email": "asha@example.com", "name": "Asha"}, SECRET)

    user = await provider.get_user(token)

    assert user.id == "u1"
    assert user.display_name == "Asha"
    assert await provider.get_user("garbage") is None


@pytest.mark.asyncio
async def test_provider_mirrors_profile() -> None:
    db = MagicMock()
    db.upsert_profile.return_value = {
        "id": "u1",
        "email": "asha@example.com",
        "full_name": "Asha Rao",
        "avatar_url": "https://cdn.example.com/a.png",
    }
    provider = SignedTokenAuthProvider(SECRET, ProfileRepository(db))

    user = await provider.get_user(sign_token({"sub": "u1", "email": "asha@example.com"}, SECRET))

    assert user.full_name == "Asha Rao"
    assert user.avatar_url == "https://cdn.example.com/a.png"


@pytest.mark.asyncio
async def test_provider_does_not_issue_credentials() -> None:
    provider = SignedTokenAuthProvider(SECRET)

    with pytest.raises(AuthenticationException):
        await provider.sign_in("asha@example.com", "password")
    with pytest.raises(AuthenticationException):
        SignedTokenAuthProvider("")
