from __future__ import annotations

import pytest

from conftest import FakeAuthProvider, make_user
from zentaro.core.exceptions import AuthenticationException
from zentaro.services.auth_session import AuthSession


def test_listeners_see_only_identity_changes() -> None:
    session = AuthSession()
    seen = []
    session.subscribe(lambda prev, cur: seen.append((prev and prev.id, cur and cur.id)))

    session.set_identity(make_user("u1"), "t1")
    session.refresh("t2")
    session.set_identity(make_user("u1"), "t3")
    session.set_identity(make_user("u2"), "t4")
    session.set_identity(None)

    assert seen == [(None, "u1"), ("u1", "u2"), ("u2", None)]
    assert session.token is None
    assert not session.is_authenticated


def test_refresh_updates_token_without_notifying() -> None:
    session = AuthSession()
    session.set_identity(make_user("u1"), "t1")
    calls = []
    session.subscribe(lambda prev, cur: calls.append(cur))

    assert session.refresh("t2") is False
    assert session.token == "t2"
    assert calls == []


def test_unsubscribe_stops_notifications() -> None:
    session = AuthSession()
    calls = []
    unsubscribe = session.subscribe(lambda prev, cur: calls.append(cur))
    unsubscribe()
    unsubscribe()

    session.set_identity(make_user("u1"), "t1")

    assert calls == []


def test_failing_listener_does_not_block_others() -> None:
    session = AuthSession()
    calls = []

    def broken(prev, cur):
        raise RuntimeError("boom")

    session.subscribe(broken)
    session.subscribe(lambda prev, cur: calls.append(cur.id))

    assert session.set_identity(make_user("u1"), "t1") is True
    assert calls == ["u1"]


@pytest.mark.asyncio
async def test_sign_in_and_sign_up_set_identity() -> None:
    session = AuthSession(FakeAuthProvider())

    user = await session.sign_in("asha@example.com", "password")
    assert session.user_id == user.id == "asha"
    assert session.token == "token-asha"

    await session.sign_up("ravi@example.com", "password", "Ravi")
    assert session.user.display_name == "Ravi"


@pytest.mark.asyncio
async def test_provider_errors_become_authentication_errors() -> None:
    session = AuthSession(FakeAuthProvider())

    with pytest.raises(AuthenticationException):
        await session.sign_in("asha@example.com", "wrong")
    assert session.user is None


@pytest.mark.asyncio
async def test_sign_out_clears_identity_even_when_provider_fails() -> None:
    provider = FakeAuthProvider()
    provider.fail_sign_out = True
    session = AuthSession(provider)
    await session.sign_in("asha@example.com", "password")

    await session.sign_out()

    assert provider.signed_out == ["token-asha"]
    assert session.user is None
    assert session.token is None


@pytest.mark.asyncio
async def test_sign_in_without_provider_fails() -> None:
    with pytest.raises(AuthenticationException):
        await AuthSession().sign_in("asha@example.com", "password")
