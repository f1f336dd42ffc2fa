"""Auth session: current identity plus identity-change notifications.

Token issuance belongs to an external provider. The session only keeps the
identity it was handed and tells subscribers when that identity changes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from logging_config import logger
from zentaro.core.exceptions import AuthenticationException
from zentaro.domain.entities import AuthUser

IdentityListener = Callable[[Optional[AuthUser], Optional[AuthUser]], None]


@dataclass(frozen=True, slots=True)
class AuthResult:
    user: AuthUser
    token: str


class AuthProvider(Protocol):
    """External identity provider contract."""

    async def sign_in(self, email: str, password: str) -> AuthResult:
        ...

    async def sign_up(self, email: str, password: str, full_name: str) -> AuthResult:
        ...

    async def sign_out(self, token: str) -> None:
        ...

    async def get_user(self, token: str) -> Optional[AuthUser]:
        ...


class AuthSession:
    """Holds the current identity and notifies listeners on transitions.

    Listeners receive ``(previous, current)`` only when the identity id
    changes: anonymous -> user, user -> anonymous, or user U1 -> user U2.
    A token refresh for the same user is silent.
    """

    def __init__(self, provider: AuthProvider | None = None):
        self._provider = provider
        self._user: AuthUser | None = None
        self._token: str | None = None
        self._listeners: list[IdentityListener] = []

    @property
    def user(self) -> AuthUser | None:
        return self._user

    @property
    def user_id(self) -> str | None:
        return self._user.id if self._user else None

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_identity(self, user: AuthUser | None, token: str | None = None) -> bool:
        """Replace the current identity. Returns True when listeners were notified."""
        previous = self._user
        self._user = user
        self._token = token if user else None

        if (previous.id if previous else None) == (user.id if user else None):
            return False

        logger.info(
            "Identity transition: %s -> %s",
            previous.id if previous else "anonymous",
            user.id if user else "anonymous",
        )
        for listener in list(self._listeners):
            try:
                listener(previous, user)
            except Exception as e:
                logger.error(f"Identity listener {listener!r} failed: {e}")
        return True

    def refresh(self, token: str, user: AuthUser | None = None) -> bool:
        """Apply a refreshed token; only notifies if the provider reports another user."""
        if user is None:
            self._token = token if self._user else None
            return False
        return self.set_identity(user, token)

    def _require_provider(self) -> AuthProvider:
        if self._provider is None:
            raise AuthenticationException("No auth provider configured")
        return self._provider

    async def sign_in(self, email: str, password: str) -> AuthUser:
        provider = self._require_provider()
        try:
            result = await provider.sign_in(email, password)
        except AuthenticationException:
            raise
        except Exception as e:
            logger.warning(f"Sign in failed for {email}: {e}")
            raise AuthenticationException(f"Sign in failed: {e}") from e
        self.set_identity(result.user, result.token)
        return result.user

    async def sign_up(self, email: str, password: str, full_name: str) -> AuthUser:
        provider = self._require_provider()
        try:
            result = await provider.sign_up(email, password, full_name)
        except AuthenticationException:
            raise
        except Exception as e:
            logger.warning(f"Sign up failed for {email}: {e}")
            raise AuthenticationException(f"Sign up failed: {e}") from e
        self.set_identity(result.user, result.token)
        return result.user

    async def sign_out(self) -> None:
        """Drop the identity locally even if the provider call fails."""
        token = self._token
        try:
            if self._provider is not None and token:
                await self._provider.sign_out(token)
        except Exception as e:
            logger.warning(f"Provider sign out failed: {e}")
        finally:
            self.set_identity(None)
