"""
Bearer token verification for identities issued by the external provider.

The provider signs compact HS256 JWTs with a shared secret. Only
verification happens here; credentials never reach the storefront.
"""
from __future__ import annotations

from typing import Any

import anyio
import jwt

from logging_config import logger
from zentaro.core.exceptions import AuthenticationException
from zentaro.domain.entities import AuthUser
from zentaro.repositories.profile_repository import ProfileRepository

from .auth_session import AuthResult

JWT_ALGO = "HS256"
CLOCK_SKEW_SECONDS = 30


def sign_token(claims: dict[str, Any], secret: str) -> str:
    """Produce an HS256 token; used by local tooling and tests."""
    return jwt.encode(claims, secret, algorithm=JWT_ALGO)


def verify_token(token: str, secret: str) -> dict[str, Any] | None:
    """
    Validate an HS256 token signature and expiry.

    Args:
        token: Compact token from the Authorization header
        secret: Secret shared with the identity provider

    Returns:
        Claims if valid, None otherwise
    """
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGO],
            leeway=CLOCK_SKEW_SECONDS,
            options={"require": ["sub"]},
        )
    except jwt.PyJWTError as e:
        logger.debug(f"Rejected bearer token: {e}")
        return None

    if not claims.get("sub"):
        return None
    return claims


class SignedTokenAuthProvider:
    """AuthProvider that trusts tokens signed by the external identity service.

    Sign-in and sign-up belong to that service, so they are rejected here.
    When a profile repository is supplied, verified identities are mirrored
    into it and display fields come from the stored profile.
    """

    def __init__(self, secret: str, profiles: ProfileRepository | None = None):
        if not secret:
            raise AuthenticationException("Token secret is not configured")
        self._secret = secret
        self._profiles = profiles

    async def sign_in(self, email: str, password: str) -> AuthResult:
        raise AuthenticationException("Sign in is handled by the identity provider")

    async def sign_up(self, email: str, password: str, full_name: str) -> AuthResult:
        raise AuthenticationException("Sign up is handled by the identity provider")

    async def sign_out(self, token: str) -> None:
        return None

    async def get_user(self, token: str) -> AuthUser | None:
        claims = verify_token(token, self._secret)
        if claims is None:
            return None

        user = AuthUser(
            id=str(claims["sub"]),
            email=str(claims.get("email") or ""),
            full_name=str(claims.get("full_name") or claims.get("name") or ""),
            avatar_url=claims.get("avatar_url"),
        )
        if self._profiles is None:
            return user
        return await anyio.to_thread.run_sync(self._profiles.save_profile, user)
