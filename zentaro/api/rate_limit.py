from __future__ import annotations

import os

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from zentaro.core.constants import DEFAULT_RATE_LIMIT


def _get_client_ip(request: Request) -> str:
    """Resolve client IP with proxy headers support."""
    xff = request.headers.get("X-Forwarded-For")
    if xff:
        parts = [part.strip() for part in xff.split(",") if part.strip()]
        if parts:
            return parts[0]

    x_real_ip = request.headers.get("X-Real-IP")
    if x_real_ip:
        return x_real_ip.strip()

    if request.client and request.client.host:
        return request.client.host

    return get_remote_address(request)


def build_limiter(default_limit: str | None = None) -> Limiter:
    """Create a limiter; RATE_LIMIT_DISABLED=1 turns default limits off."""
    if os.getenv("RATE_LIMIT_DISABLED", "").strip().lower() in {"1", "true", "yes"}:
        limits: list[str] = []
    else:
        limits = [default_limit or DEFAULT_RATE_LIMIT]
    return Limiter(key_func=_get_client_ip, default_limits=limits)


__all__ = ["build_limiter"]
