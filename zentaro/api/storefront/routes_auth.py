from __future__ import annotations

from fastapi import APIRouter, Depends

from zentaro.domain.entities import AuthUser

from .common import get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=AuthUser)
async def me(user: AuthUser = Depends(get_current_user)):
    """Identity behind the bearer token, as reported by the auth provider."""
    return user
