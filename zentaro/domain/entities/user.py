"""Authenticated identity entity."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class AuthUser(BaseModel):
    """Identity supplied by the external auth provider."""

    id: str = Field(..., min_length=1, description="Provider user id")
    email: str = Field(..., description="Sign-in email")
    full_name: str = Field("", description="Display name")
    avatar_url: Optional[str] = Field(None, description="Avatar reference")

    class Config:
        """Pydantic config."""

        from_attributes = True
        frozen = True

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> str:
        return str(v) if v is not None else v

    @property
    def display_name(self) -> str:
        return self.full_name or self.email
