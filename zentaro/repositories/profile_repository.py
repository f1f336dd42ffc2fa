"""Profile repository for identities known to the storefront."""
from __future__ import annotations

from zentaro.domain.entities import AuthUser

from .base import BaseRepository


class ProfileRepository(BaseRepository):
    """Repository for profile rows keyed by provider user id."""

    def save_profile(self, user: AuthUser) -> AuthUser:
        """Upsert the profile and return the stored view of it.

        Raises:
            DatabaseException: If database operation fails
        """
        row = self._call(
            "save_profile",
            self.db.upsert_profile,
            user.id,
            user.email,
            user.full_name or None,
            user.avatar_url,
        )
        return AuthUser.model_validate(self._normalize(row)) if row else user

    @staticmethod
    def _normalize(row) -> dict:
        data = dict(row)
        data["full_name"] = data.get("full_name") or ""
        return data
