"""
Profile-related database operations.
"""
from __future__ import annotations

from typing import Any

from psycopg.rows import dict_row

from logging_config import logger


class ProfileMixin:
    """Mixin for profile rows mirrored from the external identity provider."""

    def upsert_profile(
        self,
        user_id: str,
        email: str,
        full_name: str | None = None,
        avatar_url: str | None = None,
    ) -> dict[str, Any]:
        """Add or update a profile; existing name and avatar survive NULLs."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                """
                INSERT INTO profiles (id, email, full_name, avatar_url)
                VALUES (%s, %s, %s, %s)
                ON CONFLICT (id) DO UPDATE SET
                    email = EXCLUDED.email,
                    full_name = COALESCE(EXCLUDED.full_name, profiles.full_name),
                    avatar_url = COALESCE(EXCLUDED.avatar_url, profiles.avatar_url),
                    updated_at = NOW()
                RETURNING id, email, full_name, avatar_url
            """,
                (user_id, email, full_name, avatar_url),
            )
            row = cursor.fetchone()
            logger.debug(f"Profile {user_id} added/updated")
            return dict(row)
