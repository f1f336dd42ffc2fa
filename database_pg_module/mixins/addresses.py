"""
Address-related database operations.
"""
from __future__ import annotations

import uuid
from typing import Any

from psycopg.rows import dict_row

from logging_config import logger

ADDRESS_FIELDS = (
    "label",
    "full_name",
    "phone_number",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "postal_code",
    "country",
)


class AddressMixin:
    """Mixin for delivery addresses with a single default per user."""

    def get_addresses(self, user_id: str) -> list[dict[str, Any]]:
        """Get all addresses of the user, newest first."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                """
                SELECT * FROM addresses
                WHERE user_id = %s
                ORDER BY created_at DESC, id DESC
            """,
                (user_id,),
            )
            return cursor.fetchall()

    def create_address(self, user_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Insert an address; demote the user's other addresses first when it is default.

        Demotion and insert share one transaction, serialized per user with an
        advisory lock so two concurrent default requests cannot both win.
        """
        is_default = bool(fields.get("is_default"))
        address_id = str(uuid.uuid4())
        values = [fields.get(name) for name in ADDRESS_FIELDS]

        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute("SELECT pg_advisory_xact_lock(hashtext(%s))", (f"addresses:{user_id}",))
            if is_default:
                cursor.execute(
                    "UPDATE addresses SET is_default = FALSE WHERE user_id = %s AND is_default",
                    (user_id,),
                )
                if cursor.rowcount:
                    logger.info(f"Demoted {cursor.rowcount} default address(es) for user {user_id}")
            cursor.execute(
                f"""
                INSERT INTO addresses (id, user_id, {", ".join(ADDRESS_FIELDS)}, is_default)
                VALUES (%s, %s, {", ".join(["%s"] * len(ADDRESS_FIELDS))}, %s)
                RETURNING *
            """,
                [address_id, user_id, *values, is_default],
            )
            return cursor.fetchone()

    def delete_address(self, address_id: str, user_id: str) -> bool:
        """Delete an address owned by the user. Returns False when nothing matched."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM addresses WHERE id = %s AND user_id = %s",
                (address_id, user_id),
            )
            return cursor.rowcount > 0
