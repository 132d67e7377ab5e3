"""
Settings repository - key/value storage for the high score and preferences.
"""

from typing import Optional

from .base import BaseRepository


class SettingsRepository(BaseRepository):
    """
    Repository over the `settings` table.

    Values are stored as text; callers convert them.
    """

    def get(self, key: str) -> Optional[str]:
        with self.read_connection() as (conn, cursor):
            cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with self.connection() as (conn, cursor):
            cursor.execute(
                """
                INSERT INTO settings (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, str(value)),
            )

    def delete(self, key: str) -> None:
        with self.connection() as (conn, cursor):
            cursor.execute("DELETE FROM settings WHERE key = ?", (key,))
