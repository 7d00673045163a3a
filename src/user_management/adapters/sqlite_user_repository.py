"""SQLite-backed user repository.

Used when no Supabase project is configured. Each operation opens its own
connection, commits on success and closes it, so the repository is safe to
share across request handlers. Uniqueness of ``email`` is enforced by the
table's UNIQUE constraint with SQLite's default binary collation, so two
emails that differ only in case are distinct.
"""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from user_management.domain.users import (
    DuplicateEmail,
    NotFound,
    UserDraft,
    UserRecord,
)
from user_management.services.users import UserRepository

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name VARCHAR(100) NOT NULL,
    phone VARCHAR(20) NOT NULL,
    email VARCHAR(100) UNIQUE NOT NULL
)
"""


@dataclass
class SqliteUserRepository(UserRepository):
    """SQLite implementation for user persistence."""

    database_path: str

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    def ensure_schema(self) -> None:
        """Create the users table if it is missing."""
        with self._connect() as conn:
            conn.execute(_CREATE_TABLE)

    def list_users(self) -> list[UserRecord]:
        """Return all users ordered by id."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, name, phone, email FROM users ORDER BY id"
            ).fetchall()
        return [_to_record(row) for row in rows]

    def get_user(self, user_id: int) -> UserRecord | None:
        """Return the user for an id, if present."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, name, phone, email FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        return _to_record(row) if row else None

    def insert_user(self, draft: UserDraft) -> UserRecord | DuplicateEmail:
        """Insert a user row and return it."""
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "INSERT INTO users (name, phone, email) VALUES (?, ?, ?)",
                    (draft.name, draft.phone, draft.email),
                )
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            if _is_email_conflict(exc):
                return DuplicateEmail()
            raise
        return UserRecord(
            id=int(user_id), name=draft.name, phone=draft.phone, email=draft.email
        )

    def update_user(
        self, user_id: int, draft: UserDraft
    ) -> UserRecord | NotFound | DuplicateEmail:
        """Update a user row and return it."""
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "UPDATE users SET name = ?, phone = ?, email = ? WHERE id = ?",
                    (draft.name, draft.phone, draft.email, user_id),
                )
                updated = cursor.rowcount
        except sqlite3.IntegrityError as exc:
            if _is_email_conflict(exc):
                return DuplicateEmail()
            raise
        if updated == 0:
            return NotFound()
        return UserRecord(
            id=user_id, name=draft.name, phone=draft.phone, email=draft.email
        )

    def delete_user(self, user_id: int) -> UserRecord | None:
        """Delete a user row and return its prior values."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, name, phone, email FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            if row is None:
                return None
            cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            if cursor.rowcount == 0:
                return None
        return _to_record(row)


def _is_email_conflict(exc: sqlite3.IntegrityError) -> bool:
    return "users.email" in str(exc)


def _to_record(row: sqlite3.Row) -> UserRecord:
    return UserRecord(
        id=int(row["id"]),
        name=row["name"],
        phone=row["phone"],
        email=row["email"],
    )
