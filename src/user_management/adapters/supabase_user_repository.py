"""Supabase-backed user repository."""

from dataclasses import dataclass

from postgrest.exceptions import APIError
from supabase import Client

from user_management.domain.users import (
    DuplicateEmail,
    NotFound,
    UserDraft,
    UserRecord,
)
from user_management.services.users import UserRepository

_UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def ensure_schema(self) -> None:
        """Run the idempotent table bootstrap function."""
        self.client.rpc("ensure_users_table", {}).execute()

    def list_users(self) -> list[UserRecord]:
        """Return all users ordered by id."""
        response = (
            self.client.table("users")
            .select("id, name, phone, email")
            .order("id")
            .execute()
        )
        return [_to_record(row) for row in response.data or []]

    def get_user(self, user_id: int) -> UserRecord | None:
        """Return the user for an id, if present."""
        response = (
            self.client.table("users")
            .select("id, name, phone, email")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return _to_record(response.data[0])
        return None

    def insert_user(self, draft: UserDraft) -> UserRecord | DuplicateEmail:
        """Insert a user row and return it."""
        try:
            response = (
                self.client.table("users").insert(_to_payload(draft)).execute()
            )
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                return DuplicateEmail()
            raise
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _to_record(response.data[0])

    def update_user(
        self, user_id: int, draft: UserDraft
    ) -> UserRecord | NotFound | DuplicateEmail:
        """Update a user row and return it."""
        try:
            response = (
                self.client.table("users")
                .update(_to_payload(draft))
                .eq("id", user_id)
                .execute()
            )
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                return DuplicateEmail()
            raise
        if not response.data:
            return NotFound()
        return _to_record(response.data[0])

    def delete_user(self, user_id: int) -> UserRecord | None:
        """Delete a user row and return its prior values."""
        response = self.client.table("users").delete().eq("id", user_id).execute()
        if not response.data:
            return None
        return _to_record(response.data[0])


def _to_payload(draft: UserDraft) -> dict[str, str]:
    return {"name": draft.name, "phone": draft.phone, "email": draft.email}


def _to_record(row: dict[str, object]) -> UserRecord:
    return UserRecord(
        id=int(row["id"]),
        name=str(row["name"]),
        phone=str(row["phone"]),
        email=str(row["email"]),
    )
