"""User record business logic."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from user_management.domain.users import (
    DuplicateEmail,
    InvalidInput,
    NotFound,
    ServerFailure,
    UserDraft,
    UserRecord,
)

logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user records."""

    def ensure_schema(self) -> None:
        """Create the users table if it does not already exist."""

    def list_users(self) -> list[UserRecord]:
        """Return all users ordered by ascending id."""

    def get_user(self, user_id: int) -> UserRecord | None:
        """Return the user for an id, if present."""

    def insert_user(self, draft: UserDraft) -> UserRecord | DuplicateEmail:
        """Create a user with a fresh id and return it."""

    def update_user(
        self, user_id: int, draft: UserDraft
    ) -> UserRecord | NotFound | DuplicateEmail:
        """Replace the mutable fields of a user and return the result."""

    def delete_user(self, user_id: int) -> UserRecord | None:
        """Remove a user and return its prior values, if it existed."""


def validate_draft(payload: Mapping[str, object]) -> UserDraft | InvalidInput:
    """Build a draft when name, phone and email are all non-empty strings."""
    name = payload.get("name")
    phone = payload.get("phone")
    email = payload.get("email")
    values = (name, phone, email)
    if not all(isinstance(value, str) and value for value in values):
        return InvalidInput()
    return UserDraft(name=name, phone=phone, email=email)  # type: ignore[arg-type]


@dataclass
class UserService:
    """Application service for user CRUD operations."""

    repository: UserRepository

    def ensure_schema(self) -> bool:
        """Prepare the users table and report whether it is ready."""
        try:
            self.repository.ensure_schema()
        except Exception:
            logger.exception("Error creating users table")
            return False
        logger.info("Users table ready")
        return True

    def list_users(self) -> list[UserRecord] | ServerFailure:
        """Return every user ordered by id."""
        logger.debug("Fetching all users")
        try:
            users = self.repository.list_users()
        except Exception:
            logger.exception("Error fetching users")
            return ServerFailure()
        logger.info("Successfully fetched %d users", len(users))
        return users

    def get_user(self, user_id: int) -> UserRecord | NotFound | ServerFailure:
        """Return a single user by id."""
        logger.debug("Fetching user with ID: %s", user_id)
        try:
            user = self.repository.get_user(user_id)
        except Exception:
            logger.exception("Error fetching user with ID %s", user_id)
            return ServerFailure()
        if user is None:
            logger.warning("User not found with ID: %s", user_id)
            return NotFound()
        logger.info("Successfully fetched user with ID: %s", user_id)
        return user

    def create_user(
        self, payload: Mapping[str, object]
    ) -> UserRecord | InvalidInput | DuplicateEmail | ServerFailure:
        """Validate the payload and create a user."""
        logger.debug("Creating new user: %s", dict(payload))
        draft = validate_draft(payload)
        if isinstance(draft, InvalidInput):
            logger.warning("Missing required fields for user creation")
            return draft
        try:
            created = self.repository.insert_user(draft)
        except Exception:
            logger.exception("Error creating user")
            return ServerFailure()
        if isinstance(created, DuplicateEmail):
            logger.warning("Email already exists: %s", draft.email)
            return created
        logger.info("User created successfully with ID: %s", created.id)
        return created

    def update_user(
        self, user_id: int, payload: Mapping[str, object]
    ) -> UserRecord | InvalidInput | NotFound | DuplicateEmail | ServerFailure:
        """Validate the payload and replace a user's fields."""
        logger.debug("Updating user with ID: %s", user_id)
        draft = validate_draft(payload)
        if isinstance(draft, InvalidInput):
            logger.warning("Missing required fields for user update ID: %s", user_id)
            return draft
        try:
            updated = self.repository.update_user(user_id, draft)
        except Exception:
            logger.exception("Error updating user with ID %s", user_id)
            return ServerFailure()
        if isinstance(updated, NotFound):
            logger.warning("User not found for update with ID: %s", user_id)
        elif isinstance(updated, DuplicateEmail):
            logger.warning("Email already exists: %s", draft.email)
        else:
            logger.info("User updated successfully with ID: %s", user_id)
        return updated

    def delete_user(self, user_id: int) -> UserRecord | NotFound | ServerFailure:
        """Delete a user and return the removed record."""
        logger.debug("Deleting user with ID: %s", user_id)
        try:
            deleted = self.repository.delete_user(user_id)
        except Exception:
            logger.exception("Error deleting user with ID %s", user_id)
            return ServerFailure()
        if deleted is None:
            logger.warning("User not found for deletion with ID: %s", user_id)
            return NotFound()
        logger.info("User deleted successfully with ID: %s", user_id)
        return deleted
