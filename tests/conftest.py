"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from user_management.config import Settings
from user_management.containers import AppContainer
from user_management.domain.users import (
    DuplicateEmail,
    NotFound,
    UserDraft,
    UserRecord,
)
from user_management.services.users import UserRepository, UserService


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests.

    Emails are compared byte-exactly, like the SQL stores' unique index.
    """

    users: dict[int, UserRecord] = field(default_factory=dict)
    next_id: int = 1
    schema_calls: int = 0
    fail_with: Exception | None = None
    calls: list[str] = field(default_factory=list)

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with is not None:
            raise self.fail_with

    def _email_owner(self, email: str) -> int | None:
        for user in self.users.values():
            if user.email == email:
                return user.id
        return None

    def ensure_schema(self) -> None:
        self._check("ensure_schema")
        self.schema_calls += 1

    def list_users(self) -> list[UserRecord]:
        self._check("list_users")
        return [self.users[user_id] for user_id in sorted(self.users)]

    def get_user(self, user_id: int) -> UserRecord | None:
        self._check("get_user")
        return self.users.get(user_id)

    def insert_user(self, draft: UserDraft) -> UserRecord | DuplicateEmail:
        self._check("insert_user")
        if self._email_owner(draft.email) is not None:
            return DuplicateEmail()
        user = UserRecord(
            id=self.next_id, name=draft.name, phone=draft.phone, email=draft.email
        )
        self.users[user.id] = user
        self.next_id += 1
        return user

    def update_user(
        self, user_id: int, draft: UserDraft
    ) -> UserRecord | NotFound | DuplicateEmail:
        self._check("update_user")
        if user_id not in self.users:
            return NotFound()
        owner = self._email_owner(draft.email)
        if owner is not None and owner != user_id:
            return DuplicateEmail()
        user = UserRecord(
            id=user_id, name=draft.name, phone=draft.phone, email=draft.email
        )
        self.users[user_id] = user
        return user

    def delete_user(self, user_id: int) -> UserRecord | None:
        self._check("delete_user")
        return self.users.pop(user_id, None)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        supabase_url=None,
        supabase_service_key=None,
        database_path=str(tmp_path / "users.db"),
        api_base_url="",
        cors_origins="*",
        environment="test",
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def container(
    settings: Settings, user_repository: InMemoryUserRepository
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        user_service=UserService(user_repository),
        close_resources=close_resources,
    )
