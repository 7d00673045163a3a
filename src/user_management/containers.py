"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from user_management.adapters.sqlite_user_repository import SqliteUserRepository
from user_management.adapters.supabase_user_repository import (
    SupabaseUserRepository,
)
from user_management.config import Settings
from user_management.services.users import UserRepository, UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    close_resources: Callable[[], Awaitable[None]]


def build_repository(settings: Settings) -> UserRepository:
    """Create the user store selected by the settings."""
    if settings.uses_supabase:
        supabase_client = create_client(
            settings.supabase_url, settings.supabase_service_key
        )
        return SupabaseUserRepository(supabase_client)
    return SqliteUserRepository(settings.database_path)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    user_service = UserService(build_repository(resolved_settings))

    async def close_resources() -> None:
        # Both stores are connectionless between calls; nothing is held open.
        return None

    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        close_resources=close_resources,
    )
