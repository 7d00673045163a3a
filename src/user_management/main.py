"""Command-line entrypoint that serves the API with uvicorn."""

import uvicorn

from user_management.config import Settings


def main() -> None:
    """Run the user management API on the configured host and port."""
    settings = Settings()
    uvicorn.run(
        "user_management.api.asgi:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
