"""User domain models and typed operation outcomes."""

from dataclasses import dataclass

REQUIRED_FIELDS_MESSAGE = "Name, phone, and email are required"


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: int
    name: str
    phone: str
    email: str


@dataclass(frozen=True)
class UserDraft:
    """Validated mutable fields of a user."""

    name: str
    phone: str
    email: str


@dataclass(frozen=True)
class NotFound:
    """No record exists for the requested id."""

    message: str = "User not found"


@dataclass(frozen=True)
class DuplicateEmail:
    """The email is already used by another record."""

    message: str = "Email already exists"


@dataclass(frozen=True)
class InvalidInput:
    """A required field was missing or empty."""

    message: str = REQUIRED_FIELDS_MESSAGE


@dataclass(frozen=True)
class ServerFailure:
    """The store failed in an unexpected way."""

    message: str = "Server error"


Failure = NotFound | DuplicateEmail | InvalidInput | ServerFailure
