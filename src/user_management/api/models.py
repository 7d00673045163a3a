"""Request and response models for the user API."""

from pydantic import BaseModel, ConfigDict


class UserPayload(BaseModel):
    """Body of create and update requests.

    Fields are optional here so that a missing field reaches the service's
    required-field check instead of failing schema validation.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    phone: str | None = None
    email: str | None = None


class UserOut(BaseModel):
    """A stored user."""

    id: int
    name: str
    phone: str
    email: str


class MessageOut(BaseModel):
    """Confirmation body for successful deletes."""

    message: str


class ErrorOut(BaseModel):
    """Body returned for every failed request."""

    error: str


class HealthOut(BaseModel):
    """Health check response body."""

    status: str
    timestamp: str
