"""User CRUD endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Path, Request, status
from fastapi.responses import JSONResponse

from user_management.api.models import ErrorOut, MessageOut, UserOut, UserPayload
from user_management.domain.users import (
    DuplicateEmail,
    InvalidInput,
    NotFound,
    ServerFailure,
    UserRecord,
)

if TYPE_CHECKING:
    from user_management.containers import AppContainer
    from user_management.domain.users import Failure

router = APIRouter(prefix="/api/users", tags=["users"])

# Store ids are 64-bit; an id outside that range can name no record.
UserId = Annotated[int, Path(ge=-(2**63), le=2**63 - 1)]

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorOut},
    status.HTTP_404_NOT_FOUND: {"model": ErrorOut},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorOut},
}

_FAILURE_STATUS: dict[type, int] = {
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    DuplicateEmail: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    ServerFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def failure_response(failure: Failure) -> JSONResponse:
    """Translate a typed failure into its JSON error response."""
    return JSONResponse(
        status_code=_FAILURE_STATUS[type(failure)],
        content={"error": failure.message},
    )


def _serialize_user(user: UserRecord) -> dict[str, object]:
    return asdict(user)


@router.get("", response_model=list[UserOut], responses=_ERROR_RESPONSES)
async def list_users(request: Request) -> object:
    """Return all users ordered by id."""
    container: AppContainer = request.app.state.container
    result = container.user_service.list_users()
    if isinstance(result, ServerFailure):
        return failure_response(result)
    return [_serialize_user(user) for user in result]


@router.get("/{user_id}", response_model=UserOut, responses=_ERROR_RESPONSES)
async def get_user(user_id: UserId, request: Request) -> object:
    """Return a single user."""
    container: AppContainer = request.app.state.container
    result = container.user_service.get_user(user_id)
    if not isinstance(result, UserRecord):
        return failure_response(result)
    return _serialize_user(result)


@router.post(
    "",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
async def create_user(payload: UserPayload, request: Request) -> object:
    """Create a user."""
    container: AppContainer = request.app.state.container
    result = container.user_service.create_user(payload.model_dump())
    if not isinstance(result, UserRecord):
        return failure_response(result)
    return _serialize_user(result)


@router.put("/{user_id}", response_model=UserOut, responses=_ERROR_RESPONSES)
async def update_user(
    user_id: UserId, payload: UserPayload, request: Request
) -> object:
    """Replace a user's name, phone and email."""
    container: AppContainer = request.app.state.container
    result = container.user_service.update_user(user_id, payload.model_dump())
    if not isinstance(result, UserRecord):
        return failure_response(result)
    return _serialize_user(result)


@router.delete("/{user_id}", response_model=MessageOut, responses=_ERROR_RESPONSES)
async def delete_user(user_id: UserId, request: Request) -> object:
    """Delete a user."""
    container: AppContainer = request.app.state.container
    result = container.user_service.delete_user(user_id)
    if not isinstance(result, UserRecord):
        return failure_response(result)
    return {"message": "User deleted successfully"}
