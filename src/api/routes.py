"""
API routes - User registration and authentication endpoints.

This module defines the HTTP endpoints:
- POST /users - Create a user after field validation
- POST /users/authenticate - Exchange credentials for a session token
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from src.api.dependencies import get_user_service
from src.api.models import (
    AuthenticateRequest,
    AuthenticateResponse,
    CreateUserResponse,
    ErrorResponse,
    FieldErrorModel,
)
from src.config.settings import Settings, get_settings
from src.domain.exceptions import RegistrationRejected
from src.domain.users import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=CreateUserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "model": list[FieldErrorModel],
            "description": "Field validation errors (or a message when the body is missing)",
        },
        409: {"model": ErrorResponse, "description": "User already exists"},
    },
    summary="Create a user",
    description="Validate username, password and email, then store the new user.",
)
async def create_user(
    body: dict[str, Any] | None = Body(default=None),
    service: UserService = Depends(get_user_service),
) -> CreateUserResponse | JSONResponse:
    """
    Create a new user.

    - **username**: 3-30 alphanumeric characters, must be unused
    - **password**: at least 6 characters
    - **email**: valid email address, must be unused

    Validation failures return 400 with a list of `{path, message}` errors.
    """
    if not body:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Request body is required."},
        )

    try:
        await service.register(body)
    except RegistrationRejected as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=[error.to_dict() for error in exc.errors],
        )
    return CreateUserResponse(message="User created.")


@router.post(
    "/authenticate",
    response_model=AuthenticateResponse,
    response_model_exclude_none=True,
    responses={422: {"description": "Validation error"}},
    summary="Authenticate a user",
    description="Check username and password and return a signed session token.",
)
async def authenticate(
    request_data: AuthenticateRequest,
    service: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> AuthenticateResponse | JSONResponse:
    """
    Authenticate with username and password.

    Invalid credentials are reported in the body with status
    `INVALID_CREDENTIALS_STATUS` (200 unless configured otherwise).
    """
    token = await service.authenticate(request_data.username, request_data.password)
    if token is not None:
        return AuthenticateResponse(message="Authenticated", token=token)

    rejected = AuthenticateResponse(
        message="Invalid credentials",
        errors=[FieldErrorModel(message="Username or password is incorrect.")],
    )
    return JSONResponse(
        status_code=settings.invalid_credentials_status,
        content=rejected.model_dump(exclude_none=True),
    )
