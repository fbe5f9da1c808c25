"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
The registration body is validated by the domain layer, not by a model,
so that unknown keys and wrong types are reported as field errors.
"""

from pydantic import BaseModel, Field


class FieldErrorModel(BaseModel):
    """A single validation error; ``path`` is omitted for payload-level errors."""

    path: str | None = Field(default=None, description="Offending field, if any")
    message: str


class CreateUserResponse(BaseModel):
    """Response model for successful registration."""

    message: str


class AuthenticateRequest(BaseModel):
    """Request model for login."""

    username: str
    password: str


class AuthenticateResponse(BaseModel):
    """Response model for login; ``token`` on success, ``errors`` on failure."""

    message: str
    token: str | None = None
    errors: list[FieldErrorModel] | None = None


class ErrorResponse(BaseModel):
    """Standard error response model."""

    message: str
