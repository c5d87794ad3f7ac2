"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """Request model for signup.

    Fields are optional so that missing values reach the auth service, which
    owns the validation messages.
    """
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class SigninRequest(BaseModel):
    """Request model for signin."""
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Public user fields. The password hash has no field here."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    created_at: datetime = Field(..., alias="createdAt")


class AuthResponse(BaseModel):
    """Success envelope for signup and signin."""
    success: bool = True
    message: str
    user: UserResponse
    token: str


class CurrentUserResponse(BaseModel):
    """Success envelope for the current-user lookup."""
    success: bool = True
    message: str
    user: UserResponse


class ErrorResponse(BaseModel):
    """Failure envelope shared by every auth endpoint."""
    success: bool = False
    error: str
    message: str
