"""
Authentication schemas.

Registration, login and the session object returned by session lookup.
Authentication mechanics are kept minimal: an email/password account and
a signed access token.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from .profiles import ProfileResponse


def normalize_email(value):
    """Accounts are keyed by the lower-cased address."""
    if isinstance(value, str):
        return value.strip().lower()
    return value


class LoginRequest(BaseModel):
    """User login request schema."""

    email: EmailStr = Field(description="Account email")
    password: str = Field(min_length=1, max_length=128, description="User password")

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        return normalize_email(v)

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "jane@example.com", "password": "securepassword123"}}
    )


class RegisterRequest(BaseModel):
    """Account registration request schema."""

    email: EmailStr = Field(description="Account email")
    password: str = Field(min_length=8, max_length=128, description="User password")
    confirm_password: str = Field(min_length=8, max_length=128, description="Password confirmation")
    full_name: Optional[str] = Field(default=None, max_length=100, description="Display name")

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        return normalize_email(v)

    @model_validator(mode="after")
    def passwords_match(self):
        """Validate that passwords match."""
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "jane@example.com",
                "password": "securepassword123",
                "confirm_password": "securepassword123",
                "full_name": "Jane Doe",
            }
        }
    )


class AuthSession(BaseModel):
    """An authenticated user context."""

    user_id: uuid.UUID = Field(description="Authenticated user id")
    token_id: Optional[str] = Field(default=None, description="Token identifier (jti)")


class TokenResponse(BaseModel):
    """Access token issued on login."""

    access_token: str = Field(description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(description="Token expiration time in seconds")
    profile: ProfileResponse = Field(description="Profile of the signed-in user")
