"""
Profile schemas.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProfileResponse(BaseModel):
    """Profile row as returned by the API."""

    id: uuid.UUID = Field(description="Profile id, equal to the account id")
    created_at: datetime = Field(description="Creation timestamp")
    email: str = Field(description="Account email")
    full_name: Optional[str] = Field(default=None, description="Display name")
    avatar_url: Optional[str] = Field(default=None, description="Avatar reference")
    is_admin: bool = Field(default=False, description="Whether the user can open the admin view")

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    """Editable profile fields."""

    full_name: Optional[str] = Field(default=None, max_length=100)
    avatar_url: Optional[str] = Field(default=None, max_length=500)

    model_config = ConfigDict(extra="forbid")
