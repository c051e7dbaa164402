"""
Note schemas.

Request and response contracts for the notes collection. Owner is never
part of an update payload: it is fixed when the note is created.
"""

import uuid
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _not_blank(value: str) -> str:
    if len(value.strip()) == 0:
        raise ValueError("Value cannot be blank")
    return value


NonBlankStr = Annotated[str, AfterValidator(_not_blank)]


class NoteCreate(BaseModel):
    """Note creation request schema."""

    title: NonBlankStr = Field(min_length=1, max_length=200, description="Note title")
    content: NonBlankStr = Field(min_length=1, description="Note content")
    is_public: bool = Field(default=False, description="Whether note is publicly visible")

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "title": "Groceries",
                "content": "Milk, eggs, coffee",
                "is_public": False,
            }
        },
    )


class NoteUpdate(BaseModel):
    """Partial note update; only provided fields are written."""

    title: Optional[NonBlankStr] = Field(default=None, min_length=1, max_length=200)
    content: Optional[NonBlankStr] = Field(default=None, min_length=1)
    is_public: Optional[bool] = Field(default=None)

    model_config = ConfigDict(extra="forbid")

    def changes(self) -> dict:
        """Fields that were explicitly set to a non-null value."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class NoteResponse(BaseModel):
    """Note row as returned by the API."""

    id: uuid.UUID = Field(description="Note unique identifier")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")
    title: str = Field(description="Note title")
    content: str = Field(description="Note content")
    user_id: uuid.UUID = Field(description="Owner profile id")
    is_public: bool = Field(description="Whether note is publicly visible")

    model_config = ConfigDict(from_attributes=True)
