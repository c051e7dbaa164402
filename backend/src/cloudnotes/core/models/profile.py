"""
Profile model - per-user metadata shown in the UI.
"""

import uuid
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, utcnow
from .types import GUID


class Profile(BaseModel):
    """Profile row whose id equals the owning account id."""

    __tablename__ = "profiles"

    # no default: the id always comes from the account it belongs to
    id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "full_name IS NULL OR length(full_name) <= 100", name="ck_profiles_full_name_len"
        ),
        Index("idx_profiles_created_at", "created_at"),
    )

    def __init__(self, **kwargs):
        # set before flush so in-memory profiles validate as responses
        kwargs.setdefault("created_at", utcnow())
        kwargs.setdefault("is_admin", False)
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return f"<Profile(email='{self.email}', is_admin={self.is_admin})>"
