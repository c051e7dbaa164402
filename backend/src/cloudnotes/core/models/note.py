# Note model for user content
import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, utcnow
from .types import GUID


class Note(BaseModel):
    """A note owned by one profile, optionally visible to everyone."""

    __tablename__ = "notes"

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # owner reference, never changes after insert
    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        Index("idx_notes_user_id", "user_id"),
        Index("idx_notes_created_at", "created_at"),
        Index("idx_notes_public_created", "is_public", "created_at"),
        CheckConstraint("length(title) <= 200", name="ck_notes_title_len"),
    )

    def __init__(self, **kwargs):
        # updated_at starts equal to created_at so views can tell unedited notes apart
        now = utcnow()
        kwargs.setdefault("created_at", now)
        kwargs.setdefault("updated_at", kwargs["created_at"])
        kwargs.setdefault("is_public", False)
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', user_id={self.user_id})>"

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        """Check if this note is owned by the specified user."""
        return self.user_id == user_id

    def is_readable_by(self, user_id: uuid.UUID, is_admin: bool = False) -> bool:
        """Owners and admins can always read; everyone else only public notes."""
        return is_admin or self.is_public or self.is_owned_by(user_id)
