"""View state for the reusable page pieces: note card, note form, admin table."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from ..core.schemas.notes import NoteCreate, NoteResponse
from ..core.schemas.profiles import ProfileResponse

UNKNOWN_AUTHOR = "Unknown"
PREVIEW_LENGTH = 100


def format_date(value: datetime) -> str:
    return value.strftime("%Y-%m-%d")


@dataclass
class NoteFormState:
    """The "+ New Note" form: collapsed button or open form with field values."""

    is_open: bool = False
    title: str = ""
    content: str = ""
    is_public: bool = False

    def is_valid(self) -> bool:
        """Blank title or content never reaches the backend."""
        return bool(self.title.strip()) and bool(self.content.strip())

    def to_request(self) -> NoteCreate:
        return NoteCreate(title=self.title, content=self.content, is_public=self.is_public)


@dataclass
class NoteCardView:
    note: NoteResponse
    is_editing: bool = False

    @property
    def created_label(self) -> str:
        return format_date(self.note.created_at)

    @property
    def updated_label(self) -> Optional[str]:
        """Only shown for notes edited after creation."""
        if self.note.updated_at == self.note.created_at:
            return None
        return format_date(self.note.updated_at)

    @property
    def badge(self) -> Optional[str]:
        return "Public" if self.note.is_public else None


def author_email(user_id: UUID, profiles: Iterable[ProfileResponse]) -> str:
    for profile in profiles:
        if profile.id == user_id:
            return profile.email or UNKNOWN_AUTHOR
    return UNKNOWN_AUTHOR


@dataclass
class AdminTableRow:
    note: NoteResponse
    author: str
    is_editing: bool = False

    @property
    def content_preview(self) -> str:
        content = self.note.content
        if len(content) <= PREVIEW_LENGTH:
            return content
        return content[:PREVIEW_LENGTH].rstrip() + "..."

    @property
    def status_label(self) -> str:
        return "Public" if self.note.is_public else "Private"

    @property
    def created_label(self) -> str:
        return format_date(self.note.created_at)


@dataclass
class AdminNotesTable:
    rows: List[AdminTableRow] = field(default_factory=list)
    empty_message: str = "No notes found"

    @classmethod
    def build(
        cls,
        notes: Iterable[NoteResponse],
        profiles: List[ProfileResponse],
        editing_id: Optional[UUID] = None,
    ) -> "AdminNotesTable":
        return cls(
            rows=[
                AdminTableRow(
                    note=note,
                    author=author_email(note.user_id, profiles),
                    is_editing=note.id == editing_id,
                )
                for note in notes
            ]
        )
