"""Page-level view models: the user dashboard and the admin dashboard."""

from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from ..core.schemas.notes import NoteResponse
from ..core.schemas.profiles import ProfileResponse
from .components import AdminNotesTable, NoteCardView, NoteFormState
from .filters import VisibilityFilter, filter_notes


@dataclass
class DashboardView:
    profile: Optional[ProfileResponse]
    cards: List[NoteCardView]
    form: NoteFormState = field(default_factory=NoteFormState)
    error: Optional[str] = None
    empty_message: str = "No notes yet. Create your first note to get started!"

    @property
    def show_admin_link(self) -> bool:
        return bool(self.profile and self.profile.is_admin)

    @classmethod
    def build(
        cls,
        profile: Optional[ProfileResponse],
        notes: List[NoteResponse],
        editing_id: Optional[UUID] = None,
        form_open: bool = False,
        error: Optional[str] = None,
    ) -> "DashboardView":
        return cls(
            profile=profile,
            cards=[NoteCardView(note=note, is_editing=note.id == editing_id) for note in notes],
            form=NoteFormState(is_open=form_open),
            error=error,
        )


@dataclass
class AdminDashboardView:
    profile: ProfileResponse
    notes: List[NoteResponse]
    profiles: List[ProfileResponse]
    search: str
    visibility: VisibilityFilter
    table: AdminNotesTable
    error: Optional[str] = None

    @property
    def total_notes(self) -> int:
        """Count after filtering, as shown next to the filters."""
        return len(self.table.rows)

    @property
    def total_users(self) -> int:
        return len(self.profiles)

    @classmethod
    def build(
        cls,
        profile: ProfileResponse,
        notes: List[NoteResponse],
        profiles: List[ProfileResponse],
        search: str = "",
        visibility: VisibilityFilter = VisibilityFilter.ALL,
        editing_id: Optional[UUID] = None,
        error: Optional[str] = None,
    ) -> "AdminDashboardView":
        filtered = filter_notes(notes, search, visibility)
        return cls(
            profile=profile,
            notes=notes,
            profiles=profiles,
            search=search,
            visibility=visibility,
            table=AdminNotesTable.build(filtered, profiles, editing_id),
            error=error,
        )
