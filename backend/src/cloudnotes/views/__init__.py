"""View state for the server-rendered pages."""

from .components import AdminNotesTable, AdminTableRow, NoteCardView, NoteFormState, author_email
from .filters import VisibilityFilter, filter_notes
from .pages import AdminDashboardView, DashboardView

__all__ = [
    "AdminDashboardView",
    "AdminNotesTable",
    "AdminTableRow",
    "DashboardView",
    "NoteCardView",
    "NoteFormState",
    "VisibilityFilter",
    "author_email",
    "filter_notes",
]
