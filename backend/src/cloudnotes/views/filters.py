"""Client-side filtering for the admin notes table.

Filters only ever narrow an already fetched list; nothing here talks to
the database.
"""

from enum import Enum
from typing import Iterable, List, Optional

from ..core.schemas.notes import NoteResponse


class VisibilityFilter(str, Enum):
    ALL = "all"
    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def parse(cls, value: Optional[str]) -> "VisibilityFilter":
        """Unknown or missing values mean no visibility filter."""
        try:
            return cls((value or cls.ALL.value).lower())
        except ValueError:
            return cls.ALL

    @property
    def label(self) -> str:
        return {"all": "All Notes", "public": "Public Only", "private": "Private Only"}[self.value]


def matches_search(note: NoteResponse, text: str) -> bool:
    """Case-insensitive substring match on title or content."""
    needle = text.lower()
    return needle in note.title.lower() or needle in note.content.lower()


def matches_visibility(note: NoteResponse, visibility: VisibilityFilter) -> bool:
    if visibility is VisibilityFilter.PUBLIC:
        return note.is_public
    if visibility is VisibilityFilter.PRIVATE:
        return not note.is_public
    return True


def filter_notes(
    notes: Iterable[NoteResponse],
    text: str = "",
    visibility: VisibilityFilter = VisibilityFilter.ALL,
) -> List[NoteResponse]:
    """Notes matching both the search text and the visibility filter, order preserved."""
    return [
        note
        for note in notes
        if matches_search(note, text) and matches_visibility(note, visibility)
    ]
