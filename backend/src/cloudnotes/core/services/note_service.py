"""Note service implementation."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.note import Note
from ..models.profile import Profile
from ..realtime import ChangeFeed, ChangeType, get_change_feed
from ..repositories.note_repository import NoteRepository
from ..schemas.notes import NoteCreate, NoteResponse, NoteUpdate
from .interfaces import INoteService

logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")


def _admin_only() -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")


class NoteService(INoteService):
    """Note service implementation.

    Access policy:
    - owners can read, edit and delete their notes
    - admins can read, edit and delete every note
    - anyone signed in can read a public note
    Anything else looks exactly like a missing note (404).
    """

    def __init__(self, session: AsyncSession, change_feed: Optional[ChangeFeed] = None):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.change_feed = change_feed or get_change_feed()

    async def list_my_notes(self, user_id: UUID) -> List[NoteResponse]:
        """Caller's own notes, newest first."""
        notes = await self.note_repo.list_notes(user_id=user_id)
        return [self._to_response(note) for note in notes]

    async def list_public_notes(self) -> List[NoteResponse]:
        """Every public note, newest first."""
        notes = await self.note_repo.list_notes(is_public=True)
        return [self._to_response(note) for note in notes]

    async def list_all_notes(self, viewer: Profile) -> List[NoteResponse]:
        """Every note, newest first. Admin only."""
        if not viewer.is_admin:
            raise _admin_only()
        notes = await self.note_repo.list_notes()
        return [self._to_response(note) for note in notes]

    async def create_note(self, user_id: UUID, request: NoteCreate) -> NoteResponse:
        """Create new note owned by user_id."""
        note = await self.note_repo.create_note(
            {
                "title": request.title,
                "content": request.content,
                "is_public": request.is_public,
                "user_id": user_id,
            }
        )
        logger.info(f"Created note {note.id} for user {user_id}")
        await self.change_feed.publish("notes", ChangeType.INSERT, note.id)
        return self._to_response(note)

    async def get_note(self, note_id: UUID, viewer: Profile) -> NoteResponse:
        """Get note by ID if the viewer may read it."""
        note = await self.note_repo.get_by_id(note_id)
        if not note or not note.is_readable_by(viewer.id, viewer.is_admin):
            raise _not_found()
        return self._to_response(note)

    async def update_note(self, note_id: UUID, viewer: Profile, request: NoteUpdate) -> NoteResponse:
        """Apply only the fields present in the request."""
        note = await self._get_writable(note_id, viewer)

        changes = request.changes()
        if not changes:
            return self._to_response(note)

        updated = await self.note_repo.update_note(note_id, changes)
        if not updated:
            # Deleted between the read and the write
            raise _not_found()

        logger.info(f"Updated note {note_id} fields {sorted(changes)}")
        await self.change_feed.publish("notes", ChangeType.UPDATE, note_id)
        return self._to_response(updated)

    async def toggle_visibility(self, note_id: UUID, viewer: Profile) -> NoteResponse:
        """Flip a note between public and private."""
        note = await self._get_writable(note_id, viewer)
        return await self.update_note(note_id, viewer, NoteUpdate(is_public=not note.is_public))

    async def delete_note(self, note_id: UUID, viewer: Profile) -> bool:
        """Delete note. A second delete of the same id is a 404."""
        await self._get_writable(note_id, viewer)

        if not await self.note_repo.delete_note(note_id):
            raise _not_found()

        await self.change_feed.publish("notes", ChangeType.DELETE, note_id)
        return True

    async def _get_writable(self, note_id: UUID, viewer: Profile) -> Note:
        note = await self.note_repo.get_by_id(note_id)
        if not note or not (viewer.is_admin or note.is_owned_by(viewer.id)):
            raise _not_found()
        return note

    @staticmethod
    def _to_response(note: Note) -> NoteResponse:
        return NoteResponse.model_validate(note)
