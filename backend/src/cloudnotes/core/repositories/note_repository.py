"""Note repository for database operations."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.note import Note

logger = logging.getLogger(__name__)

# Columns a caller may change after insert; user_id is deliberately absent
UPDATABLE_FIELDS = frozenset({"title", "content", "is_public"})


class NoteRepository:
    """Repository for the notes collection."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_note(self, note_data: dict) -> Note:
        """Insert a new note."""
        note = Note(**note_data)
        self.session.add(note)
        await self.session.commit()
        await self.session.refresh(note)
        return note

    async def get_by_id(self, note_id: UUID) -> Optional[Note]:
        """Get note by ID."""
        stmt = select(Note).where(Note.id == note_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_notes(
        self, user_id: Optional[UUID] = None, is_public: Optional[bool] = None
    ) -> List[Note]:
        """List notes newest first, optionally scoped to one owner or one visibility."""
        stmt = select(Note)
        if user_id is not None:
            stmt = stmt.where(Note.user_id == user_id)
        if is_public is not None:
            stmt = stmt.where(Note.is_public.is_(is_public))

        stmt = stmt.order_by(desc(Note.created_at), desc(Note.id))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_note(self, note_id: UUID, update_data: dict) -> Optional[Note]:
        """Apply a partial update. Returns None if the note does not exist."""
        unknown = set(update_data) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update note fields: {', '.join(sorted(unknown))}")

        note = await self.get_by_id(note_id)
        if not note:
            return None

        for key, value in update_data.items():
            setattr(note, key, value)

        await self.session.commit()
        await self.session.refresh(note)
        return note

    async def delete_note(self, note_id: UUID) -> bool:
        """Delete a note. Returns False if it was already gone."""
        note = await self.get_by_id(note_id)
        if not note:
            logger.warning(f"Note {note_id} not found for deletion")
            return False

        try:
            await self.session.delete(note)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(f"Deleted note {note_id}")
        return True
