"""Notes API endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.models.profile import Profile
from ..core.schemas.notes import NoteCreate, NoteResponse, NoteUpdate
from ..core.services import NoteService
from ..database import get_db_session
from ..middleware.auth import get_admin_profile, get_current_profile

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("/", response_model=List[NoteResponse])
async def list_my_notes(
    profile: Profile = Depends(get_current_profile),
    session: AsyncSession = Depends(get_db_session),
):
    """Caller's own notes, newest first."""
    return await NoteService(session).list_my_notes(profile.id)


@router.get("/public", response_model=List[NoteResponse])
async def list_public_notes(
    profile: Profile = Depends(get_current_profile),
    session: AsyncSession = Depends(get_db_session),
):
    """Every public note, newest first."""
    return await NoteService(session).list_public_notes()


@router.get("/all", response_model=List[NoteResponse])
async def list_all_notes(
    profile: Profile = Depends(get_admin_profile),
    session: AsyncSession = Depends(get_db_session),
):
    """Every note in the system. Admin only."""
    return await NoteService(session).list_all_notes(profile)


@router.post("/", response_model=NoteResponse, status_code=201)
async def create_note(
    request: NoteCreate,
    profile: Profile = Depends(get_current_profile),
    session: AsyncSession = Depends(get_db_session),
):
    """Create a new note owned by the caller."""
    return await NoteService(session).create_note(profile.id, request)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: UUID,
    profile: Profile = Depends(get_current_profile),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a specific note."""
    return await NoteService(session).get_note(note_id, profile)


@router.patch("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: UUID,
    request: NoteUpdate,
    profile: Profile = Depends(get_current_profile),
    session: AsyncSession = Depends(get_db_session),
):
    """Update title, content and/or visibility."""
    return await NoteService(session).update_note(note_id, profile, request)


@router.delete("/{note_id}", status_code=204)
async def delete_note(
    note_id: UUID,
    profile: Profile = Depends(get_current_profile),
    session: AsyncSession = Depends(get_db_session),
):
    """Delete a note."""
    await NoteService(session).delete_note(note_id, profile)
