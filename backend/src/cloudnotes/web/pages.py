"""
Page routes: login, dashboard and admin dashboard.

Pages only ever render what a fresh query returned. Every mutation is a
form POST that redirects back (303) so the next GET re-reads the list.
Failed mutations come back with ``?error=`` and the page shows it in a
blocking alert; failed reads are logged and render as an empty list.
"""

import logging
from typing import Awaitable, Callable, List, Optional, TypeVar
from urllib.parse import urlencode
from uuid import UUID

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..api.auth import clear_session_cookie, set_session_cookie
from ..config import get_settings
from ..core.models.profile import Profile
from ..core.schemas.auth import LoginRequest, RegisterRequest
from ..core.schemas.notes import NoteUpdate
from ..core.schemas.profiles import ProfileResponse
from ..core.services import AuthService, LoadedSession, NoteService, ProfileService, SessionLoader
from ..database import get_db_session
from ..views import AdminDashboardView, DashboardView, NoteFormState, VisibilityFilter
from .templates import templates

router = APIRouter(tags=["pages"], include_in_schema=False)
logger = logging.getLogger(__name__)

T = TypeVar("T")


def _session_token(request: Request) -> Optional[str]:
    return request.cookies.get(get_settings().session_cookie_name)


async def current_page_session(
    request: Request, session: AsyncSession = Depends(get_db_session)
) -> LoadedSession:
    """Signed-in session or a redirect to the login page."""
    return await SessionLoader(session).load(_session_token(request))


async def admin_page_session(
    request: Request, session: AsyncSession = Depends(get_db_session)
) -> LoadedSession:
    """Admin session or a redirect to the dashboard."""
    return await SessionLoader(session).load_admin(_session_token(request))


def _redirect(path: str, **params) -> RedirectResponse:
    query = {key: value for key, value in params.items() if value not in (None, "")}
    url = f"{path}?{urlencode(query)}" if query else path
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def _parse_note_id(value: Optional[str]) -> Optional[UUID]:
    """Note id from the ?edit= parameter; anything unparseable means no edit."""
    if not value:
        return None
    try:
        return UUID(value)
    except ValueError:
        return None


def _viewer(loaded: LoadedSession) -> Profile:
    if loaded.profile is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Profile not found")
    return loaded.profile


async def _read_or_empty(fetch: Callable[[], Awaitable[List[T]]], what: str) -> List[T]:
    try:
        return await fetch()
    except (HTTPException, SQLAlchemyError) as e:
        logger.error(f"Error fetching {what}: {e}")
        return []


async def _run_mutation(
    action: Callable[[], Awaitable[object]], failure: str, path: str, **params
) -> RedirectResponse:
    try:
        await action()
    except (HTTPException, SQLAlchemyError, ValidationError) as e:
        logger.error(f"{failure}: {e}")
        return _redirect(path, error=failure, **params)
    return _redirect(path, **params)


def _render_login(
    request: Request,
    mode: str,
    error: Optional[str] = None,
    email: str = "",
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "login.html",
        {"mode": mode, "login_error": error, "email": email},
        status_code=status_code,
    )


@router.get("/")
async def index():
    return _redirect(get_settings().dashboard_path)


# Sign in / sign up / sign out


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    error: Optional[str] = None,
    session: AsyncSession = Depends(get_db_session),
):
    if await SessionLoader(session).get_session(_session_token(request)):
        return _redirect(get_settings().dashboard_path)
    return _render_login(request, "login", error=error)


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        token = await AuthService(session).authenticate_user(
            LoginRequest(email=email, password=password)
        )
    except (HTTPException, ValidationError) as e:
        logger.info(f"Login failed for {email!r}: {e}")
        return _render_login(
            request,
            "login",
            error="Invalid email or password",
            email=email,
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    response = _redirect(get_settings().dashboard_path)
    set_session_cookie(response, token.access_token, token.expires_in)
    return response


@router.get("/register", response_class=HTMLResponse)
async def register_page(request: Request):
    return _render_login(request, "register")


@router.post("/register")
async def register(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
    full_name: str = Form(""),
    session: AsyncSession = Depends(get_db_session),
):
    auth_service = AuthService(session)
    try:
        await auth_service.register_user(
            RegisterRequest(
                email=email,
                password=password,
                confirm_password=confirm_password,
                full_name=full_name.strip() or None,
            )
        )
        token = await auth_service.authenticate_user(LoginRequest(email=email, password=password))
    except ValidationError as e:
        message = e.errors()[0]["msg"].removeprefix("Value error, ")
        return _render_login(
            request, "register", error=message, email=email, status_code=status.HTTP_400_BAD_REQUEST
        )
    except HTTPException as e:
        return _render_login(
            request, "register", error=e.detail, email=email, status_code=e.status_code
        )

    response = _redirect(get_settings().dashboard_path)
    set_session_cookie(response, token.access_token, token.expires_in)
    return response


@router.post("/logout")
async def logout(request: Request, session: AsyncSession = Depends(get_db_session)):
    token = _session_token(request)
    if token:
        await AuthService(session).sign_out(token)
    response = _redirect(get_settings().login_path)
    clear_session_cookie(response)
    return response


# User dashboard


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    edit: Optional[str] = None,
    new: bool = False,
    error: Optional[str] = None,
    loaded: LoadedSession = Depends(current_page_session),
    session: AsyncSession = Depends(get_db_session),
):
    note_service = NoteService(session)
    notes = await _read_or_empty(lambda: note_service.list_my_notes(loaded.user_id), "notes")
    profile = ProfileResponse.model_validate(loaded.profile) if loaded.profile else None

    view = DashboardView.build(
        profile, notes, editing_id=_parse_note_id(edit), form_open=new, error=error
    )
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"view": view, "error": view.error, "realtime_tables": [("notes", "mine")]},
    )


@router.post("/dashboard/notes")
async def create_note(
    title: str = Form(""),
    content: str = Form(""),
    is_public: bool = Form(False),
    loaded: LoadedSession = Depends(current_page_session),
    session: AsyncSession = Depends(get_db_session),
):
    dashboard_path = get_settings().dashboard_path
    form = NoteFormState(is_open=True, title=title, content=content, is_public=is_public)
    if not form.is_valid():
        return _redirect(dashboard_path, new=1)

    note_service = NoteService(session)
    return await _run_mutation(
        lambda: note_service.create_note(loaded.user_id, form.to_request()),
        "Error creating note",
        dashboard_path,
    )


@router.post("/dashboard/notes/{note_id}")
async def update_note(
    note_id: UUID,
    title: str = Form(""),
    content: str = Form(""),
    loaded: LoadedSession = Depends(current_page_session),
    session: AsyncSession = Depends(get_db_session),
):
    async def action():
        changes = NoteUpdate(title=title, content=content)
        await NoteService(session).update_note(note_id, _viewer(loaded), changes)

    return await _run_mutation(action, "Error updating note", get_settings().dashboard_path)


@router.post("/dashboard/notes/{note_id}/delete")
async def delete_note(
    note_id: UUID,
    confirm: str = Form(""),
    loaded: LoadedSession = Depends(current_page_session),
    session: AsyncSession = Depends(get_db_session),
):
    dashboard_path = get_settings().dashboard_path
    if confirm != "yes":
        return _redirect(dashboard_path)

    async def action():
        await NoteService(session).delete_note(note_id, _viewer(loaded))

    return await _run_mutation(action, "Error deleting note", dashboard_path)


# Admin dashboard


@router.get("/admin", response_class=HTMLResponse)
async def admin_dashboard(
    request: Request,
    q: str = "",
    visibility: Optional[str] = None,
    edit: Optional[str] = None,
    error: Optional[str] = None,
    loaded: LoadedSession = Depends(admin_page_session),
    session: AsyncSession = Depends(get_db_session),
):
    note_service = NoteService(session)
    profile_service = ProfileService(session)
    notes = await _read_or_empty(lambda: note_service.list_all_notes(loaded.profile), "notes")
    profiles = await _read_or_empty(lambda: profile_service.list_profiles(loaded.profile), "profiles")

    view = AdminDashboardView.build(
        ProfileResponse.model_validate(loaded.profile),
        notes,
        profiles,
        search=q,
        visibility=VisibilityFilter.parse(visibility),
        editing_id=_parse_note_id(edit),
        error=error,
    )
    return templates.TemplateResponse(
        request,
        "admin.html",
        {
            "view": view,
            "error": view.error,
            "visibility_options": list(VisibilityFilter),
            "realtime_tables": [("notes", "all"), ("profiles", "all")],
        },
    )


@router.post("/admin/notes/{note_id}")
async def admin_update_note(
    note_id: UUID,
    title: str = Form(""),
    content: str = Form(""),
    q: str = Form(""),
    visibility: str = Form(""),
    loaded: LoadedSession = Depends(admin_page_session),
    session: AsyncSession = Depends(get_db_session),
):
    async def action():
        changes = NoteUpdate(title=title, content=content)
        await NoteService(session).update_note(note_id, loaded.profile, changes)

    return await _run_mutation(
        action, "Error updating note", get_settings().admin_path, q=q, visibility=visibility
    )


@router.post("/admin/notes/{note_id}/visibility")
async def admin_toggle_visibility(
    note_id: UUID,
    q: str = Form(""),
    visibility: str = Form(""),
    loaded: LoadedSession = Depends(admin_page_session),
    session: AsyncSession = Depends(get_db_session),
):
    note_service = NoteService(session)
    return await _run_mutation(
        lambda: note_service.toggle_visibility(note_id, loaded.profile),
        "Error updating visibility",
        get_settings().admin_path,
        q=q,
        visibility=visibility,
    )


@router.post("/admin/notes/{note_id}/delete")
async def admin_delete_note(
    note_id: UUID,
    confirm: str = Form(""),
    q: str = Form(""),
    visibility: str = Form(""),
    loaded: LoadedSession = Depends(admin_page_session),
    session: AsyncSession = Depends(get_db_session),
):
    admin_path = get_settings().admin_path
    if confirm != "yes":
        return _redirect(admin_path, q=q, visibility=visibility)

    note_service = NoteService(session)
    return await _run_mutation(
        lambda: note_service.delete_note(note_id, loaded.profile),
        "Error deleting note",
        admin_path,
        q=q,
        visibility=visibility,
    )
