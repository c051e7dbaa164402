"""Realtime refresh over WebSocket.

A connected view subscribes to one table. Every change on that table makes
the server re-read the whole list the view shows and push it down; the
subscription lives exactly as long as the socket.
"""

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import async_sessionmaker

from ..config import get_settings
from ..core.models.profile import Profile
from ..core.realtime import WATCHED_TABLES, ChangeFeed, RealtimeSubscriber, get_change_feed
from ..core.repositories.profile_repository import ProfileRepository
from ..core.schemas.profiles import ProfileResponse
from ..core.services import LoginRequired, NoteService, SessionLoader
from ..database import get_session_factory

router = APIRouter(prefix="/realtime", tags=["realtime"])
logger = logging.getLogger(__name__)

# Application-defined close codes (4000-4999)
CLOSE_UNAUTHENTICATED = 4401
CLOSE_FORBIDDEN = 4403
CLOSE_UNKNOWN_TABLE = 4404

SCOPES = ("mine", "all")


async def fetch_view_items(
    session_factory: async_sessionmaker,
    change_feed: ChangeFeed,
    table: str,
    scope: str,
    viewer: Profile,
) -> List[BaseModel]:
    """Re-read the full list a view shows, in a fresh session."""
    async with session_factory() as session:
        if table == "profiles":
            profiles = await ProfileRepository(session).list_profiles()
            return [ProfileResponse.model_validate(p) for p in profiles]

        note_service = NoteService(session, change_feed)
        if scope == "all":
            return await note_service.list_all_notes(viewer)
        return await note_service.list_my_notes(viewer.id)


async def _receive_until_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive_text()
        if message == "ping":
            await websocket.send_json({"type": "pong"})


async def _authenticate(websocket: WebSocket, session_factory: async_sessionmaker) -> Optional[Profile]:
    token = websocket.query_params.get("token") or websocket.cookies.get(
        get_settings().session_cookie_name
    )
    async with session_factory() as session:
        try:
            loaded = await SessionLoader(session).load(token)
        except LoginRequired:
            return None
    return loaded.profile


@router.websocket("/{table}")
async def realtime_changes(
    websocket: WebSocket,
    table: str,
    scope: str = "mine",
    session_factory: async_sessionmaker = Depends(get_session_factory),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """Push a freshly fetched list every time the table changes."""
    if table not in WATCHED_TABLES or scope not in SCOPES:
        await websocket.close(code=CLOSE_UNKNOWN_TABLE)
        return

    viewer = await _authenticate(websocket, session_factory)
    if viewer is None:
        await websocket.close(code=CLOSE_UNAUTHENTICATED)
        return

    if (table == "profiles" or scope == "all") and not viewer.is_admin:
        await websocket.close(code=CLOSE_FORBIDDEN)
        return

    await websocket.accept()

    async def refetch() -> None:
        items = await fetch_view_items(session_factory, change_feed, table, scope, viewer)
        await websocket.send_json(
            {
                "type": "refresh",
                "table": table,
                "items": [item.model_dump(mode="json") for item in items],
            }
        )

    subscriber = RealtimeSubscriber(change_feed)
    async with change_feed.subscribe(table) as subscription:
        await websocket.send_json({"type": "subscribed", "table": table, "scope": scope})
        logger.info(f"Realtime subscriber for {viewer.id} on {table} ({scope})")

        watcher = asyncio.create_task(subscriber.run(subscription, refetch))
        receiver = asyncio.create_task(_receive_until_disconnect(websocket))
        done, pending = await asyncio.wait({watcher, receiver}, return_when=asyncio.FIRST_COMPLETED)

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        for task in done:
            exc = task.exception()
            if exc and not isinstance(exc, WebSocketDisconnect):
                logger.error(f"Realtime subscriber on {table} stopped: {exc}", exc_info=exc)

    logger.info(f"Realtime subscriber for {viewer.id} on {table} closed")
