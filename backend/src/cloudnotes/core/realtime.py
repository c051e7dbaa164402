"""
Realtime change feed.

Every committed mutation on a watched table publishes a small JSON event on
a Redis channel named ``<prefix>:<table>``. Watchers do not look at the
payload: any event on a table means "re-read the whole list".
"""

import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import AsyncIterator, Awaitable, Callable, List, Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from ..config import get_settings
from .redis_client import RedisClient, get_redis_client

logger = logging.getLogger(__name__)

WATCHED_TABLES = ("notes", "profiles")


class ChangeType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    """A row in a watched table was inserted, updated or deleted."""

    table: str
    type: ChangeType
    record_id: Optional[str] = None
    committed_at: Optional[str] = None

    def to_json(self) -> str:
        return json.dumps(
            {
                "table": self.table,
                "type": self.type.value,
                "record_id": self.record_id,
                "committed_at": self.committed_at,
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> "ChangeEvent":
        data = json.loads(raw)
        return cls(
            table=data["table"],
            type=ChangeType(data["type"]),
            record_id=data.get("record_id"),
            committed_at=data.get("committed_at"),
        )


class Subscription:
    """Scoped handle on one table's change channel.

    Only obtain it through ``ChangeFeed.subscribe()`` so the underlying
    pub/sub connection is always released.
    """

    def __init__(self, table: str, pubsub, poll_timeout: float = 1.0):
        self.table = table
        self.pubsub = pubsub
        self.poll_timeout = poll_timeout
        self.closed = False

    async def _poll(self, timeout: float) -> Optional[ChangeEvent]:
        message = await self.pubsub.get_message(ignore_subscribe_messages=True, timeout=timeout)
        if not message or message.get("type") != "message":
            return None
        try:
            return ChangeEvent.from_json(message["data"])
        except (ValueError, KeyError, TypeError) as e:
            # Malformed payloads still mean "something changed"
            logger.warning(f"Unreadable change event on {self.table}: {e}")
            return ChangeEvent(table=self.table, type=ChangeType.UPDATE)

    async def next_batch(self) -> List[ChangeEvent]:
        """Wait for at least one event, then drain whatever else is already queued."""
        event = None
        while event is None:
            if self.closed:
                raise RuntimeError("Subscription is closed")
            event = await self._poll(self.poll_timeout)

        batch = [event]
        while True:
            pending = await self._poll(0)
            if pending is None:
                return batch
            batch.append(pending)

    async def batches(self) -> AsyncIterator[List[ChangeEvent]]:
        while not self.closed:
            yield await self.next_batch()

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            await self.pubsub.unsubscribe()
        finally:
            await self.pubsub.aclose()
        logger.debug(f"Closed realtime subscription on {self.table}")


class ChangeFeed:
    """Publishes and subscribes to per-table change events."""

    def __init__(self, redis_client: RedisClient, prefix: Optional[str] = None):
        self.redis_client = redis_client
        self.prefix = prefix or get_settings().realtime_channel_prefix

    def channel_for(self, table: str) -> str:
        if table not in WATCHED_TABLES:
            raise ValueError(f"Table {table!r} is not watched")
        return f"{self.prefix}:{table}"

    async def publish(
        self, table: str, change_type: ChangeType, record_id: Optional[UUID] = None
    ) -> bool:
        """Publish a change event. Failures are logged, never raised."""
        event = ChangeEvent(
            table=table,
            type=change_type,
            record_id=str(record_id) if record_id else None,
            committed_at=datetime.now(timezone.utc).isoformat(),
        )
        try:
            receivers = await self.redis_client.publish(self.channel_for(table), event.to_json())
        except Exception as e:
            logger.warning(f"Failed to publish {change_type.value} on {table}: {e}")
            return False

        logger.debug(f"Published {change_type.value} on {table} to {receivers} receiver(s)")
        return True

    @asynccontextmanager
    async def subscribe(self, table: str) -> AsyncIterator[Subscription]:
        """Subscribe to a table; the subscription is torn down on exit."""
        pubsub = await self.redis_client.open_pubsub(self.channel_for(table))
        subscription = Subscription(table, pubsub)
        logger.debug(f"Opened realtime subscription on {table}")
        try:
            yield subscription
        finally:
            await subscription.close()


class RealtimeSubscriber:
    """Re-runs a full refetch whenever a watched table changes.

    Refetches for one watcher run one at a time, and events that arrive while
    a refetch is in flight are folded into the next one. A failed read is
    logged and the watcher waits for the next change.
    """

    def __init__(self, feed: ChangeFeed):
        self.feed = feed

    async def watch(self, table: str, refetch: Callable[[], Awaitable[None]]) -> None:
        async with self.feed.subscribe(table) as subscription:
            await self.run(subscription, refetch)

    async def run(self, subscription: Subscription, refetch: Callable[[], Awaitable[None]]) -> None:
        """Drive refetches from an already open subscription until it closes."""
        async for batch in subscription.batches():
            logger.debug(f"{len(batch)} change(s) on {subscription.table}, refetching")
            try:
                await refetch()
            except (HTTPException, SQLAlchemyError) as e:
                logger.error(f"Refetch of {subscription.table} failed: {e}")


_change_feed: Optional[ChangeFeed] = None


def get_change_feed() -> ChangeFeed:
    """Get the app-wide change feed."""
    global _change_feed
    if _change_feed is None:
        _change_feed = ChangeFeed(get_redis_client())
    return _change_feed
