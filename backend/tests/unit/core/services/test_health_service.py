"""Health service tests."""

from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.exc import OperationalError

from cloudnotes.core.services.health_service import HealthService


def broken_db_session():
    session = Mock()
    session.execute = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("db down")))
    return session


@pytest.mark.asyncio
async def test_healthy(test_session, fake_redis):
    status = await HealthService(test_session, fake_redis).get_health_status()

    assert status.status == "healthy"
    assert status.checks["database"]["connected"] is True
    assert status.checks["redis"]["connected"] is True


@pytest.mark.asyncio
async def test_redis_down_is_degraded(test_session, fake_redis, monkeypatch):
    monkeypatch.setattr(fake_redis, "ping", AsyncMock(side_effect=ConnectionError("redis down")))

    status = await HealthService(test_session, fake_redis).get_health_status()

    assert status.status == "degraded"
    assert "redis down" in status.checks["redis"]["error"]


@pytest.mark.asyncio
async def test_database_down_is_unhealthy(fake_redis):
    status = await HealthService(broken_db_session(), fake_redis).get_health_status()

    assert status.status == "unhealthy"
    assert status.checks["database"]["connected"] is False
