"""Session loader tests: login and admin gating."""

import uuid
from unittest.mock import AsyncMock, Mock

import pytest

from cloudnotes.core.models.profile import Profile
from cloudnotes.core.services import session_service
from cloudnotes.core.services.session_service import AdminRequired, LoginRequired, SessionLoader


def loader_with(monkeypatch, payload, profile=None) -> SessionLoader:
    monkeypatch.setattr(session_service, "decode_access_token", AsyncMock(return_value=payload))
    loader = SessionLoader(Mock())
    loader.profile_repo = AsyncMock()
    loader.profile_repo.get_by_id.return_value = profile
    return loader


class TestGetSession:
    @pytest.mark.asyncio
    async def test_no_token_means_no_session(self, monkeypatch):
        loader = loader_with(monkeypatch, None)

        assert await loader.get_session(None) is None
        assert await loader.get_session("") is None
        session_service.decode_access_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_token_means_no_session(self, monkeypatch):
        assert await loader_with(monkeypatch, None).get_session("bad") is None

    @pytest.mark.asyncio
    async def test_non_uuid_subject_means_no_session(self, monkeypatch):
        assert await loader_with(monkeypatch, {"sub": "nope"}).get_session("tok") is None

    @pytest.mark.asyncio
    async def test_valid_token(self, monkeypatch):
        user_id = uuid.uuid4()
        loader = loader_with(monkeypatch, {"sub": str(user_id), "jti": "abc"})

        session = await loader.get_session("tok")

        assert session.user_id == user_id
        assert session.token_id == "abc"


class TestLoad:
    @pytest.mark.asyncio
    async def test_load_without_session_requires_login(self, monkeypatch):
        with pytest.raises(LoginRequired):
            await loader_with(monkeypatch, None).load("bad")

    @pytest.mark.asyncio
    async def test_load_fetches_matching_profile(self, monkeypatch):
        user_id = uuid.uuid4()
        profile = Profile(id=user_id, email="a@example.com", is_admin=False)
        loader = loader_with(monkeypatch, {"sub": str(user_id)}, profile)

        loaded = await loader.load("tok")

        loader.profile_repo.get_by_id.assert_awaited_once_with(user_id)
        assert loaded.profile is profile
        assert loaded.user_id == user_id
        assert loaded.is_admin is False

    @pytest.mark.asyncio
    async def test_missing_profile_still_loads(self, monkeypatch):
        loaded = await loader_with(monkeypatch, {"sub": str(uuid.uuid4())}, None).load("tok")

        assert loaded.profile is None
        assert loaded.is_admin is False


class TestLoadAdmin:
    @pytest.mark.asyncio
    async def test_admin_passes(self, monkeypatch):
        user_id = uuid.uuid4()
        profile = Profile(id=user_id, email="admin@example.com", is_admin=True)

        loaded = await loader_with(monkeypatch, {"sub": str(user_id)}, profile).load_admin("tok")

        assert loaded.is_admin is True

    @pytest.mark.asyncio
    async def test_non_admin_is_refused(self, monkeypatch):
        user_id = uuid.uuid4()
        profile = Profile(id=user_id, email="a@example.com", is_admin=False)

        with pytest.raises(AdminRequired):
            await loader_with(monkeypatch, {"sub": str(user_id)}, profile).load_admin("tok")

    @pytest.mark.asyncio
    async def test_missing_profile_is_refused(self, monkeypatch):
        with pytest.raises(AdminRequired):
            await loader_with(monkeypatch, {"sub": str(uuid.uuid4())}, None).load_admin("tok")

    @pytest.mark.asyncio
    async def test_signed_out_requires_login_not_admin(self, monkeypatch):
        with pytest.raises(LoginRequired):
            await loader_with(monkeypatch, None).load_admin("tok")
