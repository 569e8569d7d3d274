"""Tests for the static session provider."""

import pytest

from orderbook.models.session import SessionStatus
from orderbook.sync.session import StaticSession


class TestStaticSession:
    def test_explicit_user(self, monkeypatch):
        monkeypatch.delenv("ORDERBOOK_USER_ID", raising=False)
        provider = StaticSession(user_id="u-1", display_name="one")
        assert provider.status == SessionStatus.AUTHENTICATED
        assert provider.session.user_id == "u-1"

    def test_no_user_is_unauthenticated(self, monkeypatch):
        monkeypatch.delenv("ORDERBOOK_USER_ID", raising=False)
        provider = StaticSession()
        assert provider.session is None
        assert provider.status == SessionStatus.UNAUTHENTICATED

    @pytest.mark.asyncio
    async def test_update_rereads_environment(self, monkeypatch):
        monkeypatch.delenv("ORDERBOOK_USER_ID", raising=False)
        provider = StaticSession()
        monkeypatch.setenv("ORDERBOOK_USER_ID", "u-env")
        await provider.update()
        assert provider.session.user_id == "u-env"
        assert provider.status == SessionStatus.AUTHENTICATED
