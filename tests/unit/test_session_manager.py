"""Tests for the session lifecycle: login, restore, logout, invalidate."""

from __future__ import annotations

import httpx
import pytest

from notesync.core.exceptions import AuthenticationFailure, TransportFailure
from notesync.core.types import Role, SessionState
from notesync.session import MemoryTokenStore, SessionContext, SessionManager

from tests.fakes import PASSWORD, FakeBackend


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_persists_token_and_authenticates(
        self,
        backend: FakeBackend,
        sessions: SessionManager,
        token_store: MemoryTokenStore,
    ) -> None:
        backend.overrides[("POST", "/auth/login")] = lambda r: httpx.Response(
            200,
            json={
                "token": "t1",
                "user": {"id": "u2", "email": "user@acme.test", "role": "member", "tenantId": "acme"},
            },
        )

        user = await sessions.login("user@acme.test", "password")

        assert token_store.load() == "t1"
        assert sessions.state == SessionState.AUTHENTICATED
        assert sessions.context.token == "t1"
        assert user.email == "user@acme.test"
        assert user.role == Role.MEMBER
        assert sessions.user == user

    @pytest.mark.asyncio
    async def test_bad_credentials_stay_anonymous(
        self,
        sessions: SessionManager,
        token_store: MemoryTokenStore,
    ) -> None:
        with pytest.raises(AuthenticationFailure, match="Invalid credentials"):
            await sessions.login("admin@acme.test", "wrong")

        assert sessions.state == SessionState.ANONYMOUS
        assert sessions.user is None
        assert token_store.load() is None

    @pytest.mark.asyncio
    async def test_login_sends_credentials_without_bearer(
        self, backend: FakeBackend, sessions: SessionManager
    ) -> None:
        await sessions.login("admin@acme.test", PASSWORD)
        request = backend.calls("POST", "/auth/login")[0]
        assert "authorization" not in request.headers

    @pytest.mark.asyncio
    async def test_malformed_login_response(
        self, backend: FakeBackend, sessions: SessionManager, token_store: MemoryTokenStore
    ) -> None:
        backend.overrides[("POST", "/auth/login")] = lambda r: httpx.Response(200, json={"ok": True})
        with pytest.raises(TransportFailure):
            await sessions.login("admin@acme.test", PASSWORD)
        assert sessions.state == SessionState.ANONYMOUS
        assert token_store.load() is None

    @pytest.mark.asyncio
    async def test_failed_relogin_drops_previous_session(
        self, backend: FakeBackend, sessions: SessionManager, token_store: MemoryTokenStore
    ) -> None:
        cleared: list[str] = []
        sessions.register_dependent(lambda: cleared.append("notes"))
        await sessions.login("admin@acme.test", PASSWORD)

        with pytest.raises(AuthenticationFailure):
            await sessions.login("user@acme.test", "wrong")

        assert token_store.load() is None
        assert sessions.state == SessionState.ANONYMOUS
        assert cleared == ["notes"]
        second = backend.calls("POST", "/auth/login")[1]
        assert "authorization" not in second.headers


class TestRestore:
    @pytest.mark.asyncio
    async def test_no_persisted_token_issues_no_request(
        self, backend: FakeBackend, sessions: SessionManager
    ) -> None:
        assert await sessions.restore() is None
        assert backend.requests == []
        assert sessions.state == SessionState.ANONYMOUS

    @pytest.mark.asyncio
    async def test_valid_token_restores_identity(
        self, backend: FakeBackend, sessions: SessionManager, token_store: MemoryTokenStore
    ) -> None:
        token_store.save(backend.issue_token("admin@acme.test"))

        user = await sessions.restore()

        assert user is not None
        assert user.is_admin
        assert sessions.state == SessionState.AUTHENTICATED
        assert backend.calls("GET", "/auth/me")[0].headers["authorization"].startswith("Bearer ")

    @pytest.mark.asyncio
    async def test_invalid_token_discarded_silently(
        self, sessions: SessionManager, token_store: MemoryTokenStore
    ) -> None:
        token_store.save("expired")

        assert await sessions.restore() is None

        assert sessions.state == SessionState.ANONYMOUS
        assert sessions.context.token is None
        assert token_store.load() is None

    @pytest.mark.asyncio
    async def test_network_failure_during_restore_is_silent(
        self, backend: FakeBackend, sessions: SessionManager, token_store: MemoryTokenStore
    ) -> None:
        def _down(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        backend.overrides[("GET", "/auth/me")] = _down
        token_store.save("t-any")

        assert await sessions.restore() is None
        assert sessions.state == SessionState.ANONYMOUS


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_clears_everything(
        self, sessions: SessionManager, token_store: MemoryTokenStore
    ) -> None:
        cleared: list[str] = []
        sessions.register_dependent(lambda: cleared.append("tenant"))
        sessions.register_dependent(lambda: cleared.append("notes"))
        await sessions.login("admin@acme.test", PASSWORD)

        sessions.logout()

        assert token_store.load() is None
        assert sessions.user is None
        assert sessions.state == SessionState.ANONYMOUS
        assert cleared == ["tenant", "notes"]

    def test_logout_is_idempotent(self, sessions: SessionManager) -> None:
        sessions.logout()
        sessions.logout()
        assert sessions.state == SessionState.ANONYMOUS

    @pytest.mark.asyncio
    async def test_invalidate_drops_session(
        self, sessions: SessionManager, token_store: MemoryTokenStore
    ) -> None:
        await sessions.login("admin@acme.test", PASSWORD)
        sessions.invalidate("token expired")
        assert token_store.load() is None
        assert sessions.context.is_authenticated is False

    def test_invalidate_without_session_is_noop(self) -> None:
        ctx = SessionContext()
        store = MemoryTokenStore("kept")
        manager = SessionManager(client=None, store=store, context=ctx)  # type: ignore[arg-type]
        manager.invalidate("nothing to drop")
        assert store.load() == "kept"
