"""Pytest configuration, shared fixtures and async test support.

Async tests are marked with ``@pytest.mark.asyncio``. When pytest-asyncio is
not installed, ``pytest_pyfunc_call`` below runs them on a fresh event loop.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any

import pytest

from notesync.api.client import ApiClient
from notesync.app import NotesApp
from notesync.notes.store import NotesStore
from notesync.session import MemoryTokenStore, SessionContext, SessionManager
from notesync.tenants.state import TenantState
from tests.fakes import BASE_URL, FakeBackend


def pytest_configure(config: pytest.Config) -> None:
    """Register local markers used in the suite."""
    config.addinivalue_line("markers", "asyncio: mark test as asyncio-compatible")


def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run ``@pytest.mark.asyncio`` coroutine tests without external plugins."""
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    kwargs: dict[str, Any] = {
        arg: pyfuncitem.funcargs[arg]
        for arg in pyfuncitem._fixtureinfo.argnames
    }
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(test_func(**kwargs))
    finally:
        loop.close()
        asyncio.set_event_loop(asyncio.new_event_loop())
    return True


# ── Fixtures ─────────────────────────────────────────────────────


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def context() -> SessionContext:
    return SessionContext()


@pytest.fixture()
def client(backend: FakeBackend, context: SessionContext) -> ApiClient:
    return ApiClient(BASE_URL, context, transport=backend.transport())


@pytest.fixture()
def token_store() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture()
def sessions(client: ApiClient, token_store: MemoryTokenStore, context: SessionContext) -> SessionManager:
    return SessionManager(client, token_store, context)


@pytest.fixture()
def app(client: ApiClient, sessions: SessionManager, context: SessionContext) -> NotesApp:
    return NotesApp(
        client=client,
        sessions=sessions,
        tenants=TenantState(client, context),
        notes=NotesStore(client),
    )
