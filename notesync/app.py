"""Application controller: the state the presentation layer renders and the
intents it forwards.

Wires one ``SessionContext`` through the request pipeline, the session
manager, tenant state and the notes store, and adds the UI-facing concerns:
a coarse busy flag, dismissable error/success messages and the note form.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from config.settings import Settings, get_settings
from notesync.api.client import ApiClient
from notesync.core.constants import (
    MSG_FETCH_NOTES_FAILED,
    MSG_LOGGED_IN,
    MSG_LOGGED_OUT,
    MSG_NOTE_CREATED,
    MSG_NOTE_DELETED,
    MSG_NOTE_UPDATED,
    MSG_TENANT_UPGRADED,
)
from notesync.core.exceptions import AuthenticationFailure, NotesClientError
from notesync.core.logging import get_logger
from notesync.core.types import GateFlags, Note, Tenant, User
from notesync.gates import compute_gates, usage_label
from notesync.notes.store import NotesStore
from notesync.session import FileTokenStore, SessionContext, SessionManager, TokenStore
from notesync.tenants.state import TenantState

log = get_logger(__name__)


@dataclass
class NoteForm:
    title: str = ""
    content: str = ""
    editing_id: str | None = None

    @property
    def editing(self) -> bool:
        return self.editing_id is not None

    def reset(self) -> None:
        self.title = ""
        self.content = ""
        self.editing_id = None


class NotesApp:
    """Single-session client facade.

    Mutating intents return True when they completed, False when they failed
    or were ignored because another intent was still outstanding. Failures are
    never raised to the caller; they land in ``error`` until
    ``clear_messages()`` dismisses them.
    """

    def __init__(
        self,
        client: ApiClient,
        sessions: SessionManager,
        tenants: TenantState,
        notes: NotesStore,
    ) -> None:
        self._client = client
        self._sessions = sessions
        self._tenants = tenants
        self._notes = notes

        self.busy: bool = False
        self.error: str | None = None
        self.success: str | None = None
        self.note_form = NoteForm()

        sessions.register_dependent(tenants.clear)
        sessions.register_dependent(notes.clear)
        sessions.register_dependent(self.note_form.reset)

    async def __aenter__(self) -> "NotesApp":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.close()

    # ── Rendered state ───────────────────────────────────────────

    @property
    def user(self) -> User | None:
        return self._sessions.user

    @property
    def tenant(self) -> Tenant | None:
        return self._tenants.tenant

    @property
    def notes(self) -> tuple[Note, ...]:
        return self._notes.notes

    @property
    def session(self) -> SessionManager:
        return self._sessions

    @property
    def gates(self) -> GateFlags:
        user = self.user
        return compute_gates(self.tenant, len(self._notes), user.role if user else None)

    @property
    def usage(self) -> str:
        return usage_label(self.tenant, len(self._notes))

    # ── Intents ──────────────────────────────────────────────────

    async def startup(self) -> bool:
        """Restore a persisted session, then load tenant and notes."""

        async def _op() -> None:
            if await self._sessions.restore() is not None:
                await self._load_session_data()

        await self._guarded("startup", _op)
        return self.user is not None

    async def submit_login(self, email: str, password: str) -> bool:
        async def _op() -> None:
            await self._sessions.login(email, password)
            self.success = MSG_LOGGED_IN
            await self._load_session_data()

        return await self._guarded("login", _op)

    def logout(self) -> None:
        self._sessions.logout()
        self.error = None
        self.success = MSG_LOGGED_OUT

    async def reload(self) -> bool:
        completed = await self._guarded("reload", self._load_session_data)
        return completed and self.error is None

    async def submit_note(self) -> bool:
        """Create a note from the form, or update the note being edited."""
        form = self.note_form

        async def _op() -> None:
            if form.editing_id is not None:
                await self._notes.update_note(form.editing_id, form.title, form.content)
                self.success = MSG_NOTE_UPDATED
            else:
                await self._notes.create_note(form.title, form.content)
                self.success = MSG_NOTE_CREATED
            form.reset()

        return await self._guarded("submit_note", _op)

    def start_edit(self, note_id: str) -> bool:
        note = self._notes.get(note_id)
        if note is None:
            return False
        self.note_form.title = note.title
        self.note_form.content = note.content
        self.note_form.editing_id = note.id
        return True

    def cancel_edit(self) -> None:
        self.note_form.reset()

    async def delete_note(self, note_id: str, confirmed: bool) -> bool:
        if not confirmed:
            log.debug("delete_not_confirmed", note_id=note_id)
            return False

        async def _op() -> None:
            await self._notes.delete_note(note_id)
            self.success = MSG_NOTE_DELETED

        return await self._guarded("delete_note", _op)

    async def upgrade_tenant(self) -> bool:
        user = self.user
        if user is None:
            return False

        async def _op() -> None:
            await self._tenants.upgrade(user.tenant_id)
            self.success = MSG_TENANT_UPGRADED
            await self._tenants.refresh(user.tenant_id)

        return await self._guarded("upgrade_tenant", _op)

    def clear_messages(self) -> None:
        self.error = None
        self.success = None

    # ── Internals ────────────────────────────────────────────────

    async def _guarded(self, action: str, operation: Callable[[], Awaitable[None]]) -> bool:
        if self.busy:
            log.debug("intent_ignored_busy", action=action)
            return False

        self.busy = True
        self.error = None
        try:
            await operation()
        except NotesClientError as exc:
            self._report(action, exc)
            return False
        finally:
            self.busy = False
        return True

    async def _load_session_data(self) -> None:
        """Refresh tenant metadata and the notes list for the current identity.

        Each half reports its own failure so one does not hide the other.
        """
        user = self.user
        if user is None:
            return

        try:
            await self._tenants.refresh(user.tenant_id)
        except NotesClientError as exc:
            self._report("refresh_tenant", exc)

        if self.user is None:
            return

        try:
            await self._notes.list_notes()
        except NotesClientError as exc:
            self._report("list_notes", exc, message=MSG_FETCH_NOTES_FAILED)

    def _report(self, action: str, exc: NotesClientError, message: str | None = None) -> None:
        if isinstance(exc, AuthenticationFailure) and self._sessions.context.is_authenticated:
            self._sessions.invalidate(str(exc))
        self.error = message or str(exc)
        log.info("intent_failed", action=action, kind=type(exc).__name__, error=str(exc))


def create_app(
    settings: Settings | None = None,
    *,
    store: TokenStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> NotesApp:
    """Build a ``NotesApp`` with every component sharing one session context."""
    settings = settings or get_settings()
    context = SessionContext()
    client = ApiClient(
        base_url=settings.notes_api_base_url,
        session=context,
        timeout=settings.notes_http_timeout,
        transport=transport,
    )
    sessions = SessionManager(
        client=client,
        store=store if store is not None else FileTokenStore(settings.notes_token_path),
        context=context,
    )
    return NotesApp(
        client=client,
        sessions=sessions,
        tenants=TenantState(client, context),
        notes=NotesStore(client),
    )
