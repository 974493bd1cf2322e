"""Session lifecycle: acquire, persist, restore and invalidate the bearer token.

State machine::

    ANONYMOUS --login--> AUTHENTICATING --ok--> AUTHENTICATED
        ^                      |                     |
        +-------failure--------+      logout / invalidate
        ^                                            |
        +--------------------------------------------+
    (startup, token persisted) RESTORING --ok--> AUTHENTICATED
                                         --fail--> ANONYMOUS (silent)

The ``TokenStore`` is touched by this class only.
"""

from __future__ import annotations

from collections.abc import Callable

from notesync.api.client import ApiClient
from notesync.api.schemas import LoginRequest, LoginResponse, UserOut, decode
from notesync.core.constants import PATH_LOGIN, PATH_ME
from notesync.core.exceptions import NotesClientError
from notesync.core.logging import get_logger
from notesync.core.types import SessionState, User
from notesync.session.context import SessionContext
from notesync.session.storage import TokenStore

log = get_logger(__name__)


class SessionManager:
    """Owns the token lifecycle and the identity it unlocks."""

    def __init__(
        self,
        client: ApiClient,
        store: TokenStore,
        context: SessionContext,
    ) -> None:
        self._client = client
        self._store = store
        self._context = context
        self._dependents: list[Callable[[], None]] = []

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def state(self) -> SessionState:
        return self._context.state

    @property
    def user(self) -> User | None:
        return self._context.user

    def register_dependent(self, clear: Callable[[], None]) -> None:
        """Register a synchronous callback that drops state tied to the session."""
        self._dependents.append(clear)

    async def login(self, email: str, password: str) -> User:
        """Authenticate with credentials and persist the returned token.

        Any current session is logged out first, so the login request never
        carries the previous bearer token. Raises the pipeline failure
        unchanged when authentication fails.
        """
        if self._context.token is not None:
            self.logout()
        self._context.state = SessionState.AUTHENTICATING
        body = LoginRequest(email=email, password=password).model_dump()
        try:
            payload = await self._client.send(PATH_LOGIN, "POST", body)
            response = decode(LoginResponse, payload)
        except NotesClientError as exc:
            self._context.clear()
            log.info("login_failed", email=email, error=str(exc))
            raise

        user = response.user.to_domain()
        self._store.save(response.token)
        self._context.token = response.token
        self._context.user = user
        self._context.state = SessionState.AUTHENTICATED
        log.info("login_succeeded", user_id=user.id, tenant_id=user.tenant_id, role=user.role.value)
        return user

    async def restore(self) -> User | None:
        """Revalidate a persisted token at startup.

        Returns the identity on success. Returns None, without raising, when no
        token is persisted or the backend rejects it; an expired session is an
        expected outcome and is never reported to the user.
        """
        token = self._store.load()
        if token is None:
            return None

        self._context.token = token
        self._context.state = SessionState.RESTORING
        try:
            payload = await self._client.send(PATH_ME)
            user = decode(UserOut, payload).to_domain()
        except NotesClientError as exc:
            log.info("session_restore_failed", error=str(exc))
            self._store.clear()
            self._context.clear()
            return None

        self._context.user = user
        self._context.state = SessionState.AUTHENTICATED
        log.info("session_restored", user_id=user.id, tenant_id=user.tenant_id)
        return user

    def logout(self) -> None:
        """Drop the session and all dependent state. Always succeeds; idempotent."""
        was_authenticated = self._context.token is not None
        self._clear_everything()
        if was_authenticated:
            log.info("logged_out")

    def invalidate(self, reason: str) -> None:
        """Drop a session the backend no longer accepts."""
        if self._context.token is None:
            return
        log.warning("session_invalidated", reason=reason)
        self._clear_everything()

    def _clear_everything(self) -> None:
        self._store.clear()
        self._context.clear()
        for clear in self._dependents:
            clear()
