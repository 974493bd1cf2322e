"""Explicit session context shared by every component that needs identity.

Only ``SessionManager`` writes to it; the request pipeline reads the token and
the tenant/notes components read the identity.
"""

from __future__ import annotations

from dataclasses import dataclass

from notesync.core.types import SessionState, User


@dataclass
class SessionContext:
    token: str | None = None
    user: User | None = None
    state: SessionState = SessionState.ANONYMOUS
    # Bumped on every clear; responses started under an older value are stale.
    generation: int = 0

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED and self.user is not None

    def authorization_header(self) -> dict[str, str]:
        """Bearer credential header, or an empty dict when no token is held."""
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def clear(self) -> None:
        self.token = None
        self.user = None
        self.state = SessionState.ANONYMOUS
        self.generation += 1
