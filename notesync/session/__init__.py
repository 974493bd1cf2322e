"""Session layer: explicit session context, token persistence and lifecycle."""

from notesync.session.context import SessionContext
from notesync.session.manager import SessionManager
from notesync.session.storage import FileTokenStore, MemoryTokenStore, TokenStore

__all__ = [
    "SessionContext",
    "SessionManager",
    "TokenStore",
    "FileTokenStore",
    "MemoryTokenStore",
]
