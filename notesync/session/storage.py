"""Durable client-side storage for the single persisted item: the session token."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path

from notesync.core.logging import get_logger

log = get_logger(__name__)

_TOKEN_KEY = "token"


class TokenStore(ABC):
    """Interface for session token persistence."""

    @abstractmethod
    def load(self) -> str | None:
        """Return the persisted token, or None when nothing is stored."""
        ...

    @abstractmethod
    def save(self, token: str) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove the persisted token. Must be idempotent."""
        ...


class MemoryTokenStore(TokenStore):
    """Process-local store for tests and embedding."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def load(self) -> str | None:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore(TokenStore):
    """JSON file store, e.g. ``~/.notesync/session.json`` -> ``{"token": "..."}``.

    A missing, unreadable or malformed file reads as "no token".
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            log.warning("token_store_unreadable", path=str(self._path), error=str(exc))
            return None

        token = data.get(_TOKEN_KEY) if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            return None
        return token

    def save(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps({_TOKEN_KEY: token}), encoding="utf-8")
        tmp_path.chmod(0o600)
        tmp_path.replace(self._path)
        log.debug("token_persisted", path=str(self._path))

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
        log.debug("token_cleared", path=str(self._path))
