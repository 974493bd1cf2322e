"""Failure taxonomy for the notes client.

Every failure that crosses a component boundary is a ``NotesClientError``;
``str(exc)`` is the human-readable message shown to the user.
"""

from __future__ import annotations

from typing import Any


class NotesClientError(Exception):
    """Base exception for all notes client failures."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message: str = message
        self.context: dict[str, Any] = context or {}


# ── Local (never reach the network) ──────────────────────────────

class ValidationFailure(NotesClientError):
    """A required field is empty; rejected before any request is issued."""


class PermissionDenied(NotesClientError):
    """Role-gated action attempted by an ineligible identity."""


# ── Remote ───────────────────────────────────────────────────────

class AuthenticationFailure(NotesClientError):
    """Bad credentials, or an expired / invalid session token (HTTP 401)."""


class NotFound(NotesClientError):
    """Referenced entity no longer exists on the backend (HTTP 404)."""


class TransportFailure(NotesClientError):
    """Backend unreachable, or a success response that could not be decoded."""


class BackendFailure(NotesClientError):
    """Any other non-2xx response."""
