"""Pydantic V2 schemas for the notes backend wire format.

The backend speaks camelCase (``tenantId``, ``noteLimit``, ``createdAt``);
every response model converts to the frozen dataclasses in ``core.types``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from notesync.core.constants import MSG_MALFORMED_RESPONSE
from notesync.core.exceptions import TransportFailure
from notesync.core.logging import get_logger
from notesync.core.types import Note, Role, Tenant, TenantPlan, User

log = get_logger(__name__)


class _WireModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


# ── Requests ─────────────────────────────────────────────────────

class LoginRequest(_WireModel):
    email: str
    password: str


class NoteWrite(_WireModel):
    """Request body for creating or updating a note."""

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)


# ── Responses ────────────────────────────────────────────────────

class UserOut(_WireModel):
    id: str
    email: str
    role: Role
    tenant_id: str = Field(..., alias="tenantId")

    def to_domain(self) -> User:
        return User(id=self.id, email=self.email, role=self.role, tenant_id=self.tenant_id)


class LoginResponse(_WireModel):
    token: str = Field(..., min_length=1)
    user: UserOut


class TenantOut(_WireModel):
    """Tenant payload. ``noteLimit`` is required on free and ignored on pro."""

    id: str
    name: str
    plan: TenantPlan
    note_limit: int | None = Field(default=None, alias="noteLimit")

    @model_validator(mode="after")
    def _check_free_limit(self) -> "TenantOut":
        if self.plan == TenantPlan.FREE and (self.note_limit is None or self.note_limit < 0):
            msg = f"noteLimit must be a non-negative integer on the free plan, got {self.note_limit!r}"
            raise ValueError(msg)
        return self

    def to_domain(self) -> Tenant:
        limit = self.note_limit if self.plan == TenantPlan.FREE and self.note_limit is not None else 0
        return Tenant(id=self.id, name=self.name, plan=self.plan, note_limit=limit)


class NoteOut(_WireModel):
    id: str
    title: str
    content: str
    created_at: datetime = Field(..., alias="createdAt")

    def to_domain(self) -> Note:
        return Note(
            id=self.id,
            title=self.title,
            content=self.content,
            created_at=self.created_at,
        )


class ErrorBody(_WireModel):
    """Structured error body; either field may carry the message."""

    error: str | None = None
    message: str | None = None


# ── Decoding ─────────────────────────────────────────────────────

_M = TypeVar("_M", bound=BaseModel)


def decode(model: type[_M], payload: Any) -> _M:
    """Validate a response payload, mapping schema mismatches to ``TransportFailure``."""
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        log.warning("payload_invalid", model=model.__name__, errors=exc.error_count())
        raise TransportFailure(MSG_MALFORMED_RESPONSE, context={"model": model.__name__}) from exc


def decode_list(model: type[_M], payload: Any) -> list[_M]:
    if not isinstance(payload, list):
        log.warning("payload_invalid", model=model.__name__, errors="expected a list")
        raise TransportFailure(MSG_MALFORMED_RESPONSE, context={"model": model.__name__})
    return [decode(model, item) for item in payload]
