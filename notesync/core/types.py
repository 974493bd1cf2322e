"""Shared types: the single source of truth for data crossing component boundaries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


# ── Enums ────────────────────────────────────────────────────────

class Role(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


class TenantPlan(str, Enum):
    FREE = "free"
    PRO = "pro"


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    RESTORING = "restoring"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


# ── Entities ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class User:
    """Authenticated identity snapshot, as returned by the backend."""

    id: str
    email: str
    role: Role
    tenant_id: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class Tenant:
    """Tenant plan and quota metadata.

    ``note_limit`` is only meaningful on the free plan; pro is unbounded.
    """

    id: str
    name: str
    plan: TenantPlan
    note_limit: int

    @property
    def is_unlimited(self) -> bool:
        return self.plan == TenantPlan.PRO


@dataclass(frozen=True)
class Note:
    id: str
    title: str
    content: str
    created_at: datetime


@dataclass(frozen=True)
class GateFlags:
    """UI-enabling flags derived from tenant plan, note count and role."""

    quota_reached: bool = False
    show_upgrade: bool = False
    upgrade_available: bool = False
