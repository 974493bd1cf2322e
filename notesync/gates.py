"""UI gate logic: pure derivation of enabling flags from tenant, count and role."""

from __future__ import annotations

from notesync.core.constants import UNLIMITED_SYMBOL
from notesync.core.types import GateFlags, Role, Tenant, TenantPlan


def compute_gates(tenant: Tenant | None, note_count: int, role: Role | None) -> GateFlags:
    """Compute gating flags.

    - ``quota_reached``: free plan and ``note_count >= note_limit``; never on pro.
    - ``show_upgrade``: quota reached and the viewer is an admin.
    - ``upgrade_available``: admin on a free plan (admin panel action).

    With no tenant loaded every flag is False.
    """
    if tenant is None:
        return GateFlags()

    is_admin = role == Role.ADMIN
    on_free = tenant.plan == TenantPlan.FREE
    quota_reached = on_free and note_count >= tenant.note_limit

    return GateFlags(
        quota_reached=quota_reached,
        show_upgrade=quota_reached and is_admin,
        upgrade_available=on_free and is_admin,
    )


def usage_label(tenant: Tenant | None, note_count: int) -> str:
    """Human-readable usage, e.g. ``"2 / 3 notes"`` or ``"12 / ∞ notes"``."""
    if tenant is None:
        return f"{note_count} notes"
    limit = UNLIMITED_SYMBOL if tenant.is_unlimited else str(tenant.note_limit)
    return f"{note_count} / {limit} notes"
