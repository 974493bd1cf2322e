"""Tenant plan and quota metadata, refreshed on demand."""

from __future__ import annotations

from notesync.api.client import ApiClient
from notesync.api.schemas import TenantOut, decode
from notesync.core.constants import MSG_ADMIN_ONLY, PATH_TENANT, PATH_TENANT_UPGRADE
from notesync.core.exceptions import NotesClientError, PermissionDenied
from notesync.core.logging import get_logger
from notesync.core.types import Tenant
from notesync.session.context import SessionContext

log = get_logger(__name__)


class TenantState:
    """Holds the current tenant snapshot.

    A failed refresh keeps the previous snapshot: stale data stays on screen
    rather than blanking it, and the failure is recorded in ``last_error``.
    """

    def __init__(self, client: ApiClient, session: SessionContext) -> None:
        self._client = client
        self._session = session
        self._tenant: Tenant | None = None
        self.last_error: str | None = None

    @property
    def tenant(self) -> Tenant | None:
        return self._tenant

    async def refresh(self, tenant_id: str) -> Tenant:
        generation = self._session.generation
        try:
            payload = await self._client.send(PATH_TENANT.format(tenant_id=tenant_id))
            tenant = decode(TenantOut, payload).to_domain()
        except NotesClientError as exc:
            if self._session.generation == generation:
                self.last_error = str(exc)
            log.warning("tenant_refresh_failed", tenant_id=tenant_id, error=str(exc))
            raise

        if self._session.generation != generation:
            log.info("stale_tenant_dropped", tenant_id=tenant_id)
            return tenant
        self._tenant = tenant
        self.last_error = None
        log.debug(
            "tenant_refreshed",
            tenant_id=tenant.id,
            plan=tenant.plan.value,
            note_limit=tenant.note_limit,
        )
        return tenant

    async def upgrade(self, tenant_id: str) -> None:
        """Request the pro plan for ``tenant_id``.

        Local state is left untouched; call ``refresh`` to observe the new plan.

        Raises:
            PermissionDenied: the session identity is not an admin. No request
                is issued in that case.
        """
        user = self._session.user
        if user is None or not user.is_admin:
            log.warning(
                "tenant_upgrade_denied",
                tenant_id=tenant_id,
                role=user.role.value if user else None,
            )
            raise PermissionDenied(
                MSG_ADMIN_ONLY,
                context={"tenant_id": tenant_id, "role": user.role.value if user else None},
            )

        await self._client.send(PATH_TENANT_UPGRADE.format(tenant_id=tenant_id), "POST")
        log.info("tenant_upgraded", tenant_id=tenant_id)

    def clear(self) -> None:
        self._tenant = None
        self.last_error = None
