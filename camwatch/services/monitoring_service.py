import logging
from typing import Optional
from sqlalchemy.orm import Session

from camwatch.config import settings
from camwatch.core.exceptions import NotFoundException, TenantScopeError
from camwatch.models.access_context import AccessContext
from camwatch.models.alert import Alert, AlertSeverity
from camwatch.models.base import utcnow
from camwatch.models.camera import Camera, CameraStatus
from camwatch.models.client import Client
from camwatch.models.role import AppRole
from camwatch.repositories.alert_repository import AlertRepository
from camwatch.repositories.camera_repository import CameraRepository
from camwatch.repositories.client_repository import ClientRepository
from camwatch.repositories.platform_repository import TenantStatsRepository
from camwatch.schemas.monitoring_schemas import CameraCreate, CameraUpdate
from camwatch.services.scope import ScopedResult, TenantScope, resolve_tenant_scope, scoped_read

logger = logging.getLogger(__name__)


class PartnerService:
    """
    Tenant-scoped operations for partner admins.

    The tenant always comes from resolve_tenant_scope(); an explicit
    tenant_id argument is only a selection among the caller's own tenants.
    """

    def __init__(self, db: Session):
        self.db = db
        self.client_repo = ClientRepository(db)
        self.camera_repo = CameraRepository(db)
        self.alert_repo = AlertRepository(db)
        self.stats_repo = TenantStatsRepository(db)

    def scope(self, context: AccessContext, tenant_id: int | None = None) -> TenantScope:
        return resolve_tenant_scope(context, AppRole.PARTNER_ADMIN, tenant_id)

    def dashboard(self, context: AccessContext, tenant_id: int | None = None) -> ScopedResult[dict]:
        """
        Clients, cameras, most recent alerts and stats of the caller's tenant.

        Fails closed: a partner without a tenant gets empty data and an error.
        """
        resolved: dict = {"tenant_id": None}

        def load() -> dict:
            scope = self.scope(context, tenant_id)
            resolved["tenant_id"] = scope.tenant_id
            return {
                "tenant_id": scope.tenant_id,
                "clients": self.client_repo.get_by_tenant(scope.tenant_id),
                "cameras": self.camera_repo.get_by_tenant(scope.tenant_id),
                "alerts": self.alert_repo.get_recent_by_tenant(
                    scope.tenant_id, settings.PARTNER_RECENT_ALERTS
                ),
                "stats": self.stats_repo.get_by_tenant(scope.tenant_id),
            }

        result = scoped_read(load, {}, "partner dashboard")
        if not result.ok:
            result.data = {
                "tenant_id": resolved["tenant_id"],
                "clients": [],
                "cameras": [],
                "alerts": [],
                "stats": [],
            }
        return result

    def list_clients(self, context: AccessContext, tenant_id: int | None = None) -> list[Client]:
        scope = self.scope(context, tenant_id)
        return self.client_repo.get_by_tenant(scope.tenant_id)

    def delete_client(self, client_id: int, context: AccessContext, tenant_id: int | None = None) -> None:
        """Delete a client of the caller's tenant (cascades to cameras and alerts)"""
        scope = self.scope(context, tenant_id)
        client = self.client_repo.get_by_id_and_tenant(client_id, scope.tenant_id)
        if not client:
            raise NotFoundException("Client not found")
        self.client_repo.delete(client)
        logger.info("Client %s deleted from tenant %s", client_id, scope.tenant_id)

    def list_cameras(
        self,
        context: AccessContext,
        tenant_id: int | None = None,
        client_id: int | None = None,
        status: CameraStatus | None = None,
    ) -> list[Camera]:
        scope = self.scope(context, tenant_id)
        return self.camera_repo.get_by_tenant(scope.tenant_id, client_id=client_id, status=status)

    def create_camera(
        self, data: CameraCreate, context: AccessContext, tenant_id: int | None = None
    ) -> Camera:
        """
        Register a camera for one of the tenant's clients.

        Raises:
            NotFoundException: If the client doesn't belong to the tenant
        """
        scope = self.scope(context, tenant_id)
        client = self.client_repo.get_by_id_and_tenant(data.client_id, scope.tenant_id)
        if not client:
            raise NotFoundException(f"Client {data.client_id} not found or access denied")

        camera = Camera(tenant_id=scope.tenant_id, **data.model_dump())
        return self.camera_repo.create(camera)

    def update_camera(
        self,
        camera_id: int,
        data: CameraUpdate,
        context: AccessContext,
        tenant_id: int | None = None,
    ) -> Camera:
        scope = self.scope(context, tenant_id)
        camera = self.camera_repo.get_by_id_and_tenant(camera_id, scope.tenant_id)
        if not camera:
            raise NotFoundException("Camera not found")

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None or field == "rtsp_url":
                setattr(camera, field, value)
        return self.camera_repo.update(camera)

    def list_alerts(
        self,
        context: AccessContext,
        tenant_id: int | None = None,
        client_id: Optional[int] = None,
        camera_id: Optional[int] = None,
        severity: Optional[AlertSeverity] = None,
        acknowledged: Optional[bool] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Alert], int]:
        scope = self.scope(context, tenant_id)
        return self.alert_repo.get_with_filters(
            scope.tenant_id,
            client_id=client_id,
            camera_id=camera_id,
            severity=severity,
            acknowledged=acknowledged,
            limit=limit,
            offset=offset,
        )

    def acknowledge_alert(
        self, alert_id: int, context: AccessContext, tenant_id: int | None = None
    ) -> Alert:
        scope = self.scope(context, tenant_id)
        alert = self.alert_repo.get_by_id_and_tenant(alert_id, scope.tenant_id)
        if not alert:
            raise NotFoundException("Alert not found")
        return acknowledge(self.alert_repo, alert, context)


class ClientService:
    """Operations for client users: their own cameras and alerts only"""

    def __init__(self, db: Session):
        self.db = db
        self.client_repo = ClientRepository(db)
        self.camera_repo = CameraRepository(db)
        self.alert_repo = AlertRepository(db)

    def scope(self, context: AccessContext, tenant_id: int | None = None) -> TenantScope:
        """
        Tenant scope narrowed to the client records the principal owns.

        Raises:
            TenantScopeError: If the principal owns no client record in the tenant
        """
        scope = resolve_tenant_scope(context, AppRole.CLIENT_USER, tenant_id)
        clients = self.client_repo.get_owned_by(context.principal.id, scope.tenant_id)
        if not clients:
            raise TenantScopeError("No client record linked to this account (configuration error)")
        scope.client_ids = [client.id for client in clients]
        return scope

    def dashboard(self, context: AccessContext, tenant_id: int | None = None) -> ScopedResult[dict]:
        def load() -> dict:
            scope = self.scope(context, tenant_id)
            return {
                "cameras": self.camera_repo.get_by_clients(scope.tenant_id, scope.client_ids),
                "alerts": self.alert_repo.get_recent_by_clients(
                    scope.tenant_id, scope.client_ids, settings.CLIENT_RECENT_ALERTS
                ),
                "unacknowledged_alerts": self.alert_repo.count_unacknowledged(
                    scope.tenant_id, scope.client_ids
                ),
            }

        empty = {"cameras": [], "alerts": [], "unacknowledged_alerts": 0}
        return scoped_read(load, empty, "client dashboard")

    def acknowledge_alert(
        self, alert_id: int, context: AccessContext, tenant_id: int | None = None
    ) -> Alert:
        scope = self.scope(context, tenant_id)
        alert = self.alert_repo.get_by_id_and_tenant(alert_id, scope.tenant_id)
        if not alert or alert.client_id not in scope.client_ids:
            raise NotFoundException("Alert not found")
        return acknowledge(self.alert_repo, alert, context)


def acknowledge(repo: AlertRepository, alert: Alert, context: AccessContext) -> Alert:
    """Mark an alert acknowledged by the caller; acknowledging twice keeps the first record."""
    if alert.is_acknowledged:
        return alert
    alert.is_acknowledged = True
    alert.acknowledged_by = context.principal.id
    alert.acknowledged_at = utcnow()
    return repo.update(alert)
