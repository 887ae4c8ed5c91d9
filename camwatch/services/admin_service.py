import logging
from sqlalchemy.orm import Session

from camwatch.core.exceptions import NotFoundException
from camwatch.models.access_context import AccessContext
from camwatch.models.base import utcnow
from camwatch.models.license import License
from camwatch.models.ip_authorization import IPAuthorization
from camwatch.models.role import AppRole
from camwatch.models.tenant import Tenant
from camwatch.models.user_session import UserSession
from camwatch.repositories.platform_repository import (
    LicenseRepository,
    IPAuthorizationRepository,
)
from camwatch.repositories.session_repository import SessionRepository
from camwatch.repositories.tenant_repository import TenantRepository
from camwatch.schemas.tenant_schemas import TenantCreate, TenantUpdate
from camwatch.services.scope import ScopedResult, scoped_read

logger = logging.getLogger(__name__)


class AdminService:
    """
    Platform-wide operations for super admins.

    None of these are tenant-filtered; every method checks the super_admin
    role before touching the store.
    """

    def __init__(self, db: Session):
        self.db = db
        self.tenant_repo = TenantRepository(db)
        self.license_repo = LicenseRepository(db)
        self.ip_repo = IPAuthorizationRepository(db)
        self.session_repo = SessionRepository(db)

    def list_tenants(self, context: AccessContext) -> list[Tenant]:
        context.require_role(AppRole.SUPER_ADMIN)
        return self.tenant_repo.get_all()

    def get_tenant(self, tenant_id: int, context: AccessContext) -> Tenant:
        context.require_role(AppRole.SUPER_ADMIN)
        tenant = self.tenant_repo.get_by_id(tenant_id)
        if not tenant:
            raise NotFoundException("Tenant not found")
        return tenant

    def create_tenant(self, data: TenantCreate, context: AccessContext) -> Tenant:
        """Create a partner tenant (SUPER_ADMIN only)"""
        context.require_role(AppRole.SUPER_ADMIN)
        tenant = self.tenant_repo.create(Tenant(**data.model_dump()))
        logger.info("Tenant %s created by principal %s", tenant.id, context.principal.id)
        return tenant

    def update_tenant(self, tenant_id: int, data: TenantUpdate, context: AccessContext) -> Tenant:
        """
        Update tenant details or status (SUPER_ADMIN only).

        Raises:
            ForbiddenException: If caller is not a super admin
            NotFoundException: If tenant doesn't exist
        """
        tenant = self.get_tenant(tenant_id, context)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(tenant, field, value)
        return self.tenant_repo.update(tenant)

    def delete_tenant(self, tenant_id: int, context: AccessContext) -> None:
        """Delete tenant and everything it owns (SUPER_ADMIN only)"""
        tenant = self.get_tenant(tenant_id, context)
        self.tenant_repo.delete(tenant)
        logger.info("Tenant %s deleted by principal %s", tenant_id, context.principal.id)

    def list_licenses(self, context: AccessContext, active_only: bool = False) -> list[License]:
        context.require_role(AppRole.SUPER_ADMIN)
        return self.license_repo.get_all(active_only=active_only)

    def list_ip_authorizations(self, context: AccessContext) -> list[IPAuthorization]:
        context.require_role(AppRole.SUPER_ADMIN)
        return self.ip_repo.get_all()

    def list_active_sessions(self, context: AccessContext) -> list[UserSession]:
        context.require_role(AppRole.SUPER_ADMIN)
        return self.session_repo.get_active(utcnow())

    def dashboard(self, context: AccessContext) -> ScopedResult[dict]:
        """Tenants, licenses, IP authorizations and active sessions in one read"""
        context.require_role(AppRole.SUPER_ADMIN)

        def load() -> dict:
            return {
                "tenants": self.tenant_repo.get_all(),
                "licenses": self.license_repo.get_all(),
                "ip_authorizations": self.ip_repo.get_all(),
                "sessions": self.session_repo.get_active(utcnow()),
            }

        empty = {"tenants": [], "licenses": [], "ip_authorizations": [], "sessions": []}
        return scoped_read(load, empty, "admin dashboard")
