"""Read access to platform-wide tables used by the super-admin dashboard."""

from sqlalchemy.orm import Session
from camwatch.models.license import License
from camwatch.models.ip_authorization import IPAuthorization
from camwatch.models.tenant_stats import TenantStats


class LicenseRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self, active_only: bool = False) -> list[License]:
        query = self.db.query(License)
        if active_only:
            query = query.filter(License.is_active.is_(True))
        return query.order_by(License.created_at.desc(), License.id.desc()).all()


class IPAuthorizationRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[IPAuthorization]:
        return (
            self.db.query(IPAuthorization)
            .order_by(IPAuthorization.created_at.desc(), IPAuthorization.id.desc())
            .all()
        )


class TenantStatsRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_tenant(self, tenant_id: int) -> list[TenantStats]:
        """Rollup rows of a tenant (zero or one)"""
        return self.db.query(TenantStats).filter(TenantStats.tenant_id == tenant_id).all()
