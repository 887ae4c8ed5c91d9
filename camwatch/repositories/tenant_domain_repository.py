"""Repository for TenantDomain and TenantBranding operations."""

from sqlalchemy import or_, update
from sqlalchemy.orm import Session
from camwatch.models.tenant_domain import TenantDomain
from camwatch.models.tenant_branding import TenantBranding


class TenantDomainRepository:
    """Repository for TenantDomain model operations"""

    def __init__(self, db: Session):
        self.db = db

    def find_active_by_hostname(self, hostname: str) -> TenantDomain | None:
        """
        Get the active domain row matching a host name.

        Matches either the custom domain or the subdomain column.

        Args:
            hostname: Request host name, lower-cased, no port

        Returns:
            TenantDomain or None when no tenant serves this host
        """
        return (
            self.db.query(TenantDomain)
            .filter(
                or_(TenantDomain.domain == hostname, TenantDomain.subdomain == hostname),
                TenantDomain.is_active.is_(True),
            )
            .order_by(TenantDomain.is_primary.desc(), TenantDomain.id)
            .first()
        )

    def find_conflict(
        self, hostname: str, exclude_id: int | None = None, active_only: bool = False
    ) -> TenantDomain | None:
        """
        Get any other row already claiming a host name, in either column.

        Args:
            hostname: Host name, lower-cased, no port
            exclude_id: Row to ignore (the one being changed)
            active_only: Only consider active rows

        Returns:
            Conflicting TenantDomain or None
        """
        query = self.db.query(TenantDomain).filter(
            or_(TenantDomain.domain == hostname, TenantDomain.subdomain == hostname)
        )
        if exclude_id is not None:
            query = query.filter(TenantDomain.id != exclude_id)
        if active_only:
            query = query.filter(TenantDomain.is_active.is_(True))
        return query.first()

    def get_by_tenant(self, tenant_id: int) -> list[TenantDomain]:
        """Get a tenant's domains, primary first"""
        return (
            self.db.query(TenantDomain)
            .filter(TenantDomain.tenant_id == tenant_id)
            .order_by(TenantDomain.is_primary.desc(), TenantDomain.id)
            .all()
        )

    def get_by_id_and_tenant(self, domain_id: int, tenant_id: int) -> TenantDomain | None:
        """
        Get domain ensuring it belongs to tenant (multi-tenant safety).

        Returns None if domain doesn't exist or belongs to another tenant.
        """
        return (
            self.db.query(TenantDomain)
            .filter(TenantDomain.id == domain_id, TenantDomain.tenant_id == tenant_id)
            .first()
        )

    def get_primary(self, tenant_id: int) -> TenantDomain | None:
        """Get the active primary domain of a tenant"""
        return (
            self.db.query(TenantDomain)
            .filter(
                TenantDomain.tenant_id == tenant_id,
                TenantDomain.is_primary.is_(True),
                TenantDomain.is_active.is_(True),
            )
            .first()
        )

    def count_for_tenant(self, tenant_id: int) -> int:
        return self.db.query(TenantDomain).filter(TenantDomain.tenant_id == tenant_id).count()

    def create(self, domain: TenantDomain) -> TenantDomain:
        self.db.add(domain)
        self.db.commit()
        self.db.refresh(domain)
        return domain

    def update(self, domain: TenantDomain) -> TenantDomain:
        self.db.commit()
        self.db.refresh(domain)
        return domain

    def set_primary(self, tenant_id: int, domain_id: int) -> None:
        """
        Make one domain the tenant's primary and clear all others.

        Issued as a single UPDATE over the tenant's rows, so the tenant
        never passes through a state with zero or two primaries.
        """
        self.db.execute(
            update(TenantDomain)
            .where(TenantDomain.tenant_id == tenant_id)
            .values(is_primary=(TenantDomain.id == domain_id))
            .execution_options(synchronize_session="fetch")
        )
        self.db.commit()


class TenantBrandingRepository:
    """Repository for TenantBranding model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_tenant(self, tenant_id: int) -> TenantBranding | None:
        return self.db.query(TenantBranding).filter(TenantBranding.tenant_id == tenant_id).first()

    def upsert(self, tenant_id: int, values: dict) -> TenantBranding:
        """
        Create or update the tenant's single branding row.

        Args:
            tenant_id: Tenant ID
            values: Column values to apply (unset fields are left untouched)

        Returns:
            Stored TenantBranding
        """
        branding = self.get_by_tenant(tenant_id)
        if branding is None:
            branding = TenantBranding(tenant_id=tenant_id)
            self.db.add(branding)
        for field, value in values.items():
            setattr(branding, field, value)
        self.db.commit()
        self.db.refresh(branding)
        return branding
