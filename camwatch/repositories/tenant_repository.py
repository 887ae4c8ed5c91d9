"""Repository for Tenant model operations."""

from sqlalchemy.orm import Session
from camwatch.models.tenant import Tenant


class TenantRepository:
    """Repository for Tenant model operations (platform-wide, no tenant filter)"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, tenant_id: int) -> Tenant | None:
        """
        Get tenant by ID.

        Args:
            tenant_id: Tenant ID

        Returns:
            Tenant object or None if not found
        """
        return self.db.query(Tenant).filter(Tenant.id == tenant_id).first()

    def get_all(self) -> list[Tenant]:
        """
        Get all tenants, newest first.

        Returns:
            List of all Tenant objects
        """
        return self.db.query(Tenant).order_by(Tenant.created_at.desc(), Tenant.id.desc()).all()

    def add(self, tenant: Tenant) -> Tenant:
        """Stage a tenant without committing (for atomic provisioning)"""
        self.db.add(tenant)
        self.db.flush()
        return tenant

    def create(self, tenant: Tenant) -> Tenant:
        """
        Create a new tenant.

        Args:
            tenant: Tenant object to create

        Returns:
            Created Tenant object with ID populated
        """
        self.db.add(tenant)
        self.db.commit()
        self.db.refresh(tenant)
        return tenant

    def update(self, tenant: Tenant) -> Tenant:
        """
        Update an existing tenant.

        Args:
            tenant: Tenant object with updated fields

        Returns:
            Updated Tenant object
        """
        self.db.commit()
        self.db.refresh(tenant)
        return tenant

    def delete(self, tenant: Tenant) -> None:
        """
        Delete a tenant.

        WARNING: This will cascade delete all clients, cameras, alerts,
        licenses, domains, branding, stats and role assignments of the tenant.

        Args:
            tenant: Tenant object to delete
        """
        self.db.delete(tenant)
        self.db.commit()
