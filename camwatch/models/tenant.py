"""Tenant model for multi-tenant isolation."""

from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from camwatch.models.base import Base, TimestampMixin, enum_column

if TYPE_CHECKING:
    from camwatch.models.role_assignment import RoleAssignment
    from camwatch.models.client import Client
    from camwatch.models.camera import Camera
    from camwatch.models.alert import Alert
    from camwatch.models.license import License
    from camwatch.models.tenant_domain import TenantDomain
    from camwatch.models.tenant_branding import TenantBranding
    from camwatch.models.tenant_stats import TenantStats
    from camwatch.models.ip_authorization import IPAuthorization


class TenantStatus(str, PyEnum):
    """Lifecycle status of a tenant or client account"""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"


class PlanTier(str, PyEnum):
    """Commercial plan of a tenant or client"""

    BASIC = "basic"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


class Tenant(Base, TimestampMixin):
    """
    Reseller ("partner") account and data-isolation boundary.

    Every client, camera, alert, license, domain, branding and stats row
    belongs to exactly one tenant. Deleting a tenant removes all of them,
    together with the role assignments scoped to it.

    Status transitions are reserved to super admins.
    """

    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[TenantStatus] = mapped_column(
        enum_column(TenantStatus), nullable=False, default=TenantStatus.ACTIVE
    )
    plan: Mapped[PlanTier] = mapped_column(
        enum_column(PlanTier), nullable=False, default=PlanTier.BASIC
    )

    # Relationships
    role_assignments: Mapped[list["RoleAssignment"]] = relationship(
        "RoleAssignment", back_populates="tenant", cascade="all, delete-orphan"
    )
    clients: Mapped[list["Client"]] = relationship(
        "Client", back_populates="tenant", cascade="all, delete-orphan"
    )
    cameras: Mapped[list["Camera"]] = relationship(
        "Camera", back_populates="tenant", cascade="all, delete-orphan"
    )
    alerts: Mapped[list["Alert"]] = relationship(
        "Alert", back_populates="tenant", cascade="all, delete-orphan"
    )
    licenses: Mapped[list["License"]] = relationship(
        "License", back_populates="tenant", cascade="all, delete-orphan"
    )
    domains: Mapped[list["TenantDomain"]] = relationship(
        "TenantDomain", back_populates="tenant", cascade="all, delete-orphan"
    )
    branding: Mapped["TenantBranding | None"] = relationship(
        "TenantBranding", back_populates="tenant", cascade="all, delete-orphan", uselist=False
    )
    stats: Mapped["TenantStats | None"] = relationship(
        "TenantStats", back_populates="tenant", cascade="all, delete-orphan", uselist=False
    )
    ip_authorizations: Mapped[list["IPAuthorization"]] = relationship(
        "IPAuthorization", back_populates="tenant", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name='{self.name}', status={self.status.value})>"
