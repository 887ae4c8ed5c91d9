"""Role assignment model binding principals to roles and tenants."""

from sqlalchemy import Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from camwatch.models.base import Base, TimestampMixin, enum_column
from camwatch.models.role import AppRole, TENANT_ROLES
from camwatch.core.exceptions import ValidationException

if TYPE_CHECKING:
    from camwatch.models.principal import Principal
    from camwatch.models.tenant import Tenant


class RoleAssignment(Base, TimestampMixin):
    """
    Binding of a principal to a role, optionally scoped to a tenant.

    This model enables:
    - Platform-wide super admins (tenant_id is NULL)
    - Partner admins and client users bound to one tenant each
    - Several assignments per principal (multi-role / multi-tenant)

    Example assignments:
    - "ops@platform" has role SUPER_ADMIN, no tenant
    - "owner@acme-security" has role PARTNER_ADMIN in tenant "Acme Security"
    - "shop@bakery" has role CLIENT_USER in tenant "Acme Security"

    Constraints:
    - Unique(user_id, role, tenant_id)
    - SUPER_ADMIN has tenant_id NULL, other roles non-null (validate_scope)

    Assignments are never mutated; they are created by provisioning and
    deleted together with their principal or tenant.
    """

    __tablename__ = "user_roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("principals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[AppRole] = mapped_column(enum_column(AppRole), nullable=False)
    tenant_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    # Relationships
    principal: Mapped["Principal"] = relationship("Principal", back_populates="role_assignments")
    tenant: Mapped["Tenant | None"] = relationship("Tenant", back_populates="role_assignments")

    # Constraints
    __table_args__ = (
        UniqueConstraint("user_id", "role", "tenant_id", name="uq_user_role_tenant"),
    )

    def validate_scope(self) -> None:
        """
        Check the role/tenant pairing.

        Raises:
            ValidationException: If a super admin is tenant-bound or a tenant role is not
        """
        if self.role == AppRole.SUPER_ADMIN and self.tenant_id is not None:
            raise ValidationException("super_admin assignments cannot be bound to a tenant")
        if self.role in TENANT_ROLES and self.tenant_id is None:
            raise ValidationException(f"{self.role.value} assignments require a tenant")

    def __repr__(self) -> str:
        return f"<RoleAssignment(user_id={self.user_id}, role={self.role.value}, tenant_id={self.tenant_id})>"
