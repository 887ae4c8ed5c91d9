"""Access context for request authorization."""

from dataclasses import dataclass
from camwatch.core.exceptions import ForbiddenException
from camwatch.models.principal import Principal
from camwatch.models.role import AppRole
from camwatch.services.role_resolver import RoleResolver
from camwatch.services.session_store import SessionStore


@dataclass
class AccessContext:
    """
    Complete access context for request authorization.

    Built from the bearer token and the principal's role assignments.
    Used throughout the service layer for role checks and tenant scoping.

    Attributes:
        principal: The authenticated Principal
        session: The SessionStore holding that principal
        resolver: RoleResolver loaded with the principal's assignments
    """

    principal: Principal
    session: SessionStore
    resolver: RoleResolver

    def has_role(self, role: AppRole, tenant_id: int | None = None) -> bool:
        return self.resolver.has_role(role, tenant_id)

    def require_role(self, role: AppRole, tenant_id: int | None = None) -> None:
        """
        Assert the principal holds `role`.

        Raises:
            ForbiddenException: If no assignment grants the role
        """
        if not self.has_role(role, tenant_id):
            raise ForbiddenException(f"{role.value} role required")

    def is_super_admin(self) -> bool:
        return self.resolver.is_super_admin()

    def is_partner_admin(self) -> bool:
        return self.has_role(AppRole.PARTNER_ADMIN)

    def __repr__(self) -> str:
        return (
            f"<AccessContext(principal_id={self.principal.id}, "
            f"primary_role={self.resolver.get_primary_role()})>"
        )
