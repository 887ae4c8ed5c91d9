"""Role/tenant access resolution for a principal."""

import logging
from enum import Enum as PyEnum

from sqlalchemy.exc import SQLAlchemyError

from camwatch.core.exceptions import TenantScopeError, TenantSelectionRequired
from camwatch.models.principal import Principal
from camwatch.models.role import AppRole, ROLE_PRECEDENCE, TENANT_ROLES
from camwatch.models.role_assignment import RoleAssignment
from camwatch.repositories.role_assignment_repository import RoleAssignmentRepository
from camwatch.services.session_store import SessionStore

logger = logging.getLogger(__name__)


class CacheState(str, PyEnum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"


class RoleResolver:
    """
    Authoritative answer to "can this principal act as role R in tenant T?".

    Assignments are loaded once per identity and cached. The cache is
    replaced as a whole: it is reset when the session identity changes
    (the resolver subscribes to the SessionStore) or on refresh().

    An empty assignment list is a valid, loaded state: a principal without
    roles is not an error.
    """

    def __init__(self, repo: RoleAssignmentRepository, session: SessionStore | None = None):
        self.repo = repo
        self.state = CacheState.UNLOADED
        self._principal_id: int | None = None
        self._assignments: list[RoleAssignment] = []
        self._unsubscribe = session.subscribe(self._on_identity_change) if session else None

    @property
    def assignments(self) -> list[RoleAssignment]:
        """Full assignment list, for callers that must choose a tenant explicitly."""
        return list(self._assignments)

    @property
    def is_loaded(self) -> bool:
        return self.state == CacheState.LOADED

    def load_assignments(self, principal_id: int) -> list[RoleAssignment]:
        """
        Fetch all role assignments for a principal.

        Served from cache when already loaded for the same principal.
        A store failure is logged and yields an empty list; the cache is
        left unloaded so the next call queries again.

        Args:
            principal_id: Principal ID

        Returns:
            List of RoleAssignment objects (possibly empty)
        """
        if principal_id != self._principal_id:
            self.reset()
            self._principal_id = principal_id
        if self.state == CacheState.LOADED:
            return self.assignments

        self.state = CacheState.LOADING
        try:
            rows = self.repo.get_by_principal(principal_id)
        except SQLAlchemyError:
            logger.exception("Failed to load role assignments for principal %s", principal_id)
            self.state = CacheState.UNLOADED
            self._assignments = []
            return []

        self._assignments = rows
        self.state = CacheState.LOADED
        return self.assignments

    def refresh(self) -> list[RoleAssignment]:
        """Drop the cache and reload for the current principal."""
        principal_id = self._principal_id
        self.reset()
        if principal_id is None:
            return []
        return self.load_assignments(principal_id)

    def reset(self) -> None:
        self.state = CacheState.UNLOADED
        self._principal_id = None
        self._assignments = []

    def close(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_identity_change(self, principal: Principal | None) -> None:
        self.reset()
        if principal is not None:
            self._principal_id = principal.id

    def has_role(self, role: AppRole, tenant_id: int | None = None) -> bool:
        """
        Check whether any assignment grants `role`.

        super_admin is platform-wide, so the tenant argument is ignored for
        it. For tenant roles, a supplied tenant_id must match the
        assignment's tenant; without one any tenant matches.
        """
        for assignment in self._assignments:
            if assignment.role != role:
                continue
            if role == AppRole.SUPER_ADMIN:
                return True
            if tenant_id is not None and assignment.tenant_id != tenant_id:
                continue
            return True
        return False

    def is_super_admin(self) -> bool:
        return self.has_role(AppRole.SUPER_ADMIN)

    def get_effective_tenant(self) -> int | None:
        """
        Tenant of the first partner_admin or client_user assignment.

        super_admin assignments never contribute a tenant. With several
        tenant assignments the first one wins; use select_tenant() where
        that ambiguity matters.
        """
        for assignment in self._assignments:
            if assignment.role in TENANT_ROLES:
                return assignment.tenant_id
        return None

    def get_primary_role(self) -> AppRole | None:
        """
        Highest role held: super_admin > partner_admin > client_user.

        When none of those is present the first assignment's role is
        returned, so a caller is never left without a role to route on.
        """
        if not self._assignments:
            return None
        held = {assignment.role for assignment in self._assignments}
        for role in ROLE_PRECEDENCE:
            if role in held:
                return role
        return self._assignments[0].role

    def tenant_ids(self, role: AppRole | None = None) -> list[int]:
        """Distinct tenants reachable through tenant roles (or one role), in assignment order."""
        roles = (role,) if role is not None else TENANT_ROLES
        seen: list[int] = []
        for assignment in self._assignments:
            if assignment.role not in roles or assignment.tenant_id is None:
                continue
            if assignment.tenant_id not in seen:
                seen.append(assignment.tenant_id)
        return seen

    def is_ambiguous(self) -> bool:
        return len(self.tenant_ids()) > 1

    def select_tenant(self, requested: int | None = None, role: AppRole | None = None) -> int | None:
        """
        Resolve the tenant a request operates in.

        Args:
            requested: Tenant explicitly chosen by the caller, if any
            role: Restrict the candidate tenants to those held with this role

        Returns:
            Tenant ID, or None when the principal has no tenant and asked for none

        Raises:
            TenantScopeError: If the requested tenant is not one of the caller's
            TenantSelectionRequired: If the caller spans several tenants and chose none
        """
        tenants = self.tenant_ids(role)
        if requested is not None:
            if requested in tenants or self.is_super_admin():
                return requested
            raise TenantScopeError(f"Tenant {requested} is outside your access scope")

        if len(tenants) > 1:
            raise TenantSelectionRequired(
                "Account belongs to several tenants; select one with tenant_id"
            )
        return tenants[0] if tenants else None
