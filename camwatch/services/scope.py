"""Tenant scoping for data access.

Tenant ids used in queries come from the caller's role assignments. A
client-supplied tenant id is honoured only as a choice among the caller's
own tenants (or any tenant for a super admin).
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from camwatch.core.exceptions import CamwatchException, TenantScopeError
from camwatch.models.access_context import AccessContext
from camwatch.models.role import AppRole

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ScopedResult(Generic[T]):
    """Outcome of a read at the data-access boundary: data, or empty data plus an error."""

    data: T
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class TenantScope:
    """Tenant a request is allowed to read and write."""

    tenant_id: int
    role: AppRole
    client_ids: list[int] = field(default_factory=list)


def resolve_tenant_scope(
    context: AccessContext, role: AppRole, requested_tenant_id: int | None = None
) -> TenantScope:
    """
    Derive the tenant scope for an operation performed as `role`.

    Args:
        context: Access context of the caller
        role: Role the operation requires
        requested_tenant_id: Optional explicit tenant selection

    Returns:
        TenantScope with a non-null tenant

    Raises:
        ForbiddenException: If the caller lacks the role in the selected tenant
        TenantScopeError: If no tenant can be resolved (fail closed)
        TenantSelectionRequired: If the caller spans several tenants and chose none
    """
    tenant_id = context.resolver.select_tenant(requested_tenant_id, role)
    if tenant_id is None:
        logger.warning(
            "Principal %s acting as %s has no tenant assignment", context.principal.id, role.value
        )
        raise TenantScopeError(
            f"No tenant associated with this {role.value} account (configuration error)"
        )
    # super admins read partner data of any tenant
    if not context.is_super_admin():
        context.require_role(role, tenant_id)
    return TenantScope(tenant_id=tenant_id, role=role)


def scoped_read(loader: Callable[[], T], empty: T, description: str) -> ScopedResult[T]:
    """
    Run a read and convert failures into a typed result.

    Scope errors and store errors never cross the HTTP boundary from a
    dashboard read; the caller gets `empty` and the error message.
    """
    try:
        return ScopedResult(data=loader())
    except CamwatchException as e:
        logger.info("%s rejected: %s", description, e)
        return ScopedResult(data=empty, error=str(e))
    except SQLAlchemyError:
        logger.exception("%s failed", description)
        return ScopedResult(data=empty, error=f"Failed to load {description}")
