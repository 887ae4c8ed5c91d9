"""Navigation gating for the role-scoped dashboards."""

from dataclasses import dataclass
from enum import Enum as PyEnum
from urllib.parse import urlencode

from camwatch.config import settings
from camwatch.models.role import AppRole
from camwatch.services.role_resolver import RoleResolver
from camwatch.services.session_store import SessionStore

# Dashboard subtrees and the role each requires
ROUTE_ROLES: dict[str, AppRole] = {
    "/admin": AppRole.SUPER_ADMIN,
    "/partner": AppRole.PARTNER_ADMIN,
    "/client": AppRole.CLIENT_USER,
}

ROLE_HOMES: dict[AppRole, str] = {
    AppRole.SUPER_ADMIN: "/admin/dashboard",
    AppRole.PARTNER_ADMIN: "/partner/dashboard",
    AppRole.CLIENT_USER: "/client/dashboard",
}


class GuardOutcome(str, PyEnum):
    PENDING = "pending"
    UNAUTHENTICATED = "unauthenticated"
    UNAUTHORIZED = "unauthorized"
    ALLOWED = "allowed"


@dataclass(frozen=True)
class GuardDecision:
    outcome: GuardOutcome
    redirect_to: str | None = None
    return_to: str | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome == GuardOutcome.ALLOWED


def required_role_for(path: str) -> AppRole | None:
    """Role guarding a path, from its top-level segment (None for public paths)."""
    for prefix, role in ROUTE_ROLES.items():
        if path == prefix or path.startswith(prefix + "/"):
            return role
    return None


def login_redirect(path: str) -> str:
    """Login entry point that carries the originally requested path."""
    return f"{settings.LOGIN_PATH}?{urlencode({'next': path})}"


def is_safe_return_path(path: str | None) -> bool:
    """Only same-site absolute paths may be used as post-login targets."""
    return bool(path) and path.startswith("/") and not path.startswith("//") and "\\" not in path


def home_for_role(role: AppRole | None) -> str:
    return ROLE_HOMES.get(role, settings.UNAUTHORIZED_PATH) if role else settings.UNAUTHORIZED_PATH


def evaluate_navigation(
    path: str,
    session: SessionStore,
    resolver: RoleResolver,
    required_role: AppRole | None = None,
    required_tenant: int | None = None,
) -> GuardDecision:
    """
    Decide whether navigation to `path` is permitted.

    Evaluated on every navigation, so a revoked role takes effect on the
    next navigation rather than mid-page.

    Args:
        path: Requested path
        session: Current session identity
        resolver: Role resolver for that identity
        required_role: Role to require; derived from the path when omitted
        required_tenant: Optional tenant the role must be held in

    Returns:
        GuardDecision (pending, unauthenticated, unauthorized or allowed)
    """
    if session.pending:
        return GuardDecision(GuardOutcome.PENDING)

    if session.principal is None:
        return GuardDecision(
            GuardOutcome.UNAUTHENTICATED, redirect_to=login_redirect(path), return_to=path
        )

    if not resolver.is_loaded:
        resolver.load_assignments(session.principal.id)
        if not resolver.is_loaded:
            # store failure; assignments are unknown, not empty
            return GuardDecision(GuardOutcome.PENDING)

    role = required_role or required_role_for(path)
    if role is not None and not resolver.has_role(role, required_tenant):
        return GuardDecision(GuardOutcome.UNAUTHORIZED, redirect_to=settings.UNAUTHORIZED_PATH)

    return GuardDecision(GuardOutcome.ALLOWED)


def post_login_destination(next_path: str | None, session: SessionStore, resolver: RoleResolver) -> str:
    """
    Where to send a freshly signed-in principal.

    The preserved path wins when the guard allows it; otherwise the home
    of the principal's primary role.
    """
    if session.principal is not None and not resolver.is_loaded:
        resolver.load_assignments(session.principal.id)
    if is_safe_return_path(next_path):
        decision = evaluate_navigation(next_path, session, resolver)
        if decision.allowed:
            return next_path
    return home_for_role(resolver.get_primary_role())
