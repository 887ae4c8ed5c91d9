import logging
from typing import Callable, Generator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from camwatch.core.exceptions import UnauthorizedException
from camwatch.database import get_db
from camwatch.models.access_context import AccessContext
from camwatch.models.principal import Principal
from camwatch.models.role import AppRole
from camwatch.repositories.role_assignment_repository import RoleAssignmentRepository
from camwatch.services.auth_service import AuthService
from camwatch.services.role_resolver import RoleResolver
from camwatch.services.session_store import SessionStore

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_session_store() -> SessionStore:
    """One SessionStore per request; FastAPI caches it across dependencies"""
    return SessionStore()


def get_role_resolver(
    session: SessionStore = Depends(get_session_store), db: Session = Depends(get_db)
) -> Generator[RoleResolver, None, None]:
    resolver = RoleResolver(RoleAssignmentRepository(db), session)
    try:
        yield resolver
    finally:
        resolver.close()


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: SessionStore = Depends(get_session_store),
    db: Session = Depends(get_db),
) -> Principal:
    """
    FastAPI dependency to validate the bearer token and load its principal.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT signature and expiration
    3. Check the session row named by the 'sid' claim is active and unexpired
    4. Load the principal and populate the request's SessionStore

    Raises:
        HTTPException 401: If token, session or principal is invalid
    """
    try:
        return AuthService(db).authenticate(credentials.credentials, session)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_optional_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_security),
    session: SessionStore = Depends(get_session_store),
    db: Session = Depends(get_db),
) -> SessionStore:
    """SessionStore resolved from an optional bearer token; anonymous when absent or invalid"""
    if credentials is None:
        session.clear()
        return session
    try:
        AuthService(db).authenticate(credentials.credentials, session)
    except UnauthorizedException as e:
        logger.debug("Ignoring invalid bearer token on public route: %s", e)
    return session


async def get_access_context(
    principal: Principal = Depends(get_current_principal),
    session: SessionStore = Depends(get_session_store),
    resolver: RoleResolver = Depends(get_role_resolver),
) -> AccessContext:
    """
    FastAPI dependency that builds the AccessContext of the request.

    Loads the principal's role assignments into the resolver. When they
    cannot be loaded the request is refused rather than treated as a
    principal without roles.

    Raises:
        HTTPException 401: If not authenticated
        HTTPException 503: If role assignments could not be loaded
    """
    resolver.load_assignments(principal.id)
    if not resolver.is_loaded:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Role assignments unavailable, try again",
        )
    return AccessContext(principal=principal, session=session, resolver=resolver)


def require_role(role: AppRole) -> Callable:
    """
    Dependency factory guarding a router with a role.

    Usage:
        router = APIRouter(dependencies=[Depends(require_role(AppRole.SUPER_ADMIN))])
    """

    async def role_checker(context: AccessContext = Depends(get_access_context)) -> AccessContext:
        if not context.has_role(role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{role.value} role required",
            )
        return context

    return role_checker
