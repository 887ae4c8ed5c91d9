from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from camwatch.database import get_db
from camwatch.dependencies import (
    get_access_context,
    get_current_principal,
    get_role_resolver,
    get_session_store,
)
from camwatch.models.access_context import AccessContext
from camwatch.models.principal import Principal
from camwatch.schemas.auth_schemas import (
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    MeResponse,
)
from camwatch.services.auth_service import AuthService
from camwatch.services.role_resolver import RoleResolver
from camwatch.services.route_guard import post_login_destination
from camwatch.services.session_store import SessionStore

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    request: Request,
    session: SessionStore = Depends(get_session_store),
    resolver: RoleResolver = Depends(get_role_resolver),
    db: Session = Depends(get_db),
):
    """
    Sign in with email and password.

    Returns a bearer token plus `redirect_to`: the preserved `next` path
    when the principal may open it, otherwise the home of its primary role.
    """
    service = AuthService(db)
    principal, token, _ = service.sign_in(
        credentials.email,
        credentials.password,
        session,
        ip_address=request.client.host if request.client else "",
        device_info=request.headers.get("user-agent"),
    )
    redirect_to = post_login_destination(credentials.next, session, resolver)
    return LoginResponse(
        access_token=token,
        user=principal,
        primary_role=resolver.get_primary_role(),
        redirect_to=redirect_to,
    )


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    principal: Principal = Depends(get_current_principal),
    session: SessionStore = Depends(get_session_store),
    db: Session = Depends(get_db),
):
    """Revoke the session behind the bearer token; the token stops working immediately."""
    AuthService(db).sign_out(session)
    return LogoutResponse(message="Signed out")


@router.get("/me", response_model=MeResponse)
async def me(context: AccessContext = Depends(get_access_context)):
    """
    Current principal with every role assignment.

    `tenant_selection_required` is true when the principal belongs to more
    than one tenant; tenant-scoped endpoints then need an explicit tenant_id.
    """
    resolver = context.resolver
    return MeResponse(
        user=context.principal,
        roles=resolver.assignments,
        primary_role=resolver.get_primary_role(),
        effective_tenant_id=resolver.get_effective_tenant(),
        tenant_ids=resolver.tenant_ids(),
        tenant_selection_required=resolver.is_ambiguous(),
    )
