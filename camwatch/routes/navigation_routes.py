from fastapi import APIRouter, Depends, Query

from camwatch.dependencies import get_optional_session, get_role_resolver
from camwatch.schemas.auth_schemas import GuardResponse
from camwatch.services.role_resolver import RoleResolver
from camwatch.services.route_guard import evaluate_navigation
from camwatch.services.session_store import SessionStore

router = APIRouter()


@router.get("/guard", response_model=GuardResponse)
async def guard(
    path: str = Query(..., min_length=1),
    tenant_id: int | None = Query(None),
    session: SessionStore = Depends(get_optional_session),
    resolver: RoleResolver = Depends(get_role_resolver),
):
    """
    Evaluate whether the caller may navigate to `path`.

    Bearer token is optional: without one the outcome is `unauthenticated`
    and `redirect_to` points at the login page carrying `next=<path>`.
    """
    decision = evaluate_navigation(path, session, resolver, required_tenant=tenant_id)
    return GuardResponse(
        path=path,
        outcome=decision.outcome,
        redirect_to=decision.redirect_to,
        return_to=decision.return_to,
    )
