from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from camwatch.core.exceptions import NotFoundException
from camwatch.database import get_db
from camwatch.dependencies import require_role
from camwatch.models.access_context import AccessContext
from camwatch.models.role import AppRole
from camwatch.schemas.domain_schemas import (
    BrandingResponse,
    BrandingUpdate,
    DomainCreate,
    DomainResponse,
    TenantDetectionResponse,
    TenantUrlResponse,
    ThemeResponse,
)
from camwatch.services.branding import build_theme
from camwatch.services.scope import resolve_tenant_scope
from camwatch.services.tenant_resolver import TenantResolver

router = APIRouter()

partner_admin = require_role(AppRole.PARTNER_ADMIN)


@router.get("/detect", response_model=TenantDetectionResponse)
async def detect_tenant(
    request: Request,
    hostname: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    Detect the tenant serving a host name.

    Falls back to the request's Host header. All tenant fields null means
    no tenant matched and the default platform theme applies.
    """
    host = hostname or request.headers.get("host", "")
    detection = TenantResolver(db).detect_tenant(host)
    return TenantDetectionResponse(
        tenant_id=detection.tenant_id,
        domain=detection.domain,
        branding=detection.branding,
        theme=build_theme(detection.branding),
    )


@router.get("/url/{tenant_id}", response_model=TenantUrlResponse)
async def get_tenant_url(tenant_id: int, db: Session = Depends(get_db)):
    """Public URL of the tenant's primary domain (null when it has none)"""
    return TenantUrlResponse(tenant_id=tenant_id, url=TenantResolver(db).get_tenant_url(tenant_id))


@router.get("/domains", response_model=list[DomainResponse])
async def list_domains(
    tenant_id: int | None = Query(None),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    scope = resolve_tenant_scope(context, AppRole.PARTNER_ADMIN, tenant_id)
    return TenantResolver(db).list_domains(scope.tenant_id)


@router.post("/domains", response_model=DomainResponse, status_code=status.HTTP_201_CREATED)
async def add_domain(
    domain_data: DomainCreate,
    tenant_id: int | None = Query(None),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    """
    Register a domain for the caller's tenant.

    - The tenant's first domain becomes its primary domain
    - A host already served by another active domain is rejected
    """
    scope = resolve_tenant_scope(context, AppRole.PARTNER_ADMIN, tenant_id)
    return TenantResolver(db).add_domain(scope.tenant_id, domain_data)


@router.post("/domains/{domain_id}/primary", response_model=DomainResponse)
async def set_primary_domain(
    domain_id: int,
    tenant_id: int | None = Query(None),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    """Make a domain the tenant's primary; every other domain of the tenant stops being primary"""
    scope = resolve_tenant_scope(context, AppRole.PARTNER_ADMIN, tenant_id)
    return TenantResolver(db).set_primary_domain(scope.tenant_id, domain_id)


@router.post("/domains/{domain_id}/toggle", response_model=DomainResponse)
async def toggle_domain(
    domain_id: int,
    tenant_id: int | None = Query(None),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    scope = resolve_tenant_scope(context, AppRole.PARTNER_ADMIN, tenant_id)
    return TenantResolver(db).toggle_domain_active(scope.tenant_id, domain_id)


@router.get("/branding", response_model=BrandingResponse)
async def get_branding(
    tenant_id: int | None = Query(None),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    scope = resolve_tenant_scope(context, AppRole.PARTNER_ADMIN, tenant_id)
    branding = TenantResolver(db).get_branding(scope.tenant_id)
    if branding is None:
        raise NotFoundException("Branding not configured")
    return branding


@router.put("/branding", response_model=BrandingResponse)
async def update_branding(
    branding_data: BrandingUpdate,
    tenant_id: int | None = Query(None),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    """Create or update the tenant's branding; omitted fields keep their value"""
    scope = resolve_tenant_scope(context, AppRole.PARTNER_ADMIN, tenant_id)
    return TenantResolver(db).upsert_branding(scope.tenant_id, branding_data)


@router.get("/theme", response_model=ThemeResponse)
async def preview_theme(
    tenant_id: int | None = Query(None),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    """Theme the tenant's branding currently produces"""
    scope = resolve_tenant_scope(context, AppRole.PARTNER_ADMIN, tenant_id)
    return build_theme(TenantResolver(db).get_branding(scope.tenant_id))
