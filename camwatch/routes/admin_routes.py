from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from camwatch.database import get_db
from camwatch.dependencies import require_role
from camwatch.models.access_context import AccessContext
from camwatch.models.role import AppRole
from camwatch.schemas.monitoring_schemas import PartnerDashboardResponse
from camwatch.schemas.tenant_schemas import (
    AdminDashboardResponse,
    IPAuthorizationResponse,
    LicenseResponse,
    SessionResponse,
    TenantCreate,
    TenantDeleteResponse,
    TenantResponse,
    TenantUpdate,
)
from camwatch.services.admin_service import AdminService
from camwatch.services.monitoring_service import PartnerService

router = APIRouter()

super_admin = require_role(AppRole.SUPER_ADMIN)


@router.get("/dashboard", response_model=AdminDashboardResponse)
async def admin_dashboard(
    context: AccessContext = Depends(super_admin),
    db: Session = Depends(get_db),
):
    """
    Platform overview: tenants, licenses, IP authorizations, active sessions.

    A failed read returns empty lists with `error` set instead of a 5xx.
    """
    result = AdminService(db).dashboard(context)
    return AdminDashboardResponse(**result.data, error=result.error)


@router.get("/tenants", response_model=list[TenantResponse])
async def list_tenants(
    context: AccessContext = Depends(super_admin),
    db: Session = Depends(get_db),
):
    return AdminService(db).list_tenants(context)


@router.post("/tenants", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    tenant_data: TenantCreate,
    context: AccessContext = Depends(super_admin),
    db: Session = Depends(get_db),
):
    return AdminService(db).create_tenant(tenant_data, context)


@router.get("/tenants/{tenant_id}", response_model=TenantResponse)
async def get_tenant(
    tenant_id: int,
    context: AccessContext = Depends(super_admin),
    db: Session = Depends(get_db),
):
    return AdminService(db).get_tenant(tenant_id, context)


@router.patch("/tenants/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: int,
    tenant_data: TenantUpdate,
    context: AccessContext = Depends(super_admin),
    db: Session = Depends(get_db),
):
    """
    Update tenant details.

    - Status changes (active, suspended, inactive) go through this endpoint
    """
    return AdminService(db).update_tenant(tenant_id, tenant_data, context)


@router.delete("/tenants/{tenant_id}", response_model=TenantDeleteResponse)
async def delete_tenant(
    tenant_id: int,
    context: AccessContext = Depends(super_admin),
    db: Session = Depends(get_db),
):
    """
    Delete a tenant.

    - Removes its clients, cameras, alerts, domains, branding and licenses
    - Cannot be undone
    """
    AdminService(db).delete_tenant(tenant_id, context)
    return TenantDeleteResponse(message="Tenant deleted", deleted_tenant_id=tenant_id)


@router.get("/tenants/{tenant_id}/dashboard", response_model=PartnerDashboardResponse)
async def tenant_dashboard(
    tenant_id: int,
    context: AccessContext = Depends(super_admin),
    db: Session = Depends(get_db),
):
    """Partner dashboard of any tenant, as seen by a super admin"""
    result = PartnerService(db).dashboard(context, tenant_id)
    return PartnerDashboardResponse(**result.data, error=result.error)


@router.get("/licenses", response_model=list[LicenseResponse])
async def list_licenses(
    active_only: bool = Query(False),
    context: AccessContext = Depends(super_admin),
    db: Session = Depends(get_db),
):
    return AdminService(db).list_licenses(context, active_only=active_only)


@router.get("/ip-authorizations", response_model=list[IPAuthorizationResponse])
async def list_ip_authorizations(
    context: AccessContext = Depends(super_admin),
    db: Session = Depends(get_db),
):
    return AdminService(db).list_ip_authorizations(context)


@router.get("/sessions", response_model=list[SessionResponse])
async def list_active_sessions(
    context: AccessContext = Depends(super_admin),
    db: Session = Depends(get_db),
):
    return AdminService(db).list_active_sessions(context)
