from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from camwatch.database import get_db
from camwatch.dependencies import require_role
from camwatch.models.access_context import AccessContext
from camwatch.models.alert import AlertSeverity
from camwatch.models.camera import CameraStatus
from camwatch.models.role import AppRole
from camwatch.schemas.monitoring_schemas import (
    AlertListResponse,
    AlertResponse,
    CameraCreate,
    CameraResponse,
    CameraUpdate,
    ClientResponse,
    PartnerDashboardResponse,
)
from camwatch.services.monitoring_service import PartnerService

router = APIRouter()

partner_admin = require_role(AppRole.PARTNER_ADMIN)


@router.get("/dashboard", response_model=PartnerDashboardResponse)
async def partner_dashboard(
    tenant_id: int | None = Query(None, description="Tenant to open when the account has several"),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    """
    Clients, cameras, the most recent alerts and stats of the caller's tenant.

    A partner account without a tenant gets empty lists and an `error`.
    """
    result = PartnerService(db).dashboard(context, tenant_id)
    return PartnerDashboardResponse(**result.data, error=result.error)


@router.get("/clients", response_model=list[ClientResponse])
async def list_clients(
    tenant_id: int | None = Query(None),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    return PartnerService(db).list_clients(context, tenant_id)


@router.delete("/clients/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: int,
    tenant_id: int | None = Query(None),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    """Delete a client together with its cameras and alerts"""
    PartnerService(db).delete_client(client_id, context, tenant_id)


@router.get("/cameras", response_model=list[CameraResponse])
async def list_cameras(
    tenant_id: int | None = Query(None),
    client_id: int | None = Query(None),
    status: CameraStatus | None = Query(None),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    return PartnerService(db).list_cameras(context, tenant_id, client_id=client_id, status=status)


@router.post("/cameras", response_model=CameraResponse, status_code=status.HTTP_201_CREATED)
async def create_camera(
    camera_data: CameraCreate,
    tenant_id: int | None = Query(None),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    """
    Register a camera.

    - The client must belong to the caller's tenant
    """
    return PartnerService(db).create_camera(camera_data, context, tenant_id)


@router.patch("/cameras/{camera_id}", response_model=CameraResponse)
async def update_camera(
    camera_id: int,
    camera_data: CameraUpdate,
    tenant_id: int | None = Query(None),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    return PartnerService(db).update_camera(camera_id, camera_data, context, tenant_id)


@router.get("/alerts", response_model=AlertListResponse)
async def list_alerts(
    tenant_id: int | None = Query(None),
    client_id: Optional[int] = Query(None),
    camera_id: Optional[int] = Query(None),
    severity: Optional[AlertSeverity] = Query(None),
    acknowledged: Optional[bool] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    """
    List the tenant's alerts with optional filters, newest first.

    - **client_id**: Filter by client
    - **camera_id**: Filter by camera
    - **severity**: Filter by severity
    - **acknowledged**: Filter by acknowledgement state
    - **limit** / **offset**: Pagination
    """
    alerts, total = PartnerService(db).list_alerts(
        context,
        tenant_id,
        client_id=client_id,
        camera_id=camera_id,
        severity=severity,
        acknowledged=acknowledged,
        limit=limit,
        offset=offset,
    )
    return AlertListResponse(alerts=alerts, total=total)


@router.post("/alerts/{alert_id}/acknowledge", response_model=AlertResponse)
async def acknowledge_alert(
    alert_id: int,
    tenant_id: int | None = Query(None),
    context: AccessContext = Depends(partner_admin),
    db: Session = Depends(get_db),
):
    return PartnerService(db).acknowledge_alert(alert_id, context, tenant_id)
