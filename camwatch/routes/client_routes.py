from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from camwatch.database import get_db
from camwatch.dependencies import require_role
from camwatch.models.access_context import AccessContext
from camwatch.models.role import AppRole
from camwatch.schemas.monitoring_schemas import AlertResponse, ClientDashboardResponse
from camwatch.services.monitoring_service import ClientService

router = APIRouter()

client_user = require_role(AppRole.CLIENT_USER)


@router.get("/dashboard", response_model=ClientDashboardResponse)
async def client_dashboard(
    tenant_id: int | None = Query(None),
    context: AccessContext = Depends(client_user),
    db: Session = Depends(get_db),
):
    """Own cameras, most recent alerts and the unacknowledged alert count"""
    result = ClientService(db).dashboard(context, tenant_id)
    return ClientDashboardResponse(**result.data, error=result.error)


@router.post("/alerts/{alert_id}/acknowledge", response_model=AlertResponse)
async def acknowledge_alert(
    alert_id: int,
    tenant_id: int | None = Query(None),
    context: AccessContext = Depends(client_user),
    db: Session = Depends(get_db),
):
    return ClientService(db).acknowledge_alert(alert_id, context, tenant_id)
