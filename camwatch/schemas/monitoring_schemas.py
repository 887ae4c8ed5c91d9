from datetime import datetime
from pydantic import BaseModel, Field
from camwatch.models.camera import CameraStatus
from camwatch.models.client import ClientType
from camwatch.models.tenant import TenantStatus, PlanTier
from camwatch.models.alert import AlertType, AlertSeverity
from camwatch.schemas.tenant_schemas import TenantStatsResponse


class ClientResponse(BaseModel):
    id: int
    tenant_id: int
    name: str
    email: str | None
    phone: str | None
    type: ClientType
    address: str | None
    plan: PlanTier
    status: TenantStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CameraCreate(BaseModel):
    """Schema for registering a camera under one of the tenant's clients"""

    client_id: int
    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    rtsp_url: str | None = Field(None, max_length=1024)
    status: CameraStatus = CameraStatus.OFFLINE
    is_recording: bool = False


class CameraUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    location: str | None = Field(None, min_length=1, max_length=255)
    rtsp_url: str | None = Field(None, max_length=1024)
    status: CameraStatus | None = None
    is_recording: bool | None = None


class CameraResponse(BaseModel):
    id: int
    tenant_id: int
    client_id: int
    name: str
    location: str
    rtsp_url: str | None
    status: CameraStatus
    is_recording: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AlertResponse(BaseModel):
    id: int
    tenant_id: int
    client_id: int
    camera_id: int
    type: AlertType
    severity: AlertSeverity
    message: str
    metadata: dict | None = Field(None, validation_alias="metadata_")
    is_acknowledged: bool
    acknowledged_by: int | None
    acknowledged_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AlertListResponse(BaseModel):
    alerts: list[AlertResponse]
    total: int


class PartnerDashboardResponse(BaseModel):
    """Tenant-scoped overview; `error` is set (and lists empty) when loading failed"""

    tenant_id: int | None
    clients: list[ClientResponse]
    cameras: list[CameraResponse]
    alerts: list[AlertResponse]
    stats: list[TenantStatsResponse]
    error: str | None = None


class ClientDashboardResponse(BaseModel):
    cameras: list[CameraResponse]
    alerts: list[AlertResponse]
    unacknowledged_alerts: int
    error: str | None = None
