from pydantic import BaseModel, Field
from datetime import datetime
from camwatch.models.tenant import TenantStatus, PlanTier


class TenantCreate(BaseModel):
    """Create a partner tenant (super admin only)"""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone: str | None = Field(None, max_length=50)
    address: str | None = None
    plan: PlanTier = PlanTier.BASIC


class TenantUpdate(BaseModel):
    """Update tenant fields (super admin only); status transitions live here"""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: str | None = Field(None, min_length=3, max_length=255)
    phone: str | None = Field(None, max_length=50)
    address: str | None = None
    status: TenantStatus | None = None
    plan: PlanTier | None = None


class TenantResponse(BaseModel):
    """Tenant details response"""

    id: int
    name: str
    email: str
    phone: str | None
    address: str | None
    status: TenantStatus
    plan: PlanTier
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TenantDeleteResponse(BaseModel):
    message: str
    deleted_tenant_id: int


class TenantStatsResponse(BaseModel):
    tenant_id: int
    active_clients: int
    total_cameras: int
    online_cameras: int
    monthly_alerts: int
    monthly_revenue: float | None
    last_updated: datetime

    model_config = {"from_attributes": True}


class LicenseResponse(BaseModel):
    id: int
    tenant_id: int
    license_type: str
    max_cameras: int
    max_cloud_storage_gb: int
    ai_features: list[str] | None
    expires_at: datetime | None
    is_active: bool

    model_config = {"from_attributes": True}


class IPAuthorizationResponse(BaseModel):
    id: int
    tenant_id: int
    ip_address: str
    domain: str | None
    description: str | None
    is_active: bool

    model_config = {"from_attributes": True}


class SessionResponse(BaseModel):
    id: int
    user_id: int
    tenant_id: int | None
    client_id: int | None
    ip_address: str
    device_info: str | None
    is_active: bool
    last_activity: datetime
    created_at: datetime
    expires_at: datetime

    model_config = {"from_attributes": True}


class AdminDashboardResponse(BaseModel):
    """Platform-wide overview; `error` is set (and lists empty) when loading failed"""

    tenants: list[TenantResponse]
    licenses: list[LicenseResponse]
    ip_authorizations: list[IPAuthorizationResponse]
    sessions: list[SessionResponse]
    error: str | None = None
