from pydantic import BaseModel, Field
from camwatch.models.role import AppRole
from camwatch.services.route_guard import GuardOutcome


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6)
    next: str | None = Field(None, description="Path to return to after sign-in")


class RoleAssignmentResponse(BaseModel):
    id: int
    role: AppRole
    tenant_id: int | None

    model_config = {"from_attributes": True}


class PrincipalResponse(BaseModel):
    id: int
    email: str
    full_name: str

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: PrincipalResponse
    primary_role: AppRole | None
    redirect_to: str


class MeResponse(BaseModel):
    """Principal with its full assignment list, for explicit tenant selection"""

    user: PrincipalResponse
    roles: list[RoleAssignmentResponse]
    primary_role: AppRole | None
    effective_tenant_id: int | None
    tenant_ids: list[int]
    tenant_selection_required: bool


class LogoutResponse(BaseModel):
    message: str


class GuardResponse(BaseModel):
    path: str
    outcome: GuardOutcome
    redirect_to: str | None
    return_to: str | None
