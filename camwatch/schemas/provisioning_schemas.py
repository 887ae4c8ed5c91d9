from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from camwatch.models.client import ClientType
from camwatch.models.role import AppRole
from camwatch.models.tenant import PlanTier
from camwatch.schemas.auth_schemas import PrincipalResponse


class ProvisionTenant(BaseModel):
    """Tenant created together with a new partner admin"""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone: str | None = Field(None, max_length=50)
    address: str | None = None
    plan: PlanTier = PlanTier.BASIC


class ProvisionClient(BaseModel):
    """Client record created together with a new client user"""

    name: str = Field(..., min_length=1, max_length=255)
    type: ClientType
    phone: str | None = Field(None, max_length=50)
    address: str | None = None


class ProvisionUserRequest(BaseModel):
    """
    Request body of the user-provisioning call.

    Accepts camelCase keys (fullName, tenantId, clientData) as sent by the
    admin forms, as well as snake_case.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str = Field(..., min_length=3, max_length=255)
    full_name: str = Field(..., min_length=1, max_length=255)
    role: AppRole
    password: str | None = Field(None, min_length=6)
    tenant_id: int | None = None
    tenant: ProvisionTenant | None = None
    client_data: ProvisionClient | None = None


class ProvisionUserResponse(BaseModel):
    success: bool = True
    user: PrincipalResponse
    password: str
    message: str


class ProvisionErrorResponse(BaseModel):
    success: bool = False
    error: str
