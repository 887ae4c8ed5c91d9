from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from camwatch.database import get_db
from camwatch.dependencies import get_access_context
from camwatch.models.access_context import AccessContext
from camwatch.schemas.provisioning_schemas import (
    ProvisionErrorResponse,
    ProvisionUserRequest,
    ProvisionUserResponse,
)
from camwatch.services.provisioning_service import ProvisioningService

router = APIRouter()


@router.post(
    "/users",
    response_model=ProvisionUserResponse,
    responses={400: {"model": ProvisionErrorResponse}, 403: {"model": ProvisionErrorResponse}},
)
async def provision_user(
    request: ProvisionUserRequest,
    context: AccessContext = Depends(get_access_context),
    db: Session = Depends(get_db),
):
    """
    Create a user with its role (and tenant or client record).

    - super_admin may create partner_admin users, for an existing tenant
      (`tenantId`) or a new one (`tenant`)
    - partner_admin may create client_user users in its own tenant,
      optionally with a client record (`clientData`)
    - The initial password is generated when not supplied and returned once
    """
    principal, password = ProvisioningService(db).provision_user(request, context)
    return ProvisionUserResponse(
        user=principal,
        password=password,
        message=f"User {principal.email} created as {request.role.value}",
    )
