"""Privileged creation of principals with their role and tenant records."""

import logging
import secrets
import string

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from camwatch.config import settings
from camwatch.core.exceptions import CamwatchException, ForbiddenException, ProvisioningError
from camwatch.core.security import hash_password
from camwatch.models.access_context import AccessContext
from camwatch.models.audit_log import AuditLog
from camwatch.models.client import Client
from camwatch.models.principal import Principal
from camwatch.models.role import AppRole
from camwatch.models.role_assignment import RoleAssignment
from camwatch.models.tenant import Tenant
from camwatch.repositories.client_repository import ClientRepository
from camwatch.repositories.principal_repository import PrincipalRepository
from camwatch.repositories.role_assignment_repository import RoleAssignmentRepository
from camwatch.repositories.session_repository import AuditLogRepository
from camwatch.repositories.tenant_repository import TenantRepository
from camwatch.schemas.provisioning_schemas import ProvisionUserRequest
from camwatch.services.scope import resolve_tenant_scope

logger = logging.getLogger(__name__)

PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*"


def generate_password(length: int | None = None) -> str:
    length = length or settings.GENERATED_PASSWORD_LENGTH
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


class ProvisioningService:
    """
    Creates a principal together with its profile, role assignment and,
    depending on the role, a tenant or client record, plus an audit entry.

    Who may create whom:
    - super_admin creates partner_admin (for an existing or a new tenant)
    - partner_admin creates client_user, always inside its own tenant

    All rows are written in one transaction; any failure rolls back every
    row, so a half-provisioned principal can never be left behind.
    """

    def __init__(self, db: Session):
        self.db = db
        self.principal_repo = PrincipalRepository(db)
        self.assignment_repo = RoleAssignmentRepository(db)
        self.tenant_repo = TenantRepository(db)
        self.client_repo = ClientRepository(db)
        self.audit_repo = AuditLogRepository(db)

    def provision_user(
        self, request: ProvisionUserRequest, context: AccessContext
    ) -> tuple[Principal, str]:
        """
        Create a new user on behalf of the caller.

        Args:
            request: Provisioning request
            context: Access context of the caller

        Returns:
            Tuple of (created principal, its initial password)

        Raises:
            ProvisioningError: If the caller may not create this role or any write fails
        """
        logger.info(
            "Provisioning %s as %s (requested by principal %s)",
            request.email,
            request.role.value,
            context.principal.id,
        )
        self._authorize(request, context)

        if self.principal_repo.get_by_email(request.email) is not None:
            raise ProvisioningError(f"A user with email {request.email} already exists")

        password = request.password or generate_password()
        try:
            tenant_id = self._target_tenant(request, context)
            principal = self.principal_repo.add(
                Principal(
                    email=request.email.strip().lower(),
                    full_name=request.full_name,
                    password_hash=hash_password(password),
                )
            )
            self.assignment_repo.add(
                RoleAssignment(user_id=principal.id, role=request.role, tenant_id=tenant_id)
            )
            if request.role == AppRole.CLIENT_USER and request.client_data is not None:
                self.client_repo.add(
                    Client(
                        tenant_id=tenant_id,
                        principal_id=principal.id,
                        name=request.client_data.name,
                        email=principal.email,
                        phone=request.client_data.phone,
                        address=request.client_data.address,
                        type=request.client_data.type,
                    )
                )
            self.audit_repo.add(
                AuditLog(
                    user_id=context.principal.id,
                    tenant_id=tenant_id,
                    action="CREATE_USER",
                    resource_type="user",
                    resource_id=str(principal.id),
                    metadata_={
                        "created_user_email": principal.email,
                        "created_user_role": request.role.value,
                        "created_user_name": request.full_name,
                    },
                )
            )
            self.db.commit()
        except (CamwatchException, SQLAlchemyError) as e:
            self.db.rollback()
            logger.exception("Provisioning of %s failed, rolled back", request.email)
            if isinstance(e, ProvisioningError):
                raise
            if isinstance(e, ForbiddenException):
                raise ProvisioningError(str(e), status_code=403) from e
            if isinstance(e, CamwatchException):
                raise ProvisioningError(str(e)) from e
            raise ProvisioningError(f"Could not create user: {e}") from e

        self.db.refresh(principal)
        logger.info("Provisioned principal %s as %s", principal.id, request.role.value)
        return principal, password

    def _authorize(self, request: ProvisionUserRequest, context: AccessContext) -> None:
        if request.role == AppRole.PARTNER_ADMIN and not context.is_super_admin():
            raise ProvisioningError("Only super admins can create partners", status_code=403)
        if request.role == AppRole.CLIENT_USER and not context.is_partner_admin():
            raise ProvisioningError("Only partner admins can create clients", status_code=403)
        if request.role == AppRole.SUPER_ADMIN:
            raise ProvisioningError("super_admin accounts cannot be provisioned", status_code=403)

    def _target_tenant(self, request: ProvisionUserRequest, context: AccessContext) -> int:
        """Tenant the new assignment is scoped to; a tenant payload is created in the same transaction."""
        if request.role == AppRole.CLIENT_USER:
            # clients always land in the calling partner's tenant
            return resolve_tenant_scope(context, AppRole.PARTNER_ADMIN, request.tenant_id).tenant_id

        if request.tenant is not None:
            tenant = self.tenant_repo.add(Tenant(**request.tenant.model_dump()))
            return tenant.id
        if request.tenant_id is not None:
            if self.tenant_repo.get_by_id(request.tenant_id) is None:
                raise ProvisioningError(f"Tenant {request.tenant_id} not found")
            return request.tenant_id
        raise ProvisioningError("partner_admin requires tenantId or tenant details")
