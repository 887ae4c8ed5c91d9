"""Host-name to tenant resolution and white-label domain management."""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from camwatch.core.exceptions import NotFoundException, ValidationException
from camwatch.models.tenant_branding import TenantBranding
from camwatch.models.tenant_domain import TenantDomain
from camwatch.repositories.tenant_domain_repository import (
    TenantDomainRepository,
    TenantBrandingRepository,
)
from camwatch.schemas.domain_schemas import BrandingUpdate, DomainCreate

logger = logging.getLogger(__name__)


@dataclass
class TenantDetection:
    """Result of host-based tenant detection. All fields None means the default platform."""

    tenant_id: int | None = None
    domain: TenantDomain | None = None
    branding: TenantBranding | None = None


def normalize_hostname(hostname: str) -> str:
    """Lower-case a host name and drop any port."""
    host = hostname.strip().lower()
    if host.startswith("["):  # IPv6 literal
        return host.split("]")[0] + "]"
    return host.split(":")[0]


class TenantResolver:
    """Service layer for tenant detection, domains and branding"""

    def __init__(self, db: Session):
        self.db = db
        self.domain_repo = TenantDomainRepository(db)
        self.branding_repo = TenantBrandingRepository(db)

    def detect_tenant(self, hostname: str) -> TenantDetection:
        """
        Map a request host to a tenant and its branding.

        No matching active domain is the normal "serve the default
        platform" outcome. Store failures also degrade to no tenant so the
        application stays usable, but are logged as errors.

        Args:
            hostname: Request host name

        Returns:
            TenantDetection (empty when no tenant serves the host)
        """
        host = normalize_hostname(hostname)
        if not host:
            return TenantDetection()
        try:
            domain = self.domain_repo.find_active_by_hostname(host)
            if domain is None:
                logger.debug("No tenant domain for host %s", host)
                return TenantDetection()
            branding = self.branding_repo.get_by_tenant(domain.tenant_id)
        except SQLAlchemyError:
            logger.exception("Tenant detection failed for host %s", host)
            return TenantDetection()

        return TenantDetection(tenant_id=domain.tenant_id, domain=domain, branding=branding)

    def get_tenant_url(self, tenant_id: int) -> str | None:
        """Public URL of a tenant's active primary domain, if it has one."""
        domain = self.domain_repo.get_primary(tenant_id)
        if domain is None or not domain.hostname:
            return None
        return f"https://{domain.hostname}"

    def list_domains(self, tenant_id: int) -> list[TenantDomain]:
        return self.domain_repo.get_by_tenant(tenant_id)

    def add_domain(self, tenant_id: int, data: DomainCreate) -> TenantDomain:
        """
        Register a domain for a tenant.

        The first domain a tenant registers becomes its primary.

        Raises:
            ValidationException: If any domain row, active or not, already claims the host
        """
        host = normalize_hostname(data.domain)
        subdomain = normalize_hostname(data.subdomain) if data.subdomain else host
        for candidate in {host, subdomain}:
            if self.domain_repo.find_conflict(candidate) is not None:
                raise ValidationException(f"Domain {candidate} is already in use")

        domain = TenantDomain(
            tenant_id=tenant_id,
            domain=host,
            subdomain=subdomain,
            is_primary=self.domain_repo.count_for_tenant(tenant_id) == 0,
            ssl_enabled=data.ssl_enabled,
            is_active=True,
        )
        return self.domain_repo.create(domain)

    def set_primary_domain(self, tenant_id: int, domain_id: int) -> TenantDomain:
        """
        Make `domain_id` the tenant's only primary domain.

        Raises:
            NotFoundException: If the domain does not belong to the tenant
            ValidationException: If the domain is inactive
        """
        domain = self.domain_repo.get_by_id_and_tenant(domain_id, tenant_id)
        if domain is None:
            raise NotFoundException("Domain not found")
        if not domain.is_active:
            raise ValidationException("An inactive domain cannot be made primary")
        try:
            self.domain_repo.set_primary(tenant_id, domain_id)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to set primary domain %s for tenant %s", domain_id, tenant_id)
            raise
        self.db.refresh(domain)
        return domain

    def toggle_domain_active(self, tenant_id: int, domain_id: int) -> TenantDomain:
        """
        Activate or deactivate a domain.

        Raises:
            NotFoundException: If the domain does not belong to the tenant
            ValidationException: If re-activating would serve a host another active row serves
        """
        domain = self.domain_repo.get_by_id_and_tenant(domain_id, tenant_id)
        if domain is None:
            raise NotFoundException("Domain not found")
        if not domain.is_active:
            for candidate in {domain.domain, domain.subdomain} - {None}:
                if self.domain_repo.find_conflict(candidate, exclude_id=domain.id, active_only=True):
                    raise ValidationException(f"Domain {candidate} is already in use")
        domain.is_active = not domain.is_active
        return self.domain_repo.update(domain)

    def get_branding(self, tenant_id: int) -> TenantBranding | None:
        return self.branding_repo.get_by_tenant(tenant_id)

    def upsert_branding(self, tenant_id: int, data: BrandingUpdate) -> TenantBranding:
        return self.branding_repo.upsert(tenant_id, data.model_dump(exclude_unset=True))
