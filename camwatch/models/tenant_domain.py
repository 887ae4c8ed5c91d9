from sqlalchemy import String, Integer, Boolean, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from camwatch.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from camwatch.models.tenant import Tenant


class TenantDomain(Base, TimestampMixin):
    """
    Hostname serving a tenant's white-labeled deployment.

    A request host matches a row when it equals either `domain` or
    `subdomain` and the row is active. At most one row per tenant has
    is_primary set; TenantDomainRepository.set_primary keeps that true.
    A host name belongs to one row only, whether active or not.
    """

    __tablename__ = "tenant_domains"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    domain: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True, index=True)
    subdomain: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True, index=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ssl_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="domains")

    __table_args__ = (Index("ix_tenant_domains_tenant_primary", "tenant_id", "is_primary"),)

    @property
    def hostname(self) -> str | None:
        return self.domain or self.subdomain
