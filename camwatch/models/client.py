from enum import Enum as PyEnum
from sqlalchemy import String, Integer, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from camwatch.models.base import Base, TimestampMixin, enum_column
from camwatch.models.tenant import TenantStatus, PlanTier

if TYPE_CHECKING:
    from camwatch.models.tenant import Tenant
    from camwatch.models.camera import Camera


class ClientType(str, PyEnum):
    """Client legal type"""

    PF = "pf"  # individual
    PJ = "pj"  # company


class Client(Base, TimestampMixin):
    """
    End customer of a partner.

    principal_id links the client_user login created by provisioning to
    its client record; client-scoped queries filter on it.
    """

    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,  # Critical for multi-tenant queries
    )
    principal_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("principals.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    type: Mapped[ClientType] = mapped_column(enum_column(ClientType), nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    plan: Mapped[PlanTier] = mapped_column(
        enum_column(PlanTier), nullable=False, default=PlanTier.BASIC
    )
    status: Mapped[TenantStatus] = mapped_column(
        enum_column(TenantStatus), nullable=False, default=TenantStatus.ACTIVE
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="clients")
    cameras: Mapped[list["Camera"]] = relationship(
        "Camera",
        back_populates="client",
        cascade="all, delete-orphan",  # Delete cameras if client deleted
    )
