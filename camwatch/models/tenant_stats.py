from datetime import datetime
from sqlalchemy import Integer, Numeric, ForeignKey, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from camwatch.models.base import Base, utcnow

if TYPE_CHECKING:
    from camwatch.models.tenant import Tenant


class TenantStats(Base):
    """
    Precomputed per-tenant rollup.

    Maintained by an external job; read-only from this service.
    """

    __tablename__ = "tenant_stats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    active_clients: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_cameras: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    online_cameras: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    monthly_alerts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    monthly_revenue: Mapped[float | None] = mapped_column(
        Numeric(precision=15, scale=2), nullable=True
    )
    last_updated: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="stats")
