from datetime import datetime
from sqlalchemy import String, Integer, Boolean, ForeignKey, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from camwatch.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from camwatch.models.tenant import Tenant


class License(Base, TimestampMixin):
    """
    Capacity grant for a tenant.

    A tenant keeps its historical licenses; the active one carries the
    current limits. Limits are informational, nothing enforces them here.
    """

    __tablename__ = "licenses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    license_type: Mapped[str] = mapped_column(String(100), nullable=False)
    max_cameras: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    max_cloud_storage_gb: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    ai_features: Mapped[list[str] | None] = mapped_column(JSON, nullable=True, default=list)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="licenses")
