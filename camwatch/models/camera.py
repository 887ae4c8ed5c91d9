from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from camwatch.models.base import Base, TimestampMixin, enum_column

if TYPE_CHECKING:
    from camwatch.models.tenant import Tenant
    from camwatch.models.client import Client
    from camwatch.models.alert import Alert


class CameraStatus(str, PyEnum):
    """Camera connectivity status"""

    ONLINE = "online"
    OFFLINE = "offline"
    MAINTENANCE = "maintenance"


class Camera(Base, TimestampMixin):
    """
    Camera installed at a client site.

    tenant_id is denormalized from the owning client so tenant-scoped
    listings do not need a join.
    """

    __tablename__ = "cameras"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    client_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    rtsp_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    status: Mapped[CameraStatus] = mapped_column(
        enum_column(CameraStatus), nullable=False, default=CameraStatus.OFFLINE
    )
    is_recording: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="cameras")
    client: Mapped["Client"] = relationship("Client", back_populates="cameras")
    alerts: Mapped[list["Alert"]] = relationship(
        "Alert", back_populates="camera", cascade="all, delete-orphan"
    )
