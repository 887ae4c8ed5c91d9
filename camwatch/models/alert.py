from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Boolean, ForeignKey, DateTime, Text, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from camwatch.models.base import Base, enum_column, utcnow

if TYPE_CHECKING:
    from camwatch.models.tenant import Tenant
    from camwatch.models.camera import Camera


class AlertType(str, PyEnum):
    """Detection category reported by the external analytics process"""

    MOVEMENT = "movement"
    PERSON_DETECTED = "person_detected"
    INTRUSION = "intrusion"
    OBJECT_DETECTION = "object_detection"


class AlertSeverity(str, PyEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Alert(Base):
    """
    Detection event raised against a camera.

    Rows are inserted by an external detection process; this service only
    reads them and records acknowledgements. Metadata is free-form JSON.
    """

    __tablename__ = "alerts"

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
    camera_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("cameras.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type: Mapped[AlertType] = mapped_column(enum_column(AlertType), nullable=False)
    severity: Mapped[AlertSeverity] = mapped_column(
        enum_column(AlertSeverity), nullable=False, default=AlertSeverity.MEDIUM
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    metadata_: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)
    is_acknowledged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    acknowledged_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("principals.id", ondelete="SET NULL"), nullable=True
    )
    acknowledged_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="alerts")
    camera: Mapped["Camera"] = relationship("Camera", back_populates="alerts")

    # Composite index for recent-N listings
    __table_args__ = (
        Index("ix_alerts_tenant_created", "tenant_id", "created_at"),
        Index("ix_alerts_client_created", "client_id", "created_at"),
    )
