from typing import Optional
from sqlalchemy.orm import Session

from camwatch.models.alert import Alert, AlertSeverity


class AlertRepository:
    """Repository for Alert data access"""

    def __init__(self, db: Session):
        self.db = db

    def get_recent_by_tenant(self, tenant_id: int, limit: int) -> list[Alert]:
        """Most recent alerts of a tenant"""
        return (
            self.db.query(Alert)
            .filter(Alert.tenant_id == tenant_id)
            .order_by(Alert.created_at.desc(), Alert.id.desc())
            .limit(limit)
            .all()
        )

    def get_recent_by_clients(self, tenant_id: int, client_ids: list[int], limit: int) -> list[Alert]:
        """Most recent alerts raised for the given clients within a tenant"""
        if not client_ids:
            return []
        return (
            self.db.query(Alert)
            .filter(Alert.tenant_id == tenant_id, Alert.client_id.in_(client_ids))
            .order_by(Alert.created_at.desc(), Alert.id.desc())
            .limit(limit)
            .all()
        )

    def get_with_filters(
        self,
        tenant_id: int,
        client_id: Optional[int] = None,
        camera_id: Optional[int] = None,
        severity: Optional[AlertSeverity] = None,
        acknowledged: Optional[bool] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Alert], int]:
        """
        Get alerts with filters, ensuring multi-tenant isolation.

        Args:
            tenant_id: Tenant ID for isolation
            client_id: Optional client filter
            camera_id: Optional camera filter
            severity: Optional severity filter
            acknowledged: Optional acknowledgement-state filter
            limit: Maximum number of results
            offset: Pagination offset

        Returns:
            Tuple of (alerts list, total count)
        """
        query = self.db.query(Alert).filter(Alert.tenant_id == tenant_id)

        if client_id is not None:
            query = query.filter(Alert.client_id == client_id)

        if camera_id is not None:
            query = query.filter(Alert.camera_id == camera_id)

        if severity is not None:
            query = query.filter(Alert.severity == severity)

        if acknowledged is not None:
            query = query.filter(Alert.is_acknowledged.is_(acknowledged))

        # Get total count before pagination
        total = query.count()

        alerts = (
            query.order_by(Alert.created_at.desc(), Alert.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )

        return alerts, total

    def count_unacknowledged(self, tenant_id: int, client_ids: list[int]) -> int:
        if not client_ids:
            return 0
        return (
            self.db.query(Alert)
            .filter(
                Alert.tenant_id == tenant_id,
                Alert.client_id.in_(client_ids),
                Alert.is_acknowledged.is_(False),
            )
            .count()
        )

    def get_by_id_and_tenant(self, alert_id: int, tenant_id: int) -> Optional[Alert]:
        """
        Get alert by ID, ensuring it belongs to the tenant.

        Returns:
            Alert object or None if not found or belongs to different tenant
        """
        return (
            self.db.query(Alert)
            .filter(Alert.id == alert_id, Alert.tenant_id == tenant_id)
            .first()
        )

    def update(self, alert: Alert) -> Alert:
        self.db.commit()
        self.db.refresh(alert)
        return alert
