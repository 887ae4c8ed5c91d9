from sqlalchemy.orm import Session
from camwatch.models.camera import Camera, CameraStatus


class CameraRepository:
    """Repository for Camera data access. Every query carries a tenant predicate."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_tenant(
        self,
        tenant_id: int,
        client_id: int | None = None,
        status: CameraStatus | None = None,
    ) -> list[Camera]:
        """
        Get cameras of a tenant with optional filters.

        Args:
            tenant_id: Tenant ID for isolation
            client_id: Optional owning client filter
            status: Optional status filter

        Returns:
            List of cameras, newest first
        """
        query = self.db.query(Camera).filter(Camera.tenant_id == tenant_id)
        if client_id is not None:
            query = query.filter(Camera.client_id == client_id)
        if status is not None:
            query = query.filter(Camera.status == status)
        return query.order_by(Camera.created_at.desc(), Camera.id.desc()).all()

    def get_by_clients(self, tenant_id: int, client_ids: list[int]) -> list[Camera]:
        """Get cameras owned by any of the given clients within a tenant"""
        if not client_ids:
            return []
        return (
            self.db.query(Camera)
            .filter(Camera.tenant_id == tenant_id, Camera.client_id.in_(client_ids))
            .order_by(Camera.created_at.desc(), Camera.id.desc())
            .all()
        )

    def get_by_id_and_tenant(self, camera_id: int, tenant_id: int) -> Camera | None:
        """
        Get camera ensuring it belongs to tenant.

        Returns None if camera doesn't exist or belongs to another tenant.
        """
        return (
            self.db.query(Camera)
            .filter(Camera.id == camera_id, Camera.tenant_id == tenant_id)
            .first()
        )

    def create(self, camera: Camera) -> Camera:
        self.db.add(camera)
        self.db.commit()
        self.db.refresh(camera)
        return camera

    def update(self, camera: Camera) -> Camera:
        self.db.commit()
        self.db.refresh(camera)
        return camera
