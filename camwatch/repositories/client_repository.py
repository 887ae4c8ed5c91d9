from sqlalchemy.orm import Session
from camwatch.models.client import Client


class ClientRepository:
    """Repository for Client model operations with multi-tenant support"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_tenant(self, tenant_id: int) -> list[Client]:
        """Get all clients for a tenant, newest first"""
        return (
            self.db.query(Client)
            .filter(Client.tenant_id == tenant_id)
            .order_by(Client.created_at.desc(), Client.id.desc())
            .all()
        )

    def get_by_id_and_tenant(self, client_id: int, tenant_id: int) -> Client | None:
        """
        Get client ensuring it belongs to tenant (multi-tenant safety).

        Returns None if client doesn't exist or belongs to another tenant.
        """
        return (
            self.db.query(Client)
            .filter(Client.id == client_id, Client.tenant_id == tenant_id)
            .first()
        )

    def get_owned_by(self, principal_id: int, tenant_id: int) -> list[Client]:
        """Get the client records a client_user login owns within its tenant"""
        return (
            self.db.query(Client)
            .filter(Client.principal_id == principal_id, Client.tenant_id == tenant_id)
            .all()
        )

    def add(self, client: Client) -> Client:
        """Stage client without committing (for atomic provisioning)"""
        self.db.add(client)
        self.db.flush()
        return client

    def delete(self, client: Client) -> None:
        """Delete client (cascades to cameras and their alerts)"""
        self.db.delete(client)
        self.db.commit()
