from sqlalchemy import func
from sqlalchemy.orm import Session
from camwatch.models.principal import Principal
from camwatch.models.profile import Profile


class PrincipalRepository:
    """Repository for Principal model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Principal | None:
        """Get principal by email (case-insensitive)"""
        return (
            self.db.query(Principal)
            .filter(func.lower(Principal.email) == email.strip().lower())
            .first()
        )

    def get_by_id(self, principal_id: int) -> Principal | None:
        """Get principal by internal ID"""
        return self.db.query(Principal).filter(Principal.id == principal_id).first()

    def add(self, principal: Principal) -> Principal:
        """Stage a principal and its profile without committing (for atomic provisioning)"""
        self.db.add(principal)
        self.db.flush()  # Assign ID without committing
        self.db.add(Profile(user_id=principal.id, email=principal.email, full_name=principal.full_name))
        self.db.flush()
        return principal

