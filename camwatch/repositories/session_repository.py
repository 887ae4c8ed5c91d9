"""Repository for sign-in sessions and the audit trail."""

from datetime import datetime
from sqlalchemy.orm import Session
from camwatch.models.user_session import UserSession
from camwatch.models.audit_log import AuditLog


class SessionRepository:
    """Repository for UserSession model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, session_id: int) -> UserSession | None:
        return self.db.query(UserSession).filter(UserSession.id == session_id).first()

    def get_active(self, now: datetime) -> list[UserSession]:
        """Get all active, unexpired sessions across the platform"""
        return (
            self.db.query(UserSession)
            .filter(UserSession.is_active.is_(True), UserSession.expires_at > now)
            .order_by(UserSession.last_activity.desc())
            .all()
        )

    def create(self, session: UserSession) -> UserSession:
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def deactivate(self, session: UserSession) -> None:
        session.is_active = False
        self.db.commit()


class AuditLogRepository:
    """Repository for AuditLog model operations"""

    def __init__(self, db: Session):
        self.db = db

    def add(self, entry: AuditLog) -> AuditLog:
        """Stage audit entry without committing (written with the action it records)"""
        self.db.add(entry)
        self.db.flush()
        return entry

