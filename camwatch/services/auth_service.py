import logging
from sqlalchemy.orm import Session

from camwatch.core.exceptions import UnauthorizedException
from camwatch.core.security import (
    create_access_token,
    extract_identity,
    token_expiry,
    verify_password,
)
from camwatch.models.base import utcnow
from camwatch.models.principal import Principal
from camwatch.models.user_session import UserSession
from camwatch.repositories.principal_repository import PrincipalRepository
from camwatch.repositories.session_repository import SessionRepository
from camwatch.services.session_store import SessionStore

logger = logging.getLogger(__name__)


class AuthService:
    """Sign-in, sign-out and token validation"""

    def __init__(self, db: Session):
        self.db = db
        self.principal_repo = PrincipalRepository(db)
        self.session_repo = SessionRepository(db)

    def sign_in(
        self,
        email: str,
        password: str,
        session: SessionStore,
        ip_address: str = "",
        device_info: str | None = None,
    ) -> tuple[Principal, str, UserSession]:
        """
        Authenticate with email and password and open a session.

        Args:
            email: Principal email
            password: Plain password
            session: SessionStore to populate
            ip_address: Client address recorded on the session row
            device_info: User agent recorded on the session row

        Returns:
            Tuple of (principal, access token, session row)

        Raises:
            UnauthorizedException: If credentials are wrong or the principal is disabled
        """
        principal = self.principal_repo.get_by_email(email)
        if principal is None or not verify_password(password, principal.password_hash):
            logger.info("Rejected sign-in for %s", email)
            raise UnauthorizedException("Invalid email or password")
        if not principal.is_active:
            raise UnauthorizedException("Account is disabled")

        expires_at = token_expiry()
        record = self.session_repo.create(
            UserSession(
                user_id=principal.id,
                ip_address=ip_address,
                device_info=device_info,
                expires_at=expires_at.replace(tzinfo=None),
            )
        )
        token = create_access_token(principal.id, record.id, expires_at)
        session.set_session(principal, token, record.id)
        logger.info("Principal %s signed in (session %s)", principal.id, record.id)
        return principal, token, record

    def authenticate(self, token: str, session: SessionStore) -> Principal:
        """
        Validate a bearer token and populate the session store.

        The token must be well-formed and its session row active and
        unexpired.

        Raises:
            UnauthorizedException: If the token or its session is invalid
        """
        try:
            principal_id, session_id = extract_identity(token)
            record = self.session_repo.get_by_id(session_id)
            if record is None or record.user_id != principal_id or not record.is_valid(utcnow()):
                raise UnauthorizedException("Session expired or signed out")
            principal = self.principal_repo.get_by_id(principal_id)
            if principal is None or not principal.is_active:
                raise UnauthorizedException("Account not found or disabled")
        except UnauthorizedException:
            session.clear()
            raise

        session.set_session(principal, token, session_id)
        return principal

    def sign_out(self, session: SessionStore) -> None:
        """Revoke the current session row and clear the store"""
        if session.session_id is not None:
            record = self.session_repo.get_by_id(session.session_id)
            if record is not None and record.is_active:
                self.session_repo.deactivate(record)
                logger.info("Session %s signed out", record.id)
        session.clear()
