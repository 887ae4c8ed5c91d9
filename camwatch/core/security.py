from datetime import datetime, timedelta, UTC

from jose import JWTError, jwt
from passlib.context import CryptContext

from camwatch.config import settings
from camwatch.core.exceptions import UnauthorizedException

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(principal_id: int, session_id: int, expires_at: datetime) -> str:
    """
    Issue a signed access token for a sign-in session.

    Args:
        principal_id: Principal ID, stored in the 'sub' claim
        session_id: Session row ID, stored in the 'sid' claim
        expires_at: Token expiry (matches the session row)

    Returns:
        Encoded JWT
    """
    payload = {
        "sub": str(principal_id),
        "sid": session_id,
        "exp": expires_at,
        "iat": datetime.now(UTC),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def token_expiry() -> datetime:
    """Expiry timestamp for a token issued now"""
    return datetime.now(UTC) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using shared SECRET_KEY.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub' (principal id), 'sid', 'exp', etc.

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])

        # Validate expiration (jose checks this automatically)
        exp = payload.get("exp")
        if exp is None:
            raise UnauthorizedException("Token missing expiration")

        principal_id = payload.get("sub")
        if principal_id is None:
            raise UnauthorizedException("Token missing user identifier")

        if payload.get("sid") is None:
            raise UnauthorizedException("Token missing session identifier")

        return payload

    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")


def extract_identity(token: str) -> tuple[int, int]:
    """Extract (principal_id, session_id) from JWT token"""
    payload = decode_jwt(token)
    try:
        return int(payload["sub"]), int(payload["sid"])
    except (TypeError, ValueError):
        raise UnauthorizedException("Token carries a malformed identifier")
