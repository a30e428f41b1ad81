"""
Security: bcrypt password hashing and HS256 access tokens.
Tokens carry the user id as `sub` and a `type` claim; only access tokens
are accepted by the API.
"""

from datetime import datetime, timezone, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from inventory_api.config import get_settings
from inventory_api.db.base import is_valid_id

settings = get_settings()
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(user_id: str, extra: dict[str, Any] | None = None) -> str:
    issued = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued,
        "exp": issued + timedelta(minutes=settings.jwt_expire_minutes),
    }
    if extra:
        claims.update(extra)
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Signature and expiry checked; None on any failure."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def token_subject(token: str) -> str | None:
    """User id from a valid access token, or None."""
    payload = decode_access_token(token)
    if not payload or payload.get("type") != ACCESS_TOKEN_TYPE:
        return None
    subject = str(payload.get("sub", ""))
    return subject if is_valid_id(subject) else None
