"""JWT verification for the identity-provider boundary."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from src.infrastructure.config.settings import get_settings

settings = get_settings()


def create_access_token(
    data: dict[str, Any], expires_delta: timedelta | None = None
) -> str:
    """Create a signed access token; `sub` carries the user id"""
    to_encode = data.copy()
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    assert isinstance(encoded_jwt, str)
    return encoded_jwt


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode JWT token, returns payload"""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        raise ValueError(f"Invalid token: {str(e)}") from e
    if not isinstance(payload, dict):
        raise ValueError("Token payload must be a dictionary")
    return payload


def get_subject(token: str) -> str:
    """User id carried by a verified token"""
    subject = verify_token(token).get("sub")
    if not subject or not isinstance(subject, str):
        raise ValueError("Token has no subject")
    return subject
