"""Security infrastructure - JWT handling."""

from src.infrastructure.security.jwt import (create_access_token, get_subject,
                                             verify_token)

__all__ = [
    "create_access_token",
    "get_subject",
    "verify_token",
]
