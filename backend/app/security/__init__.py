"""Security utilities for authentication and authorization."""

from .admin import (
    check_admin_password,
    hash_admin_token,
    issue_admin_session,
    revoke_admin_session,
    verify_admin_token,
)
from .jwt import (
    AuthenticationError,
    TokenPayload,
    create_access_token,
    create_refresh_token,
    verify_access_token,
    verify_refresh_token,
)
from .middleware import SecurityHeadersMiddleware
from .passwords import hash_password, needs_rehash, validate_password, verify_password

__all__ = [
    "create_access_token",
    "create_refresh_token",
    "verify_access_token",
    "verify_refresh_token",
    "TokenPayload",
    "AuthenticationError",
    "hash_password",
    "validate_password",
    "verify_password",
    "needs_rehash",
    "check_admin_password",
    "hash_admin_token",
    "issue_admin_session",
    "revoke_admin_session",
    "verify_admin_token",
    "SecurityHeadersMiddleware",
]
