"""JWT token creation and verification."""

import jwt
from datetime import datetime, timedelta, timezone
from typing import Literal
from uuid import UUID

from pydantic import BaseModel

from backend.app.config import get_settings


class TokenPayload(BaseModel):
    """JWT token payload."""
    user_id: UUID
    token_type: Literal["access", "refresh"]
    issued_at: datetime
    expires_at: datetime


class AuthenticationError(Exception):
    """Authentication-related errors."""
    pass


def get_jwt_private_key() -> str:
    """Get JWT private key from settings."""
    key = get_settings().jwt_private_key_pem.strip()

    if key.startswith("dummy-"):
        raise AuthenticationError(
            "JWT private key not configured. Set JWT_PRIVATE_KEY_PEM in environment."
        )

    return key


def get_jwt_public_key() -> str:
    """Get JWT public key from settings."""
    key = get_settings().jwt_public_key_pem.strip()

    if key.startswith("dummy-"):
        raise AuthenticationError(
            "JWT public key not configured. Set JWT_PUBLIC_KEY_PEM in environment."
        )

    return key


def _encode(user_id: UUID, token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + lifetime,
        "type": token_type,
        "jti": f"{token_type[:3]}_{user_id}_{int(now.timestamp())}",
    }
    return jwt.encode(payload, get_jwt_private_key(), algorithm="RS256")


def create_access_token(user_id: UUID) -> str:
    """Create a short-lived JWT access token.

    Args:
        user_id: User UUID

    Returns:
        Encoded JWT token string

    Raises:
        AuthenticationError: If JWT keys not configured
    """
    settings = get_settings()
    return _encode(user_id, "access", timedelta(minutes=settings.jwt_access_ttl_minutes))


def create_refresh_token(user_id: UUID) -> str:
    """Create a JWT refresh token.

    Raises:
        AuthenticationError: If JWT keys not configured
    """
    settings = get_settings()
    return _encode(user_id, "refresh", timedelta(days=settings.jwt_refresh_ttl_days))


def _decode(token: str, expected_type: str, label: str) -> TokenPayload:
    try:
        payload = jwt.decode(token, get_jwt_public_key(), algorithms=["RS256"])

        if payload.get("type") != expected_type:
            raise AuthenticationError("Invalid token type")

        return TokenPayload(
            user_id=UUID(payload["sub"]),
            token_type=payload["type"],
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    except jwt.ExpiredSignatureError:
        raise AuthenticationError(f"{label} has expired")
    except jwt.InvalidTokenError as e:
        raise AuthenticationError(f"Invalid {label.lower()}: {e}")
    except (KeyError, ValueError) as e:
        raise AuthenticationError(f"Malformed {label.lower()} payload: {e}")


def verify_access_token(token: str) -> TokenPayload:
    """Verify and decode JWT access token.

    Raises:
        AuthenticationError: If token is invalid, expired, or wrong type
    """
    return _decode(token, "access", "Token")


def verify_refresh_token(token: str) -> TokenPayload:
    """Verify and decode JWT refresh token.

    Raises:
        AuthenticationError: If token is invalid, expired, or wrong type
    """
    return _decode(token, "refresh", "Refresh token")
