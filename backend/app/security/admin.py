"""Server-issued admin sessions.

The admin password is exchanged for a random 64-hex-character token. Only
the SHA-256 digest of the token is persisted, together with an expiry; every
admin request is checked against that store.
"""

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.app.config import get_settings
from backend.app.db.mixins import as_utc, utcnow
from backend.app.db.models.admin_session import AdminSession
from backend.app.security.jwt import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


def hash_admin_token(token: str) -> str:
    """Digest stored in place of the raw token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def check_admin_password(password: str) -> bool:
    """Constant-time comparison against the configured admin password."""
    expected = get_settings().admin_password
    return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))


def issue_admin_session(session: Session, now: datetime | None = None) -> tuple[str, AdminSession]:
    """Create a new admin session and return the raw token with its record.

    The caller commits.
    """
    now = now or utcnow()
    token = secrets.token_hex(TOKEN_BYTES)
    record = AdminSession(
        token_hash=hash_admin_token(token),
        created_at=now,
        expires_at=now + timedelta(hours=get_settings().admin_session_ttl_hours),
    )
    session.add(record)
    session.flush()
    logger.info("Issued admin session %s", record.session_id)
    return token, record


def verify_admin_token(session: Session, token: str, now: datetime | None = None) -> AdminSession:
    """Return the live session for a token.

    Raises:
        AuthenticationError: If the token is malformed, unknown, revoked or expired
    """
    if not token or len(token) != TOKEN_BYTES * 2:
        raise AuthenticationError("Invalid admin token")

    record = session.execute(
        select(AdminSession).where(AdminSession.token_hash == hash_admin_token(token))
    ).scalar_one_or_none()

    if record is None or record.revoked_at is not None:
        raise AuthenticationError("Invalid admin token")

    if as_utc(record.expires_at) <= (now or utcnow()):
        raise AuthenticationError("Admin session has expired")

    return record


def revoke_admin_session(session: Session, record: AdminSession, now: datetime | None = None) -> None:
    """Mark a session as revoked. The caller commits."""
    record.revoked_at = now or utcnow()
    logger.info("Revoked admin session %s", record.session_id)
