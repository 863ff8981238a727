"""Unit tests for passwords, JWTs and admin sessions."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import jwt as pyjwt
import pytest

from backend.app.config import get_settings
from backend.app.security import (
    AuthenticationError,
    check_admin_password,
    create_access_token,
    create_refresh_token,
    hash_admin_token,
    hash_password,
    issue_admin_session,
    needs_rehash,
    revoke_admin_session,
    verify_access_token,
    verify_admin_token,
    verify_password,
    verify_refresh_token,
)


class TestPasswords:
    def test_hash_and_verify(self) -> None:
        password_hash = hash_password("password123")

        assert password_hash.startswith("$argon2id$")
        assert verify_password("password123", password_hash)
        assert not verify_password("password124", password_hash)
        assert not needs_rehash(password_hash)

    def test_short_password_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least 8"):
            hash_password("short")

    def test_garbage_hash_does_not_verify(self) -> None:
        assert not verify_password("password123", "not-a-hash")


class TestTokens:
    def test_access_token_round_trip(self) -> None:
        user_id = uuid4()

        payload = verify_access_token(create_access_token(user_id))

        assert payload.user_id == user_id
        assert payload.token_type == "access"
        assert payload.expires_at - payload.issued_at == timedelta(minutes=15)

    def test_refresh_token_is_not_an_access_token(self) -> None:
        token = create_refresh_token(uuid4())

        assert verify_refresh_token(token).token_type == "refresh"
        with pytest.raises(AuthenticationError, match="Invalid token type"):
            verify_access_token(token)

    def test_expired_token(self) -> None:
        now = datetime.now(UTC)
        token = pyjwt.encode(
            {
                "sub": str(uuid4()),
                "type": "access",
                "iat": int((now - timedelta(hours=2)).timestamp()),
                "exp": int((now - timedelta(hours=1)).timestamp()),
            },
            get_settings().jwt_private_key_pem,
            algorithm="RS256",
        )

        with pytest.raises(AuthenticationError, match="expired"):
            verify_access_token(token)

    def test_tampered_token(self) -> None:
        token = create_access_token(uuid4())

        with pytest.raises(AuthenticationError):
            verify_access_token(token[:-4] + "AAAA")

    def test_unconfigured_keys(self, test_settings) -> None:
        test_settings.jwt_private_key_pem = "dummy-private-key-for-tests"

        with pytest.raises(AuthenticationError):
            create_access_token(uuid4())


class TestAdminSessions:
    def test_password_check(self) -> None:
        assert check_admin_password("admin123")
        assert not check_admin_password("admin1234")

    def test_issue_and_verify(self, test_session) -> None:
        token, record = issue_admin_session(test_session)

        assert len(token) == 64
        assert record.token_hash == hash_admin_token(token)
        assert record.token_hash != token
        assert verify_admin_token(test_session, token).session_id == record.session_id

    def test_expired_session(self, test_session) -> None:
        issued = datetime(2026, 1, 1, tzinfo=UTC)
        token, _ = issue_admin_session(test_session, now=issued)

        with pytest.raises(AuthenticationError, match="expired"):
            verify_admin_token(test_session, token, now=issued + timedelta(hours=13))

        assert verify_admin_token(test_session, token, now=issued + timedelta(hours=11))

    def test_revoked_session(self, test_session) -> None:
        token, record = issue_admin_session(test_session)
        revoke_admin_session(test_session, record)
        test_session.flush()

        with pytest.raises(AuthenticationError, match="Invalid admin token"):
            verify_admin_token(test_session, token)

    @pytest.mark.parametrize("token", ["", "abc", "f" * 64])
    def test_unknown_tokens(self, test_session, token) -> None:
        with pytest.raises(AuthenticationError):
            verify_admin_token(test_session, token)
