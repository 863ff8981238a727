"""Unit tests for health check."""

from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from backend.app.api.health import get_health


def test_health_ok(test_session) -> None:
    result = get_health(test_session)

    assert result.status == "ok"
    assert result.checks == {"db": "ok"}


def test_health_down_when_db_fails() -> None:
    session = MagicMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("gone"))

    result = get_health(session)

    assert result.status == "down"
    assert result.checks["db"] == "down"
