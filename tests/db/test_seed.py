"""Tests for the demo dataset loader."""

from sqlalchemy import func, select

from backend.app.db.models import (
    Badge,
    HeritageQuest,
    HeritageSite,
    Restaurant,
    RestaurantReview,
    User,
    UserBadge,
)
from backend.app.db.seed import seed_database
from backend.app.security import verify_password


def _count(session, model) -> int:
    return session.execute(select(func.count()).select_from(model)).scalar_one()


def test_seed_creates_dataset(test_session) -> None:
    counts = seed_database(test_session)
    test_session.commit()

    assert counts == {
        "heritage_sites": 6,
        "restaurants": 5,
        "badges": 5,
        "quests": 3,
        "users": 4,
        "reviews": 3,
    }
    assert _count(test_session, HeritageSite) == 6
    assert _count(test_session, RestaurantReview) == 3

    quest = test_session.execute(
        select(HeritageQuest).where(HeritageQuest.name == "Hidden Tomb Mystery")
    ).scalar_one()
    assert quest.heritage_site.name == "South Park Street Cemetery"

    priya = test_session.execute(
        select(User).where(User.email == "priya@kolkata.com")
    ).scalar_one()
    assert verify_password("password123", priya.password_hash)
    assert priya.total_points == 125


def test_seeded_badge_progress_matches_facts(test_session) -> None:
    seed_database(test_session)
    test_session.commit()

    culinary = test_session.execute(
        select(Badge).where(Badge.name == "Culinary Explorer")
    ).scalar_one()
    rows = test_session.execute(
        select(UserBadge).where(UserBadge.badge_id == culinary.badge_id)
    ).scalars().all()

    assert len(rows) == 4
    assert {row.progress for row in rows} == {0, 1}
    assert all(row.unlocked_at is None for row in rows)


def test_seed_is_idempotent(test_session) -> None:
    seed_database(test_session)
    test_session.commit()

    assert seed_database(test_session) == {}
    assert _count(test_session, Restaurant) == 5


def test_reset_reloads(test_session) -> None:
    seed_database(test_session)
    test_session.commit()

    counts = seed_database(test_session, reset=True)
    test_session.commit()

    assert counts["users"] == 4
    assert _count(test_session, User) == 4
    assert _count(test_session, HeritageSite) == 6
