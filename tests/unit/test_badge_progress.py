"""Unit tests for badge progress evaluation."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import select

from backend.app.db.mixins import as_utc
from backend.app.db.models import Badge, UserBadge
from backend.app.gamification import (
    count_progress,
    evaluate_badges,
    record_visit,
    refresh_badges,
)
from backend.app.metrics import MetricsClient

T0 = datetime(2026, 1, 10, 9, 0, tzinfo=UTC)


def _user_badge(session, user, badge) -> UserBadge | None:
    return session.execute(
        select(UserBadge).where(
            UserBadge.user_id == user.user_id, UserBadge.badge_id == badge.badge_id
        )
    ).scalar_one_or_none()


def _visit(session, user, sites, n, start=T0):
    for i in range(n):
        record_visit(session, user, sites[i % len(sites)].site_id, now=start + timedelta(hours=i))


def test_fourth_visit_leaves_badge_locked(test_session, test_user, heritage_sites, badges) -> None:
    _visit(test_session, test_user, heritage_sites, 4)

    user_badge = _user_badge(test_session, test_user, badges["bhadralok"])
    assert user_badge.progress == 4
    assert user_badge.unlocked_at is None


def test_fifth_visit_unlocks_badge(test_session, test_user, heritage_sites, badges) -> None:
    _visit(test_session, test_user, heritage_sites, 4)
    fifth = T0 + timedelta(days=1)

    outcome = record_visit(test_session, test_user, heritage_sites[4].site_id, now=fifth)

    user_badge = _user_badge(test_session, test_user, badges["bhadralok"])
    assert user_badge.progress == 5
    assert as_utc(user_badge.unlocked_at) == fifth
    assert outcome.total_visits == 5

    by_name = {e.name: e for e in outcome.badges}
    assert by_name["The Bhadralok"].newly_unlocked is True
    assert by_name["Heritage Master"].unlocked is False
    assert by_name["Heritage Master"].progress == 5


def test_unlock_time_survives_later_evaluations(
    test_session, test_user, heritage_sites, badges
) -> None:
    _visit(test_session, test_user, heritage_sites, 5)
    first_unlock = as_utc(_user_badge(test_session, test_user, badges["bhadralok"]).unlocked_at)

    outcome = record_visit(
        test_session, test_user, heritage_sites[0].site_id, now=T0 + timedelta(days=30)
    )

    user_badge = _user_badge(test_session, test_user, badges["bhadralok"])
    assert user_badge.progress == 6
    assert as_utc(user_badge.unlocked_at) == first_unlock
    assert not any(e.newly_unlocked for e in outcome.badges)


def test_progress_written_to_every_badge_of_type(
    test_session, test_user, heritage_sites, badges
) -> None:
    _visit(test_session, test_user, heritage_sites, 3)

    assert _user_badge(test_session, test_user, badges["bhadralok"]).progress == 3
    assert _user_badge(test_session, test_user, badges["heritage_master"]).progress == 3
    assert _user_badge(test_session, test_user, badges["culinary"]) is None


def test_unlock_cleared_when_count_drops(test_session, test_user, badges) -> None:
    evaluate_badges(test_session, test_user.user_id, "visits", 5, now=T0)
    evaluate_badges(test_session, test_user.user_id, "visits", 3, now=T0)

    user_badge = _user_badge(test_session, test_user, badges["bhadralok"])
    assert user_badge.progress == 3
    assert user_badge.unlocked_at is None


def test_non_positive_threshold_is_ignored(test_session, test_user) -> None:
    badge = Badge(name="Broken", requirement_type="visits", requirement_value=0)
    test_session.add(badge)
    test_session.commit()

    evaluations = evaluate_badges(test_session, test_user.user_id, "visits", 7)

    assert evaluations == []
    assert _user_badge(test_session, test_user, badge) is None


def test_evaluation_is_idempotent(test_session, test_user, badges) -> None:
    metrics = MetricsClient()

    evaluate_badges(test_session, test_user.user_id, "matches", 3, now=T0, metrics=metrics)
    evaluate_badges(test_session, test_user.user_id, "matches", 3, now=T0, metrics=metrics)

    rows = test_session.execute(
        select(UserBadge).where(UserBadge.user_id == test_user.user_id)
    ).scalars().all()
    assert len(rows) == 1
    assert metrics.badge_unlocks["matches"] == 1
    assert metrics.badge_evaluations["matches"] == 2


def test_count_progress_counts_pending_facts(test_session, test_user, heritage_sites) -> None:
    from backend.app.db.models import SiteVisit

    test_session.add(SiteVisit(user_id=test_user.user_id, site_id=heritage_sites[0].site_id))

    assert count_progress(test_session, test_user.user_id, "visits") == 1


def test_unknown_requirement_type(test_session, test_user) -> None:
    with pytest.raises(ValueError, match="Unknown requirement type"):
        count_progress(test_session, test_user.user_id, "likes")


def test_refresh_without_badges_returns_count(test_session, test_user, heritage_sites) -> None:
    _visit(test_session, test_user, heritage_sites, 2)

    count, evaluations = refresh_badges(test_session, test_user.user_id, "visits")

    assert count == 2
    assert evaluations == []


def test_visit_increments_site_counter(test_session, test_user, heritage_sites) -> None:
    site = heritage_sites[0]
    before = site.visit_count

    record_visit(test_session, test_user, site.site_id)
    record_visit(test_session, test_user, site.site_id)

    assert site.visit_count == before + 2
