"""Pytest configuration and fixtures for testing."""

from collections.abc import Generator
from datetime import date

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app import config
from backend.app.config import Settings


def _generate_keypair() -> tuple[str, str]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")
    return private_pem, public_pem


TEST_PRIVATE_KEY, TEST_PUBLIC_KEY = _generate_keypair()


def make_settings(**overrides) -> Settings:
    """Settings isolated from the process environment."""
    values = {
        "database_url": "sqlite://",
        "jwt_private_key_pem": TEST_PRIVATE_KEY,
        "jwt_public_key_pem": TEST_PUBLIC_KEY,
        "openai_api_key": "dummy-openai-api-key-for-tests",
        "admin_password": "admin123",
    }
    values.update(overrides)
    return Settings(**values)


# Installed before the app module is imported anywhere
config._settings = make_settings()


@pytest.fixture(autouse=True)
def test_settings() -> Generator[Settings, None, None]:
    """Fresh settings per test; tests may mutate the returned object."""
    settings = make_settings()
    config._settings = settings
    yield settings
    config._settings = make_settings()


@pytest.fixture(autouse=True)
def reset_metrics() -> Generator[None, None, None]:
    from backend.app.metrics import get_metrics

    get_metrics().reset()
    yield
    get_metrics().reset()


@pytest.fixture(scope="function")
def test_db_engine():
    """Create a test database engine with in-memory SQLite."""
    from backend.app.db.base import Base
    from backend.app.db import models  # noqa: F401

    # One shared connection so every session sees the same in-memory database
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_db_engine) -> Generator[Session, None, None]:
    """Create a test database session configured like the application's."""
    factory = sessionmaker(bind=test_db_engine, autoflush=False, expire_on_commit=False)
    session = factory()

    yield session

    session.close()


def _make_user(session: Session, email: str, **fields):
    from backend.app.db.models import User
    from backend.app.security import hash_password

    values = {
        "full_name": email.split("@")[0].title(),
        "age": 27,
        "gender": "Female",
        "interests": [],
        "travel_style": "cultural",
        "is_solo_traveler": True,
    }
    values.update(fields)
    user = User(email=email, password_hash=hash_password("password123"), **values)
    session.add(user)
    session.commit()
    return user


@pytest.fixture
def make_user(test_session: Session):
    """Factory creating committed users with password ``password123``."""

    def factory(email: str, **fields):
        return _make_user(test_session, email, **fields)

    return factory


@pytest.fixture
def test_user(make_user):
    return make_user(
        "priya@example.com",
        full_name="Priya Sharma",
        interests=["Heritage", "Photography", "Bengali Cuisine", "Art"],
    )


@pytest.fixture
def other_user(make_user):
    return make_user(
        "vikram@example.com",
        full_name="Vikram Patel",
        age=28,
        gender="Male",
        interests=["Adventure", "History", "Photography", "Food"],
        travel_style="adventurous",
    )


@pytest.fixture
def heritage_sites(test_session: Session):
    """Six heritage sites."""
    from backend.app.db.models import HeritageSite

    sites = [
        HeritageSite(
            name=f"Site {i}",
            description=f"Heritage site number {i}",
            category="Monument" if i % 2 else "Museum",
            latitude=22.5 + i / 100,
            longitude=88.3 + i / 100,
            address=f"{i} Park Street, Kolkata",
            entry_fee=50 * i,
            rating=4.0 + i / 10,
        )
        for i in range(1, 7)
    ]
    test_session.add_all(sites)
    test_session.commit()
    return sites


@pytest.fixture
def restaurants(test_session: Session):
    """Six restaurants."""
    from backend.app.db.models import Restaurant

    rows = [
        Restaurant(
            name=f"Restaurant {i}",
            description=f"Restaurant number {i}",
            cuisine_type=["Bengali"] if i % 2 else ["Continental", "Bakery"],
            latitude=22.55,
            longitude=88.36,
            address=f"{i} Free School Street, Kolkata",
            price_range="moderate",
            avg_cost_per_person=100 * i,
        )
        for i in range(1, 7)
    ]
    test_session.add_all(rows)
    test_session.commit()
    return rows


@pytest.fixture
def badges(test_session: Session):
    """One badge per requirement type, plus a second visits tier."""
    from backend.app.db.models import Badge

    rows = {
        "bhadralok": Badge(name="The Bhadralok", requirement_type="visits", requirement_value=5),
        "heritage_master": Badge(
            name="Heritage Master", requirement_type="visits", requirement_value=10
        ),
        "culinary": Badge(
            name="Culinary Explorer", requirement_type="restaurants", requirement_value=5
        ),
        "social": Badge(name="Social Butterfly", requirement_type="matches", requirement_value=3),
        "quest_master": Badge(name="Quest Master", requirement_type="quests", requirement_value=2),
    }
    test_session.add_all(rows.values())
    test_session.commit()
    return rows


@pytest.fixture
def quests(test_session: Session, heritage_sites):
    from backend.app.db.models import HeritageQuest

    rows = [
        HeritageQuest(
            name="Hidden Tomb Mystery",
            description="Find the hidden tomb",
            heritage_site_id=heritage_sites[0].site_id,
            reward_points=50,
            reward_discount=10,
            difficulty_level="medium",
            clue="Oldest marble structure near the eastern wall",
        ),
        HeritageQuest(
            name="Cathedral Bells",
            description="Attend a service",
            heritage_site_id=heritage_sites[1].site_id,
            reward_points=40,
            reward_discount=8,
            difficulty_level="easy",
            clue="Morning prayers",
        ),
    ]
    test_session.add_all(rows)
    test_session.commit()
    return rows


@pytest.fixture
def trip(test_session: Session, test_user):
    from backend.app.db.models import TripPlan

    row = TripPlan(
        user_id=test_user.user_id,
        name="Durga Puja Weekend",
        start_date=date(2026, 10, 17),
        end_date=date(2026, 10, 19),
        budget=5000,
    )
    test_session.add(row)
    test_session.commit()
    return row


@pytest.fixture
def client(test_session: Session):
    """Create a test client with database session override."""
    from fastapi.testclient import TestClient

    from backend.app.db.session import get_session
    from backend.app.main import app

    def override_get_session():
        yield test_session

    app.dependency_overrides[get_session] = override_get_session
    client = TestClient(app, raise_server_exceptions=False)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build a bearer header for a user."""
    from backend.app.security import create_access_token

    def factory(user) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.user_id)}"}

    return factory


@pytest.fixture
def admin_headers(test_session: Session) -> dict[str, str]:
    from backend.app.security import issue_admin_session

    token, _ = issue_admin_session(test_session)
    test_session.commit()
    return {"Authorization": f"Bearer {token}"}
