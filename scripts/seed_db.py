"""Seed the database with the Kolkata demo dataset.

Creates tables if needed, then loads heritage sites, restaurants, badges,
quests, demo travellers and reviews. Safe to run repeatedly; pass --reset to
wipe existing rows first.

Usage:
    python scripts/seed_db.py [--reset]
"""

import argparse

from backend.app.db.base import Base, session_scope
from backend.app.db.seed import DEMO_PASSWORD, USERS, seed_database
from backend.app.db.session import get_engine, get_session_factory


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--reset", action="store_true", help="Delete existing rows before seeding"
    )
    args = parser.parse_args()

    Base.metadata.create_all(get_engine())

    with session_scope(get_session_factory()) as session:
        counts = seed_database(session, reset=args.reset)

    if not counts:
        print("✓ Database already seeded (use --reset to reload)")
        return

    for entity, count in counts.items():
        print(f"✓ Created {count} {entity.replace('_', ' ')}")
    print()
    print("Demo accounts (password: %s):" % DEMO_PASSWORD)
    for user in USERS:
        print(f"  - {user['email']}")


if __name__ == "__main__":
    main()
