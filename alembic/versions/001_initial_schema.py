"""Initial schema: users, heritage sites, restaurants, badges, quests, matches, trips, culture submissions, admin sessions

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables with indexes and constraints."""

    # PostgreSQL gets native UUID and JSONB; SQLite gets CHAR(32) UUIDs and JSON text
    bind = op.get_bind()
    is_postgresql = bind.dialect.name == 'postgresql'

    if is_postgresql:
        uuid_type = postgresql.UUID(as_uuid=True)
        json_type = postgresql.JSONB()
    else:
        uuid_type = sa.Uuid()
        json_type = sa.JSON()

    op.create_table(
        'user',
        sa.Column('user_id', uuid_type, primary_key=True),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('full_name', sa.Text(), nullable=False),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('gender', sa.Text(), nullable=True),
        sa.Column('interests', json_type, nullable=False),
        sa.Column('travel_style', sa.Text(), nullable=True),
        sa.Column('is_solo_traveler', sa.Boolean(), nullable=False),
        sa.Column('total_points', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'heritage_site',
        sa.Column('site_id', uuid_type, primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('short_description', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.Text(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('entry_fee', sa.Integer(), nullable=True),
        sa.Column('opening_hours', sa.Text(), nullable=True),
        sa.Column('best_time_to_visit', sa.Text(), nullable=True),
        sa.Column('historical_significance', sa.Text(), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('rating', sa.Float(), nullable=False),
        sa.Column('visit_count', sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_heritage_site_category', 'heritage_site', ['category'])

    op.create_table(
        'site_visit',
        sa.Column('visit_id', uuid_type, primary_key=True),
        sa.Column('user_id', uuid_type, nullable=False),
        sa.Column('site_id', uuid_type, nullable=False),
        sa.Column('visited_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.user_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['site_id'], ['heritage_site.site_id'], ondelete='CASCADE'),
    )
    op.create_index('idx_site_visit_user', 'site_visit', ['user_id'])

    op.create_table(
        'restaurant',
        sa.Column('restaurant_id', uuid_type, primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('cuisine_type', json_type, nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('price_range', sa.Text(), nullable=False),
        sa.Column('rating', sa.Float(), nullable=False),
        sa.Column('review_count', sa.Integer(), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('avg_cost_per_person', sa.Integer(), nullable=True),
        sa.Column('specialties', json_type, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'restaurant_review',
        sa.Column('review_id', uuid_type, primary_key=True),
        sa.Column('restaurant_id', uuid_type, nullable=False),
        sa.Column('user_id', uuid_type, nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('dishes_tried', json_type, nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurant.restaurant_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['user.user_id'], ondelete='CASCADE'),
    )
    op.create_index('idx_review_restaurant', 'restaurant_review', ['restaurant_id', 'created_at'])
    op.create_index('idx_review_user', 'restaurant_review', ['user_id'])

    op.create_table(
        'badge',
        sa.Column('badge_id', uuid_type, primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('icon_url', sa.Text(), nullable=True),
        sa.Column('requirement_type', sa.Text(), nullable=False),
        sa.Column('requirement_value', sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_badge_requirement_type', 'badge', ['requirement_type'])

    op.create_table(
        'user_badge',
        sa.Column('user_badge_id', uuid_type, primary_key=True),
        sa.Column('user_id', uuid_type, nullable=False),
        sa.Column('badge_id', uuid_type, nullable=False),
        sa.Column('progress', sa.Integer(), nullable=False),
        sa.Column('unlocked_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['user.user_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['badge_id'], ['badge.badge_id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'badge_id', name='uq_user_badge_user_badge'),
    )

    op.create_table(
        'heritage_quest',
        sa.Column('quest_id', uuid_type, primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('heritage_site_id', uuid_type, nullable=False),
        sa.Column('reward_points', sa.Integer(), nullable=False),
        sa.Column('reward_discount', sa.Integer(), nullable=False),
        sa.Column('difficulty_level', sa.Text(), nullable=False),
        sa.Column('clue', sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['heritage_site_id'], ['heritage_site.site_id'], ondelete='CASCADE'),
    )

    op.create_table(
        'user_quest',
        sa.Column('user_quest_id', uuid_type, primary_key=True),
        sa.Column('user_id', uuid_type, nullable=False),
        sa.Column('quest_id', uuid_type, nullable=False),
        sa.Column('is_completed', sa.Boolean(), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['user.user_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['quest_id'], ['heritage_quest.quest_id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'quest_id', name='uq_user_quest_user_quest'),
    )

    op.create_table(
        'travel_match',
        sa.Column('match_id', uuid_type, primary_key=True),
        sa.Column('user_id1', uuid_type, nullable=False),
        sa.Column('user_id2', uuid_type, nullable=False),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('compatibility_score', sa.Integer(), nullable=False),
        sa.Column('common_interests', json_type, nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id1'], ['user.user_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id2'], ['user.user_id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id1', 'user_id2', name='uq_travel_match_pair'),
    )
    op.create_index('idx_travel_match_target', 'travel_match', ['user_id2', 'status'])

    op.create_table(
        'trip_plan',
        sa.Column('trip_id', uuid_type, primary_key=True),
        sa.Column('user_id', uuid_type, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('budget', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['user.user_id'], ondelete='CASCADE'),
    )
    op.create_index('idx_trip_plan_user', 'trip_plan', ['user_id', 'start_date'])

    op.create_table(
        'trip_activity',
        sa.Column('activity_id', uuid_type, primary_key=True),
        sa.Column('trip_id', uuid_type, nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('site_id', uuid_type, nullable=True),
        sa.Column('restaurant_id', uuid_type, nullable=True),
        sa.Column('estimated_cost', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['trip_id'], ['trip_plan.trip_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['site_id'], ['heritage_site.site_id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurant.restaurant_id'], ondelete='SET NULL'),
    )

    op.create_table(
        'culture_submission',
        sa.Column('submission_id', uuid_type, primary_key=True),
        sa.Column('user_id', uuid_type, nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=False),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('reward_points', sa.Integer(), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('admin_note', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['user.user_id'], ondelete='CASCADE'),
    )
    op.create_index('idx_culture_submission_status', 'culture_submission', ['status', 'created_at'])

    op.create_table(
        'admin_session',
        sa.Column('session_id', uuid_type, primary_key=True),
        sa.Column('token_hash', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('token_hash'),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table('admin_session')
    op.drop_index('idx_culture_submission_status', table_name='culture_submission')
    op.drop_table('culture_submission')
    op.drop_table('trip_activity')
    op.drop_index('idx_trip_plan_user', table_name='trip_plan')
    op.drop_table('trip_plan')
    op.drop_index('idx_travel_match_target', table_name='travel_match')
    op.drop_table('travel_match')
    op.drop_table('user_quest')
    op.drop_table('heritage_quest')
    op.drop_table('user_badge')
    op.drop_index('idx_badge_requirement_type', table_name='badge')
    op.drop_table('badge')
    op.drop_index('idx_review_user', table_name='restaurant_review')
    op.drop_index('idx_review_restaurant', table_name='restaurant_review')
    op.drop_table('restaurant_review')
    op.drop_table('restaurant')
    op.drop_index('idx_site_visit_user', table_name='site_visit')
    op.drop_table('site_visit')
    op.drop_index('idx_heritage_site_category', table_name='heritage_site')
    op.drop_table('heritage_site')
    op.drop_table('user')
