"""Initial schema: users, emails, trips, potential_trips, bookings, user_profiles

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the trip planning tables."""

    now = sa.text('CURRENT_TIMESTAMP')

    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=False), nullable=False, server_default=now),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )

    # Create emails table
    op.create_table(
        'emails',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('subject', sa.Text(), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('sender_email', sa.Text(), nullable=False),
        sa.Column('recipient_email', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('folder', sa.Text(), nullable=False, server_default='inbox'),
        sa.Column('sent_at', sa.DateTime(timezone=False), nullable=False, server_default=now),
    )

    # Create trips table
    op.create_table(
        'trips',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('destination', sa.Text(), nullable=False),
        sa.Column('origin', sa.Text(), nullable=True),
        sa.Column('budget', sa.Integer(), nullable=True),
        sa.Column('source', sa.Text(), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=False), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=False), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=False), nullable=False, server_default=now),
    )

    # Create potential_trips table
    op.create_table(
        'potential_trips',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('destination', sa.Text(), nullable=False),
        sa.Column('origin', sa.Text(), nullable=True),
        sa.Column('budget', sa.Integer(), nullable=True),
        sa.Column('source', sa.Text(), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=False), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=False), nullable=True),
        sa.Column('is_booked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=False), nullable=False, server_default=now),
    )
    op.create_index(
        'idx_potential_trips_booked_created', 'potential_trips', ['is_booked', 'created_at']
    )

    # Create bookings table
    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('trip_id', sa.Integer(), nullable=False),
        sa.Column('carrier', sa.Text(), nullable=False),
        sa.Column('flight_number', sa.Text(), nullable=False),
        sa.Column('origin_city', sa.Text(), nullable=False),
        sa.Column('origin_code', sa.Text(), nullable=False),
        sa.Column('origin_airport_name', sa.Text(), nullable=False),
        sa.Column('destination_city', sa.Text(), nullable=False),
        sa.Column('destination_code', sa.Text(), nullable=False),
        sa.Column('destination_airport_name', sa.Text(), nullable=False),
        sa.Column('depart_at', sa.DateTime(timezone=False), nullable=False),
        sa.Column('arrive_at', sa.DateTime(timezone=False), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('currency', sa.Text(), nullable=False, server_default='USD'),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=False), nullable=False, server_default=now),
    )

    # Create user_profiles table
    op.create_table(
        'user_profiles',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('location', sa.Text(), nullable=True),
        sa.Column('adult_companions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('kids_companion_ages', sa.JSON(), nullable=True),
        sa.Column('budget_per_person', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=False), nullable=False, server_default=now),
    )


def downgrade() -> None:
    """Drop all tables in reverse order."""
    op.drop_table('user_profiles')
    op.drop_table('bookings')
    op.drop_index('idx_potential_trips_booked_created', table_name='potential_trips')
    op.drop_table('potential_trips')
    op.drop_table('trips')
    op.drop_table('emails')
    op.drop_table('users')
