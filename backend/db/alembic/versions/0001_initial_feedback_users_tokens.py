from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_feedback_users_tokens'
down_revision = None
branch_labels = None
depends_on = None


def _rating(name: str) -> sa.Column:
    return sa.Column(name, sa.Integer(), nullable=True)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(length=150), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='staff'),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('password_algo', sa.String(length=20), nullable=False, server_default='bcrypt'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('username', name='uq_users_username'),
    )

    op.create_table(
        'refresh_tokens',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('token', sa.String(length=1024), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('expires', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_refresh_tokens_token', 'refresh_tokens', ['token'])

    op.create_table(
        'feedback_tokens',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('token', sa.String(length=128), nullable=False),
        sa.Column('context_loc', sa.String(length=50), nullable=False),
        sa.Column('context_id', sa.String(length=100), nullable=True),
        sa.Column('guest_name', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('used_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('token', name='uq_feedback_tokens_token'),
    )

    op.create_table(
        'feedback',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('source', sa.String(length=10), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('sentiment', sa.String(length=10), nullable=False, server_default='Neutral'),
        sa.Column('is_negative', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('COMMENT_TEXT', sa.Text(), nullable=True),
        sa.Column('feedback_area', sa.String(length=50), nullable=True),
        _rating('rating'),
        sa.Column('room_number', sa.String(length=50), nullable=True),
        sa.Column('language', sa.String(length=20), nullable=True),
        sa.Column('context_loc', sa.String(length=50), nullable=True),
        sa.Column('context_id', sa.String(length=100), nullable=True),
        sa.Column('context_token', sa.String(length=255), nullable=True),
        sa.Column('context_guest_name', sa.String(length=255), nullable=True),
        _rating('overall_rating'),
        sa.Column('feedback_type', sa.String(length=20), nullable=True),
        sa.Column('booking_reference', sa.String(length=100), nullable=True),
        sa.Column('contact_consent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('other_comments', sa.Text(), nullable=True),
        _rating('room_cleanliness'),
        _rating('room_comfort'),
        _rating('room_noise'),
        _rating('bathroom_cleanliness'),
        _rating('room_amenities'),
        sa.Column('room_comments', sa.Text(), nullable=True),
        _rating('food_quality'),
        _rating('food_variety'),
        _rating('dining_service'),
        _rating('service_speed'),
        _rating('staff_attentiveness'),
        _rating('ambiance_rating'),
        sa.Column('dining_comments', sa.Text(), nullable=True),
        _rating('pool_cleanliness'),
        _rating('seating_availability'),
        _rating('towel_availability'),
        _rating('pool_ambiance'),
        _rating('wifi_rating'),
        _rating('restroom_rating'),
        sa.Column('amenities_comments', sa.Text(), nullable=True),
        _rating('staff_helpfulness'),
        _rating('staff_friendliness'),
        _rating('reception_rating'),
        _rating('checkout_speed'),
        _rating('checkout_staff_friendliness'),
        _rating('billing_accuracy'),
        sa.Column('staff_mention', sa.String(length=255), nullable=True),
        sa.Column('staff_comments', sa.Text(), nullable=True),
        sa.Column('checkout_comments', sa.Text(), nullable=True),
        _rating('value_rating'),
        sa.Column('SIMULATED_FILE_NAMES', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=20), nullable=True),
        sa.Column('severity', sa.String(length=10), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('details', sa.Text(), nullable=True),
    )
    op.create_index('ix_feedback_timestamp', 'feedback', ['timestamp'])
    op.create_index('ix_feedback_context', 'feedback', ['context_loc', 'context_id'])


def downgrade() -> None:
    op.drop_index('ix_feedback_context', table_name='feedback')
    op.drop_index('ix_feedback_timestamp', table_name='feedback')
    op.drop_table('feedback')
    op.drop_table('feedback_tokens')
    op.drop_index('ix_refresh_tokens_token', table_name='refresh_tokens')
    op.drop_table('refresh_tokens')
    op.drop_table('users')
