"""Initial ScriptFlow schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create content, identity and billing tables."""

    op.create_table(
        'ideas',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text),
        sa.Column('topic', sa.String(50)),
        sa.Column('format', sa.String(50)),
        sa.Column('hook_type', sa.String(50)),
        sa.Column('priority', sa.String(20), server_default='medium', nullable=False),
        sa.Column('status', sa.String(20), server_default='captured', nullable=False),
        sa.Column('promoted_to_script_id', sa.Integer),
        *_timestamps(),
    )
    op.create_index('ix_ideas_user_id', 'ideas', ['user_id'])
    op.create_index('ix_ideas_status', 'ideas', ['status'])

    op.create_table(
        'scripts',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('idea_id', sa.Integer),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('stage', sa.String(20), server_default='idea', nullable=False),

        # Classification
        sa.Column('topic', sa.String(50)),
        sa.Column('format', sa.String(50)),
        sa.Column('hook_type', sa.String(50)),

        # Length targets
        sa.Column('target_length_minutes', sa.Integer, server_default='10'),
        sa.Column('words_per_minute', sa.Integer, server_default='150'),

        # Content
        sa.Column('hook_content', sa.Text, server_default=''),
        sa.Column('outline_content', sa.Text, server_default=''),
        sa.Column('script_content', sa.Text, server_default=''),
        sa.Column('notes_content', sa.Text, server_default=''),

        sa.Column('checklist_intro', sa.Boolean, server_default='false', nullable=False),
        sa.Column('checklist_body', sa.Boolean, server_default='false', nullable=False),
        sa.Column('checklist_cta', sa.Boolean, server_default='false', nullable=False),

        sa.Column('attachments', sa.JSON, nullable=False, server_default='[]'),
        sa.Column('versions', sa.JSON, nullable=False, server_default='[]'),

        sa.Column('scheduled_date', sa.DateTime(timezone=True)),
        sa.Column('published_date', sa.DateTime(timezone=True)),
        sa.Column('last_edited', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_scripts_user_id', 'scripts', ['user_id'])
    op.create_index('ix_scripts_stage', 'scripts', ['stage'])

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('script_id', sa.Integer, nullable=False),
        sa.Column('views', sa.Float, server_default='0', nullable=False),
        sa.Column('retention_percentage', sa.Float, server_default='0', nullable=False),
        sa.Column('revenue', sa.Float, server_default='0', nullable=False),
        sa.Column('what_worked', sa.Text, server_default='', nullable=False),
        sa.Column('what_didnt_work', sa.Text, server_default='', nullable=False),
        sa.Column('changes_for_next_time', sa.Text, server_default='', nullable=False),
        sa.Column('is_above_average', sa.Boolean, server_default='false', nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_reviews_user_id', 'reviews', ['user_id'])
    op.create_index('ix_reviews_script_id', 'reviews', ['script_id'])

    op.create_table(
        'user_settings',
        sa.Column('user_id', sa.String(255), primary_key=True),
        sa.Column('default_words_per_minute', sa.Integer, server_default='150', nullable=False),
        sa.Column('max_concurrent_drafts', sa.Integer, server_default='5', nullable=False),
        sa.Column('require_schedule_before_draft', sa.Boolean, server_default='false', nullable=False),
        sa.Column('channel_baseline_views', sa.Float),
        sa.Column('channel_baseline_retention', sa.Float),
        sa.Column('has_pending_review', sa.Boolean, server_default='false', nullable=False),
        sa.Column('pending_review_script_id', sa.Integer),
        *_timestamps(),
    )

    op.create_table(
        'user_profiles',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100)),
        sa.Column('last_name', sa.String(100)),
        sa.Column('email', sa.String(255)),
        sa.Column('stripe_customer_id', sa.String(255)),
        *_timestamps(),
    )
    op.create_index('ix_user_profiles_user_id', 'user_profiles', ['user_id'], unique=True)
    op.create_index(
        'ix_user_profiles_stripe_customer_id',
        'user_profiles',
        ['stripe_customer_id'],
        unique=True,
    )

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('plan_name', sa.String(50), nullable=False),
        sa.Column('status', sa.String(30), nullable=False),
        sa.Column('stripe_subscription_id', sa.String(255), nullable=False),
        sa.Column('stripe_price_id', sa.String(255), nullable=False),
        sa.Column('current_period_end', sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index('ix_subscriptions_user_id', 'subscriptions', ['user_id'], unique=True)
    op.create_index(
        'ix_subscriptions_stripe_subscription_id',
        'subscriptions',
        ['stripe_subscription_id'],
        unique=True,
    )


def downgrade() -> None:
    op.drop_table('subscriptions')
    op.drop_table('user_profiles')
    op.drop_table('user_settings')
    op.drop_table('reviews')
    op.drop_table('scripts')
    op.drop_table('ideas')
