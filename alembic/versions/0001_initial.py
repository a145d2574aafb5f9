"""Initial schema

Revision ID: 0001_initial
Revises: None
Create Date: 2026-10-18 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'applications',
        sa.Column('id', sa.String(32), primary_key=True),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('email', sa.String(254), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('roll_no', sa.String(40), nullable=False),
        sa.Column('branch', sa.String(60)),
        sa.Column('section', sa.String(20)),
        sa.Column('year_of_study', sa.String(10)),
        sa.Column('cgpa', sa.String(10)),
        sa.Column('backlogs', sa.String(10)),
        sa.Column('join_reason', sa.Text()),
        sa.Column('about_club', sa.Text()),
        sa.Column('anything_else', sa.Text()),
        sa.Column('linkedin', sa.String(255)),
        sa.Column('resume_url', sa.String(512)),
        sa.Column('resume_summary', sa.Text()),
        sa.Column('technical_domain', sa.String(40)),
        sa.Column('non_technical_domain', sa.String(40)),
        sa.Column('status', sa.String(30), nullable=False),
        sa.Column('is_recommended', sa.Boolean(), nullable=False),
        sa.Column('suitability_technical', sa.String(10), nullable=False),
        sa.Column('suitability_non_technical', sa.String(10), nullable=False),
        sa.Column('rating_communication', sa.Float(), nullable=False),
        sa.Column('rating_technical', sa.Float(), nullable=False),
        sa.Column('rating_problem_solving', sa.Float(), nullable=False),
        sa.Column('rating_team_fit', sa.Float(), nullable=False),
        sa.Column('rating_overall', sa.Float(), nullable=False),
        sa.Column('remarks', sa.Text()),
        sa.Column('reviewed_by', sa.String(80)),
        sa.Column('submitted_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        *_timestamps(),
    )
    for col in ('email', 'roll_no', 'year_of_study', 'technical_domain', 'status', 'rating_overall', 'submitted_at'):
        op.create_index(f'ix_applications_{col}', 'applications', [col])

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(80), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('domain', sa.String(40)),
        *_timestamps(),
    )

    op.create_table(
        'settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('key', sa.String(128), nullable=False, unique=True),
        sa.Column('value', sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('message', sa.String(500), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'outbox_messages',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('kind', sa.String(50), nullable=False),
        sa.Column('application_id', sa.String(32), sa.ForeignKey('applications.id')),
        sa.Column('sent_to', sa.String(255), nullable=False),
        sa.Column('subject', sa.String(255)),
        sa.Column('body', sa.Text()),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False),
        sa.Column('last_error', sa.Text()),
        sa.Column('provider_message_id', sa.String(255)),
        sa.Column('sent_at', sa.DateTime()),
        *_timestamps(),
    )
    op.create_index('ix_outbox_messages_application_id', 'outbox_messages', ['application_id'])
    op.create_index('ix_outbox_messages_status', 'outbox_messages', ['status'])

    op.create_table(
        'team_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'team_members',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('email', sa.String(254), nullable=False),
        sa.Column('role', sa.String(120), nullable=False),
        sa.Column('image', sa.String(512)),
        sa.Column('linkedin', sa.String(255)),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('team_categories.id')),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('onboarding_token', sa.String(64)),
        sa.Column('onboarding_token_expires_at', sa.DateTime()),
        sa.Column('edit_token', sa.String(64)),
        *_timestamps(),
    )
    op.create_index('ix_team_members_email', 'team_members', ['email'])
    op.create_index('ix_team_members_onboarding_token', 'team_members', ['onboarding_token'], unique=True)
    op.create_index('ix_team_members_edit_token', 'team_members', ['edit_token'], unique=True)

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('image', sa.String(512)),
        sa.Column('registration_open', sa.Boolean(), nullable=False),
        sa.Column('speakers', sa.Text()),
        sa.Column('timeline', sa.Text()),
        *_timestamps(),
    )
    op.create_index('ix_events_date', 'events', ['date'])

    op.create_table(
        'event_registrations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id'), nullable=False),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('email', sa.String(254), nullable=False),
        sa.Column('registered_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('event_id', 'email', name='uq_event_registration_email'),
    )
    op.create_index('ix_event_registrations_event_id', 'event_registrations', ['event_id'])

    op.create_table(
        'visitors',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ip', sa.String(64)),
        sa.Column('user_agent', sa.String(512)),
        sa.Column('path', sa.String(512)),
        sa.Column('timestamp', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_visitors_timestamp', 'visitors', ['timestamp'])


def downgrade() -> None:
    for table in ('visitors', 'event_registrations', 'events', 'team_members', 'team_categories',
                  'outbox_messages', 'notifications', 'settings', 'users', 'applications'):
        op.drop_table(table)
