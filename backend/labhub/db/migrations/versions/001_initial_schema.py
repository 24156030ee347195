"""Initial schema: users, profiles, submissions, email queue, activity logs

Revision ID: 001
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        'profiles',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, index=True),
        sa.Column('full_name', sa.String(200), nullable=True),
        sa.Column('role', sa.Enum('super_admin', 'admin', 'faculty', 'view_only', name='profilerole'), nullable=False, server_default='view_only', index=True),
        sa.Column('notification_preferences', sa.JSON(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'submissions',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('student_name', sa.String(200), nullable=False),
        sa.Column('student_email', sa.String(255), nullable=False, index=True),
        sa.Column('roll_number', sa.String(50), nullable=False, index=True),
        sa.Column('branch', sa.Enum('CSE', 'ECE', 'Mechanical', 'IT', 'Other', name='branch'), nullable=False),
        sa.Column('year', sa.Enum('1st', '2nd', '3rd', '4th', name='studyyear'), nullable=False),
        sa.Column('contact_number', sa.String(30), nullable=True),
        sa.Column('is_team_project', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('team_size', sa.Integer(), nullable=True),
        sa.Column('team_members', sa.Text(), nullable=True),
        sa.Column('category', sa.Enum(
            'Autonomous Robots', 'Robotic Manipulation', 'Human-Robot Interaction',
            'Industrial Automation', 'Bio-Inspired Robotics', 'Aerial Robotics',
            'Computer Vision & AI', 'Other',
            name='projectcategory'), nullable=False),
        sa.Column('project_title', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('expected_outcomes', sa.Text(), nullable=True),
        sa.Column('duration', sa.Enum('1-3 months', '3-6 months', '6-12 months', '12+ months', name='projectduration'), nullable=False),
        sa.Column('required_resources', sa.JSON(), nullable=False),
        sa.Column('other_resources', sa.String(300), nullable=True),
        sa.Column('status', sa.Enum('pending', 'under_review', 'approved', 'rejected', 'completed', name='submissionstatus'), nullable=False, server_default='pending', index=True),
        sa.Column('faculty_comments', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.String(15), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),
    )

    op.create_table(
        'email_queue',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('to_email', sa.String(255), nullable=False, index=True),
        sa.Column('to_name', sa.String(200), nullable=True),
        sa.Column('subject', sa.String(300), nullable=False),
        sa.Column('body_html', sa.Text(), nullable=False),
        sa.Column('body_text', sa.Text(), nullable=True),
        sa.Column('template_name', sa.String(100), nullable=True),
        sa.Column('template_data', sa.JSON(), nullable=True),
        sa.Column('status', sa.Enum('pending', 'sending', 'sent', 'failed', name='emailstatus'), nullable=False, server_default='pending', index=True),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_attempts', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('error_message', sa.String(500), nullable=True),
        sa.Column('scheduled_for', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), index=True),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'activity_logs',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('admin_id', sa.String(15), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('action', sa.String(300), nullable=False),
        sa.Column('entity_type', sa.String(50), nullable=False, index=True),
        sa.Column('entity_id', sa.String(15), nullable=True, index=True),
        sa.Column('details', sa.JSON(), nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table('activity_logs')
    op.drop_table('email_queue')
    op.drop_table('submissions')
    op.drop_table('profiles')
    op.drop_table('users')
    # Drop enum types
    for enum_name in ('emailstatus', 'submissionstatus', 'projectduration', 'projectcategory', 'studyyear', 'branch', 'profilerole'):
        op.execute(f'DROP TYPE IF EXISTS {enum_name}')
