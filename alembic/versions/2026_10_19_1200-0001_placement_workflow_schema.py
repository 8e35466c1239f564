"""Placement workflow schema

Revision ID: 0001_placement_workflow
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '0001_placement_workflow'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns():
    return [
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'colleges',
        *_base_columns(),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_colleges_id'), 'colleges', ['id'])
    op.create_index(op.f('ix_colleges_name'), 'colleges', ['name'], unique=True)

    op.create_table(
        'users',
        *_base_columns(),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('mobile_number', sa.String(length=20), nullable=True),
        sa.Column('role', sa.String(length=9), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('profile_avatar', sa.String(length=500), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'])
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'students',
        *_base_columns(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('college_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('course', sa.String(length=100), nullable=False),
        sa.Column('cgpa', sa.Float(), nullable=True),
        sa.Column('backlogs', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('year_of_completion', sa.Integer(), nullable=True),
        sa.Column('registration_number', sa.String(length=50), nullable=True),
        sa.Column('tenth_marks', sa.JSON(), nullable=True),
        sa.Column('twelfth_marks', sa.JSON(), nullable=True),
        sa.Column('last_semester_marksheet', sa.String(length=500), nullable=True),
        sa.Column('area_of_interest', sa.JSON(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('verified_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('verified_at', sa.DateTime(), nullable=True),
        sa.Column('verification_note', sa.Text(), nullable=True),
        sa.Column('placement_status', sa.String(length=10), nullable=False, server_default='Not Placed'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['college_id'], ['colleges.id']),
        sa.ForeignKeyConstraint(['verified_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
        sa.UniqueConstraint('registration_number'),
    )
    op.create_index(op.f('ix_students_id'), 'students', ['id'])
    op.create_index(op.f('ix_students_college_id'), 'students', ['college_id'])

    op.create_table(
        'recruiters',
        *_base_columns(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('industry', sa.String(length=100), nullable=True),
        sa.Column('designation', sa.String(length=100), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )
    op.create_index(op.f('ix_recruiters_id'), 'recruiters', ['id'])

    op.create_table(
        'tnp_officers',
        *_base_columns(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('college_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('designation', sa.String(length=100), nullable=True),
        sa.Column('employee_id', sa.String(length=50), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['college_id'], ['colleges.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )
    op.create_index(op.f('ix_tnp_officers_id'), 'tnp_officers', ['id'])
    op.create_index(op.f('ix_tnp_officers_college_id'), 'tnp_officers', ['college_id'])

    op.create_table(
        'jobs',
        *_base_columns(),
        sa.Column('posted_by', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('job_type', sa.String(length=50), nullable=True),
        sa.Column('work_mode', sa.String(length=50), nullable=True),
        sa.Column('designation', sa.String(length=100), nullable=True),
        sa.Column('skills_required', sa.JSON(), nullable=True),
        sa.Column('ctc_min', sa.Float(), nullable=False),
        sa.Column('ctc_max', sa.Float(), nullable=False),
        sa.Column('ctc_currency', sa.String(length=10), nullable=False, server_default='INR'),
        sa.Column('min_cgpa', sa.Float(), nullable=True),
        sa.Column('allowed_courses', sa.JSON(), nullable=True),
        sa.Column('max_backlogs', sa.Integer(), nullable=True),
        sa.Column('allowed_years', sa.JSON(), nullable=True),
        sa.Column('application_deadline', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(length=8), nullable=False, server_default='Pending'),
        sa.Column('approved_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('approval_notes', sa.Text(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('application_count', sa.Integer(), nullable=False, server_default='0'),
        sa.CheckConstraint('application_count >= 0', name='ck_jobs_application_count_non_negative'),
        sa.CheckConstraint('ctc_min < ctc_max', name='ck_jobs_ctc_range'),
        sa.ForeignKeyConstraint(['posted_by'], ['users.id']),
        sa.ForeignKeyConstraint(['approved_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_jobs_id'), 'jobs', ['id'])
    op.create_index(op.f('ix_jobs_posted_by'), 'jobs', ['posted_by'])
    op.create_index('idx_jobs_status_active', 'jobs', ['status', 'is_active'])
    op.create_index('idx_jobs_deadline', 'jobs', ['application_deadline'])

    op.create_table(
        'applications',
        *_base_columns(),
        sa.Column('job_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('student_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('status', sa.String(length=19), nullable=False, server_default='Applied'),
        sa.Column('resume_filename', sa.String(length=255), nullable=False),
        sa.Column('resume_original_name', sa.String(length=255), nullable=True),
        sa.Column('resume_mimetype', sa.String(length=100), nullable=True),
        sa.Column('resume_size', sa.Integer(), nullable=True),
        sa.Column('resume_path', sa.String(length=500), nullable=True),
        sa.Column('applied_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('reviewed_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('withdrawn_at', sa.DateTime(), nullable=True),
        sa.Column('interview_details', sa.JSON(), nullable=True),
        sa.Column('recruiter_notes', sa.String(length=1000), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('viewed_by_recruiter', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('viewed_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id']),
        sa.ForeignKeyConstraint(['student_id'], ['users.id']),
        sa.ForeignKeyConstraint(['reviewed_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_applications_id'), 'applications', ['id'])
    op.create_index(op.f('ix_applications_job_id'), 'applications', ['job_id'])
    op.create_index(op.f('ix_applications_student_id'), 'applications', ['student_id'])
    op.create_index('idx_applications_student_status', 'applications', ['student_id', 'status'])
    op.create_index('idx_applications_job_status', 'applications', ['job_id', 'status'])
    # One live application per (student, job); withdrawn rows stay as history
    op.create_index(
        'uq_applications_student_job_active',
        'applications',
        ['student_id', 'job_id'],
        unique=True,
        postgresql_where=sa.text("status <> 'Withdrawn'"),
    )

    op.create_table(
        'activity_logs',
        *_base_columns(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('entity_type', sa.String(length=30), nullable=True),
        sa.Column('entity_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_activity_logs_id'), 'activity_logs', ['id'])
    op.create_index(op.f('ix_activity_logs_user_id'), 'activity_logs', ['user_id'])
    op.create_index('idx_activity_logs_entity', 'activity_logs', ['entity_type', 'entity_id'])

    op.create_table(
        'notifications',
        *_base_columns(),
        sa.Column('recipient_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('priority', sa.String(length=10), nullable=True),
        sa.Column('link', sa.String(length=500), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('extra_data', sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(['recipient_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_notifications_id'), 'notifications', ['id'])
    op.create_index('idx_notifications_recipient_read', 'notifications', ['recipient_id', 'is_read'])


def downgrade() -> None:
    op.drop_table('notifications')
    op.drop_table('activity_logs')
    op.drop_index('uq_applications_student_job_active', table_name='applications')
    op.drop_table('applications')
    op.drop_table('jobs')
    op.drop_table('tnp_officers')
    op.drop_table('recruiters')
    op.drop_table('students')
    op.drop_table('users')
    op.drop_table('colleges')
