"""create classroom, membership, assignment, submission, announcement and comment tables

Revision ID: a1c3e5f7b9d0
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f7b9d0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def base_columns():
    return [
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
    ]


def base_indexes(table: str):
    op.create_index(f'ix_{table}_id', table, ['id'])
    op.create_index(f'ix_{table}_created_at', table, ['created_at'])
    op.create_index(f'ix_{table}_is_deleted', table, ['is_deleted'])


def upgrade() -> None:
    op.create_table(
        'users',
        *base_columns(),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    base_indexes('users')
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_full_name', 'users', ['full_name'])

    op.create_table(
        'classrooms',
        *base_columns(),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('subject', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('code', sa.String(length=16), nullable=False),
        sa.Column('teacher_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    base_indexes('classrooms')
    op.create_index('ix_classrooms_code', 'classrooms', ['code'], unique=True)
    op.create_index('ix_classrooms_teacher_id', 'classrooms', ['teacher_id'])

    op.create_table(
        'classroom_students',
        *base_columns(),
        sa.Column('classroom_id', sa.Uuid(), sa.ForeignKey('classrooms.id', ondelete='CASCADE'), nullable=False),
        sa.Column('student_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('classroom_id', 'student_id', name='uq_classroom_student'),
    )
    base_indexes('classroom_students')
    op.create_index('ix_classroom_students_classroom_id', 'classroom_students', ['classroom_id'])
    op.create_index('ix_classroom_students_student_id', 'classroom_students', ['student_id'])

    op.create_table(
        'assignments',
        *base_columns(),
        sa.Column('classroom_id', sa.Uuid(), sa.ForeignKey('classrooms.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_by', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('points', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    base_indexes('assignments')
    op.create_index('ix_assignments_classroom_id', 'assignments', ['classroom_id'])
    op.create_index('idx_assignment_classroom_due', 'assignments', ['classroom_id', 'due_date'])

    op.create_table(
        'submissions',
        *base_columns(),
        sa.Column('assignment_id', sa.Uuid(), sa.ForeignKey('assignments.id', ondelete='CASCADE'), nullable=False),
        sa.Column('student_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('file_refs', sa.JSON(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('grade', sa.Float(), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('assignment_id', 'student_id', name='uq_submission_assignment_student'),
    )
    base_indexes('submissions')
    op.create_index('ix_submissions_assignment_id', 'submissions', ['assignment_id'])
    op.create_index('ix_submissions_student_id', 'submissions', ['student_id'])

    op.create_table(
        'announcements',
        *base_columns(),
        sa.Column('classroom_id', sa.Uuid(), sa.ForeignKey('classrooms.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_by', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('file_refs', sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    base_indexes('announcements')
    op.create_index('ix_announcements_classroom_id', 'announcements', ['classroom_id'])

    op.create_table(
        'comments',
        *base_columns(),
        sa.Column('classroom_id', sa.Uuid(), sa.ForeignKey('classrooms.id', ondelete='CASCADE'), nullable=False),
        sa.Column('author_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('subject_type', sa.String(length=20), nullable=False),
        sa.Column('subject_id', sa.Uuid(), nullable=False),
        sa.Column('parent_id', sa.Uuid(), sa.ForeignKey('comments.id', ondelete='CASCADE'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    base_indexes('comments')
    op.create_index('ix_comments_classroom_id', 'comments', ['classroom_id'])
    op.create_index('ix_comments_author_id', 'comments', ['author_id'])
    op.create_index('ix_comments_parent_id', 'comments', ['parent_id'])
    op.create_index(
        'idx_comment_subject_time', 'comments',
        ['classroom_id', 'subject_type', 'subject_id', 'created_at'],
    )


def downgrade() -> None:
    for table in ('comments', 'announcements', 'submissions', 'assignments',
                  'classroom_students', 'classrooms', 'users'):
        op.drop_table(table)
