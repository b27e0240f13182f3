"""Create the school tables read by the reporting endpoints

Revision ID: 3f1c9a7d2b64
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b64'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _fk(target: str, **kwargs) -> sa.ForeignKey:
    return sa.ForeignKey(target, ondelete='SET NULL', **kwargs)


def upgrade() -> None:
    """Create the roster, schedule, grade and attendance tables."""
    op.create_table(
        'academic_years',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('year', sa.String(), nullable=False),
        sa.Column('semester', sa.String(), nullable=False),
    )
    op.create_table(
        'majors',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
    )
    op.create_table(
        'teachers',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('nip', sa.String(), nullable=True, unique=True),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('specialization', sa.String(), nullable=True),
    )
    op.create_table(
        'classes',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False, index=True),
        sa.Column('grade_level', sa.Integer(), nullable=True),
        sa.Column('major_id', sa.String(), _fk('majors.id'), nullable=True),
        sa.Column('homeroom_teacher_id', sa.String(), _fk('teachers.id'), nullable=True),
        sa.Column('academic_year_id', sa.String(), _fk('academic_years.id'), nullable=True, index=True),
    )
    op.create_table(
        'students',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('nis', sa.String(), nullable=True, unique=True),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('class_id', sa.String(), _fk('classes.id'), nullable=True, index=True),
    )
    op.create_table(
        'subjects',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('code', sa.String(), nullable=True),
    )
    op.create_table(
        'schedules',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('class_id', sa.String(), _fk('classes.id'), nullable=True),
        sa.Column('subject_id', sa.String(), _fk('subjects.id'), nullable=True),
        sa.Column('teacher_id', sa.String(), _fk('teachers.id'), nullable=True),
        sa.Column('day_of_week', sa.String(), nullable=True),
        sa.Column('start_time', sa.String(), nullable=True),
    )
    op.create_table(
        'grades',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('student_id', sa.String(), _fk('students.id'), nullable=True, index=True),
        sa.Column('subject_id', sa.String(), _fk('subjects.id'), nullable=True, index=True),
        sa.Column('teacher_id', sa.String(), _fk('teachers.id'), nullable=True),
        sa.Column('academic_year_id', sa.String(), _fk('academic_years.id'), nullable=True, index=True),
        sa.Column('grade_type', sa.String(), nullable=False),
        sa.Column('score', sa.Float(), nullable=False),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'attendance',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('student_id', sa.String(), _fk('students.id'), nullable=True, index=True),
        sa.Column('schedule_id', sa.String(), _fk('schedules.id'), nullable=True),
        sa.Column('date', sa.Date(), nullable=False, index=True),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    op.create_table(
        'assignments',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('teacher_id', sa.String(), _fk('teachers.id'), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
    )
    op.create_table(
        'assignment_submissions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('assignment_id', sa.String(), sa.ForeignKey('assignments.id'), nullable=False),
        sa.Column('student_id', sa.String(), _fk('students.id'), nullable=True),
    )


def downgrade() -> None:
    """Drop the tables in reverse dependency order."""
    for table in (
        'assignment_submissions', 'assignments', 'attendance', 'grades', 'schedules',
        'subjects', 'students', 'classes', 'teachers', 'majors', 'academic_years',
    ):
        op.drop_table(table)
