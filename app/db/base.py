# /app/db/base.py

# Central registry of all SQLAlchemy models. Importing them here ensures the
# Base metadata knows about every table when Alembic or `create_all` runs.

from .base_class import Base

from .models.school_models import (
    AcademicYear,
    Major,
    Teacher,
    Class,
    Student,
    Subject,
    Schedule,
    Grade,
    Attendance,
    Assignment,
    AssignmentSubmission,
)
