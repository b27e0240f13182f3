# /app/models/report_model.py

"""
Pydantic contracts for the reporting engine.

The persistence layer hands the engine flat, already-joined rows. Each report
kind gets its own explicit record type so that a missing (deleted or unlinked)
foreign entity shows up as a plain `None` field instead of a broken nested
lookup. Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import date as date_type
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# --- Core Enumerations ---
class ReportKind(str, Enum):
    GRADES = "grades"
    ATTENDANCE = "attendance"
    TEACHER_PERFORMANCE = "teacherPerformance"
    CLASS_PERFORMANCE = "classPerformance"

class GradeType(str, Enum):
    ASSIGNMENT = "Assignment"; MIDTERM = "Midterm"; FINAL = "Final"; PRACTICAL = "Practical"

class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    SICK = "Sick"
    EXCUSED = "Excused"
    ABSENT = "Absent"
    LATE = "Late"

class TeacherActivity(str, Enum):
    SCHEDULE = "schedule"
    ASSIGNMENT = "assignment"

class ClassActivity(str, Enum):
    ENROLLMENT = "enrollment"
    GRADE = "grade"
    ATTENDANCE = "attendance"
    SCHEDULE = "schedule"

class ExportFormat(str, Enum):
    CSV = "csv"; EXCEL = "excel"; JSON = "json"


# Statuses that count against a student's attendance. Late is neither present
# nor absent.
ABSENCE_STATUSES = (AttendanceStatus.SICK, AttendanceStatus.EXCUSED, AttendanceStatus.ABSENT)


class RecordBase(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


# --- Flat Input Records ---

class GradeRecord(RecordBase):
    """One grade entry joined with its student, class, subject, teacher and year."""
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    student_code: Optional[str] = Field(default=None, description="The student's registration number (NIS).")
    class_id: Optional[str] = None
    class_name: Optional[str] = None
    subject_id: Optional[str] = None
    subject_name: Optional[str] = None
    teacher_name: Optional[str] = None
    academic_year_id: Optional[str] = None
    semester: Optional[str] = None
    grade_type: Optional[GradeType] = None
    score: float = Field(default=0, description="Already range-checked upstream (0-100).")
    date: Optional[date_type] = None
    description: Optional[str] = None

class AttendanceRecord(RecordBase):
    """One attendance mark joined with its student, class and scheduled subject."""
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    student_code: Optional[str] = None
    class_id: Optional[str] = None
    class_name: Optional[str] = None
    subject_id: Optional[str] = None
    subject_name: Optional[str] = None
    date: date_type
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None

class TeacherActivityRecord(RecordBase):
    """
    One schedule slot or assignment owned by a teacher. A teacher with no
    activity at all is represented by a single row whose `activity` is None.
    """
    teacher_id: Optional[str] = None
    teacher_name: Optional[str] = None
    teacher_code: Optional[str] = Field(default=None, description="The teacher's employee number (NIP).")
    email: Optional[str] = None
    specialization: Optional[str] = None
    activity: Optional[TeacherActivity] = None
    class_id: Optional[str] = None
    class_name: Optional[str] = None
    subject_id: Optional[str] = None
    subject_name: Optional[str] = None
    submission_count: int = 0

class ClassActivityRecord(RecordBase):
    """
    One fact about a class: an enrolled student, a grade, an attendance mark or
    a scheduled subject. An empty class is a single row with `activity` None.
    """
    class_id: Optional[str] = None
    class_name: Optional[str] = None
    grade_level: Optional[int] = None
    major_name: Optional[str] = None
    homeroom_teacher: Optional[str] = None
    activity: Optional[ClassActivity] = None
    student_id: Optional[str] = None
    score: Optional[float] = None
    status: Optional[AttendanceStatus] = None
    subject_id: Optional[str] = None
    subject_name: Optional[str] = None


# --- Request Echo ---

class ReportFilters(RecordBase):
    """
    Filter values echoed back in the report summary. Filtering itself has
    already happened by the time the engine sees the records.
    """
    class_id: Optional[str] = None
    subject_id: Optional[str] = None
    student_id: Optional[str] = None
    academic_year_id: Optional[str] = None
    semester: Optional[str] = None
    start_date: Optional[date_type] = None
    end_date: Optional[date_type] = None
    month: Optional[int] = Field(default=None, ge=1, le=12)
