# /app/services/report_helpers/ingestion.py

"""
Resolution of joined ORM rows into the flat record types the engine consumes.

Every nested lookup (grade -> student -> class, attendance -> schedule ->
subject, ...) is resolved exactly once here. A relation that is missing because
the referenced row was deleted resolves to `None`; nothing downstream ever has
to touch an ORM object or guard a nested attribute again.
"""

from typing import Any, List, Optional

from ...models.report_model import (
    AttendanceRecord,
    AttendanceStatus,
    ClassActivity,
    ClassActivityRecord,
    GradeRecord,
    GradeType,
    TeacherActivity,
    TeacherActivityRecord,
)


def _walk(obj: Any, *path: str) -> Optional[Any]:
    """getattr along `path`, stopping at the first missing link."""
    for name in path:
        if obj is None:
            return None
        obj = getattr(obj, name, None)
    return obj


def _as_enum(enum_cls, value: Any):
    """Unrecognized legacy values resolve to None and are reported as Unknown."""
    try:
        return None if value is None else enum_cls(value)
    except ValueError:
        return None


def _as_id(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _student_fields(student: Any) -> dict:
    return {
        "student_id": _as_id(_walk(student, "id")),
        "student_name": _walk(student, "full_name"),
        "student_code": _walk(student, "nis"),
        "class_id": _as_id(_walk(student, "class_id")),
        "class_name": _walk(student, "class_", "name"),
    }


def resolve_grade_row(grade: Any) -> GradeRecord:
    student = _walk(grade, "student")
    fields = _student_fields(student)
    # The foreign key can survive a failed join (e.g. a dangling id).
    fields["student_id"] = fields["student_id"] or _as_id(_walk(grade, "student_id"))
    return GradeRecord(
        **fields,
        subject_id=_as_id(_walk(grade, "subject", "id") or _walk(grade, "subject_id")),
        subject_name=_walk(grade, "subject", "name"),
        teacher_name=_walk(grade, "teacher", "full_name"),
        academic_year_id=_as_id(_walk(grade, "academic_year_id")),
        semester=_walk(grade, "academic_year", "semester"),
        grade_type=_as_enum(GradeType, _walk(grade, "grade_type")),
        score=_walk(grade, "score") or 0,
        date=_walk(grade, "date") or _date_of(_walk(grade, "created_at")),
        description=_walk(grade, "description"),
    )


def _date_of(timestamp: Any) -> Optional[Any]:
    return timestamp.date() if hasattr(timestamp, "date") else timestamp


def resolve_attendance_row(mark: Any) -> AttendanceRecord:
    fields = _student_fields(_walk(mark, "student"))
    fields["student_id"] = fields["student_id"] or _as_id(_walk(mark, "student_id"))
    return AttendanceRecord(
        **fields,
        subject_id=_as_id(_walk(mark, "schedule", "subject_id")),
        subject_name=_walk(mark, "schedule", "subject", "name"),
        date=_walk(mark, "date"),
        status=_as_enum(AttendanceStatus, _walk(mark, "status")),
        notes=_walk(mark, "notes"),
    )


def resolve_teacher_rows(teacher: Any) -> List[TeacherActivityRecord]:
    """Flattens one teacher and their schedules and assignments into rows."""
    profile = {
        "teacher_id": _as_id(_walk(teacher, "id")),
        "teacher_name": _walk(teacher, "full_name"),
        "teacher_code": _walk(teacher, "nip"),
        "email": _walk(teacher, "email"),
        "specialization": _walk(teacher, "specialization"),
    }
    rows = [
        TeacherActivityRecord(
            **profile,
            activity=TeacherActivity.SCHEDULE,
            class_id=_as_id(_walk(schedule, "class_id")),
            class_name=_walk(schedule, "class_", "name"),
            subject_id=_as_id(_walk(schedule, "subject_id")),
            subject_name=_walk(schedule, "subject", "name"),
        )
        for schedule in (_walk(teacher, "schedules") or [])
    ]
    rows.extend(
        TeacherActivityRecord(
            **profile,
            activity=TeacherActivity.ASSIGNMENT,
            submission_count=len(_walk(assignment, "submissions") or []),
        )
        for assignment in (_walk(teacher, "assignments") or [])
    )
    return rows or [TeacherActivityRecord(**profile)]


def resolve_class_rows(klass: Any) -> List[ClassActivityRecord]:
    """Flattens one class with its roster, their grades and attendance, and its schedule."""
    profile = {
        "class_id": _as_id(_walk(klass, "id")),
        "class_name": _walk(klass, "name"),
        "grade_level": _walk(klass, "grade_level"),
        "major_name": _walk(klass, "major", "name"),
        "homeroom_teacher": _walk(klass, "homeroom_teacher", "full_name"),
    }
    rows: List[ClassActivityRecord] = []
    for student in (_walk(klass, "students") or []):
        student_id = _as_id(_walk(student, "id"))
        rows.append(ClassActivityRecord(**profile, activity=ClassActivity.ENROLLMENT, student_id=student_id))
        rows.extend(
            ClassActivityRecord(**profile, activity=ClassActivity.GRADE, student_id=student_id, score=grade.score)
            for grade in (_walk(student, "grades") or [])
        )
        rows.extend(
            ClassActivityRecord(**profile, activity=ClassActivity.ATTENDANCE, student_id=student_id, status=_as_enum(AttendanceStatus, mark.status))
            for mark in (_walk(student, "attendance") or [])
        )
    rows.extend(
        ClassActivityRecord(
            **profile,
            activity=ClassActivity.SCHEDULE,
            subject_id=_as_id(_walk(schedule, "subject_id")),
            subject_name=_walk(schedule, "subject", "name"),
        )
        for schedule in (_walk(klass, "schedules") or [])
    )
    return rows or [ClassActivityRecord(**profile)]
