# /app/services/database_helpers/report_repository_sql.py

"""
SQLAlchemy queries that fetch and flatten the record sets behind each report.

Filters on the queried table's own columns (subject, student, academic year,
date range) are pushed into SQL. Filters on a JOINED table's columns (the
student's class, the academic year's semester) are applied in Python on the
resolved records instead, once the join has been materialized; pushing them
through the relationship would silently change the join semantics.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from app.db.models.school_models import (
    Attendance,
    Class,
    Grade,
    Schedule,
    Student,
    Teacher,
    Assignment,
)
from ...models.report_model import (
    AttendanceRecord,
    ClassActivityRecord,
    GradeRecord,
    TeacherActivityRecord,
)
from ..report_helpers import ingestion

logger = logging.getLogger(__name__)


class ReportRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_grade_records(
        self,
        class_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        academic_year_id: Optional[str] = None,
        semester: Optional[str] = None,
        student_id: Optional[str] = None,
        newest_first: bool = True,
    ) -> List[GradeRecord]:
        """Grade rows joined with student, class, subject, teacher and year."""
        query = self.db.query(Grade).options(
            joinedload(Grade.student).joinedload(Student.class_),
            joinedload(Grade.subject),
            joinedload(Grade.teacher),
            joinedload(Grade.academic_year),
        )
        if subject_id:
            query = query.filter(Grade.subject_id == subject_id)
        if academic_year_id:
            query = query.filter(Grade.academic_year_id == academic_year_id)
        if student_id:
            query = query.filter(Grade.student_id == student_id)

        if newest_first:
            query = query.order_by(Grade.created_at.desc(), Grade.id)
        else:
            query = query.order_by(Grade.date, Grade.id)

        records = [ingestion.resolve_grade_row(g) for g in query.all()]
        filtered = [
            r for r in records
            if (not class_id or r.class_id == class_id) and (not semester or r.semester == semester)
        ]
        logger.info("Fetched %d grade rows (%d dropped by post-join filters).", len(records), len(records) - len(filtered))
        return filtered

    def get_attendance_records(
        self,
        class_id: Optional[str] = None,
        student_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[AttendanceRecord]:
        """Attendance marks joined with student, class and scheduled subject, oldest first."""
        query = self.db.query(Attendance).options(
            joinedload(Attendance.student).joinedload(Student.class_),
            joinedload(Attendance.schedule).joinedload(Schedule.subject),
        )
        if student_id:
            query = query.filter(Attendance.student_id == student_id)
        if start_date:
            query = query.filter(Attendance.date >= start_date)
        if end_date:
            query = query.filter(Attendance.date <= end_date)

        records = [ingestion.resolve_attendance_row(a) for a in query.order_by(Attendance.date, Attendance.id).all()]
        filtered = [r for r in records if not class_id or r.class_id == class_id]
        logger.info("Fetched %d attendance rows (%d dropped by post-join filters).", len(records), len(records) - len(filtered))
        return filtered

    def get_teacher_activity_records(self) -> List[TeacherActivityRecord]:
        teachers = (
            self.db.query(Teacher)
            .options(
                selectinload(Teacher.schedules).joinedload(Schedule.class_),
                selectinload(Teacher.schedules).joinedload(Schedule.subject),
                selectinload(Teacher.assignments).selectinload(Assignment.submissions),
            )
            .order_by(Teacher.full_name, Teacher.id)
            .all()
        )
        records = [row for t in teachers for row in ingestion.resolve_teacher_rows(t)]
        logger.info("Fetched %d teachers as %d activity rows.", len(teachers), len(records))
        return records

    def get_class_activity_records(self, academic_year_id: Optional[str] = None) -> List[ClassActivityRecord]:
        query = self.db.query(Class).options(
            joinedload(Class.major),
            joinedload(Class.homeroom_teacher),
            selectinload(Class.students).selectinload(Student.grades),
            selectinload(Class.students).selectinload(Student.attendance),
            selectinload(Class.schedules).joinedload(Schedule.subject),
        )
        if academic_year_id:
            query = query.filter(Class.academic_year_id == academic_year_id)
        classes = query.order_by(Class.name, Class.id).all()
        records = [row for c in classes for row in ingestion.resolve_class_rows(c)]
        logger.info("Fetched %d classes as %d activity rows.", len(classes), len(records))
        return records
