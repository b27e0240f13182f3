# /app/services/database_service.py

from datetime import date
from typing import List, Optional, Generator
from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from app.db.database import get_db

# --- Repository Imports ---
from .database_helpers.report_repository_sql import ReportRepositorySQL
from ..models.report_model import (
    AttendanceRecord,
    ClassActivityRecord,
    GradeRecord,
    TeacherActivityRecord,
)


class DatabaseService:
    def __init__(self, db_session: Session):
        """
        Facade over the SQL repositories. Report services only ever talk to
        this class, which keeps them testable with a plain mock.
        """
        self.report_repo = ReportRepositorySQL(db_session)

    # --- REPORT RECORD SETS (DELEGATED) ---
    def get_grade_records(self, class_id: Optional[str] = None, subject_id: Optional[str] = None, academic_year_id: Optional[str] = None, semester: Optional[str] = None, student_id: Optional[str] = None, newest_first: bool = True) -> List[GradeRecord]:
        return self.report_repo.get_grade_records(class_id=class_id, subject_id=subject_id, academic_year_id=academic_year_id, semester=semester, student_id=student_id, newest_first=newest_first)
    def get_attendance_records(self, class_id: Optional[str] = None, student_id: Optional[str] = None, start_date: Optional[date] = None, end_date: Optional[date] = None) -> List[AttendanceRecord]:
        return self.report_repo.get_attendance_records(class_id=class_id, student_id=student_id, start_date=start_date, end_date=end_date)
    def get_teacher_activity_records(self) -> List[TeacherActivityRecord]: return self.report_repo.get_teacher_activity_records()
    def get_class_activity_records(self, academic_year_id: Optional[str] = None) -> List[ClassActivityRecord]: return self.report_repo.get_class_activity_records(academic_year_id=academic_year_id)


def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """FastAPI dependency that provides a DatabaseService bound to the request's session."""
    yield DatabaseService(db_session=db)
