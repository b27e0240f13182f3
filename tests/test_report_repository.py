# /tests/test_report_repository.py

import pytest
from datetime import date, datetime

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import (
    Base,
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
from app.services.database_service import DatabaseService


@pytest.fixture
def db_session():
    """A fresh in-memory SQLite database per test."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded(db_session):
    """Two classes, three students, one orphaned grade and a week of attendance."""
    db_session.add_all([
        AcademicYear(id="ay_1", year="2024/2025", semester="Ganjil"),
        AcademicYear(id="ay_2", year="2024/2025", semester="Genap"),
        Major(id="m_1", name="IPA"),
        Teacher(id="t_1", nip="1980", full_name="Pak Budi", email="budi@school.id", specialization="Math"),
        Teacher(id="t_2", nip="1985", full_name="Bu Sari"),
        Class(id="c_1", name="X-A", grade_level=10, major_id="m_1", homeroom_teacher_id="t_2", academic_year_id="ay_1"),
        Class(id="c_2", name="X-B", grade_level=10, academic_year_id="ay_1"),
        Student(id="S1", nis="1001", full_name="Ayu", class_id="c_1"),
        Student(id="S2", nis="1002", full_name="Bima", class_id="c_1"),
        Student(id="S3", nis="1003", full_name="Citra", class_id="c_2"),
        Subject(id="sub_math", name="Math", code="MTK"),
        Subject(id="sub_phys", name="Physics", code="FIS"),
        Schedule(id="sch_1", class_id="c_1", subject_id="sub_math", teacher_id="t_1"),
        Schedule(id="sch_2", class_id="c_2", subject_id="sub_phys", teacher_id="t_1"),
        Grade(id="g_1", student_id="S1", subject_id="sub_math", teacher_id="t_1", academic_year_id="ay_1",
              grade_type="Midterm", score=80, date=date(2024, 9, 1), created_at=datetime(2024, 9, 1, 8)),
        Grade(id="g_2", student_id="S1", subject_id="sub_math", teacher_id="t_1", academic_year_id="ay_2",
              grade_type="Final", score=90, date=date(2025, 3, 1), created_at=datetime(2025, 3, 1, 8)),
        Grade(id="g_3", student_id="S3", subject_id="sub_phys", teacher_id="t_1", academic_year_id="ay_1",
              grade_type="Assignment", score=70, date=date(2024, 10, 1), created_at=datetime(2024, 10, 1, 8)),
        Grade(id="g_4", student_id=None, subject_id="sub_math", teacher_id=None, academic_year_id="ay_1",
              grade_type="Practical", score=60, date=date(2024, 11, 1), created_at=datetime(2024, 11, 1, 8)),
        Attendance(id="a_1", student_id="S1", schedule_id="sch_1", date=date(2024, 8, 1), status="Present"),
        Attendance(id="a_2", student_id="S2", schedule_id="sch_1", date=date(2024, 8, 1), status="Absent"),
        Attendance(id="a_3", student_id="S3", schedule_id="sch_2", date=date(2024, 8, 2), status="Present"),
        Attendance(id="a_4", student_id="S1", schedule_id="sch_1", date=date(2024, 9, 5), status="Late"),
        Assignment(id="as_1", teacher_id="t_1", title="Quadratic equations"),
        AssignmentSubmission(id="sub_a", assignment_id="as_1", student_id="S1"),
        AssignmentSubmission(id="sub_b", assignment_id="as_1", student_id="S2"),
    ])
    db_session.commit()
    return DatabaseService(db_session=db_session)


def test_grade_records_are_resolved_newest_first(seeded):
    records = seeded.get_grade_records()

    assert [r.score for r in records] == [90, 60, 70, 80]
    orphan = records[1]
    assert orphan.student_id is None
    assert orphan.student_name is None
    assert orphan.subject_name == "Math"
    assert records[0].class_name == "X-A"
    assert records[0].semester == "Genap"


def test_grade_class_filter_is_applied_after_the_join(seeded):
    """Only grades whose resolved student belongs to the class survive; the orphan does not."""
    records = seeded.get_grade_records(class_id="c_1")
    assert {r.student_id for r in records} == {"S1"}
    assert len(records) == 2


def test_grade_semester_and_subject_filters(seeded):
    assert [r.score for r in seeded.get_grade_records(semester="Ganjil", subject_id="sub_math")] == [60, 80]
    assert [r.score for r in seeded.get_grade_records(newest_first=False, student_id="S1")] == [80, 90]


def test_attendance_records_with_date_range_and_class(seeded):
    records = seeded.get_attendance_records(start_date=date(2024, 8, 1), end_date=date(2024, 8, 31))
    assert [r.student_id for r in records] == ["S1", "S2", "S3"]
    assert records[0].subject_name == "Math"

    in_class = seeded.get_attendance_records(class_id="c_2")
    assert [r.student_name for r in in_class] == ["Citra"]


def test_teacher_activity_records(seeded):
    records = seeded.get_teacher_activity_records()

    budi = [r for r in records if r.teacher_id == "t_1"]
    sari = [r for r in records if r.teacher_id == "t_2"]
    assert sorted(r.activity for r in budi) == ["assignment", "schedule", "schedule"]
    assert [r.submission_count for r in budi if r.activity == "assignment"] == [2]
    assert len(sari) == 1 and sari[0].activity is None


def test_class_activity_records(seeded):
    records = seeded.get_class_activity_records(academic_year_id="ay_1")
    x_a = [r for r in records if r.class_id == "c_1"]

    assert x_a[0].major_name == "IPA"
    assert x_a[0].homeroom_teacher == "Bu Sari"
    assert sum(1 for r in x_a if r.activity == "enrollment") == 2
    assert sum(1 for r in x_a if r.activity == "grade") == 2
    assert [r.subject_name for r in x_a if r.activity == "schedule"] == ["Math"]
    assert seeded.get_class_activity_records(academic_year_id="ay_404") == []
