# /tests/test_ingestion.py

from datetime import date, datetime
from types import SimpleNamespace as Row

from app.services.report_helpers import ingestion


def test_resolve_grade_row_with_full_joins():
    grade = Row(
        student_id="S1",
        student=Row(id="S1", full_name="Ayu", nis="1001", class_id="c_1", class_=Row(name="X-A")),
        subject_id="sub_1", subject=Row(id="sub_1", name="Math"),
        teacher=Row(full_name="Pak Budi"),
        academic_year_id="ay_1", academic_year=Row(semester="Ganjil"),
        grade_type="Midterm", score=88.5, date=date(2024, 9, 1), description="UTS",
        created_at=datetime(2024, 9, 2, 10, 0),
    )
    record = ingestion.resolve_grade_row(grade)

    assert record.student_name == "Ayu"
    assert record.class_name == "X-A"
    assert record.subject_name == "Math"
    assert record.teacher_name == "Pak Budi"
    assert record.semester == "Ganjil"
    assert record.grade_type == "Midterm"
    assert record.date == date(2024, 9, 1)


def test_resolve_grade_row_with_deleted_relations():
    """Missing nested entities become None fields; the dangling FK is kept."""
    grade = Row(
        student_id="S9", student=None, subject_id=None, subject=None, teacher=None,
        academic_year_id=None, academic_year=None, grade_type="UTS", score=70,
        date=None, description=None, created_at=datetime(2024, 3, 4, 8, 30),
    )
    record = ingestion.resolve_grade_row(grade)

    assert record.student_id == "S9"
    assert record.student_name is None
    assert record.class_name is None
    assert record.subject_id is None
    assert record.grade_type is None  # legacy value outside the enumeration
    assert record.date == date(2024, 3, 4)


def test_resolve_attendance_row_student_without_class():
    mark = Row(
        student_id="S1", student=Row(id="S1", full_name="Ayu", nis=None, class_id=None, class_=None),
        schedule=Row(subject_id="sub_1", subject=None),
        date=date(2024, 8, 1), status="Sick", notes="flu",
    )
    record = ingestion.resolve_attendance_row(mark)

    assert record.class_name is None
    assert record.subject_id == "sub_1"
    assert record.subject_name is None
    assert record.status == "Sick"


def test_resolve_teacher_rows():
    teacher = Row(
        id="t_1", full_name="Pak Budi", nip="1980", email="budi@school.id", specialization="Math",
        schedules=[Row(class_id="c_1", class_=Row(name="X-A"), subject_id="s_1", subject=Row(name="Math"))],
        assignments=[Row(submissions=[Row(), Row()]), Row(submissions=[])],
    )
    rows = ingestion.resolve_teacher_rows(teacher)

    assert [r.activity for r in rows] == ["schedule", "assignment", "assignment"]
    assert [r.submission_count for r in rows] == [0, 2, 0]
    assert rows[0].class_name == "X-A"


def test_resolve_idle_teacher_and_empty_class_keep_a_profile_row():
    teacher = Row(id="t_2", full_name="Bu Sari", nip=None, email=None, specialization=None, schedules=[], assignments=None)
    klass = Row(id="c_9", name="XII-C", grade_level=12, major=None, homeroom_teacher=None, students=[], schedules=[])

    teacher_rows = ingestion.resolve_teacher_rows(teacher)
    class_rows = ingestion.resolve_class_rows(klass)

    assert len(teacher_rows) == 1 and teacher_rows[0].activity is None
    assert len(class_rows) == 1 and class_rows[0].activity is None
    assert class_rows[0].major_name is None


def test_resolve_class_rows():
    klass = Row(
        id="c_1", name="X-A", grade_level=10, major=Row(name="IPA"), homeroom_teacher=Row(full_name="Bu Sari"),
        students=[Row(id="S1", grades=[Row(score=80)], attendance=[Row(status="Present"), Row(status="Alpha")])],
        schedules=[Row(subject_id="s_1", subject=Row(name="Math"))],
    )
    rows = ingestion.resolve_class_rows(klass)

    assert [r.activity for r in rows] == ["enrollment", "grade", "attendance", "attendance", "schedule"]
    assert rows[1].score == 80
    assert rows[3].status is None
    assert rows[0].major_name == "IPA"
