# /tests/test_report_service.py

import pytest
from datetime import date
from unittest.mock import MagicMock

from app.core.exceptions import InvalidReportRequest
from app.models.report_model import (
    AttendanceRecord,
    ClassActivityRecord,
    GradeRecord,
    ReportFilters,
    ReportKind,
)
from app.services import report_service

# --- Test Data Fixtures ---

@pytest.fixture
def mock_db_service():
    """Provides a mock of the DatabaseService for dependency injection."""
    db = MagicMock()
    db.get_grade_records.return_value = [
        GradeRecord(student_id="S1", student_name="Ayu", subject_id="Math", grade_type="Midterm", score=80),
        GradeRecord(student_id="S2", student_name='Bima "Bim"', subject_id="Math", grade_type="Final", score=70),
    ]
    db.get_attendance_records.return_value = [
        AttendanceRecord(student_id="S1", date=date(2024, 8, 1), status="Present"),
    ]
    db.get_teacher_activity_records.return_value = []
    db.get_class_activity_records.return_value = [
        ClassActivityRecord(class_id="c_1", class_name="X-A", activity="schedule", subject_name="Math"),
        ClassActivityRecord(class_id="c_1", class_name="X-A", activity="schedule", subject_name="Physics"),
    ]
    return db


# --- Request Parsing ---

@pytest.mark.parametrize("value, kind", [
    ("grades", ReportKind.GRADES),
    ("Attendance", ReportKind.ATTENDANCE),
    ("teacher", ReportKind.TEACHER_PERFORMANCE),
    ("class", ReportKind.CLASS_PERFORMANCE),
    ("class-performance", ReportKind.CLASS_PERFORMANCE),
])
def test_parse_report_type(value, kind):
    assert report_service.parse_report_type(value) == kind


@pytest.mark.parametrize("value", ["", None, "payroll"])
def test_parse_report_type_rejects_unknown(value):
    with pytest.raises(InvalidReportRequest):
        report_service.parse_report_type(value)


def test_parse_export_format():
    assert report_service.parse_export_format(None).value == "json"
    assert report_service.parse_export_format("CSV").value == "csv"
    with pytest.raises(InvalidReportRequest):
        report_service.parse_export_format("pdf")


def test_resolve_date_range():
    today = date(2024, 5, 20)
    assert report_service.resolve_date_range(None, None, 2, today=today) == (date(2024, 2, 1), date(2024, 2, 29))
    assert report_service.resolve_date_range(None, None, 12, today=today) == (date(2024, 12, 1), date(2024, 12, 31))
    explicit = (date(2024, 1, 1), date(2024, 1, 7))
    assert report_service.resolve_date_range(*explicit, 3, today=today) == explicit
    assert report_service.resolve_date_range(None, None, None) == (None, None)
    with pytest.raises(InvalidReportRequest):
        report_service.resolve_date_range(None, None, 13)


# --- Report Building ---

def test_get_grade_report_passes_filters_to_persistence(mock_db_service):
    filters = ReportFilters(class_id="c_1", semester="Ganjil")
    report = report_service.get_grade_report(mock_db_service, filters)

    mock_db_service.get_grade_records.assert_called_once_with(
        class_id="c_1", subject_id=None, academic_year_id=None, semester="Ganjil", student_id=None, newest_first=True,
    )
    assert report["summary"]["averageScore"] == "75.00"
    assert report["summary"]["filters"] == {"classId": "c_1", "semester": "Ganjil"}


def test_get_attendance_report_expands_month(mock_db_service):
    report_service.get_attendance_report(mock_db_service, ReportFilters(month=2))

    kwargs = mock_db_service.get_attendance_records.call_args.kwargs
    assert kwargs["start_date"].month == 2 and kwargs["start_date"].day == 1
    assert kwargs["end_date"].month == 2


def test_export_csv(mock_db_service):
    result = report_service.export_report(mock_db_service, "grades", "csv", now_ms=1700000000000)

    assert isinstance(result, report_service.ExportFile)
    assert result.filename == "report-grades-1700000000000.csv"
    assert result.media_type == "text/csv"
    lines = result.content.split("\n")
    assert lines[0].startswith("studentId,studentName,")
    assert '"Bima ""Bim"""' in lines[2]
    mock_db_service.get_grade_records.assert_called_once()
    assert mock_db_service.get_grade_records.call_args.kwargs["newest_first"] is False


def test_export_class_rows_as_json(mock_db_service):
    rows = report_service.export_report(mock_db_service, "class", "json")
    assert rows == [{
        "id": "c_1", "name": "X-A", "gradeLevel": None, "major": None, "homeroomTeacher": None,
        "totalStudents": 0, "averageGrade": "0.00", "attendanceRate": "0.0",
        "totalSubjects": 2, "subjects": "Math; Physics",
    }]


def test_export_excel_filename(mock_db_service):
    result = report_service.export_report(mock_db_service, "teacher", "excel", now_ms=42)
    assert result.filename == "report-teacher-42.xlsx"
    assert result.content[:2] == b"PK"  # xlsx is a zip container


def test_export_rejects_unknown_type(mock_db_service):
    with pytest.raises(InvalidReportRequest):
        report_service.export_report(mock_db_service, "payroll", "csv")
    mock_db_service.get_grade_records.assert_not_called()
