# /app/services/report_service.py

"""
Business logic layer for the reporting endpoints.

This module is a facade: it asks the `DatabaseService` for an already-joined,
already-filtered record set, hands it to the pure assembly functions in
`report_helpers`, and packages downloads. It performs no aggregation itself.
"""

import calendar
import logging
import time
from datetime import date
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from ..core.exceptions import InvalidReportRequest
from ..models.report_model import ExportFormat, ReportFilters, ReportKind
from .database_service import DatabaseService
from .report_helpers import assembly, tabular_export

logger = logging.getLogger(__name__)

# Accepted values of the export endpoint's `type` parameter.
REPORT_TYPE_ALIASES = {
    "grades": ReportKind.GRADES,
    "attendance": ReportKind.ATTENDANCE,
    "teacher": ReportKind.TEACHER_PERFORMANCE,
    "teacherperformance": ReportKind.TEACHER_PERFORMANCE,
    "teacher-performance": ReportKind.TEACHER_PERFORMANCE,
    "class": ReportKind.CLASS_PERFORMANCE,
    "classperformance": ReportKind.CLASS_PERFORMANCE,
    "class-performance": ReportKind.CLASS_PERFORMANCE,
}

MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.EXCEL: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}
EXTENSIONS = {ExportFormat.CSV: "csv", ExportFormat.EXCEL: "xlsx"}

ENTITY_REPORTS = (ReportKind.TEACHER_PERFORMANCE, ReportKind.CLASS_PERFORMANCE)


class ExportFile(NamedTuple):
    filename: str
    media_type: str
    content: Any


# --- Request Parsing ---

def parse_report_type(value: Optional[str]) -> ReportKind:
    kind = REPORT_TYPE_ALIASES.get((value or "").strip().lower())
    if kind is None:
        raise InvalidReportRequest(f"Invalid report type: {value!r}.")
    return kind


def parse_export_format(value: Optional[str]) -> ExportFormat:
    try:
        return ExportFormat((value or ExportFormat.JSON.value).strip().lower())
    except ValueError:
        raise InvalidReportRequest(f"Invalid export format: {value!r}.")


def resolve_date_range(
    start_date: Optional[date],
    end_date: Optional[date],
    month: Optional[int],
    today: Optional[date] = None,
) -> Tuple[Optional[date], Optional[date]]:
    """
    An explicit start or end date wins. Otherwise a `month` (1-12) expands to
    that whole month of the current year.
    """
    if start_date or end_date or month is None:
        return start_date, end_date
    if not 1 <= month <= 12:
        raise InvalidReportRequest(f"Month must be between 1 and 12, got {month}.")
    year = (today or date.today()).year
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


# --- Record Fetching ---

def fetch_records(db: DatabaseService, kind: ReportKind, filters: ReportFilters, for_export: bool = False) -> List[Any]:
    """Delegates to the persistence layer for the record set of one report kind."""
    if kind == ReportKind.GRADES:
        return db.get_grade_records(
            class_id=filters.class_id,
            subject_id=filters.subject_id,
            academic_year_id=filters.academic_year_id,
            semester=filters.semester,
            student_id=filters.student_id,
            newest_first=not for_export,
        )
    if kind == ReportKind.ATTENDANCE:
        return db.get_attendance_records(
            class_id=filters.class_id,
            student_id=filters.student_id,
            start_date=filters.start_date,
            end_date=filters.end_date,
        )
    if kind == ReportKind.TEACHER_PERFORMANCE:
        return db.get_teacher_activity_records()
    return db.get_class_activity_records(academic_year_id=filters.academic_year_id)


def _with_resolved_dates(filters: ReportFilters) -> ReportFilters:
    start, end = resolve_date_range(filters.start_date, filters.end_date, filters.month)
    return filters.model_copy(update={"start_date": start, "end_date": end})


# --- Core Public Functions ---

def get_report(db: DatabaseService, kind: ReportKind, filters: Optional[ReportFilters] = None) -> Dict[str, Any]:
    """
    Fetches the record set for `kind` and assembles the report.

    Args:
        db: The DatabaseService, provided by dependency injection.
        kind: Which of the four report shapes to build.
        filters: Request filters. Applied by the persistence layer and echoed
            back in the report summary.

    Returns:
        The JSON-serializable report dict.
    """
    filters = _with_resolved_dates(filters or ReportFilters())
    records = fetch_records(db, kind, filters)
    logger.info("Building %s report over %d records.", ReportKind(kind).value, len(records))
    return assembly.assemble(kind, records, filters)


def get_grade_report(db: DatabaseService, filters: Optional[ReportFilters] = None) -> Dict[str, Any]:
    return get_report(db, ReportKind.GRADES, filters)

def get_attendance_report(db: DatabaseService, filters: Optional[ReportFilters] = None) -> Dict[str, Any]:
    return get_report(db, ReportKind.ATTENDANCE, filters)

def get_teacher_performance_report(db: DatabaseService, filters: Optional[ReportFilters] = None) -> Dict[str, Any]:
    return get_report(db, ReportKind.TEACHER_PERFORMANCE, filters)

def get_class_performance_report(db: DatabaseService, filters: Optional[ReportFilters] = None) -> Dict[str, Any]:
    return get_report(db, ReportKind.CLASS_PERFORMANCE, filters)


def export_report(
    db: DatabaseService,
    report_type: str,
    export_format: Optional[str],
    filters: Optional[ReportFilters] = None,
    now_ms: Optional[int] = None,
):
    """
    Builds a download for one report.

    Returns:
        A list of flat rows for the JSON format, otherwise an `ExportFile`
        whose filename is `report-<type>-<epoch-ms>.<ext>`.
    """
    kind = parse_report_type(report_type)
    fmt = parse_export_format(export_format)
    filters = _with_resolved_dates(filters or ReportFilters())

    records = fetch_records(db, kind, filters, for_export=True)
    # Grade and attendance downloads are the flat record set; only the
    # performance reports export assembled per-entity rows.
    report = assembly.assemble(kind, records, filters) if kind in ENTITY_REPORTS else {}
    rows = tabular_export.export_rows(kind, records, report)
    logger.info("Exporting %s report as %s: %d rows.", kind.value, fmt.value, len(rows))

    if fmt == ExportFormat.JSON:
        return rows

    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    filename = f"report-{report_type.strip().lower()}-{stamp}.{EXTENSIONS[fmt]}"
    content = tabular_export.to_csv(rows) if fmt == ExportFormat.CSV else tabular_export.to_excel(rows)
    return ExportFile(filename=filename, media_type=MEDIA_TYPES[fmt], content=content)
