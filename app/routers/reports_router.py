# /app/routers/reports_router.py

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from ..core.exceptions import InvalidReportRequest
from ..models.report_model import ReportFilters, ReportKind
from ..services import report_service
from ..services.database_service import DatabaseService, get_db_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _grade_filters(
    class_id: Optional[str] = Query(None, alias="classId"),
    subject_id: Optional[str] = Query(None, alias="subjectId"),
    academic_year_id: Optional[str] = Query(None, alias="academicYearId"),
    semester: Optional[str] = Query(None),
    student_id: Optional[str] = Query(None, alias="studentId"),
) -> ReportFilters:
    return ReportFilters(
        class_id=class_id, subject_id=subject_id, academic_year_id=academic_year_id,
        semester=semester, student_id=student_id,
    )


def _attendance_filters(
    class_id: Optional[str] = Query(None, alias="classId"),
    student_id: Optional[str] = Query(None, alias="studentId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    month: Optional[int] = Query(None, ge=1, le=12),
) -> ReportFilters:
    return ReportFilters(class_id=class_id, student_id=student_id, start_date=start_date, end_date=end_date, month=month)


def _run(kind: ReportKind, db: DatabaseService, filters: ReportFilters):
    """Runs one report and wraps it in the standard success envelope."""
    try:
        return {"success": True, "data": report_service.get_report(db=db, kind=kind, filters=filters)}
    except InvalidReportRequest as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.detail)
    except Exception as e:
        logger.error("Failed to build %s report: %s", kind.value, e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while generating the report.",
        )


@router.get("/grades", summary="Get Grade Report")
def get_grade_report(
    filters: ReportFilters = Depends(_grade_filters),
    db: DatabaseService = Depends(get_db_service),
):
    return _run(ReportKind.GRADES, db, filters)


@router.get("/attendance", summary="Get Attendance Report")
def get_attendance_report(
    filters: ReportFilters = Depends(_attendance_filters),
    db: DatabaseService = Depends(get_db_service),
):
    return _run(ReportKind.ATTENDANCE, db, filters)


@router.get("/teacher-performance", summary="Get Teacher Performance Report")
def get_teacher_performance_report(
    academic_year_id: Optional[str] = Query(None, alias="academicYearId"),
    semester: Optional[str] = Query(None),
    db: DatabaseService = Depends(get_db_service),
):
    # The filters are echoed only; teacher activity is not scoped by year.
    filters = ReportFilters(academic_year_id=academic_year_id, semester=semester)
    return _run(ReportKind.TEACHER_PERFORMANCE, db, filters)


@router.get("/class-performance", summary="Get Class Performance Report")
def get_class_performance_report(
    academic_year_id: Optional[str] = Query(None, alias="academicYearId"),
    db: DatabaseService = Depends(get_db_service),
):
    return _run(ReportKind.CLASS_PERFORMANCE, db, ReportFilters(academic_year_id=academic_year_id))


@router.get(
    "/export",
    summary="Export a Report",
    description="Downloads a report as CSV or an Excel workbook, or returns its flat rows as JSON.",
    responses={400: {"description": "Unknown report type or export format"}},
)
def export_report(
    report_type: str = Query(..., alias="type"),
    export_format: Optional[str] = Query("json", alias="format"),
    class_id: Optional[str] = Query(None, alias="classId"),
    subject_id: Optional[str] = Query(None, alias="subjectId"),
    academic_year_id: Optional[str] = Query(None, alias="academicYearId"),
    semester: Optional[str] = Query(None),
    student_id: Optional[str] = Query(None, alias="studentId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: DatabaseService = Depends(get_db_service),
):
    filters = ReportFilters(
        class_id=class_id, subject_id=subject_id, academic_year_id=academic_year_id, semester=semester,
        student_id=student_id, start_date=start_date, end_date=end_date, month=month,
    )
    try:
        result = report_service.export_report(
            db=db, report_type=report_type, export_format=export_format, filters=filters
        )
    except InvalidReportRequest as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.detail)
    except Exception as e:
        logger.error("Failed to export %s report: %s", report_type, e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while exporting the report.",
        )

    if isinstance(result, report_service.ExportFile):
        return Response(
            content=result.content,
            media_type=result.media_type,
            # An explicit Content-Type keeps Starlette from appending a charset.
            headers={
                "Content-Type": result.media_type,
                "Content-Disposition": f"attachment; filename={result.filename}",
            },
        )
    return {"success": True, "data": result}
