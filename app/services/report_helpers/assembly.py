# /app/services/report_helpers/assembly.py

"""
Report assembly: composes the grouper and the statistics calculator into the
four fixed report shapes.

Every builder is a pure function of the record set it is given. It allocates
its own buckets, touches nothing outside its call frame, and never re-queries.
The order in which views are computed is also the key order of the returned
dict, so the JSON output is stable across runs.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from ...models.report_model import (
    ABSENCE_STATUSES,
    AttendanceRecord,
    AttendanceStatus,
    ClassActivity,
    ClassActivityRecord,
    GradeRecord,
    GradeType,
    ReportFilters,
    ReportKind,
    TeacherActivity,
    TeacherActivityRecord,
)
from .grouping import (
    class_key,
    composite_key,
    count_distinct,
    date_key,
    display,
    distinct_values,
    first_present,
    group,
    group_nested,
    seed,
    student_key,
    subject_key,
    teacher_key,
)
from .statistics import (
    format_average,
    format_percentage,
    format_ratio,
    summarize,
    summarize_categorical,
)

logger = logging.getLogger(__name__)

STATUSES = tuple(AttendanceStatus)
GRADE_TYPES = tuple(GradeType)
PRESENT = AttendanceStatus.PRESENT.value


# --- Shared Helpers ---

def _label(bucket: Sequence[Any], attr: str) -> Any:
    """The first non-null display value in a bucket, or the Unknown placeholder."""
    return display(first_present(*(getattr(r, attr, None) for r in bucket)))


def _echo(filters: Optional[ReportFilters]) -> Dict[str, Any]:
    if filters is None:
        return {}
    return filters.model_dump(mode="json", by_alias=True, exclude_none=True)


def _details(records: Sequence[Any]) -> List[Dict[str, Any]]:
    return [r.model_dump(mode="json", by_alias=True) for r in records]


def _score_stats(bucket: Sequence[GradeRecord]) -> Dict[str, Any]:
    stats = summarize(r.score for r in bucket)
    return {
        "count": stats["count"],
        "total": stats["sum"],
        "average": stats["average"],
        "min": stats["min"],
        "max": stats["max"],
    }


def _status_of(record: Any) -> Optional[str]:
    return record.status


def _attendance_stats(bucket: Sequence[Any]) -> Dict[str, Any]:
    """Status counts plus present/absent percentages for one bucket of marks."""
    categorical = summarize_categorical(bucket, _status_of, STATUSES)
    counts, total = categorical["counts"], categorical["total"]
    absent = sum(counts[s.value] for s in ABSENCE_STATUSES)
    return {
        "total": total,
        **counts,
        "attendancePercentage": format_percentage(counts[PRESENT], total),
        "absentPercentage": format_percentage(absent, total),
    }


def _student_header(bucket: Sequence[Any]) -> Dict[str, Any]:
    return {
        "student": _label(bucket, "student_name"),
        "studentCode": _label(bucket, "student_code"),
        "class": _label(bucket, "class_name"),
    }


# --- Grade Report ---

def build_grade_report(records: Sequence[GradeRecord], filters: Optional[ReportFilters] = None) -> Dict[str, Any]:
    """
    Builds the grade report: global summary, per-subject and per-student
    statistics (with a per-subject drill-down inside each student) and the
    per-grade-type breakdown.
    """
    overall = summarize(r.score for r in records)
    summary = {
        "totalGrades": overall["count"],
        "averageScore": overall["average"],
        "highestScore": overall["max"],
        "lowestScore": overall["min"],
        "filters": _echo(filters),
    }

    by_subject = {
        key: {"subject": _label(bucket, "subject_name"), **_score_stats(bucket)}
        for key, bucket in group(records, subject_key).items()
    }

    student_buckets = group(records, student_key)
    nested = group_nested(records, student_key, subject_key)
    by_student = {}
    for key, bucket in student_buckets.items():
        by_student[key] = {
            **_student_header(bucket),
            **_score_stats(bucket),
            "bySubject": {
                subj: {"subject": _label(sub_bucket, "subject_name"), **_score_stats(sub_bucket)}
                for subj, sub_bucket in nested[key].items()
            },
        }

    by_grade_type = {}
    for key, bucket in seed(GRADE_TYPES, group(records, lambda r: r.grade_type)).items():
        stats = _score_stats(bucket)
        by_grade_type[key] = {"count": stats["count"], "total": stats["total"], "average": stats["average"]}

    logger.debug(
        "Grade report assembled: %d records, %d subjects, %d students.",
        len(records), len(by_subject), len(by_student),
    )
    return {
        "summary": summary,
        "bySubject": by_subject,
        "byStudent": by_student,
        "byGradeType": by_grade_type,
        "details": _details(records),
    }


# --- Attendance Report ---

def build_attendance_report(records: Sequence[AttendanceRecord], filters: Optional[ReportFilters] = None) -> Dict[str, Any]:
    """
    Builds the attendance report. Percentages are over all marks in the bucket;
    Sick, Excused and Absent count as absent, Late counts as neither.
    """
    overall = _attendance_stats(records)
    echo = _echo(filters)
    summary = {
        "totalRecords": len(records),
        "totalStudents": count_distinct(records, student_key),
        "dateRange": {"start": echo.get("startDate"), "end": echo.get("endDate")},
        "attendancePercentage": overall["attendancePercentage"],
        "absentPercentage": overall["absentPercentage"],
        "filters": echo,
    }

    by_subject = {
        key: {"subject": _label(bucket, "subject_name"), **_attendance_stats(bucket)}
        for key, bucket in group(records, subject_key).items()
    }

    nested = group_nested(records, student_key, subject_key)
    by_student = {}
    for key, bucket in group(records, student_key).items():
        by_student[key] = {
            **_student_header(bucket),
            **_attendance_stats(bucket),
            "bySubject": {
                subj: {"subject": _label(sub_bucket, "subject_name"), **_attendance_stats(sub_bucket)}
                for subj, sub_bucket in nested[key].items()
            },
            "details": [
                {
                    "date": r.date.isoformat(),
                    "status": display(r.status),
                    "subject": r.subject_name,
                    "notes": r.notes,
                }
                for r in bucket
            ],
        }

    overall_counts = summarize_categorical(records, _status_of, STATUSES)
    by_status = {
        key: {
            "count": len(bucket),
            "studentCount": count_distinct(bucket, student_key),
            "percentage": overall_counts["percentages"][key],
        }
        for key, bucket in seed(STATUSES, group(records, _status_of)).items()
    }

    by_date = {}
    for key, bucket in group(records, date_key).items():
        stats = _attendance_stats(bucket)
        stats.pop("absentPercentage")
        by_date[key] = {"date": key, **stats}

    logger.debug(
        "Attendance report assembled: %d records, %d students, %d dates.",
        len(records), len(by_student), len(by_date),
    )
    return {
        "summary": summary,
        "bySubject": by_subject,
        "byStudent": by_student,
        "byStatus": by_status,
        "byDate": by_date,
        "details": _details(records),
    }


# --- Teacher Performance Report ---

def _teacher_metrics(bucket: Sequence[TeacherActivityRecord]) -> Dict[str, Any]:
    schedules = [r for r in bucket if r.activity == TeacherActivity.SCHEDULE]
    assignments = [r for r in bucket if r.activity == TeacherActivity.ASSIGNMENT]
    total_submissions = sum(r.submission_count for r in assignments)
    return {
        "totalSchedules": len(schedules),
        "totalClasses": count_distinct(schedules, class_key),
        "totalSubjects": count_distinct(schedules, subject_key),
        "totalClassSubjects": count_distinct(schedules, lambda r: composite_key(class_key(r), subject_key(r))),
        "totalAssignments": len(assignments),
        "totalSubmissions": total_submissions,
        "averageSubmissionsPerAssignment": format_ratio(total_submissions, len(assignments)),
    }


def build_teacher_performance_report(
    records: Sequence[TeacherActivityRecord], filters: Optional[ReportFilters] = None
) -> Dict[str, Any]:
    by_teacher = {
        key: {
            "id": first_present(*(r.teacher_id for r in bucket)),
            "name": _label(bucket, "teacher_name"),
            "code": _label(bucket, "teacher_code"),
            "email": first_present(*(r.email for r in bucket)),
            "specialization": first_present(*(r.specialization for r in bucket)),
            "metrics": _teacher_metrics(bucket),
        }
        for key, bucket in group(records, teacher_key).items()
    }
    summary = {
        "totalTeachers": len(by_teacher),
        "totalSchedules": sum(t["metrics"]["totalSchedules"] for t in by_teacher.values()),
        "totalAssignments": sum(t["metrics"]["totalAssignments"] for t in by_teacher.values()),
        "filters": _echo(filters),
    }
    logger.debug("Teacher performance report assembled: %d teachers.", len(by_teacher))
    return {"summary": summary, "byTeacher": by_teacher, "details": _details(records)}


# --- Class Performance Report ---

def _rows_of(bucket: Sequence[ClassActivityRecord], activity: ClassActivity) -> List[ClassActivityRecord]:
    return [r for r in bucket if r.activity == activity]


def _class_metrics(bucket: Sequence[ClassActivityRecord]) -> Dict[str, Any]:
    grades = _rows_of(bucket, ClassActivity.GRADE)
    marks = _rows_of(bucket, ClassActivity.ATTENDANCE)
    subjects = distinct_values(_rows_of(bucket, ClassActivity.SCHEDULE), lambda r: r.subject_name)
    return {
        "totalStudents": count_distinct(_rows_of(bucket, ClassActivity.ENROLLMENT), student_key),
        "averageGrade": format_average(sum(r.score or 0 for r in grades), len(grades)),
        "attendanceRate": format_percentage(sum(1 for r in marks if r.status == PRESENT), len(marks)),
        "totalSubjects": len(subjects),
        "subjects": subjects,
    }


def build_class_performance_report(
    records: Sequence[ClassActivityRecord], filters: Optional[ReportFilters] = None
) -> Dict[str, Any]:
    by_class = {
        key: {
            "id": first_present(*(r.class_id for r in bucket)),
            "name": _label(bucket, "class_name"),
            "gradeLevel": first_present(*(r.grade_level for r in bucket)),
            "major": first_present(*(r.major_name for r in bucket)),
            "homeroomTeacher": first_present(*(r.homeroom_teacher for r in bucket)),
            "metrics": _class_metrics(bucket),
        }
        for key, bucket in group(records, class_key).items()
    }
    overall = _class_metrics(records)
    summary = {
        "totalClasses": len(by_class),
        "totalStudents": overall["totalStudents"],
        "averageGrade": overall["averageGrade"],
        "attendanceRate": overall["attendanceRate"],
        "filters": _echo(filters),
    }
    logger.debug("Class performance report assembled: %d classes.", len(by_class))
    return {"summary": summary, "byClass": by_class, "details": _details(records)}


# --- Dispatch ---

BUILDERS: Dict[ReportKind, Callable[..., Dict[str, Any]]] = {
    ReportKind.GRADES: build_grade_report,
    ReportKind.ATTENDANCE: build_attendance_report,
    ReportKind.TEACHER_PERFORMANCE: build_teacher_performance_report,
    ReportKind.CLASS_PERFORMANCE: build_class_performance_report,
}


def assemble(kind: ReportKind, records: Sequence[Any], filters: Optional[ReportFilters] = None) -> Dict[str, Any]:
    return BUILDERS[ReportKind(kind)](records, filters)
