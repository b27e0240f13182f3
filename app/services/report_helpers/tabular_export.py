# /app/services/report_helpers/tabular_export.py

"""
Flat tabular output for report downloads.

The CSV writer is deliberately minimal: the header is the key set of the FIRST
row, every value is wrapped in double quotes with inner quotes doubled, and
lines are joined with "\\n". Rows with a different key set than the first one
will not line up with the header; callers must pass homogeneous rows.
"""

import io
from typing import Any, Dict, List, Mapping, Sequence

import pandas as pd
from openpyxl.styles import Font

from ...models.report_model import ReportKind
from .statistics import plain_number

SHEET_NAME = "Report"


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        value = plain_number(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def escape_field(value: Any) -> str:
    return '"' + _to_text(value).replace('"', '""') + '"'


def to_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    """
    Serializes rows to CSV text.

    Returns an empty string for an empty row set. A key missing from a later
    row is written as an empty field.
    """
    if not rows:
        return ""
    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(escape_field(row.get(h)) for h in headers))
    return "\n".join(lines)


def to_excel(rows: Sequence[Mapping[str, Any]]) -> bytes:
    """Writes the same flat rows to a single-sheet .xlsx workbook with a bold header."""
    df = pd.DataFrame(list(rows))
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
        sheet = writer.sheets[SHEET_NAME]
        for cell in sheet[1]:
            cell.font = Font(bold=True)
    return buffer.getvalue()


# --- Row Projection ---

def _flatten_entity(entity: Mapping[str, Any]) -> Dict[str, Any]:
    """Lifts an entity's `metrics` into the row; list metrics become "; "-joined text."""
    row = {k: v for k, v in entity.items() if k != "metrics"}
    for key, value in entity.get("metrics", {}).items():
        row[key] = "; ".join(str(v) for v in value) if isinstance(value, list) else value
    return row


def export_rows(kind: ReportKind, records: Sequence[Any], report: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """
    Chooses the flat rows a download is built from: the record set itself for
    grade and attendance reports, one row per teacher or class otherwise.
    """
    kind = ReportKind(kind)
    if kind == ReportKind.TEACHER_PERFORMANCE:
        return [_flatten_entity(t) for t in report["byTeacher"].values()]
    if kind == ReportKind.CLASS_PERFORMANCE:
        return [_flatten_entity(c) for c in report["byClass"].values()]
    return [r.model_dump(mode="json", by_alias=True) for r in records]
