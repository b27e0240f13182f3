# /app/services/report_helpers/grouping.py

"""
Dimension grouping for the reporting engine.

Every function here is a pure fold over an in-memory record sequence. Buckets
are plain dicts, so bucket order is the order in which each key was first
observed in the input. A record whose key cannot be resolved is never dropped:
it lands in the shared `UNKNOWN` bucket, which keeps the total number of
grouped records equal to the number of input records.
"""

from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence, TypeVar

R = TypeVar("R")

UNKNOWN = "Unknown"

# ASCII unit separator. It never appears in identifiers, so joined parts
# cannot run together into a key belonging to another entity.
KEY_SEPARATOR = "\x1f"


def display(value: Any) -> Any:
    """Returns the placeholder for a missing display attribute."""
    return UNKNOWN if value is None or value == "" else value


def normalize_key(value: Any) -> str:
    if value is None:
        return UNKNOWN
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):
        value = value.value
    text = str(value)
    return text if text.strip() else UNKNOWN


def composite_key(*parts: Any) -> str:
    """
    Joins identifier parts into one key. If any part is missing the whole key
    collapses to `UNKNOWN`, since a half-known composite identifies nothing.
    """
    normalized = [normalize_key(p) for p in parts]
    if UNKNOWN in normalized:
        return UNKNOWN
    return KEY_SEPARATOR.join(normalized)


def first_present(*candidates: Optional[Any]) -> Optional[Any]:
    for candidate in candidates:
        if candidate is not None and candidate != "":
            return candidate
    return None


def group(records: Iterable[R], key_fn: Callable[[R], Any]) -> Dict[str, List[R]]:
    """Partitions records into buckets keyed by `key_fn`, in first-seen order."""
    buckets: Dict[str, List[R]] = {}
    for record in records:
        key = normalize_key(key_fn(record))
        buckets.setdefault(key, []).append(record)
    return buckets


def group_nested(
    records: Iterable[R],
    outer_key_fn: Callable[[R], Any],
    inner_key_fn: Callable[[R], Any],
) -> Dict[str, Dict[str, List[R]]]:
    """Two-level grouping, e.g. each student's records split again by subject."""
    return {
        outer: group(bucket, inner_key_fn)
        for outer, bucket in group(records, outer_key_fn).items()
    }


def seed(keys: Sequence[Hashable], grouped: Dict[str, List[R]]) -> Dict[str, List[R]]:
    """
    Orders buckets for a fixed enumeration: every key in `keys` appears (empty
    if unseen), followed by any unexpected keys in first-seen order.
    """
    seeded: Dict[str, List[R]] = {normalize_key(k): [] for k in keys}
    for key, bucket in grouped.items():
        seeded[key] = bucket
    return seeded


def count_distinct(records: Iterable[R], key_fn: Callable[[R], Any]) -> int:
    """Counts distinct resolvable keys; unresolvable ones are not counted."""
    return len([k for k in group(records, key_fn) if k != UNKNOWN])


def distinct_values(records: Iterable[R], value_fn: Callable[[R], Any]) -> List[Any]:
    """Distinct non-null values in first-seen order."""
    seen: Dict[Any, None] = {}
    for record in records:
        value = value_fn(record)
        if value is not None:
            seen.setdefault(value, None)
    return list(seen)


# --- Dimension Key Extractors ---
# Keys use identifiers rather than display names, so two students who share a
# name are never merged. A record without an identifier goes to the Unknown
# bucket.

def student_key(record) -> Optional[str]:
    if record.student_id:
        return record.student_id
    if getattr(record, "student_code", None):
        return composite_key("code", record.student_code)
    return None

def subject_key(record) -> Optional[str]:
    return record.subject_id or None

def class_key(record) -> Optional[str]:
    return record.class_id or None

def teacher_key(record) -> Optional[str]:
    if record.teacher_id:
        return record.teacher_id
    if record.teacher_code:
        return composite_key("code", record.teacher_code)
    return None

def date_key(record) -> Optional[str]:
    return record.date
