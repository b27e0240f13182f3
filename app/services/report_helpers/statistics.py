# /app/services/report_helpers/statistics.py

"""
Statistics for report buckets, and the single place where numbers are rounded
and formatted for output.

Averages are emitted as strings with exactly 2 decimal places and percentages
with exactly 1, rounding half away from zero. Empty input is a normal case (a
student with no grades yet) and always yields zeros, never NaN or an error.
"""

from decimal import Decimal, ROUND_HALF_UP
from functools import reduce
from typing import Any, Callable, Dict, Iterable, NamedTuple, Optional, Sequence, Union

from .grouping import UNKNOWN

Number = Union[int, float, Decimal]

AVERAGE_PLACES = 2
PERCENTAGE_PLACES = 1


# --- Rounding & Formatting ---

def _to_decimal(value: Number) -> Decimal:
    # str() first so 0.1 becomes Decimal("0.1"), not its binary expansion.
    return value if isinstance(value, Decimal) else Decimal(str(value))


def round_half_away(value: Number, places: int) -> Decimal:
    """ROUND_HALF_UP in `decimal` rounds ties away from zero, for negatives too."""
    return _to_decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_fixed(value: Number, places: int) -> str:
    return f"{round_half_away(value, places):.{places}f}"


def safe_ratio(numerator: Number, denominator: Number, scale: Number = 1) -> Decimal:
    if not denominator:
        return Decimal(0)
    return _to_decimal(numerator) * _to_decimal(scale) / _to_decimal(denominator)


def format_average(total: Number, count: int) -> str:
    return format_fixed(safe_ratio(total, count), AVERAGE_PLACES)


def format_percentage(part: Number, whole: Number) -> str:
    return format_fixed(safe_ratio(part, whole, 100), PERCENTAGE_PLACES)


def format_ratio(part: Number, whole: Number) -> str:
    """A plain ratio with one decimal, e.g. submissions per assignment."""
    return format_fixed(safe_ratio(part, whole), PERCENTAGE_PLACES)


def plain_number(value: Number) -> Union[int, float]:
    """Renders whole numbers as ints so 80.0 serializes as 80."""
    if isinstance(value, Decimal):
        value = float(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


# --- Numeric Accumulation ---

class Accumulator(NamedTuple):
    """Running totals for one bucket. Adding a value returns a new accumulator."""
    count: int = 0
    total: Decimal = Decimal(0)
    minimum: Optional[Decimal] = None
    maximum: Optional[Decimal] = None

    def add(self, value: Number) -> "Accumulator":
        value = _to_decimal(value)
        return Accumulator(
            count=self.count + 1,
            total=self.total + value,
            minimum=value if self.minimum is None else min(self.minimum, value),
            maximum=value if self.maximum is None else max(self.maximum, value),
        )


def accumulate(values: Iterable[Number]) -> Accumulator:
    return reduce(Accumulator.add, values, Accumulator())


def summarize(values: Iterable[Number]) -> Dict[str, Any]:
    """
    Computes count, sum, average, min and max for a sequence of numbers.

    Args:
        values: Scores or other numeric payloads. Not re-validated here.

    Returns:
        A dict with `count`, `sum`, `average` (string, 2 decimals), `min` and
        `max`. For empty input `average` is "0.00" and min/max are 0.
    """
    acc = accumulate(values)
    return {
        "count": acc.count,
        "sum": plain_number(acc.total),
        "average": format_average(acc.total, acc.count),
        "min": plain_number(acc.minimum) if acc.minimum is not None else 0,
        "max": plain_number(acc.maximum) if acc.maximum is not None else 0,
    }


# --- Categorical Accumulation ---

def tally(records: Iterable[Any], category_of: Callable[[Any], Any], categories: Sequence[Any]) -> Dict[str, int]:
    """
    Counts records per category. Every category in `categories` is present,
    in enumeration order; an unexpected category gets its own entry after them.
    """
    def _step(counts: Dict[str, int], record: Any) -> Dict[str, int]:
        key = _category_name(category_of(record))
        return {**counts, key: counts.get(key, 0) + 1}

    seeded = {_category_name(c): 0 for c in categories}
    return reduce(_step, records, seeded)


def _category_name(category: Any) -> str:
    if category is None:
        return UNKNOWN
    return str(getattr(category, "value", category))


def summarize_categorical(
    records: Sequence[Any],
    category_of: Callable[[Any], Any],
    categories: Sequence[Any],
) -> Dict[str, Any]:
    """
    Per-category counts and percentages of the total.

    Returns:
        `{"total": n, "counts": {...}, "percentages": {...}}` where each
        percentage is a 1-decimal string and "0.0" when there are no records.
    """
    counts = tally(records, category_of, categories)
    total = sum(counts.values())
    return {
        "total": total,
        "counts": counts,
        "percentages": {k: format_percentage(v, total) for k, v in counts.items()},
    }
