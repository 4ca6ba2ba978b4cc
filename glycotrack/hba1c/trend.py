"""
HbA1c trend narrative.

Builds a short, deterministic description of how a series of HbA1c readings
has moved over time. Direction labels assume lower HbA1c is better: an
increase is reported as "rising" and a decrease as "improving". That mapping
is specific to HbA1c and should not be reused for other lab panels as-is.

Malformed rows never raise. Missing or unparsable values count as zero in
the arithmetic and are shown as "n/a"; unparsable dates are shown as "n/a".
"""
import math
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from glycotrack.config.constants import MISSING_VALUE_PLACEHOLDER, NO_HISTORY_MESSAGE

STABLE_THRESHOLD = Decimal("0.1")
ONE_DECIMAL = Decimal("0.1")
MAX_MAGNITUDE = Decimal(10) ** 26

_ZERO = Decimal(0)


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def coerce_date(raw: Any) -> Optional[date]:
    """Best-effort conversion of a stored date field, None when unusable."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str) and raw.strip():
        text = raw.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None


def coerce_value(raw: Any) -> Optional[Decimal]:
    """Best-effort conversion of a stored value field, None when unusable."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, float):
        if not math.isfinite(raw):
            return None
        value = Decimal(repr(raw))
    elif isinstance(raw, (int, str)):
        try:
            value = Decimal(str(raw).strip())
        except (InvalidOperation, ValueError):
            return None
    else:
        return None
    # Magnitudes this large cannot be a reading and would overflow one-decimal rendering
    if not value.is_finite() or abs(value) >= MAX_MAGNITUDE:
        return None
    return value


def format_percentage(value: Any) -> str:
    """
    Render a value with exactly one decimal place, rounding halves away from zero.

    Returns the "n/a" placeholder when the value is missing or unusable.
    """
    number = value if isinstance(value, Decimal) else coerce_value(value)
    if number is None:
        return MISSING_VALUE_PLACEHOLDER
    try:
        return str(number.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return MISSING_VALUE_PLACEHOLDER


def format_date(value: Optional[date]) -> str:
    return value.isoformat() if value is not None else MISSING_VALUE_PLACEHOLDER


def classify_direction(change: Decimal) -> str:
    if abs(change) < STABLE_THRESHOLD:
        return "stable"
    return "rising" if change > 0 else "improving"


def _normalize(history: Sequence[Any]) -> List[Tuple[Optional[date], Optional[Decimal]]]:
    rows = [(coerce_date(_field(r, "reading_date")), coerce_value(_field(r, "value"))) for r in history]
    # Undated readings go first; sorted() leaves the caller's sequence untouched
    return sorted(rows, key=lambda row: (row[0] is not None, row[0] or date.min))


def _summary_date(summary: Any) -> Optional[date]:
    report_date = _field(summary, "report_date")
    if report_date is None:
        nested = _field(summary, "reports")
        if nested is not None:
            report_date = _field(nested, "report_date")
    return coerce_date(report_date) or coerce_date(_field(summary, "created_at"))


def build_trend_summary(history: Optional[Sequence[Any]], previous_summaries: Optional[Sequence[Any]] = None) -> str:
    """
    Describe the HbA1c trend across ``history``.

    Args:
        history: Readings in any order, as models or mappings with
            ``reading_date`` and ``value``.
        previous_summaries: Prior AI summaries, most recent first. Only the
            first one is used, to cite when the last summary was recorded.

    Returns:
        The trend narrative, or a fixed message when there is no history.
    """
    if not history:
        return NO_HISTORY_MESSAGE

    rows = _normalize(history)
    first_date, first_value = rows[0]
    last_date, last_value = rows[-1]

    change = (last_value or _ZERO) - (first_value or _ZERO)
    direction = classify_direction(change)

    total = sum((value or _ZERO for _, value in rows), _ZERO)
    average = total / (len(rows) or 1)

    summary = f"Latest HbA1c {format_percentage(last_value)}% on {format_date(last_date)}. "
    summary += f"Trend looks {direction} from {format_percentage(first_value)}% to {format_percentage(last_value)}%. "
    summary += f"Average across {len(rows)} readings: {format_percentage(average)}%."

    if previous_summaries:
        last_summary_date = _summary_date(previous_summaries[0])
        if last_summary_date is not None:
            summary += f" Last summary recorded on {last_summary_date.isoformat()}."

    return summary
