"""
Weekly schedule building for groups.

Two variants share the weekday mapping and the duration arithmetic:

- ``build``: the lenient form used when creating groups. A slot whose end
  is not after its start (or whose times cannot be read) gets a 60 minute
  duration instead of being rejected.
- ``build_strict``: rejects slots shorter than 30 or longer than 300 minutes
  and validity windows over 180 days, reporting every problem at once.

Durations are plain same-day wall-clock differences; slots crossing
midnight are not supported.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from dateutil.relativedelta import relativedelta

from libs.common.config import get_settings
from libs.common.errors import ValidationFailed
from services.staff_service.schemas.schedule import (
    ScheduleEntry,
    ScheduleRow,
    ScheduleSlot,
)

WEEKDAY_LABELS = {
    "Понедельник": "monday",
    "Вторник": "tuesday",
    "Среда": "wednesday",
    "Четверг": "thursday",
    "Пятница": "friday",
    "Суббота": "saturday",
    "Воскресенье": "sunday",
}


class ScheduleValidationError(ValidationFailed):
    code = "schedule_invalid"


def day_key(label: str) -> str:
    """Canonical weekday key for a display label; unknown labels are lower-cased."""
    return WEEKDAY_LABELS.get(label, label.lower())


def _parse_time(value: str) -> Optional[datetime]:
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value.strip(), fmt)
        except (ValueError, AttributeError):
            continue
    return None


def slot_minutes(start: str, end: str) -> Optional[int]:
    """``end - start`` in whole minutes, or None if either time is unreadable."""
    start_at = _parse_time(start)
    end_at = _parse_time(end)
    if start_at is None or end_at is None:
        return None
    return int((end_at - start_at).total_seconds() // 60)


def _add_slot(pattern: dict, row: ScheduleRow, duration: int) -> None:
    pattern.setdefault(day_key(row.day), []).append(
        ScheduleSlot(time=row.start, duration=duration)
    )


def build(
    rows: Sequence[ScheduleRow],
    valid_from: Optional[str] = None,
    valid_until: Optional[str] = None,
) -> ScheduleEntry:
    fallback = get_settings().SCHEDULE_FALLBACK_DURATION
    pattern: dict[str, list[ScheduleSlot]] = {}
    for row in rows:
        minutes = slot_minutes(row.start, row.end)
        _add_slot(pattern, row, minutes if minutes and minutes > 0 else fallback)
    return ScheduleEntry(
        weekly_pattern=pattern,
        valid_from=valid_from or "",
        valid_until=valid_until or "",
    )


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def build_strict(
    rows: Sequence[ScheduleRow],
    valid_from: Optional[str],
    valid_until: Optional[str],
) -> ScheduleEntry:
    """
    Build a schedule or refuse it.

    Raises:
        ScheduleValidationError: keyed ``slots.<n>``, ``valid_from`` and
            ``valid_until`` for each problem found.
    """
    settings = get_settings()
    errors: dict[str, str] = {}
    pattern: dict[str, list[ScheduleSlot]] = {}

    for n, row in enumerate(rows):
        minutes = slot_minutes(row.start, row.end)
        if minutes is None:
            errors[f"slots.{n}"] = "time_invalid"
        elif not (
            settings.SCHEDULE_MIN_DURATION <= minutes <= settings.SCHEDULE_MAX_DURATION
        ):
            errors[f"slots.{n}"] = "duration_out_of_range"
        else:
            _add_slot(pattern, row, minutes)

    start = _parse_date(valid_from)
    end = _parse_date(valid_until)
    if start is None:
        errors["valid_from"] = "date_invalid"
    if end is None:
        errors["valid_until"] = "date_invalid"
    if start and end:
        if end < start:
            errors["valid_until"] = "before_valid_from"
        elif end - start > timedelta(days=settings.SCHEDULE_MAX_SPAN_DAYS):
            errors["valid_until"] = "span_too_long"

    if errors:
        raise ScheduleValidationError(errors, "Schedule is invalid")

    return ScheduleEntry(
        weekly_pattern=pattern, valid_from=valid_from, valid_until=valid_until
    )


def default_validity(today: date) -> tuple[str, str]:
    """Today through the same day three months later (clamped to month end)."""
    until = today + relativedelta(months=3)
    return today.isoformat(), until.isoformat()
