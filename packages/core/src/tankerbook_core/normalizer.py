"""Entry normalization.

Rows come back from the entry store (or from entry forms) as loosely typed
mappings: numbers may arrive as text, blanks as empty strings, times with
or without seconds. This module turns them into validated ``Entry`` and
``Label`` models before anything is aggregated.

Rules:
- empty string / whitespace / None in a numeric field means "not entered"
  and becomes None, never 0
- an unparsable, negative, non-finite or oversized optional number also
  becomes None
- a missing or malformed time or date is a ValidationError
- driver status must be "present", "absent" or blank; a driver-status
  label additionally requires it
"""

import datetime
import re
from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError
from .models import DRIVER_ONLY_FIELDS, DriverStatus, Entry, Label, LabelMode

logger = structlog.get_logger()

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])(?::([0-5][0-9]))?$")

_DECIMAL_FIELDS = ("cash_amount", "total_km", "cash_taken")

# Largest accepted amount or distance; keeps month sums renderable at two places.
MAX_AMOUNT = Decimal("999999999999.99")

MAX_COUNT = 999_999_999

_LEADING_DIGITS = re.compile(r"^\d+")


def is_valid_time(text: str) -> bool:
    """Check an H:MM / HH:MM (24-hour) time string, seconds optional."""
    return bool(TIME_PATTERN.match(text.strip())) if isinstance(text, str) else False


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Parse a non-negative finite amount up to MAX_AMOUNT; anything else is None."""
    if _is_blank(value) or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite() or number < 0 or number > MAX_AMOUNT:
        return None
    # "-0" parses as negative zero
    return number.copy_abs()


def parse_count(value: Any) -> Optional[int]:
    """Parse a non-negative integer count up to MAX_COUNT.

    Text is read by its leading digits, as integer parsing of form text
    does: "3.7" -> 3, "1e3" -> 1, "-2" -> None.
    """
    if _is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, int):
        count = value
    else:
        match = _LEADING_DIGITS.match(str(value).strip())
        if not match or len(match.group()) > len(str(MAX_COUNT)):
            return None
        count = int(match.group())
    if count < 0 or count > MAX_COUNT:
        return None
    return count


def _prefix(position: Optional[int]) -> str:
    return f"Entry #{position}" if position is not None else "Entry"


def _parse_time(value: Any, position: Optional[int]) -> datetime.time:
    if isinstance(value, datetime.time):
        return value.replace(second=0, microsecond=0, tzinfo=None)
    if _is_blank(value):
        raise ValidationError(
            f"{_prefix(position)} is missing a time.",
            field="time",
            constraint="HH:MM, 24-hour clock",
        )
    match = TIME_PATTERN.match(str(value).strip())
    if not match:
        raise ValidationError(
            f"{_prefix(position)} has an invalid time: {value!r}.",
            field="time",
            value=value,
            constraint="HH:MM, 24-hour clock",
        )
    return datetime.time(int(match.group(1)), int(match.group(2)))


def _parse_date(value: Any, position: Optional[int]) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if _is_blank(value):
        raise ValidationError(
            f"{_prefix(position)} is missing a date.",
            field="date",
            constraint="YYYY-MM-DD",
        )
    try:
        return datetime.date.fromisoformat(str(value).strip()[:10])
    except ValueError as e:
        raise ValidationError(
            f"{_prefix(position)} has an invalid date: {value!r}.",
            field="date",
            value=value,
            constraint="YYYY-MM-DD",
        ) from e


def _parse_status(value: Any, position: Optional[int]) -> Optional[DriverStatus]:
    if isinstance(value, DriverStatus):
        return value
    if _is_blank(value):
        return None
    try:
        return DriverStatus(value)
    except ValueError as e:
        raise ValidationError(
            f"{_prefix(position)} has an invalid driver status: {value!r}.",
            field="driver_status",
            value=value,
            constraint="Exactly one of: present, absent",
        ) from e


def _optional_text(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    return str(value).strip()


def normalize_entry(
    raw: Mapping[str, Any],
    label: Optional[Label] = None,
    *,
    entry_date: Optional[datetime.date] = None,
    position: Optional[int] = None,
) -> Entry:
    """Validate and coerce one raw entry record.

    Args:
        raw: Store row or form values keyed by snake_case field name.
        label: Owning label; enables the mode checks when given.
        entry_date: Date to use when the record has none (day-entry forms).
        position: 1-based index used in error messages.

    Returns:
        A frozen Entry.

    Raises:
        ValidationError: Missing/malformed time or date, unknown driver
            status, or missing status on a driver-status label.
    """
    date_value = raw.get("date")
    if _is_blank(date_value) and entry_date is not None:
        date_value = entry_date

    values: dict[str, Any] = {
        "id": _optional_text(raw.get("id")),
        "date": _parse_date(date_value, position),
        "time": _parse_time(raw.get("time"), position),
        "total_tankers": parse_count(raw.get("total_tankers")),
        "driver_status": _parse_status(raw.get("driver_status"), position),
        "notes": _optional_text(raw.get("notes")),
        "diesel_added": parse_decimal(raw.get("diesel_added")) or Decimal("0"),
    }
    for field in _DECIMAL_FIELDS:
        values[field] = parse_decimal(raw.get(field))
        if values[field] is None and not _is_blank(raw.get(field)):
            logger.debug("optional_value_dropped", field=field, value=str(raw.get(field)))

    if label is not None:
        if label.mode == LabelMode.DRIVER_STATUS and values["driver_status"] is None:
            raise ValidationError(
                f"{_prefix(position)} is missing a driver status.",
                field="driver_status",
                constraint="Required for driver-status labels",
            )
        if label.mode == LabelMode.TANKER_COUNT:
            for field in DRIVER_ONLY_FIELDS:
                values[field] = None

    try:
        return Entry(**values)
    except PydanticValidationError as e:
        raise ValidationError(
            f"{_prefix(position)} is invalid: {e.errors()[0]['msg']}",
            details={"errors": e.errors(include_url=False)},
        ) from e


def normalize_entries(
    raws: Iterable[Mapping[str, Any]],
    label: Optional[Label] = None,
    *,
    entry_date: Optional[datetime.date] = None,
) -> list[Entry]:
    """Normalize a batch, failing on the first invalid record.

    Error messages name the record's 1-based position ("Entry #3 is
    missing a time.").
    """
    entries = [
        normalize_entry(raw, label, entry_date=entry_date, position=i)
        for i, raw in enumerate(raws, 1)
    ]
    logger.debug("entries_normalized", count=len(entries), label=label.name if label else None)
    return entries


def normalize_label(raw: Mapping[str, Any]) -> Label:
    """Build a Label from a store row.

    The store keeps the mode as an ``is_driver_status`` boolean; a ``mode``
    key is accepted as well.
    """
    if "mode" in raw and not _is_blank(raw.get("mode")):
        mode = raw["mode"]
    else:
        mode = LabelMode.DRIVER_STATUS if raw.get("is_driver_status") else LabelMode.TANKER_COUNT

    values: dict[str, Any] = {
        "id": _optional_text(raw.get("id")),
        "name": raw.get("name") or "",
        "mode": mode,
        "is_pinned": bool(raw.get("is_pinned")),
        "diesel_average": parse_decimal(raw.get("diesel_average")) or Decimal("0"),
        "current_range": parse_decimal(raw.get("current_range")) or Decimal("0"),
    }
    if not _is_blank(raw.get("color")):
        values["color"] = str(raw["color"]).strip()

    try:
        return Label(**values)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else None
        raise ValidationError(
            f"Invalid label: {first['msg']}",
            field=field,
            details={"errors": e.errors(include_url=False)},
        ) from e


__all__ = [
    "TIME_PATTERN",
    "is_valid_time",
    "parse_decimal",
    "parse_count",
    "normalize_entry",
    "normalize_entries",
    "normalize_label",
]
