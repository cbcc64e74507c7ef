"""Daily and monthly aggregation of normalized entries.

The aggregation is a pure function of (label, entries): nothing is cached
between calls and inputs are never mutated. Every fetch recomputes the
rollups from scratch.

Summing follows field presence, not label mode. Missing amounts add zero,
so tanker-mode and driver-mode totals accumulate independently and the
report picks which ones to show.
"""

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from typing import Union

import structlog

from .exceptions import AggregationError
from .models import DailyRollup, Entry, Label, MonthlyRollup

logger = structlog.get_logger()

_DECIMAL_TOTALS = ("total_cash", "total_km", "total_cash_taken", "total_diesel_added")


def derived_tanker_count(entry: Entry) -> int:
    """Explicit tanker count, else 1, else 0 for an absent driver."""
    return entry.derived_tankers


def group_entries_by_date(entries: Iterable[Entry]) -> dict[date, list[Entry]]:
    """Bucket entries by calendar date, keeping first-seen order."""
    grouped: dict[date, list[Entry]] = {}
    for entry in entries:
        grouped.setdefault(entry.date, []).append(entry)
    return grouped


def aggregate_daily(entries: Iterable[Entry]) -> dict[str, DailyRollup]:
    """Group entries by day of month and sum each day.

    Days appear in first-seen order; callers that need ascending days sort
    (``aggregate_monthly`` does).
    """
    daily: dict[str, DailyRollup] = {}
    for entry in entries:
        rollup = daily.get(f"{entry.day:02d}")
        if rollup is None:
            rollup = DailyRollup(day=entry.day)
            daily[rollup.key] = rollup
        rollup.add(entry)
    return daily


def _check_finite(rollup: DailyRollup) -> None:
    for field in _DECIMAL_TOTALS:
        value = getattr(rollup, field)
        if not isinstance(value, Decimal) or not value.is_finite():
            raise AggregationError(
                f"Non-numeric total on day {rollup.day}",
                day=rollup.day,
                field=field,
                details={"value": str(value)},
            )


def aggregate_monthly(
    daily: Union[Mapping[str, DailyRollup], Iterable[DailyRollup]],
    *,
    year: int,
    month: int,
) -> MonthlyRollup:
    """Fold day rollups into month totals.

    Totals are exact Decimal sums of the day totals, so the fold order does
    not matter. No days gives zero totals and an empty day mapping.

    Raises:
        AggregationError: A day does not exist in the month, appears
            twice, or carries a non-finite total.
    """
    days = list(daily.values()) if isinstance(daily, Mapping) else list(daily)
    monthly = MonthlyRollup(year=year, month=month)

    ordered: dict[str, DailyRollup] = {}
    for rollup in sorted(days, key=lambda d: d.day):
        try:
            date(year, month, rollup.day)
        except ValueError as e:
            raise AggregationError(
                f"Day {rollup.day} does not exist in {monthly.month_name} {year}",
                day=rollup.day,
            ) from e
        if rollup.key in ordered:
            raise AggregationError(f"Day {rollup.day} aggregated twice", day=rollup.day)
        _check_finite(rollup)

        ordered[rollup.key] = rollup
        monthly.total_tankers += rollup.total_tankers
        monthly.total_cash += rollup.total_cash
        monthly.total_km += rollup.total_km
        monthly.total_cash_taken += rollup.total_cash_taken
        monthly.total_diesel_added += rollup.total_diesel_added
        monthly.total_present_count += rollup.present_count
        monthly.total_absent_count += rollup.absent_count

    monthly.days = ordered
    return monthly


def summarize_month(
    label: Label,
    entries: Iterable[Entry],
    *,
    year: int,
    month: int,
) -> MonthlyRollup:
    """Aggregate one label's entries for one calendar month.

    Raises:
        AggregationError: An entry dated outside the requested month.
    """
    entries = list(entries)
    for entry in entries:
        if (entry.date.year, entry.date.month) != (year, month):
            raise AggregationError(
                f"Entry dated {entry.date.isoformat()} is outside {year}-{month:02d}",
                day=entry.day,
                details={"label": label.name},
            )

    monthly = aggregate_monthly(aggregate_daily(entries), year=year, month=month)
    logger.info(
        "month_aggregated",
        label=label.name,
        mode=label.mode.value,
        year=year,
        month=month,
        days=len(monthly.days),
        entries=len(entries),
        total_tankers=monthly.total_tankers,
    )
    return monthly


def calendar_badges(monthly: MonthlyRollup) -> dict[int, int]:
    """Day number -> day total tankers, for the calendar view."""
    return {d.day: d.total_tankers for d in monthly.sorted_days()}


__all__ = [
    "derived_tanker_count",
    "group_entries_by_date",
    "aggregate_daily",
    "aggregate_monthly",
    "summarize_month",
    "calendar_badges",
]
