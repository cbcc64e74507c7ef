"""Month navigation state and fetch sequencing.

The viewed month is an immutable value passed into each load. Rapid
month switching can leave several fetches in flight, so a sequencer
decides whether a completed fetch is still the latest one issued before
its result reaches the view.
"""

import calendar
import itertools
from dataclasses import dataclass
from datetime import date
from typing import Optional

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class MonthCursor:
    """A calendar month being viewed."""

    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be 1-12, got {self.month}")
        if not 1900 <= self.year <= 2100:
            raise ValueError(f"year out of range: {self.year}")

    @classmethod
    def for_date(cls, day: date) -> "MonthCursor":
        return cls(day.year, day.month)

    @classmethod
    def current(cls) -> "MonthCursor":
        return cls.for_date(date.today())

    def shift(self, offset: int) -> "MonthCursor":
        """Move ``offset`` months forward (negative for backward)."""
        index = self.year * 12 + (self.month - 1) + offset
        return MonthCursor(index // 12, index % 12 + 1)

    def next(self) -> "MonthCursor":
        return self.shift(1)

    def previous(self) -> "MonthCursor":
        return self.shift(-1)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def start_date(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end_date(self) -> date:
        return date(self.year, self.month, self.days_in_month)

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]

    @property
    def label(self) -> str:
        """"March 2025"."""
        return f"{self.month_name} {self.year}"

    def contains(self, day: date) -> bool:
        return (day.year, day.month) == (self.year, self.month)

    def day_path(self, day: int) -> str:
        """Zero-padded ``YYYY/MM/DD`` path segment for a day screen."""
        if not 1 <= day <= self.days_in_month:
            raise ValueError(f"{self.label} has no day {day}")
        return f"{self.year}/{self.month:02d}/{day:02d}"

    def weeks(self) -> list[list[int]]:
        """Calendar grid, Monday first; 0 marks padding cells."""
        return calendar.monthcalendar(self.year, self.month)


class RequestSequencer:
    """Accept only the response to the most recently issued request.

    Each load takes a ticket before fetching and presents it when the
    fetch completes. A response holding an older ticket arrived after a
    newer request was made and is dropped.
    """

    def __init__(self):
        self._counter = itertools.count(1)
        self._latest = 0

    def issue(self) -> int:
        self._latest = next(self._counter)
        return self._latest

    def is_current(self, ticket: int) -> bool:
        return ticket == self._latest

    def accept(self, ticket: int, *, context: Optional[str] = None) -> bool:
        """Return True if ``ticket`` is current, logging stale drops."""
        if self.is_current(ticket):
            return True
        logger.info("stale_response_dropped", ticket=ticket, latest=self._latest, context=context)
        return False


__all__ = ["MonthCursor", "RequestSequencer"]
