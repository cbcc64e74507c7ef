"""Monthly summary service.

Glue between the entry store and the pure pipeline:

    repository rows -> normalize -> aggregate -> (badges, summary, report)

The store itself is outside this package. Anything with the methods of
``EntryRepository`` can be plugged in; no inheritance is required.

Library functions raise. ``load_month``, ``validate_day`` and
``export_report`` are the boundary of a user action: they catch
TankerbookError and return an ``ActionOutcome`` carrying a single
human-readable message.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

import structlog

from .aggregator import calendar_badges, summarize_month
from .config import TankerbookConfig
from .exceptions import ConfigurationError, RepositoryError, TankerbookError
from .models import Entry, Label, MonthlyRollup
from .navigation import MonthCursor, RequestSequencer
from .normalizer import normalize_entries, normalize_label
from .report_generator import MonthlyReportGenerator, ReportDocument, save_report

logger = structlog.get_logger()


@runtime_checkable
class EntryRepository(Protocol):
    """Read access to labels and entries in the entry store."""

    def get_label(self, label_id: str) -> Optional[Mapping[str, Any]]:
        """Return the label row, or None if it does not exist."""
        ...

    def list_entries(self, label_id: str, start: date, end: date) -> Sequence[Mapping[str, Any]]:
        """Return entry rows dated ``start..end`` inclusive, ordered by date then time."""
        ...


class ActionStatus(str, Enum):
    """Outcome of a user-triggered action."""

    SUCCESS = "success"
    ERROR = "error"
    STALE = "stale"
    """A newer request superseded this one; the result was discarded."""


@dataclass
class ActionOutcome:
    """Result of a user action, ready for a toast or an error banner."""

    status: ActionStatus
    message: str = ""
    data: Any = None
    error: Optional[TankerbookError] = None

    @property
    def ok(self) -> bool:
        return self.status == ActionStatus.SUCCESS


@dataclass
class MonthSummary:
    """Everything the calendar and summary screens need for one month."""

    label: Label
    cursor: MonthCursor
    rollup: MonthlyRollup
    badges: dict[int, int] = field(default_factory=dict)


class MonthlySummaryService:
    """
    Load, summarize and export one label's months.

    Each load takes a sequencer ticket before fetching. When responses
    complete out of order, only the newest request's result is delivered.
    """

    def __init__(
        self,
        repository: EntryRepository,
        config: Optional[TankerbookConfig] = None,
        generator: Optional[MonthlyReportGenerator] = None,
    ):
        self.repository = repository
        self.config = config or TankerbookConfig()
        output_dir = self.config.output_dir
        if output_dir and Path(output_dir).exists() and not Path(output_dir).is_dir():
            raise ConfigurationError(
                "Report output path is not a directory",
                config_key="TANKERBOOK_OUTPUT_DIR",
                expected="Directory path",
                actual=output_dir,
            )
        self.generator = generator or MonthlyReportGenerator(self.config.report)
        self.sequencer = RequestSequencer()

    # -- raising pipeline --------------------------------------------------

    def fetch_label(self, label_id: str) -> Label:
        try:
            row = self.repository.get_label(label_id)
        except TankerbookError:
            raise
        except Exception as e:
            raise RepositoryError(
                f"Label lookup failed: {e}",
                operation="get_label",
                label_id=label_id,
            ) from e
        if row is None:
            raise RepositoryError("Label not found", operation="get_label", label_id=label_id)
        return normalize_label(row)

    def fetch_rows(self, label_id: str, cursor: MonthCursor) -> list[Mapping[str, Any]]:
        try:
            return list(self.repository.list_entries(label_id, cursor.start_date, cursor.end_date))
        except TankerbookError:
            raise
        except Exception as e:
            raise RepositoryError(
                f"Entry fetch failed: {e}",
                operation="list_entries",
                label_id=label_id,
            ) from e

    def summarize(
        self,
        label: Label,
        rows: Sequence[Mapping[str, Any]],
        cursor: MonthCursor,
    ) -> MonthSummary:
        """Normalize and aggregate already-fetched rows."""
        entries = normalize_entries(rows, label)
        rollup = summarize_month(label, entries, year=cursor.year, month=cursor.month)
        return MonthSummary(label=label, cursor=cursor, rollup=rollup, badges=calendar_badges(rollup))

    def build_summary(self, label_id: str, cursor: MonthCursor) -> MonthSummary:
        label = self.fetch_label(label_id)
        return self.summarize(label, self.fetch_rows(label_id, cursor), cursor)

    # -- sequenced loading -------------------------------------------------

    def begin_load(self) -> int:
        """Take a ticket for a month fetch about to be issued."""
        return self.sequencer.issue()

    def complete_load(
        self,
        ticket: int,
        label: Label,
        rows: Sequence[Mapping[str, Any]],
        cursor: MonthCursor,
    ) -> Optional[MonthSummary]:
        """Summarize a finished fetch, or return None if it went stale."""
        if not self.sequencer.accept(ticket, context=cursor.label):
            return None
        return self.summarize(label, rows, cursor)

    # -- action boundary ---------------------------------------------------

    def load_month(self, label_id: str, cursor: MonthCursor) -> ActionOutcome:
        """Fetch and summarize a month for the calendar/summary views."""
        ticket = self.begin_load()
        try:
            label = self.fetch_label(label_id)
            rows = self.fetch_rows(label_id, cursor)
            summary = self.complete_load(ticket, label, rows, cursor)
        except TankerbookError as e:
            return self._failed("Failed to load data", e, label_id=label_id)
        if summary is None:
            return ActionOutcome(status=ActionStatus.STALE)
        return ActionOutcome(status=ActionStatus.SUCCESS, data=summary)

    def validate_day(
        self,
        label: Label,
        day: date,
        rows: Sequence[Mapping[str, Any]],
    ) -> ActionOutcome:
        """Check a day's form rows before they are handed to the store.

        On failure the message names the first bad row ("Entry #2 is
        missing a time.") and nothing should be persisted.
        """
        try:
            entries: list[Entry] = normalize_entries(rows, label, entry_date=day)
        except TankerbookError as e:
            logger.info("day_entries_rejected", label=label.name, day=day.isoformat(), error=e.message)
            return ActionOutcome(status=ActionStatus.ERROR, message=e.message, error=e)
        return ActionOutcome(status=ActionStatus.SUCCESS, data=entries)

    def export_report(
        self,
        label_id: str,
        cursor: MonthCursor,
        format: str = "pdf",
        output_dir: Optional[str] = None,
    ) -> ActionOutcome:
        """Build the monthly report and optionally save it.

        ``output_dir`` falls back to the configured output directory. When
        neither is set the document is returned in memory only.
        """
        try:
            summary = self.build_summary(label_id, cursor)
            document: ReportDocument = self.generator.generate(summary.label, summary.rollup, format=format)
            target = output_dir or self.config.output_dir
            path: Optional[Path] = save_report(document, target) if target else None
        except TankerbookError as e:
            return self._failed(f"Failed to generate {format.upper()}", e, label_id=label_id)

        return ActionOutcome(
            status=ActionStatus.SUCCESS,
            message=f"{format.upper()} report generated successfully",
            data=path if path is not None else document,
        )

    def _failed(self, prefix: str, error: TankerbookError, **context) -> ActionOutcome:
        logger.error("action_failed", prefix=prefix, error=error.message, details=error.details, **context)
        return ActionOutcome(
            status=ActionStatus.ERROR,
            message=f"{prefix}: {error.message}",
            error=error,
        )


__all__ = [
    "EntryRepository",
    "ActionStatus",
    "ActionOutcome",
    "MonthSummary",
    "MonthlySummaryService",
]
