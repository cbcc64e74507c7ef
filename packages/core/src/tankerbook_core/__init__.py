"""Tankerbook Core - Entry aggregation and monthly report generation."""

__version__ = "0.1.0"

from .aggregator import (
    aggregate_daily,
    aggregate_monthly,
    calendar_badges,
    derived_tanker_count,
    group_entries_by_date,
    summarize_month,
)
from .config import ReportConfig, TankerbookConfig, configure_logging
from .exceptions import (
    AggregationError,
    ConfigurationError,
    ReportGenerationError,
    RepositoryError,
    TankerbookError,
    ValidationError,
)
from .models import DailyRollup, DriverStatus, Entry, Label, LabelMode, MonthlyRollup
from .navigation import MonthCursor, RequestSequencer
from .normalizer import is_valid_time, normalize_entries, normalize_entry, normalize_label
from .report_generator import MonthlyReportGenerator, ReportDocument, plan_pages, save_report
from .service import ActionOutcome, ActionStatus, EntryRepository, MonthlySummaryService, MonthSummary

__all__ = [
    # Models
    "Label",
    "LabelMode",
    "DriverStatus",
    "Entry",
    "DailyRollup",
    "MonthlyRollup",
    # Pipeline
    "normalize_entry",
    "normalize_entries",
    "normalize_label",
    "is_valid_time",
    "derived_tanker_count",
    "group_entries_by_date",
    "aggregate_daily",
    "aggregate_monthly",
    "summarize_month",
    "calendar_badges",
    # Reports
    "MonthlyReportGenerator",
    "ReportDocument",
    "plan_pages",
    "save_report",
    # Navigation and service
    "MonthCursor",
    "RequestSequencer",
    "EntryRepository",
    "MonthlySummaryService",
    "MonthSummary",
    "ActionOutcome",
    "ActionStatus",
    # Configuration
    "ReportConfig",
    "TankerbookConfig",
    "configure_logging",
    # Errors
    "TankerbookError",
    "ValidationError",
    "AggregationError",
    "ReportGenerationError",
    "RepositoryError",
    "ConfigurationError",
]
