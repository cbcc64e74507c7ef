"""Daily and monthly rollup models.

Rollups are derived data. They are rebuilt from the full entry list on
every fetch and never persisted.
"""

import calendar
from decimal import Decimal

from pydantic import BaseModel, Field, computed_field

from tankerbook_core.models.entry import DriverStatus, Entry


class DailyRollup(BaseModel):
    """Per-day sums for one label.

    Entries keep their insertion order, which for store reads is time
    order.
    """

    day: int = Field(ge=1, le=31, description="Day of month")
    entries: list[Entry] = Field(default_factory=list)
    total_tankers: int = Field(default=0, ge=0)
    total_cash: Decimal = Field(default=Decimal("0"))
    total_km: Decimal = Field(default=Decimal("0"))
    total_cash_taken: Decimal = Field(default=Decimal("0"))
    total_diesel_added: Decimal = Field(default=Decimal("0"))
    present_count: int = Field(default=0, ge=0)
    absent_count: int = Field(default=0, ge=0)

    @computed_field
    @property
    def key(self) -> str:
        """Zero-padded day key ("05")."""
        return f"{self.day:02d}"

    def add(self, entry: Entry) -> None:
        """Fold one entry into the day's sums."""
        self.entries.append(entry)
        self.total_tankers += entry.derived_tankers
        self.total_cash += entry.cash_amount or Decimal("0")
        self.total_km += entry.total_km or Decimal("0")
        self.total_cash_taken += entry.cash_taken or Decimal("0")
        self.total_diesel_added += entry.diesel_added
        if entry.driver_status == DriverStatus.PRESENT:
            self.present_count += 1
        elif entry.driver_status == DriverStatus.ABSENT:
            self.absent_count += 1

    @property
    def notes(self) -> list[str]:
        return [e.notes for e in self.entries if e.notes]


class MonthlyRollup(BaseModel):
    """Month-wide sums for one label, plus the per-day breakdown.

    ``days`` is keyed by zero-padded day and ordered by numeric day.
    """

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "year": 2025,
                    "month": 3,
                    "days": {},
                    "total_tankers": 0,
                    "total_cash": "0",
                }
            ]
        }
    }

    year: int = Field(ge=1900, le=2100)
    month: int = Field(ge=1, le=12)
    days: dict[str, DailyRollup] = Field(default_factory=dict)
    total_tankers: int = Field(default=0, ge=0)
    total_cash: Decimal = Field(default=Decimal("0"))
    total_km: Decimal = Field(default=Decimal("0"))
    total_cash_taken: Decimal = Field(default=Decimal("0"))
    total_diesel_added: Decimal = Field(default=Decimal("0"))
    total_present_count: int = Field(default=0, ge=0)
    total_absent_count: int = Field(default=0, ge=0)

    @computed_field
    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]

    @property
    def entry_count(self) -> int:
        return sum(len(d.entries) for d in self.days.values())

    @property
    def is_empty(self) -> bool:
        return not self.days

    def sorted_days(self) -> list[DailyRollup]:
        """Day rollups in ascending numeric day order."""
        return sorted(self.days.values(), key=lambda d: d.day)
