"""Label and entry models.

A label is a user-defined tracking category in one of two modes:

- tanker count: each entry records how many tankers ran and the cash
  collected for them
- driver status: each entry records whether the driver was present, the
  kilometres driven, cash taken and free-form notes

Entries are immutable once normalized; rollups are always recomputed from
them rather than updated in place.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class LabelMode(str, Enum):
    """Selects which entry fields a label uses and which report columns it gets."""

    TANKER_COUNT = "tanker_count"
    DRIVER_STATUS = "driver_status"


class DriverStatus(str, Enum):
    """Attendance state recorded on a driver-status entry."""

    PRESENT = "present"
    ABSENT = "absent"


DRIVER_ONLY_FIELDS = ("driver_status", "total_km", "cash_taken", "notes")


class Label(BaseModel):
    """A tracking category that owns entries.

    Fleet labels carry a diesel average (km per litre) and the vehicle's
    current range, both maintained by the data-entry screens.
    """

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Truck A",
                    "mode": "driver_status",
                    "color": "#3B82F6",
                    "diesel_average": "8.5",
                }
            ]
        }
    }

    id: Optional[str] = Field(default=None, description="Identifier in the entry store")
    name: str = Field(min_length=1, description="Display name of the label")
    mode: LabelMode = Field(
        default=LabelMode.TANKER_COUNT,
        description="Tanker-count or driver-status mode",
    )
    color: str = Field(default="#3B82F6", description="Badge colour in the UI")
    is_pinned: bool = Field(default=False, description="Pinned to the top of the dashboard")
    diesel_average: Decimal = Field(
        default=Decimal("0"),
        ge=Decimal("0"),
        description="Vehicle fuel efficiency in km per litre",
    )
    current_range: Decimal = Field(
        default=Decimal("0"),
        ge=Decimal("0"),
        description="Remaining driving range in km",
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Label names cannot be blank."""
        v = v.strip()
        if not v:
            raise ValueError("Label name cannot be empty")
        return v

    @property
    def is_driver_status(self) -> bool:
        return self.mode == LabelMode.DRIVER_STATUS


class Entry(BaseModel):
    """One timestamped record of activity under a label on a given day.

    Numeric fields are None when nothing was entered; None is never
    silently turned into zero here. Aggregation decides how a missing
    value contributes.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(default=None, description="Identifier in the entry store")
    date: datetime.date = Field(description="Calendar day the entry belongs to")
    time: datetime.time = Field(description="Hour and minute of the entry")
    cash_amount: Optional[Decimal] = Field(
        default=None,
        ge=Decimal("0"),
        description="Cash collected (tanker-count labels)",
    )
    total_tankers: Optional[int] = Field(
        default=None,
        ge=0,
        description="Explicit tanker count; None means infer from driver status",
    )
    driver_status: Optional[DriverStatus] = Field(
        default=None,
        description="Present/absent (driver-status labels)",
    )
    total_km: Optional[Decimal] = Field(
        default=None,
        ge=Decimal("0"),
        description="Kilometres driven (driver-status labels)",
    )
    cash_taken: Optional[Decimal] = Field(
        default=None,
        ge=Decimal("0"),
        description="Cash taken by the driver (driver-status labels)",
    )
    notes: Optional[str] = Field(default=None, description="Free-form notes")
    diesel_added: Decimal = Field(
        default=Decimal("0"),
        ge=Decimal("0"),
        description="Litres of diesel added",
    )

    @computed_field
    @property
    def derived_tankers(self) -> int:
        """Effective tanker contribution of this entry.

        The explicit count wins. Without one, an entry counts as a single
        tanker unless the driver was absent, which counts as none.
        """
        if self.total_tankers is not None:
            return self.total_tankers
        if self.driver_status == DriverStatus.ABSENT:
            return 0
        return 1

    @property
    def day(self) -> int:
        return self.date.day

    @property
    def time_label(self) -> str:
        """Time as HH:MM, the way entry forms show it."""
        return self.time.strftime("%H:%M")
