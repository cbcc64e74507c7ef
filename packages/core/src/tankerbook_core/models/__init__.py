"""Data models for tankerbook-core.

- Labels and their modes (entry.py)
- Normalized entries (entry.py)
- Daily and monthly rollups (rollup.py)
"""

from tankerbook_core.models.entry import (
    DRIVER_ONLY_FIELDS,
    DriverStatus,
    Entry,
    Label,
    LabelMode,
)
from tankerbook_core.models.rollup import DailyRollup, MonthlyRollup

__all__ = [
    "DRIVER_ONLY_FIELDS",
    "DriverStatus",
    "Entry",
    "Label",
    "LabelMode",
    "DailyRollup",
    "MonthlyRollup",
]
