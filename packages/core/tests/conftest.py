"""Shared fixtures for tankerbook-core tests."""

from datetime import date, time
from decimal import Decimal
from typing import Any, Optional

import pytest

from tankerbook_core.models import DriverStatus, Entry, Label, LabelMode


@pytest.fixture
def tanker_label() -> Label:
    return Label(id="lbl-tanker", name="Water Tanker", mode=LabelMode.TANKER_COUNT)


@pytest.fixture
def driver_label() -> Label:
    return Label(
        id="lbl-driver",
        name="Truck A",
        mode=LabelMode.DRIVER_STATUS,
        diesel_average=Decimal("8.5"),
    )


@pytest.fixture
def make_entry():
    """Factory for normalized entries in March 2025."""

    def _make(
        day: int = 5,
        at: str = "09:00",
        *,
        month: int = 3,
        year: int = 2025,
        total_tankers: Optional[int] = None,
        cash_amount: Optional[str] = None,
        driver_status: Optional[DriverStatus] = None,
        total_km: Optional[str] = None,
        cash_taken: Optional[str] = None,
        notes: Optional[str] = None,
        diesel_added: str = "0",
    ) -> Entry:
        hour, minute = (int(part) for part in at.split(":"))
        values: dict[str, Any] = {
            "date": date(year, month, day),
            "time": time(hour, minute),
            "total_tankers": total_tankers,
            "cash_amount": Decimal(cash_amount) if cash_amount is not None else None,
            "driver_status": driver_status,
            "total_km": Decimal(total_km) if total_km is not None else None,
            "cash_taken": Decimal(cash_taken) if cash_taken is not None else None,
            "notes": notes,
            "diesel_added": Decimal(diesel_added),
        }
        return Entry(**values)

    return _make


class FakeRepository:
    """In-memory stand-in for the entry store."""

    def __init__(self, labels: Optional[dict] = None, entries: Optional[dict] = None):
        self.labels = labels or {}
        self.entries = entries or {}
        self.calls: list[tuple] = []
        self.fail_with: Optional[Exception] = None

    def get_label(self, label_id):
        self.calls.append(("get_label", label_id))
        return self.labels.get(label_id)

    def list_entries(self, label_id, start, end):
        self.calls.append(("list_entries", label_id, start, end))
        if self.fail_with is not None:
            raise self.fail_with
        rows = self.entries.get(label_id, [])
        return [r for r in rows if start.isoformat() <= r["date"] <= end.isoformat()]


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository(
        labels={
            "lbl-tanker": {"id": "lbl-tanker", "name": "Water Tanker", "is_driver_status": False},
            "lbl-driver": {
                "id": "lbl-driver",
                "name": "Truck A",
                "is_driver_status": True,
                "diesel_average": 8.5,
                "current_range": "120.5",
            },
        },
        entries={
            "lbl-tanker": [
                {"date": "2025-03-05", "time": "08:00:00", "total_tankers": None, "cash_amount": 100},
                {"date": "2025-03-05", "time": "10:00:00", "total_tankers": 3, "cash_amount": None},
                {"date": "2025-03-12", "time": "07:30:00", "total_tankers": "", "cash_amount": "250.50"},
                {"date": "2025-04-01", "time": "07:30:00", "total_tankers": 9, "cash_amount": "1"},
            ],
            "lbl-driver": [
                {"date": "2025-03-02", "time": "09:00", "driver_status": "absent"},
                {
                    "date": "2025-03-10",
                    "time": "11:00",
                    "driver_status": "present",
                    "total_km": "12.5",
                    "cash_taken": "40",
                    "notes": "Depot run",
                },
            ],
        },
    )
