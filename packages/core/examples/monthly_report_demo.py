#!/usr/bin/env python3
"""
Monthly Summary Demonstration

This script walks one month of a driver-status label through the pipeline:
1. Load raw rows from an in-memory store
2. Aggregate them into daily and monthly totals
3. Export the monthly report as text and PDF

Run: python examples/monthly_report_demo.py
"""

from tankerbook_core import (
    MonthCursor,
    MonthlySummaryService,
    TankerbookConfig,
    configure_logging,
)


class InMemoryStore:
    """Minimal entry store holding one label and a few days of rows."""

    LABEL = {
        "id": "truck-a",
        "name": "Truck A",
        "is_driver_status": True,
        "diesel_average": "8.5",
        "current_range": "120",
    }

    ROWS = [
        {"date": "2025-03-02", "time": "09:00:00", "driver_status": "absent"},
        {"date": "2025-03-03", "time": "07:45:00", "driver_status": "present",
         "total_km": "42.5", "cash_taken": "300", "notes": "Depot to site 4"},
        {"date": "2025-03-03", "time": "13:10:00", "driver_status": "present",
         "total_tankers": 2, "total_km": "18", "cash_taken": ""},
        {"date": "2025-03-10", "time": "08:00:00", "driver_status": "present",
         "total_km": "61", "cash_taken": "450.75"},
    ]

    def get_label(self, label_id):
        return self.LABEL if label_id == self.LABEL["id"] else None

    def list_entries(self, label_id, start, end):
        return [
            row for row in self.ROWS
            if start.isoformat() <= row["date"] <= end.isoformat()
        ]


def main():
    """Run the monthly summary demonstration."""
    config = TankerbookConfig(output_dir=".")
    configure_logging(config)

    print("=" * 70)
    print("TANKERBOOK CORE - Monthly Summary Demo")
    print("=" * 70)
    print()

    service = MonthlySummaryService(InMemoryStore(), config)
    cursor = MonthCursor(2025, 3)

    # Step 1: Load and aggregate
    print(f"Step 1: Loading {cursor.label}...")
    outcome = service.load_month("truck-a", cursor)
    if not outcome.ok:
        print(f"  - {outcome.message}")
        return

    rollup = outcome.data.rollup
    print(f"  - Days with entries: {len(rollup.days)}")
    print(f"  - Total Tankers: {rollup.total_tankers}")
    print(f"  - Total KM: {rollup.total_km}")
    print(f"  - Present / Absent: {rollup.total_present_count} / {rollup.total_absent_count}")
    print(f"  - Calendar badges: {outcome.data.badges}")
    print()

    # Step 2: Export
    print("Step 2: Exporting reports...")
    for report_format in ("text", "pdf"):
        result = service.export_report("truck-a", cursor, format=report_format)
        if result.ok:
            print(f"  - Saved: {result.data}")
        else:
            print(f"  - {result.message}")

    print()
    print("=" * 70)
    print("Demo complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()
