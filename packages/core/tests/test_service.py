"""Tests for the monthly summary service."""

from datetime import date
from decimal import Decimal

import pytest
from reportlab.platypus import SimpleDocTemplate

from tankerbook_core.config import TankerbookConfig
from tankerbook_core.exceptions import ConfigurationError, RepositoryError, ValidationError
from tankerbook_core.navigation import MonthCursor
from tankerbook_core.report_generator import ReportDocument
from tankerbook_core.service import (
    ActionStatus,
    EntryRepository,
    MonthlySummaryService,
    MonthSummary,
)

MARCH = MonthCursor(2025, 3)


@pytest.fixture
def service(repository) -> MonthlySummaryService:
    return MonthlySummaryService(repository, TankerbookConfig(output_dir=None))


class TestRepositoryProtocol:
    """Tests for structural repository typing."""

    def test_fake_repository_satisfies_protocol(self, repository):
        assert isinstance(repository, EntryRepository)

    def test_month_bounds_passed_to_store(self, service, repository):
        service.fetch_rows("lbl-tanker", MonthCursor(2024, 2))
        assert repository.calls[-1] == ("list_entries", "lbl-tanker", date(2024, 2, 1), date(2024, 2, 29))


class TestLoadMonth:
    """Tests for loading a month summary."""

    def test_tanker_month(self, service):
        outcome = service.load_month("lbl-tanker", MARCH)

        assert outcome.ok
        summary = outcome.data
        assert isinstance(summary, MonthSummary)
        assert summary.rollup.total_tankers == 5
        assert summary.rollup.total_cash == Decimal("350.50")
        assert list(summary.rollup.days) == ["05", "12"]
        assert summary.badges == {5: 4, 12: 1}

    def test_driver_month(self, service):
        summary = service.load_month("lbl-driver", MARCH).data

        assert summary.label.is_driver_status
        assert summary.label.current_range == Decimal("120.5")
        assert summary.rollup.total_tankers == 1
        assert summary.rollup.total_km == Decimal("12.5")
        assert summary.rollup.total_present_count == 1
        assert summary.rollup.total_absent_count == 1

    def test_empty_month(self, service):
        summary = service.load_month("lbl-tanker", MonthCursor(2025, 6)).data

        assert summary.rollup.is_empty
        assert summary.rollup.total_tankers == 0
        assert summary.badges == {}

    def test_missing_label(self, service):
        outcome = service.load_month("nope", MARCH)

        assert outcome.status == ActionStatus.ERROR
        assert outcome.message == "Failed to load data: Label not found"
        assert isinstance(outcome.error, RepositoryError)

    def test_store_failure(self, service, repository):
        repository.fail_with = ConnectionError("network down")

        outcome = service.load_month("lbl-tanker", MARCH)

        assert outcome.status == ActionStatus.ERROR
        assert outcome.message == "Failed to load data: Entry fetch failed: network down"

    def test_invalid_stored_row(self, service, repository):
        repository.entries["lbl-tanker"].append({"date": "2025-03-20", "time": "", "cash_amount": "5"})

        outcome = service.load_month("lbl-tanker", MARCH)

        assert outcome.status == ActionStatus.ERROR
        assert isinstance(outcome.error, ValidationError)

    def test_superseded_load_is_stale(self, service, repository):
        """A month switch while the fetch is in flight discards the older result."""
        original = repository.list_entries

        def list_entries_then_switch(label_id, start, end):
            rows = original(label_id, start, end)
            service.begin_load()
            return rows

        repository.list_entries = list_entries_then_switch

        outcome = service.load_month("lbl-tanker", MARCH)

        assert outcome.status == ActionStatus.STALE
        assert outcome.data is None


class TestSequencedLoading:
    """Tests for begin_load/complete_load."""

    def test_only_latest_completes(self, service, repository):
        label = service.fetch_label("lbl-tanker")
        march_ticket = service.begin_load()
        april_ticket = service.begin_load()

        march_rows = service.fetch_rows("lbl-tanker", MARCH)
        april_rows = service.fetch_rows("lbl-tanker", MARCH.next())

        # April lands first, then the slow March response
        april = service.complete_load(april_ticket, label, april_rows, MARCH.next())
        march = service.complete_load(march_ticket, label, march_rows, MARCH)

        assert april is not None
        assert april.rollup.total_tankers == 9
        assert march is None


class TestValidateDay:
    """Tests for day-entry form validation."""

    def test_valid_rows(self, service):
        label = service.fetch_label("lbl-driver")
        rows = [
            {"time": "08:00", "driver_status": "present", "total_km": "30"},
            {"time": "17:30", "driver_status": "absent"},
        ]

        outcome = service.validate_day(label, date(2025, 3, 5), rows)

        assert outcome.ok
        assert [e.date for e in outcome.data] == [date(2025, 3, 5)] * 2

    def test_first_bad_row_reported(self, service):
        label = service.fetch_label("lbl-driver")
        rows = [
            {"time": "08:00", "driver_status": "present"},
            {"time": "", "driver_status": "present"},
        ]

        outcome = service.validate_day(label, date(2025, 3, 5), rows)

        assert outcome.status == ActionStatus.ERROR
        assert outcome.message == "Entry #2 is missing a time."
        assert outcome.data is None


class TestExportReport:
    """Tests for report export."""

    def test_export_to_directory(self, service, tmp_path):
        outcome = service.export_report("lbl-tanker", MARCH, output_dir=str(tmp_path))

        assert outcome.ok
        assert outcome.message == "PDF report generated successfully"
        assert outcome.data == tmp_path / "Water_Tanker_March_2025_Summary.pdf"
        assert outcome.data.read_bytes().startswith(b"%PDF")

    def test_export_in_memory(self, service):
        outcome = service.export_report("lbl-driver", MARCH, format="text")

        assert outcome.ok
        assert outcome.message == "TEXT report generated successfully"
        assert isinstance(outcome.data, ReportDocument)
        assert b"Present Days: 1" in outcome.data.content

    def test_configured_output_dir(self, repository, tmp_path):
        target = tmp_path / "reports"
        service = MonthlySummaryService(repository, TankerbookConfig(output_dir=str(target)))

        outcome = service.export_report("lbl-tanker", MARCH, format="text")

        assert outcome.data == target / "Water_Tanker_March_2025_Summary.txt"

    def test_backend_failure_writes_nothing(self, service, tmp_path, monkeypatch):
        def boom(self, *args, **kwargs):
            raise RuntimeError("out of paper")

        monkeypatch.setattr(SimpleDocTemplate, "build", boom)

        outcome = service.export_report("lbl-tanker", MARCH, output_dir=str(tmp_path))

        assert outcome.status == ActionStatus.ERROR
        assert outcome.message == "Failed to generate PDF: Document backend failed: out of paper"
        assert list(tmp_path.iterdir()) == []

    def test_oversized_stored_amount(self, service, repository, tmp_path):
        """An amount too large to render is dropped before it reaches the report."""
        repository.entries["lbl-tanker"].append(
            {"date": "2025-03-20", "time": "09:00", "total_tankers": "1e12", "cash_amount": "1e27"}
        )

        outcome = service.export_report("lbl-tanker", MARCH, format="text", output_dir=str(tmp_path))

        assert outcome.ok
        text = outcome.data.read_text(encoding="utf-8")
        assert "Total Tankers: 6" in text
        assert "Total Cash: Rs.350.50" in text

    def test_missing_label(self, service, tmp_path):
        outcome = service.export_report("nope", MARCH, output_dir=str(tmp_path))

        assert outcome.message == "Failed to generate PDF: Label not found"
        assert list(tmp_path.iterdir()) == []


class TestServiceConfiguration:
    """Tests for service construction."""

    def test_output_dir_must_be_directory(self, repository, tmp_path):
        not_a_dir = tmp_path / "file.txt"
        not_a_dir.write_text("x")

        with pytest.raises(ConfigurationError) as exc_info:
            MonthlySummaryService(repository, TankerbookConfig(output_dir=str(not_a_dir)))

        assert exc_info.value.config_key == "TANKERBOOK_OUTPUT_DIR"

    def test_missing_output_dir_is_allowed(self, repository, tmp_path):
        service = MonthlySummaryService(repository, TankerbookConfig(output_dir=str(tmp_path / "later")))
        assert service.config.output_dir.endswith("later")
