"""Tests for the exception hierarchy."""

import pytest

from tankerbook_core.exceptions import (
    AggregationError,
    ConfigurationError,
    ReportGenerationError,
    RepositoryError,
    TankerbookError,
    ValidationError,
)


class TestExceptions:
    """Tests for error details and recoverability."""

    @pytest.mark.parametrize("cls", [
        ValidationError,
        AggregationError,
        ReportGenerationError,
        RepositoryError,
        ConfigurationError,
    ])
    def test_hierarchy(self, cls):
        assert issubclass(cls, TankerbookError)

    def test_str_is_message(self):
        error = TankerbookError("Something went wrong", details={"code": 500})

        assert str(error) == "Something went wrong"
        assert error.details == {"code": 500}
        assert "recoverable=False" in repr(error)

    def test_validation_error(self):
        error = ValidationError(
            "Entry #2 is missing a time.",
            field="time",
            constraint="HH:MM, 24-hour clock",
        )

        assert error.recoverable
        assert error.details == {"field": "time", "constraint": "HH:MM, 24-hour clock"}

    def test_aggregation_error(self):
        error = AggregationError("Non-numeric total on day 4", day=4, field="total_cash")

        assert not error.recoverable
        assert error.details == {"day": 4, "field": "total_cash"}

    def test_report_generation_error(self):
        error = ReportGenerationError("boom", report_format="pdf", filename="a.pdf")
        assert error.details == {"report_format": "pdf", "filename": "a.pdf"}

    def test_repository_error(self):
        error = RepositoryError("Label not found", operation="get_label", label_id="lbl-1")

        assert error.recoverable
        assert error.details == {"operation": "get_label", "label_id": "lbl-1"}

    def test_configuration_error(self):
        error = ConfigurationError(
            "Report output path is not a directory",
            config_key="TANKERBOOK_OUTPUT_DIR",
            expected="Directory path",
            actual="/tmp/file",
        )
        assert error.details["config_key"] == "TANKERBOOK_OUTPUT_DIR"
