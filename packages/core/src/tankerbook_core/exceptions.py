"""Custom exceptions for Tankerbook.

This module provides a hierarchy of exception classes for consistent error
handling across the entry -> rollup -> report pipeline. All exceptions
inherit from TankerbookError, so a single ``except TankerbookError`` at the
boundary of a user action catches everything the library raises.

Example:
    try:
        entries = normalize_entries(rows, label)
    except ValidationError as e:
        # Show the message next to the offending form row
        show_toast(str(e))
    except TankerbookError as e:
        logger.error("action_failed", error=str(e))
"""

from typing import Any, Optional


class TankerbookError(Exception):
    """Base exception for all Tankerbook errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise TankerbookError("Something went wrong", details={"code": 500})
        TankerbookError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize TankerbookError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error can be fixed by the user or a
                later attempt. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(TankerbookError):
    """Error raised when an entry record fails validation.

    Raised before any persistence or aggregation is attempted, e.g. for a
    missing time or a missing driver status on a driver-status label.

    Attributes:
        field: The field that failed validation.
        value: The invalid value (if safe to include).
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Entry #2 is missing a time.",
        ...     field="time",
        ...     constraint="HH:MM, 24-hour clock",
        ... )
        ValidationError: Entry #2 is missing a time.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
                Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class AggregationError(TankerbookError):
    """Error raised when a rollup cannot be computed consistently.

    Normalized entries never produce this; it signals a NaN or null
    reaching a sum, or entries that do not belong to the requested month.

    Attributes:
        day: Day-of-month being aggregated when the error occurred.
        field: The rollup field affected.
    """

    def __init__(
        self,
        message: str,
        *,
        day: Optional[int] = None,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.day = day
        self.field = field

        if day is not None:
            self.details["day"] = day
        if field:
            self.details["field"] = field


class ReportGenerationError(TankerbookError):
    """Error raised when rendering or saving a report fails.

    Partial output is never handed back or written to disk.

    Attributes:
        report_format: Output format being rendered ("pdf", "text").
        filename: Target filename of the report (if known).

    Example:
        >>> raise ReportGenerationError(
        ...     "Could not allocate page",
        ...     report_format="pdf",
        ...     filename="Truck_A_March_2025_Summary.pdf",
        ... )
        ReportGenerationError: Could not allocate page
    """

    def __init__(
        self,
        message: str,
        *,
        report_format: Optional[str] = None,
        filename: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.report_format = report_format
        self.filename = filename

        if report_format:
            self.details["report_format"] = report_format
        if filename:
            self.details["filename"] = filename


class RepositoryError(TankerbookError):
    """Error raised when the entry store cannot serve a request.

    Attributes:
        operation: The repository operation that failed.
        label_id: The label the request was made for.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        label_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.operation = operation
        self.label_id = label_id

        if operation:
            self.details["operation"] = operation
        if label_id:
            self.details["label_id"] = label_id


class ConfigurationError(TankerbookError):
    """Error raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Output directory is not writable",
        ...     config_key="TANKERBOOK_OUTPUT_DIR",
        ...     expected="Writable directory",
        ... )
        ConfigurationError: Output directory is not writable
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "TankerbookError",
    "ValidationError",
    "AggregationError",
    "ReportGenerationError",
    "RepositoryError",
    "ConfigurationError",
]
