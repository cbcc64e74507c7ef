"""Tests for month navigation and fetch sequencing."""

from datetime import date

import pytest

from tankerbook_core.navigation import MonthCursor, RequestSequencer


class TestMonthCursor:
    """Tests for MonthCursor."""

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            MonthCursor(2025, 13)

    def test_immutable(self):
        cursor = MonthCursor(2025, 3)
        with pytest.raises(AttributeError):
            cursor.month = 4

    def test_next_and_previous(self):
        cursor = MonthCursor(2025, 3)

        assert cursor.next() == MonthCursor(2025, 4)
        assert cursor.previous() == MonthCursor(2025, 2)
        assert cursor == MonthCursor(2025, 3)

    def test_year_rollover(self):
        assert MonthCursor(2024, 12).next() == MonthCursor(2025, 1)
        assert MonthCursor(2025, 1).previous() == MonthCursor(2024, 12)
        assert MonthCursor(2025, 3).shift(-15) == MonthCursor(2023, 12)
        assert MonthCursor(2025, 3).shift(22) == MonthCursor(2027, 1)

    def test_month_bounds(self):
        leap = MonthCursor(2024, 2)

        assert leap.days_in_month == 29
        assert leap.start_date == date(2024, 2, 1)
        assert leap.end_date == date(2024, 2, 29)
        assert MonthCursor(2025, 2).days_in_month == 28

    def test_label(self):
        assert MonthCursor(2025, 3).label == "March 2025"

    def test_for_date_and_contains(self):
        cursor = MonthCursor.for_date(date(2025, 3, 18))

        assert cursor == MonthCursor(2025, 3)
        assert cursor.contains(date(2025, 3, 1))
        assert not cursor.contains(date(2024, 3, 1))

    def test_day_path(self):
        assert MonthCursor(2025, 3).day_path(5) == "2025/03/05"
        assert MonthCursor(2025, 11).day_path(30) == "2025/11/30"

    def test_day_path_rejects_missing_day(self):
        with pytest.raises(ValueError):
            MonthCursor(2025, 2).day_path(29)

    def test_weeks(self):
        weeks = MonthCursor(2025, 3).weeks()

        # March 2025 starts on a Saturday
        assert weeks[0] == [0, 0, 0, 0, 0, 1, 2]
        assert max(max(week) for week in weeks) == 31


class TestRequestSequencer:
    """Tests for stale response detection."""

    def test_latest_is_accepted(self):
        sequencer = RequestSequencer()
        ticket = sequencer.issue()
        assert sequencer.accept(ticket) is True

    def test_superseded_response_is_dropped(self):
        """Switching months quickly: the March response lands after April was requested."""
        sequencer = RequestSequencer()
        march = sequencer.issue()
        april = sequencer.issue()

        assert sequencer.accept(march, context="March 2025") is False
        assert sequencer.accept(april, context="April 2025") is True

    def test_tickets_increase(self):
        sequencer = RequestSequencer()
        tickets = [sequencer.issue() for _ in range(3)]

        assert tickets == sorted(tickets)
        assert len(set(tickets)) == 3
        assert sequencer.is_current(tickets[-1])
