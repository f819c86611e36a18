"""Tests for date parser with relative dates."""

from datetime import date, timedelta

import pytest

from accountshelper.domain.errors import ValidationError
from accountshelper.utils.date_parser import get_date_range, month_bounds, parse_date

TODAY = date(2025, 9, 17)  # a Wednesday


def test_parse_iso_date():
    assert parse_date("2024-01-05") == date(2024, 1, 5)


def test_parse_uk_date_is_day_first():
    assert parse_date("05/01/2024") == date(2024, 1, 5)


def test_parse_named_month():
    assert parse_date("15 Sep 2025") == date(2025, 9, 15)


def test_parse_relative_days():
    assert parse_date("today", today=TODAY) == TODAY
    assert parse_date("Yesterday", today=TODAY) == TODAY - timedelta(days=1)
    assert parse_date("tomorrow", today=TODAY) == TODAY + timedelta(days=1)


def test_parse_relative_periods():
    assert parse_date("last month", today=TODAY) == date(2025, 8, 1)
    assert parse_date("this month", today=TODAY) == date(2025, 9, 1)
    assert parse_date("this year", today=TODAY) == date(2025, 1, 1)
    assert parse_date("last year", today=TODAY) == date(2024, 1, 1)
    assert parse_date("this week", today=TODAY) == date(2025, 9, 15)
    assert parse_date("last week", today=TODAY) == date(2025, 9, 8)


def test_parse_last_weekday():
    assert parse_date("last monday", today=TODAY) == date(2025, 9, 15)
    # Same weekday goes back a full week
    assert parse_date("last wednesday", today=TODAY) == date(2025, 9, 10)


def test_parse_invalid():
    with pytest.raises(ValidationError):
        parse_date("not a date")


def test_month_bounds():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))


@pytest.mark.parametrize(
    "period,expected",
    [
        ("this-month", (date(2025, 9, 1), TODAY)),
        ("this-year", (date(2025, 1, 1), TODAY)),
        ("last-month", (date(2025, 8, 1), date(2025, 8, 31))),
        ("last-year", (date(2024, 1, 1), date(2024, 12, 31))),
        ("2025-02", (date(2025, 2, 1), date(2025, 2, 28))),
    ],
)
def test_get_date_range(period, expected):
    assert get_date_range(period, today=TODAY) == expected


def test_get_date_range_unknown():
    with pytest.raises(ValidationError):
        get_date_range("next-decade", today=TODAY)
