from datetime import date, datetime

import pytest

from toms.formatting import (
    calculate_age, calculate_nights, currency_symbol, format_currency, format_date,
    format_display_date, format_timestamp, parse_date, safe_filename
)


@pytest.mark.parametrize("code, symbol", [
    ("usd", "$"), ("USD", "$"), ("eur", "€"), ("GBP", "£"), ("try", "₺"),
    ("aed", "AED"), ("sar", "SAR"), ("chf", "CHF"), ("", ""),
])
def test_currency_symbol(code, symbol):
    assert currency_symbol(code) == symbol


def test_format_currency_groups_thousands():
    assert format_currency(1234.5, "USD") == "$ 1,234.50"
    assert format_currency(0, "eur") == "€ 0.00"
    assert format_currency(float("nan"), "usd") == "$ 0.00"


def test_format_currency_is_stable_on_its_own_value():
    first = format_currency(1234.567, "USD")
    again = format_currency(float(first.split(" ")[1].replace(",", "")), "USD")
    assert first == again == "$ 1,234.57"


def test_nights_between_dates():
    assert calculate_nights("2024-01-01", "2024-01-04") == 3
    assert calculate_nights(date(2024, 1, 1), date(2024, 1, 1)) == 0


def test_nights_never_negative():
    assert calculate_nights("2024-01-04", "2024-01-01") == 0


def test_nights_with_missing_or_bad_dates():
    assert calculate_nights("", "2024-01-04") == 0
    assert calculate_nights("2024-01-01", None) == 0
    assert calculate_nights("soon", "later") == 0


def test_partial_day_counts_as_a_night():
    assert calculate_nights("2024-01-01T12:00:00", "2024-01-02T18:00:00Z") == 2


def test_format_date():
    assert format_date("2024-01-01") == "01 Jan 2024"
    assert format_date("2024-12-25T10:00:00Z") == "25 Dec 2024"
    assert format_date("") == ""
    assert format_date("not a date") == ""


def test_format_display_date():
    assert format_display_date("2024-03-05") == "05/03/2024"
    assert format_display_date(None) == ""


def test_parse_date_accepts_datetimes():
    assert parse_date(datetime(2024, 5, 6, 7, 8)) == date(2024, 5, 6)


def test_format_timestamp():
    assert format_timestamp(datetime(2024, 3, 5, 9, 7)) == ("DATE : 5.3.2024", "TIME : 9:07")


def test_calculate_age():
    today = date(2024, 6, 14)
    assert calculate_age("1990-06-15", today) == 33
    assert calculate_age("1990-06-14", today) == 34
    assert calculate_age("garbage", today) == 0


def test_safe_filename():
    assert safe_filename("PRO/2024 001") == "PRO2024_001"
