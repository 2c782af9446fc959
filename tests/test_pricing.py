from dataclasses import replace

import pytest

from toms.models import (
    AdditionalServiceEntry, FlightEntry, HotelEntry, RentACarEntry, TransportationEntry
)
from toms.pricing import (
    additional_line_total, apply_markups, compute_totals, flight_line_total, hotel_line_total,
    line_total, parse_price, rentacar_line_total, transportation_line_total, voucher_total
)


@pytest.mark.parametrize("value, expected", [
    ("100", 100.0), (" 12.5 ", 12.5), (7, 7.0), ("", 0.0), (None, 0.0),
    ("abc", 0.0), ("inf", 0.0), ("nan", 0.0), (True, 0.0),
    ("100 USD", 100.0), ("12,5", 12.0), ("-40", -40.0), (".5", 0.5), ("1e400", 0.0),
])
def test_parse_price(value, expected):
    assert parse_price(value) == expected


def test_hotel_line_total():
    item = HotelEntry(id=1, checkin="2024-01-01", checkout="2024-01-04", num_rooms=2, price_per_night="100")
    assert hotel_line_total(item) == 600.0


def test_hotel_line_total_with_missing_dates_is_zero():
    item = HotelEntry(id=1, checkin="", checkout="2024-01-04", num_rooms=2, price_per_night="100")
    assert hotel_line_total(item) == 0.0


def test_per_day_and_per_pax_totals():
    assert transportation_line_total(TransportationEntry(id=1, num_days=3, price_per_day="50")) == 150.0
    assert rentacar_line_total(RentACarEntry(id=1, num_days=4, price_per_day="40")) == 160.0
    assert flight_line_total(FlightEntry(id=1, pax=3, price_per_pax="80")) == 240.0


def test_additional_service_is_priced_per_pax_per_day():
    item = AdditionalServiceEntry(id=1, num_days=2, num_pax=3, price_per_pax="10")
    assert additional_line_total(item) == 60.0
    assert line_total(item) == 60.0


def test_bad_price_counts_as_zero():
    assert flight_line_total(FlightEntry(id=1, pax=3, price_per_pax="call us")) == 0.0


def test_negative_prices_and_quantities_count_as_zero():
    assert hotel_line_total(HotelEntry(id=1, checkin="2024-01-01", checkout="2024-01-04",
                                       num_rooms=2, price_per_night="-100")) == 0.0
    assert flight_line_total(FlightEntry(id=1, pax=-3, price_per_pax="-80")) == 0.0
    assert transportation_line_total(TransportationEntry(id=1, num_days=-2, price_per_day="50")) == 0.0


def test_negative_markups_are_ignored(proposal):
    totals = compute_totals(replace(proposal, overall_margin="-50", commission="-5"))
    assert totals.margin_percent == 0.0
    assert totals.final_total == totals.subtotal == 600.0


def test_hotel_scenario_totals(proposal):
    totals = compute_totals(proposal)
    assert totals.hotels == 600.0
    assert totals.subtotal == 600.0
    assert totals.margin_amount == pytest.approx(60.0)
    assert totals.commission_amount == pytest.approx(30.0)
    assert totals.final_total == pytest.approx(690.0)
    assert f"{totals.final_total:.2f}" == "690.00"


def test_final_total_is_additive(full_proposal):
    totals = compute_totals(full_proposal)
    # 600 hotel + 100 transfer + 160 flight + 80 car + 300 excursion
    assert totals.subtotal == pytest.approx(1240.0)
    assert totals.final_total == pytest.approx(totals.subtotal * (1 + 10 / 100 + 5 / 100))


def test_zero_margin_and_commission(proposal):
    plain = replace(proposal, overall_margin="0", commission="not a number")
    totals = compute_totals(plain)
    assert totals.final_total == totals.subtotal == 600.0


def test_empty_proposal(proposal):
    empty = replace(proposal, hotels=[])
    totals = compute_totals(empty)
    assert totals.subtotal == 0.0
    assert totals.final_total == 0.0


def test_mixed_currencies_are_summed_without_conversion(proposal, caplog):
    euro_hotel = replace(proposal.hotels[0], id=2, currency="EUR")
    mixed = replace(proposal, hotels=[proposal.hotels[0], euro_hotel])
    totals = compute_totals(mixed)
    assert totals.hotels == 1200.0
    assert "mixes currencies" in caplog.text


def test_apply_markups():
    assert apply_markups(200.0, 10, 5) == pytest.approx(230.0)


def test_voucher_total_uses_stored_total(voucher):
    assert voucher_total(voucher) == 600.0
