import pytest

from toms.loader import (
    SnapshotError, load_line_item, load_proposal, load_reference_data, load_voucher, to_record
)
from toms.models import FlightEntry, HotelEntry, ProposalStatus, ServiceType, VoucherStatus


def test_load_proposal(proposal):
    assert proposal.reference == "PRO-2024-001"
    assert proposal.status == ProposalStatus.NEW
    assert proposal.destination_ids == ["d-1", "d-2"]
    assert isinstance(proposal.hotels[0], HotelEntry)
    assert proposal.hotels[0].price_per_night == "100"


def test_single_destination_fallback(proposal_record):
    record = dict(proposal_record)
    del record["destinationIds"]
    record["destinationId"] = "d-9"
    assert load_proposal(record).destination_ids == ["d-9"]


def test_voucher_service_data_matches_its_tag(voucher, flight_voucher):
    assert voucher.service_type == ServiceType.HOTEL
    assert isinstance(voucher.service_data, HotelEntry)
    assert isinstance(flight_voucher.service_data, FlightEntry)
    assert flight_voucher.service_data.route == "IST → NAV"
    assert voucher.status == VoucherStatus.PENDING_PAYMENT
    assert voucher.guests[0].full_name == "Ali Yilmaz"


def test_unknown_service_type_is_rejected(voucher_record):
    record = dict(voucher_record, serviceType="cruise")
    with pytest.raises(SnapshotError):
        load_voucher(record)


def test_non_numeric_counts_degrade_to_zero():
    item = load_line_item("transportation", {"id": 3, "numDays": "two", "pricePerDay": "x"})
    assert item.num_days == 0
    assert item.price_per_day == "x"


def test_infinite_and_huge_numbers_degrade_to_zero():
    voucher = load_voucher({"id": "V-9", "serviceType": "hotel", "serviceData": {"id": 1, "numRooms": "inf"}})
    assert voucher.service_data.num_rooms == 0

    item = load_line_item("flight", {"id": 2, "pax": 1e400, "totalPrice": "inf"})
    assert item.pax == 0
    assert item.total_price == 0.0


def test_meal_plan_alias():
    item = load_line_item("hotels", {"id": 1, "mealPlan": "AI"})
    assert item.board_type == "AI"


def test_unknown_status_is_rejected(proposal_record):
    with pytest.raises(SnapshotError):
        load_proposal(dict(proposal_record, status="ARCHIVED"))


def test_non_object_record_is_rejected():
    with pytest.raises(SnapshotError):
        load_proposal(["not", "a", "proposal"])


def test_reference_lookups_return_none_when_missing(references):
    assert references.agency("ag-1").name == "Sunrise Tours"
    assert references.hotel("h-404") is None
    assert references.user(None) is None
    assert load_reference_data(None).destination("d-1") is None


def test_to_record_round_trips_camel_case(voucher):
    record = to_record(voucher)
    assert record["proposalReference"] == "PRO-2024-001"
    assert record["serviceType"] == "hotel"
    assert record["status"] == "PENDING_PAYMENT"
    assert record["serviceData"]["pricePerNight"] == "100"
    assert load_voucher(record) == voucher
