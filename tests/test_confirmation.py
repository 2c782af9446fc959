from dataclasses import replace
from itertools import count

import pytest

from toms.confirmation import ConfirmationError, cancel_proposal, confirm_proposal, default_voucher_id
from toms.models import ProposalStatus, ServiceType, VoucherStatus


@pytest.fixture
def ids():
    counter = count(1)
    return lambda: f"V-{next(counter)}"


def test_confirm_creates_one_voucher_per_selected_line(full_proposal, ids):
    result = confirm_proposal(full_proposal, {"hotels": [1], "flights": [1], "rentACar": []}, ids)

    assert result.proposal.status == ProposalStatus.CONFIRMED
    assert full_proposal.status == ProposalStatus.NEW
    assert [v.id for v in result.vouchers] == ["V-1", "V-2"]
    assert [v.service_type for v in result.vouchers] == [ServiceType.HOTEL, ServiceType.FLIGHT]

    hotel_voucher = result.vouchers[0]
    assert hotel_voucher.status == VoucherStatus.PENDING_PAYMENT
    assert hotel_voucher.proposal_reference == "PRO-2024-001"
    assert hotel_voucher.agency_id == "ag-1"
    assert hotel_voucher.service_data.total_price == 600.0
    assert hotel_voucher.guests == []
    assert hotel_voucher.total_pax == 0


def test_unknown_line_ids_are_skipped(full_proposal, ids, caplog):
    result = confirm_proposal(full_proposal, {"hotels": [1, 99], "additionalServices": ["1"]}, ids)
    assert len(result.vouchers) == 2
    assert "no hotel line with id 99" in caplog.text


def test_only_new_proposals_can_be_confirmed(proposal):
    confirmed = replace(proposal, status=ProposalStatus.CONFIRMED)
    with pytest.raises(ConfirmationError):
        confirm_proposal(confirmed, {"hotels": [1]})


def test_cancel_is_terminal(proposal):
    cancelled = cancel_proposal(proposal)
    assert cancelled.status == ProposalStatus.CANCELLED
    with pytest.raises(ConfirmationError):
        cancel_proposal(cancelled)
    with pytest.raises(ConfirmationError):
        confirm_proposal(cancelled, {})


def test_default_voucher_id_shape():
    voucher_id = default_voucher_id()
    prefix, millis, suffix = voucher_id.split("-")
    assert prefix == "V"
    assert millis.isdigit()
    assert len(suffix) == 9
