"""Pricing aggregation for proposals and vouchers.

All totals are plain floats summed across line items regardless of each
item's currency; no conversion is applied. Malformed or negative prices
and quantities count as zero.
"""
import logging
import math
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable

from .formatting import calculate_nights
from .models import (
    AdditionalServiceEntry, FlightEntry, HotelEntry, LineItem, Proposal,
    RentACarEntry, ServiceType, TransportationEntry, Voucher
)

logger = logging.getLogger(__name__)


_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_price(value: Any) -> float:
    """Parse the leading decimal number of a stored price; otherwise 0.0.

    "100 USD" reads as 100.0 and "12,5" as 12.0. Text without a leading
    number, and infinite or NaN results, become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return 0.0
    number = float(match.group().strip())
    return number if math.isfinite(number) else 0.0


def _amount(value: Any) -> float:
    # negative prices and percentages count as zero
    return max(0.0, parse_price(value))


def _count(value: int) -> int:
    return max(0, value)


def hotel_line_total(item: HotelEntry) -> float:
    nights = calculate_nights(item.checkin, item.checkout)
    return _count(nights) * _amount(item.price_per_night) * _count(item.num_rooms)


def transportation_line_total(item: TransportationEntry) -> float:
    return _amount(item.price_per_day) * _count(item.num_days)


def flight_line_total(item: FlightEntry) -> float:
    return _amount(item.price_per_pax) * _count(item.pax)


def rentacar_line_total(item: RentACarEntry) -> float:
    return _amount(item.price_per_day) * _count(item.num_days)


def additional_line_total(item: AdditionalServiceEntry) -> float:
    # per pax, per day
    return _amount(item.price_per_pax) * _count(item.num_pax) * _count(item.num_days)


_LINE_TOTALS = {
    ServiceType.HOTEL: hotel_line_total,
    ServiceType.TRANSPORTATION: transportation_line_total,
    ServiceType.FLIGHT: flight_line_total,
    ServiceType.RENTACAR: rentacar_line_total,
    ServiceType.ADDITIONAL: additional_line_total,
}


def line_total(item: LineItem) -> float:
    """Computed total of any line item, dispatching on its service type."""
    return _LINE_TOTALS[item.service_type](item)


def unit_price(item: LineItem) -> float:
    """The parsed unit price of a line item."""
    if isinstance(item, HotelEntry):
        return parse_price(item.price_per_night)
    if isinstance(item, (TransportationEntry, RentACarEntry)):
        return parse_price(item.price_per_day)
    return parse_price(item.price_per_pax)


def _sum(items: Iterable[LineItem]) -> float:
    return sum((line_total(item) for item in items), 0.0)


def hotels_total(items: Iterable[HotelEntry]) -> float:
    return _sum(items)


def transportation_total(items: Iterable[TransportationEntry]) -> float:
    return _sum(items)


def flights_total(items: Iterable[FlightEntry]) -> float:
    return _sum(items)


def rentacar_total(items: Iterable[RentACarEntry]) -> float:
    return _sum(items)


def additional_total(items: Iterable[AdditionalServiceEntry]) -> float:
    return _sum(items)


@dataclass
class ProposalTotals:
    """Variant totals and the margin/commission adjusted final total."""
    hotels: float
    transportation: float
    flights: float
    rent_a_car: float
    additional_services: float
    subtotal: float
    margin_percent: float
    commission_percent: float
    margin_amount: float
    commission_amount: float
    final_total: float
    currency: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def apply_markups(subtotal: float, margin_percent: float, commission_percent: float) -> float:
    """subtotal + margin% + commission%, both taken on the subtotal."""
    return subtotal + subtotal * margin_percent / 100 + subtotal * commission_percent / 100


def compute_totals(proposal: Proposal) -> ProposalTotals:
    """Compute every total shown on a proposal."""
    hotels = hotels_total(proposal.hotels)
    transportation = transportation_total(proposal.transportation)
    flights = flights_total(proposal.flights)
    cars = rentacar_total(proposal.rent_a_car)
    additional = additional_total(proposal.additional_services)
    subtotal = hotels + transportation + flights + cars + additional

    margin = _amount(proposal.overall_margin)
    commission = _amount(proposal.commission)

    currencies = {
        item.currency.upper()
        for service_type in ServiceType
        for item in proposal.items_of(service_type)
        if item.currency
    }
    if len(currencies) > 1:
        logger.warning(
            f"Proposal {proposal.reference} mixes currencies {sorted(currencies)}; "
            f"summing without conversion"
        )

    return ProposalTotals(
        hotels=hotels,
        transportation=transportation,
        flights=flights,
        rent_a_car=cars,
        additional_services=additional,
        subtotal=subtotal,
        margin_percent=margin,
        commission_percent=commission,
        margin_amount=subtotal * margin / 100,
        commission_amount=subtotal * commission / 100,
        final_total=apply_markups(subtotal, margin, commission),
        currency=proposal.display_currency,
    )


def voucher_total(voucher: Voucher) -> float:
    """Voucher records carry their pre-stored total."""
    return _amount(voucher.service_data.total_price)
