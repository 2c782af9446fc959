"""Snapshot loader.

Converts the camelCase JSON records used by the back-office front end
(proposals, vouchers and reference entities) into the dataclasses in
``models``.
"""
import logging
import math
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .models import (
    AdditionalServiceEntry, Agency, CompanyInfo, Destination, FlightEntry,
    Guest, Hotel, HotelEntry, LineItem, Proposal, ProposalStatus,
    ReferenceData, RentACarEntry, ServiceType, Source, TransportationEntry,
    User, Voucher, VoucherStatus
)

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot record cannot be interpreted."""


def _str(data: Mapping[str, Any], key: str, default: str = "") -> str:
    value = data.get(key)
    if value is None:
        return default
    return str(value)


def _int(data: Mapping[str, Any], key: str, default: int = 0) -> int:
    value = data.get(key)
    if value is None or value == "":
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        # OverflowError: "inf" and out-of-range floats such as 1e400
        logger.warning(f"Non-numeric value for '{key}': {value!r}; using 0")
        return 0


def _float(data: Mapping[str, Any], key: str) -> float:
    value = data.get(key)
    try:
        number = float(value) if value not in (None, "") else 0.0
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _price(data: Mapping[str, Any], key: str) -> str:
    # Prices stay strings; parse_price decides what is numeric.
    value = data.get(key)
    return "" if value is None else str(value)


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise SnapshotError(f"{what} must be an object, got {type(data).__name__}")
    return data


def parse_service_type(value: Any) -> ServiceType:
    """Resolve a service type tag ('hotel', 'rentacar', ...)."""
    text = str(value or "").strip().lower()
    aliases = {
        "hotels": "hotel",
        "flights": "flight",
        "rentacar": "rentacar",
        "rent_a_car": "rentacar",
        "additionalservices": "additional",
        "additional_services": "additional",
    }
    text = aliases.get(text, text)
    try:
        return ServiceType(text)
    except ValueError:
        raise SnapshotError(f"Unknown service type: {value!r}")


def load_hotel_entry(data: Mapping[str, Any]) -> HotelEntry:
    return HotelEntry(
        id=_int(data, "id"),
        destination_id=_str(data, "destinationId"),
        hotel_id=_str(data, "hotelId"),
        checkin=_str(data, "checkin"),
        checkout=_str(data, "checkout"),
        room_type=_str(data, "roomType"),
        board_type=_str(data, "boardType") or _str(data, "mealPlan"),
        num_rooms=_int(data, "numRooms", 1),
        currency=_str(data, "currency", "USD"),
        price_per_night=_price(data, "pricePerNight"),
        total_price=_float(data, "totalPrice"),
        nights=_int(data, "nights"),
    )


def load_transportation_entry(data: Mapping[str, Any]) -> TransportationEntry:
    return TransportationEntry(
        id=_int(data, "id"),
        destination_id=_str(data, "destinationId"),
        date=_str(data, "date"),
        description=_str(data, "description"),
        vehicle_type=_str(data, "vehicleType"),
        num_days=_int(data, "numDays", 1),
        num_vehicles=_int(data, "numVehicles", 1),
        currency=_str(data, "currency", "USD"),
        price_per_day=_price(data, "pricePerDay"),
        total_price=_float(data, "totalPrice"),
    )


def load_flight_entry(data: Mapping[str, Any]) -> FlightEntry:
    return FlightEntry(
        id=_int(data, "id"),
        date=_str(data, "date"),
        departure=_str(data, "departure"),
        arrival=_str(data, "arrival"),
        departure_time=_str(data, "departureTime") or _str(data, "time"),
        arrival_time=_str(data, "arrivalTime"),
        flight_type=_str(data, "flightType"),
        airline=_str(data, "airline"),
        pax=_int(data, "pax", 1),
        currency=_str(data, "currency", "USD"),
        price_per_pax=_price(data, "pricePerPax"),
        total_price=_float(data, "totalPrice"),
    )


def load_rentacar_entry(data: Mapping[str, Any]) -> RentACarEntry:
    return RentACarEntry(
        id=_int(data, "id"),
        destination_id=_str(data, "destinationId"),
        pickup_date=_str(data, "pickupDate"),
        dropoff_date=_str(data, "dropoffDate"),
        pickup_location=_str(data, "pickupLocation"),
        dropoff_location=_str(data, "dropoffLocation"),
        car_type=_str(data, "carType"),
        num_days=_int(data, "numDays", 1),
        num_cars=_int(data, "numCars", 1),
        currency=_str(data, "currency", "USD"),
        price_per_day=_price(data, "pricePerDay"),
        total_price=_float(data, "totalPrice"),
    )


def load_additional_entry(data: Mapping[str, Any]) -> AdditionalServiceEntry:
    return AdditionalServiceEntry(
        id=_int(data, "id"),
        destination_id=_str(data, "destinationId"),
        date=_str(data, "date"),
        description=_str(data, "description"),
        service_type_name=_str(data, "serviceType"),
        num_days=_int(data, "numDays", 1),
        num_pax=_int(data, "numPax", 1),
        currency=_str(data, "currency", "USD"),
        price_per_pax=_price(data, "pricePerPax"),
        total_price=_float(data, "totalPrice"),
    )


_ENTRY_LOADERS = {
    ServiceType.HOTEL: load_hotel_entry,
    ServiceType.TRANSPORTATION: load_transportation_entry,
    ServiceType.FLIGHT: load_flight_entry,
    ServiceType.RENTACAR: load_rentacar_entry,
    ServiceType.ADDITIONAL: load_additional_entry,
}


def load_line_item(service_type: Any, data: Any) -> LineItem:
    """Build the line-item variant matching the service type tag."""
    tag = service_type if isinstance(service_type, ServiceType) else parse_service_type(service_type)
    return _ENTRY_LOADERS[tag](_require_mapping(data, f"{tag.value} entry"))


def _load_items(data: Mapping[str, Any], key: str, service_type: ServiceType) -> List[LineItem]:
    raw = data.get(key) or []
    if not isinstance(raw, list):
        raise SnapshotError(f"'{key}' must be a list")
    return [load_line_item(service_type, item) for item in raw]


def _enum(enum_cls, value: Any, default):
    try:
        return enum_cls(str(value).upper()) if value else default
    except ValueError:
        raise SnapshotError(f"Unknown {enum_cls.__name__}: {value!r}")


def load_proposal(data: Any) -> Proposal:
    """Build a Proposal from its JSON record."""
    data = _require_mapping(data, "proposal")
    destination_ids = data.get("destinationIds")
    if destination_ids is None and data.get("destinationId"):
        destination_ids = [data["destinationId"]]

    return Proposal(
        id=_str(data, "id"),
        reference=_str(data, "reference"),
        source=_str(data, "source"),
        agency_id=_str(data, "agencyId"),
        sales_person_id=_str(data, "salesPersonId"),
        destination_ids=[str(d) for d in (destination_ids or [])],
        estimated_nights=_str(data, "estimatedNights"),
        status=_enum(ProposalStatus, data.get("status"), ProposalStatus.NEW),
        created_at=_str(data, "createdAt"),
        hotels=_load_items(data, "hotels", ServiceType.HOTEL),
        transportation=_load_items(data, "transportation", ServiceType.TRANSPORTATION),
        flights=_load_items(data, "flights", ServiceType.FLIGHT),
        rent_a_car=_load_items(data, "rentACar", ServiceType.RENTACAR),
        additional_services=_load_items(data, "additionalServices", ServiceType.ADDITIONAL),
        overall_margin=_str(data, "overallMargin", "0"),
        commission=_str(data, "commission", "0"),
        pdf_language=_str(data, "pdfLanguage", "english"),
        display_currency=_str(data, "displayCurrency", "USD"),
    )


def load_guest(data: Any) -> Guest:
    data = _require_mapping(data, "guest")
    return Guest(
        id=_int(data, "id"),
        first_name=_str(data, "firstName"),
        last_name=_str(data, "lastName"),
        passport_number=_str(data, "passportNumber"),
        nationality=_str(data, "nationality"),
        birth_date=_str(data, "birthDate"),
    )


def load_voucher(data: Any) -> Voucher:
    """Build a Voucher; its serviceData is typed by serviceType."""
    data = _require_mapping(data, "voucher")
    service_type = parse_service_type(data.get("serviceType"))
    service_data = load_line_item(service_type, data.get("serviceData") or {})

    return Voucher(
        id=_str(data, "id"),
        proposal_id=_str(data, "proposalId"),
        proposal_reference=_str(data, "proposalReference"),
        service_type=service_type,
        service_id=_int(data, "serviceId", service_data.id),
        service_data=service_data,
        status=_enum(VoucherStatus, data.get("status"), VoucherStatus.PENDING_PAYMENT),
        source=_str(data, "source"),
        agency_id=_str(data, "agencyId"),
        sales_person_id=_str(data, "salesPersonId"),
        guests=[load_guest(g) for g in data.get("guests") or []],
        adults=_int(data, "adults"),
        children=_int(data, "children"),
        total_pax=_int(data, "totalPax"),
        notes=_str(data, "notes"),
    )


def load_company_info(data: Optional[Mapping[str, Any]]) -> Optional[CompanyInfo]:
    if not data:
        return None
    data = _require_mapping(data, "companyInfo")
    return CompanyInfo(
        id=_str(data, "id"),
        name=_str(data, "name"),
        address=_str(data, "address"),
        city=_str(data, "city"),
        country=_str(data, "country"),
        postal_code=_str(data, "postalCode"),
        phone=_str(data, "phone"),
        email=_str(data, "email"),
        website=_str(data, "website"),
        tax_id=_str(data, "taxId"),
        license_number=_str(data, "licenseNumber"),
        currency=_str(data, "currency", "USD"),
    )


def _index(records: Any, build) -> Dict[str, Any]:
    result = {}
    for record in records or []:
        entity = build(_require_mapping(record, "reference record"))
        result[entity.id] = entity
    return result


def load_reference_data(data: Optional[Mapping[str, Any]]) -> ReferenceData:
    """Build the reference lookups from lists of records."""
    data = data or {}
    return ReferenceData(
        agencies=_index(data.get("agencies"), lambda r: Agency(
            id=_str(r, "id"),
            name=_str(r, "name"),
            country=_str(r, "country"),
            contact_person=_str(r, "contactPerson"),
            contact_email=_str(r, "contactEmail"),
            contact_phone=_str(r, "contactPhone"),
            commission_rate=_str(r, "commissionRate"),
            is_active=bool(r.get("isActive", True)),
        )),
        users=_index(data.get("users"), lambda r: User(
            id=_str(r, "id"),
            name=_str(r, "name"),
            email=_str(r, "email"),
            role=_str(r, "role"),
            is_active=bool(r.get("isActive", True)),
        )),
        hotels=_index(data.get("hotels"), lambda r: Hotel(
            id=_str(r, "id"),
            name=_str(r, "name"),
            destination_id=_str(r, "destinationId"),
            address=_str(r, "address"),
            star_rating=_int(r, "starRating"),
            contact_person=_str(r, "contactPerson"),
            contact_email=_str(r, "contactEmail"),
            contact_phone=_str(r, "contactPhone"),
            is_active=bool(r.get("isActive", True)),
        )),
        destinations=_index(data.get("destinations"), lambda r: Destination(
            id=_str(r, "id"),
            name=_str(r, "name"),
            code=_str(r, "code"),
            country=_str(r, "country"),
            description=_str(r, "description"),
            is_active=bool(r.get("isActive", True)),
        )),
        sources=_index(data.get("sources"), lambda r: Source(
            id=_str(r, "id"),
            name=_str(r, "name"),
            description=_str(r, "description"),
            is_active=bool(r.get("isActive", True)),
        )),
    )


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


_RECORD_KEYS = {
    "serviceTypeName": "serviceType",
}


def _to_json(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {
            _RECORD_KEYS.get(_camel(key), _camel(key)): _to_json(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_to_json(item) for item in value]
    return value


def to_record(entity: Any) -> Dict[str, Any]:
    """Dump a dataclass back to its camelCase JSON record."""
    return _to_json(asdict(entity))
