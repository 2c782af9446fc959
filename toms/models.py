"""Data models for the travel back-office documents."""
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Union


class ProposalStatus(Enum):
    NEW = "NEW"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class VoucherStatus(Enum):
    PENDING_PAYMENT = "PENDING_PAYMENT"
    PAID = "PAID"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def display(self) -> str:
        """Status as printed on documents ('PENDING PAYMENT')."""
        return self.value.replace("_", " ")


class ServiceType(Enum):
    """Tag of the line-item union."""
    HOTEL = "hotel"
    TRANSPORTATION = "transportation"
    FLIGHT = "flight"
    RENTACAR = "rentacar"
    ADDITIONAL = "additional"

    @property
    def collection(self) -> str:
        """Name of the proposal collection holding this kind of item."""
        return SERVICE_COLLECTIONS[self]


SERVICE_COLLECTIONS = {
    ServiceType.HOTEL: "hotels",
    ServiceType.TRANSPORTATION: "transportation",
    ServiceType.FLIGHT: "flights",
    ServiceType.RENTACAR: "rentACar",
    ServiceType.ADDITIONAL: "additionalServices",
}

# Hotels, Transportation, Flights, Rent-A-Car, Additional Services
SERVICE_ORDER = list(SERVICE_COLLECTIONS)


@dataclass
class HotelEntry:
    """A hotel stay: nights x rooms."""
    service_type: ClassVar[ServiceType] = ServiceType.HOTEL

    id: int
    destination_id: str = ""
    hotel_id: str = ""
    checkin: str = ""
    checkout: str = ""
    room_type: str = ""
    board_type: str = ""
    num_rooms: int = 1
    currency: str = "USD"
    price_per_night: str = ""
    total_price: float = 0.0
    nights: int = 0


@dataclass
class TransportationEntry:
    """A transfer or coach service billed per day."""
    service_type: ClassVar[ServiceType] = ServiceType.TRANSPORTATION

    id: int
    destination_id: str = ""
    date: str = ""
    description: str = ""
    vehicle_type: str = ""
    num_days: int = 1
    num_vehicles: int = 1
    currency: str = "USD"
    price_per_day: str = ""
    total_price: float = 0.0


@dataclass
class FlightEntry:
    """A flight billed per passenger."""
    service_type: ClassVar[ServiceType] = ServiceType.FLIGHT

    id: int
    date: str = ""
    departure: str = ""
    arrival: str = ""
    departure_time: str = ""
    arrival_time: str = ""
    flight_type: str = ""
    airline: str = ""
    pax: int = 1
    currency: str = "USD"
    price_per_pax: str = ""
    total_price: float = 0.0

    @property
    def route(self) -> str:
        return f"{self.departure} → {self.arrival}"


@dataclass
class RentACarEntry:
    """A car rental billed per day."""
    service_type: ClassVar[ServiceType] = ServiceType.RENTACAR

    id: int
    destination_id: str = ""
    pickup_date: str = ""
    dropoff_date: str = ""
    pickup_location: str = ""
    dropoff_location: str = ""
    car_type: str = ""
    num_days: int = 1
    num_cars: int = 1
    currency: str = "USD"
    price_per_day: str = ""
    total_price: float = 0.0


@dataclass
class AdditionalServiceEntry:
    """Any other service (guide, excursion, entrance...) billed per pax per day."""
    service_type: ClassVar[ServiceType] = ServiceType.ADDITIONAL

    id: int
    destination_id: str = ""
    date: str = ""
    description: str = ""
    service_type_name: str = ""
    num_days: int = 1
    num_pax: int = 1
    currency: str = "USD"
    price_per_pax: str = ""
    total_price: float = 0.0


LineItem = Union[
    HotelEntry, TransportationEntry, FlightEntry, RentACarEntry, AdditionalServiceEntry
]

@dataclass
class Proposal:
    """A travel quote aggregating line items before client confirmation."""
    id: str
    reference: str
    source: str = ""
    agency_id: str = ""
    sales_person_id: str = ""
    destination_ids: List[str] = field(default_factory=list)
    estimated_nights: str = ""
    status: ProposalStatus = ProposalStatus.NEW
    created_at: str = ""
    hotels: List[HotelEntry] = field(default_factory=list)
    transportation: List[TransportationEntry] = field(default_factory=list)
    flights: List[FlightEntry] = field(default_factory=list)
    rent_a_car: List[RentACarEntry] = field(default_factory=list)
    additional_services: List[AdditionalServiceEntry] = field(default_factory=list)
    overall_margin: str = "0"
    commission: str = "0"
    pdf_language: str = "english"
    display_currency: str = "USD"

    def items_of(self, service_type: ServiceType) -> List[LineItem]:
        """Ordered line items of one variant."""
        return {
            ServiceType.HOTEL: self.hotels,
            ServiceType.TRANSPORTATION: self.transportation,
            ServiceType.FLIGHT: self.flights,
            ServiceType.RENTACAR: self.rent_a_car,
            ServiceType.ADDITIONAL: self.additional_services,
        }[service_type]


@dataclass
class Guest:
    """A travelling guest. Age is derived from birth_date."""
    id: int
    first_name: str = ""
    last_name: str = ""
    passport_number: str = ""
    nationality: str = ""
    birth_date: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class Voucher:
    """A single confirmed service booking with its own status lifecycle."""
    id: str
    proposal_id: str
    proposal_reference: str
    service_type: ServiceType
    service_id: int
    service_data: LineItem
    status: VoucherStatus = VoucherStatus.PENDING_PAYMENT
    source: str = ""
    agency_id: str = ""
    sales_person_id: str = ""
    guests: List[Guest] = field(default_factory=list)
    adults: int = 0
    children: int = 0
    total_pax: int = 0
    notes: str = ""


@dataclass
class CompanyInfo:
    """The operating company printed on headers and footers."""
    name: str = "Travel Company"
    address: str = ""
    city: str = ""
    country: str = ""
    postal_code: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    tax_id: str = ""
    license_number: str = ""
    currency: str = "USD"
    id: str = ""


@dataclass
class Destination:
    id: str
    name: str
    code: str = ""
    country: str = ""
    description: str = ""
    is_active: bool = True


@dataclass
class Hotel:
    id: str
    name: str
    destination_id: str = ""
    address: str = ""
    star_rating: int = 0
    contact_person: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    is_active: bool = True


@dataclass
class Agency:
    id: str
    name: str
    country: str = ""
    contact_person: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    commission_rate: str = ""
    is_active: bool = True


@dataclass
class User:
    """A back-office user; sales persons are users."""
    id: str
    name: str
    email: str = ""
    role: str = ""
    is_active: bool = True


@dataclass
class Source:
    id: str
    name: str
    description: str = ""
    is_active: bool = True


@dataclass
class ReferenceData:
    """Read-only lookups resolved by id.

    Lookups return None for unknown ids; callers print a placeholder.
    """
    agencies: Dict[str, Agency] = field(default_factory=dict)
    users: Dict[str, User] = field(default_factory=dict)
    hotels: Dict[str, Hotel] = field(default_factory=dict)
    destinations: Dict[str, Destination] = field(default_factory=dict)
    sources: Dict[str, Source] = field(default_factory=dict)

    def agency(self, agency_id: Optional[str]) -> Optional[Agency]:
        return self.agencies.get(agency_id or "")

    def user(self, user_id: Optional[str]) -> Optional[User]:
        return self.users.get(user_id or "")

    def hotel(self, hotel_id: Optional[str]) -> Optional[Hotel]:
        return self.hotels.get(hotel_id or "")

    def destination(self, destination_id: Optional[str]) -> Optional[Destination]:
        return self.destinations.get(destination_id or "")

    def source(self, source_id: Optional[str]) -> Optional[Source]:
        return self.sources.get(source_id or "")
