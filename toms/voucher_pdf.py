"""Plain service voucher PDF and the per-proposal voucher bundle."""
import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .formatting import calculate_age, calculate_nights, format_date, parse_date, safe_filename
from .i18n import translator
from .layout import DocumentError, FontSet, LayoutEngine, PageGeometry
from .models import (
    SERVICE_ORDER, AdditionalServiceEntry, CompanyInfo, FlightEntry, HotelEntry,
    LineItem, ReferenceData, RentACarEntry, TransportationEntry, Voucher
)
from .pdf_renderer import GeneratedDocument, merge_pdfs
from .proposal_pdf import draw_heading, entity_name
from .tables import PLAIN

logger = logging.getLogger(__name__)

VOUCHER_GEOMETRY = PageGeometry(margin=20, top=20, bottom_reserve=40)

Column = List[str]


def room_category(room_type: str) -> str:
    """STANDARD, SUPERIOR or SUITE, derived from the room type label."""
    room = (room_type or "").upper()
    if "SUPERIOR" in room or "DELUXE" in room:
        return "SUPERIOR"
    if "SUITE" in room:
        return "SUITE"
    return "STANDARD"


def service_date(item: LineItem) -> str:
    """The date a service starts on."""
    if isinstance(item, HotelEntry):
        return item.checkin
    if isinstance(item, RentACarEntry):
        return item.pickup_date
    return item.date


def service_name(voucher: Voucher, references: ReferenceData, t) -> str:
    """Headline of a voucher: hotel name, route, vehicle, car or service."""
    item = voucher.service_data
    if isinstance(item, HotelEntry):
        return entity_name(references.hotel(item.hotel_id), t, "hotel", item.hotel_id)
    if isinstance(item, FlightEntry):
        return item.route
    if isinstance(item, TransportationEntry):
        return item.vehicle_type or item.description or t("unknown")
    if isinstance(item, RentACarEntry):
        return item.car_type or t("unknown")
    return item.service_type_name or item.description or t("unknown")


def destination_name(voucher: Voucher, references: ReferenceData) -> str:
    item = voucher.service_data
    if isinstance(item, FlightEntry):
        return item.arrival
    destination = references.destination(item.destination_id)
    return destination.name if destination else ""


def _or_unknown(value, t) -> str:
    return str(value) if value not in (None, "") else t("unknown")


def booking_columns(voucher: Voucher, t) -> Tuple[Column, Column, Column]:
    """Left (dates), centre (service specifics) and right (pax) lines."""
    item = voucher.service_data
    pax = [
        f"{t('adults')} :{voucher.adults}",
        f"{t('children')} :{voucher.children}",
        f"{t('totalPax')} :{voucher.total_pax}",
    ]

    if isinstance(item, HotelEntry):
        left = [
            f"{t('checkin')} :{_or_unknown(format_date(item.checkin), t)}",
            f"{t('checkout')} :{_or_unknown(format_date(item.checkout), t)}",
            f"{t('nights')} :{calculate_nights(item.checkin, item.checkout)}",
        ]
        centre = [
            f"{t('rooms')} :{item.num_rooms}",
            f"{t('roomType')} :{item.room_type or 'DBL'} ({room_category(item.room_type)})",
            f"{t('mealPlan')} :{item.board_type or 'BB'}",
        ]
    elif isinstance(item, TransportationEntry):
        left = [
            f"{t('date')} :{_or_unknown(format_date(item.date), t)}",
            f"{t('days')} :{item.num_days}",
        ]
        centre = [
            f"{t('vehicleType')} :{_or_unknown(item.vehicle_type, t)}",
            f"{t('numVehicles')} :{item.num_vehicles}",
            f"{t('description')} :{item.description}",
        ]
    elif isinstance(item, FlightEntry):
        left = [
            f"{t('flightDate')} :{_or_unknown(format_date(item.date), t)}",
            f"{t('time')} :{_or_unknown(item.departure_time, t)}",
        ]
        centre = [
            f"{t('route')} :{item.route}",
            f"{t('airline')} :{_or_unknown(item.airline, t)}",
            f"{t('flightType')} :{_or_unknown(item.flight_type, t)}",
        ]
    elif isinstance(item, RentACarEntry):
        left = [
            f"{t('pickupDate')} :{_or_unknown(format_date(item.pickup_date), t)}",
            f"{t('dropoffDate')} :{_or_unknown(format_date(item.dropoff_date), t)}",
            f"{t('days')} :{item.num_days}",
        ]
        centre = [
            f"{t('carType')} :{_or_unknown(item.car_type, t)}",
            f"{t('cars')} :{item.num_cars}",
            f"{t('pickupLocation')} :{item.pickup_location}",
            f"{t('dropoffLocation')} :{item.dropoff_location}",
        ]
    elif isinstance(item, AdditionalServiceEntry):
        left = [
            f"{t('date')} :{_or_unknown(format_date(item.date), t)}",
            f"{t('days')} :{item.num_days}",
        ]
        centre = [
            f"{t('serviceType')} :{_or_unknown(item.service_type_name, t)}",
            f"{t('passengers')} :{item.num_pax}",
            f"{t('description')} :{item.description}",
        ]
    else:
        raise DocumentError(f"Unsupported service data: {type(item).__name__}")

    return left, centre, pax


def _draw_booking_block(engine: LayoutEngine, voucher: Voucher, t) -> None:
    g = engine.geometry
    left, centre, right = booking_columns(voucher, t)
    line_h = g.line_height
    engine.ensure_space(max(len(left), len(centre), len(right)) * line_h)
    top = engine.cursor

    engine.text_at(g.margin, top, "1.", 10, "bold")
    centre_x = g.center - 20
    for column, x, align in ((left, g.margin + 10, "left"), (centre, centre_x, "left"), (right, g.right, "right")):
        for index, text in enumerate(column):
            engine.text_at(x, top + index * line_h, text, 10, align=align)

    engine.move_to(top + max(len(left), len(centre), len(right)) * line_h)


def _layout_voucher(
    voucher: Voucher,
    references: ReferenceData,
    company: Optional[CompanyInfo],
    language: Optional[str],
    now: Optional[datetime],
    fonts: Optional[FontSet]
):
    t = translator(language)
    engine = LayoutEngine(VOUCHER_GEOMETRY, fonts, title=f"Voucher {voucher.id}")
    g = engine.geometry

    draw_heading(engine, company, now, timestamp_y=15)
    engine.text_at(g.center, engine.cursor, t(f"form.{voucher.service_type.value}"), 14, "italic", align="center")
    engine.advance(8)
    engine.text_at(g.center, engine.cursor, service_name(voucher, references, t).upper(), 14, "bold", align="center")
    engine.advance(8)
    engine.text_at(g.center, engine.cursor, destination_name(voucher, references).upper(), 12, align="center")
    engine.advance(15)

    engine.text_at(g.margin, engine.cursor, f"{t('voucherNo')}:  {voucher.id}", 10)
    engine.advance(6)
    agency = references.agency(voucher.agency_id)
    operator = agency.name if agency else ""
    engine.text_at(g.margin, engine.cursor, f"{t('operator')} : {operator}", 10)
    engine.text_at(g.center, engine.cursor - 3, voucher.status.display, 24, "bold", align="center")
    engine.advance(15)

    _draw_booking_block(engine, voucher, t)

    engine.advance(4)
    engine.text_line(f"{t('notes').upper()} :", size=10, style="bold")
    if voucher.notes:
        engine.wrapped_text(voucher.notes, size=10, line_height=5)
    engine.advance(4)

    today = now.date() if now else None
    if voucher.guests:
        rows = [
            [guest.full_name, str(calculate_age(guest.birth_date, today)), guest.nationality, guest.passport_number]
            for guest in voucher.guests
        ]
        engine.table([t("name"), t("age"), t("nationality"), t("passport")], rows, PLAIN)
    else:
        engine.text_line(t("noGuests"), size=9)

    def footer(eng: LayoutEngine, page: int, total: int) -> None:
        line_y = eng.geometry.height - 40
        eng.draw_line(g.margin, line_y, g.right, line_y)
        phone = company.phone if company and company.phone else t("unknown")
        email = company.email if company and company.email else t("unknown")
        eng.text_at(g.margin, line_y + 8, f"{t('phone').upper()}: {phone}", 10, "bold")
        eng.text_at(g.margin, line_y + 14, f"{t('email').upper()}: {email}", 10, "bold")
        eng.text_at(g.right, line_y + 14, f"{t('page')} {page} / {total}", 8, align="right")

    return engine.finish(footer)


def generate_voucher_pdf(
    voucher: Voucher,
    references: Optional[ReferenceData] = None,
    company: Optional[CompanyInfo] = None,
    language: Optional[str] = "english",
    now: Optional[datetime] = None,
    fonts: Optional[FontSet] = None
) -> GeneratedDocument:
    """Lay out a single plain service voucher."""
    layout = _layout_voucher(voucher, references or ReferenceData(), company, language, now, fonts)
    logger.info(f"Generated voucher {voucher.id} ({voucher.service_type.value}): {layout.page_count} pages")
    return GeneratedDocument(filename=f"voucher-{safe_filename(voucher.id)}.pdf", layout=layout)


def sort_vouchers(vouchers: Sequence[Voucher]) -> List[Voucher]:
    """Order by service type (hotels first), then by service date."""
    priority = {service_type: index for index, service_type in enumerate(SERVICE_ORDER)}

    def key(voucher: Voucher):
        start = parse_date(service_date(voucher.service_data))
        return (priority.get(voucher.service_type, 99), start is None, start or datetime.min.date())

    return sorted(vouchers, key=key)


def generate_voucher_bundle(
    vouchers: Sequence[Voucher],
    references: Optional[ReferenceData] = None,
    company: Optional[CompanyInfo] = None,
    language: Optional[str] = "english",
    now: Optional[datetime] = None,
    fonts: Optional[FontSet] = None
) -> GeneratedDocument:
    """Render every plain voucher and merge them into one PDF."""
    if not vouchers:
        raise DocumentError("No vouchers to bundle")

    ordered = sort_vouchers(vouchers)
    logger.info(f"Bundling {len(ordered)} vouchers for {ordered[0].proposal_reference}")
    parts = [
        generate_voucher_pdf(v, references, company, language, now, fonts).render()
        for v in ordered
    ]
    reference = safe_filename(ordered[0].proposal_reference or "batch")
    return GeneratedDocument(filename=f"vouchers-{reference}.pdf", content=merge_pdfs(parts))
