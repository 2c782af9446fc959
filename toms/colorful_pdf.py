"""Colorful multi-voucher batch PDF.

Each voucher starts on a new page with a gradient header band, coloured
section banners, a row of three summary cards, the guest list and an
optional notes card. Page numbers count physical pages across the batch.
"""
import logging
from datetime import datetime
from typing import List, Optional, Sequence

from .formatting import calculate_age, calculate_nights, format_date, safe_filename
from .i18n import translator
from .layout import GRAY, LIGHT_GRAY, WHITE, Card, CardLine, DocumentError, FontSet, LayoutEngine, PageGeometry
from .models import (
    AdditionalServiceEntry, CompanyInfo, FlightEntry, HotelEntry, Proposal,
    ReferenceData, RentACarEntry, TransportationEntry, Voucher, VoucherStatus
)
from .pdf_renderer import GeneratedDocument
from .proposal_pdf import company_title, entity_name
from .tables import striped
from .voucher_pdf import destination_name, service_name

logger = logging.getLogger(__name__)

COLORFUL_GEOMETRY = PageGeometry(margin=15, top=20, bottom_reserve=35)

COLORS = {
    "primary": (41, 128, 185),
    "secondary": (243, 156, 18),
    "success": (46, 204, 113),
    "danger": (231, 76, 60),
    "warning": (241, 196, 15),
    "info": (52, 152, 219),
    "purple": (155, 89, 182),
    "pink": (236, 64, 122),
    "teal": (26, 188, 156),
}

STATUS_COLORS = {
    VoucherStatus.PENDING_PAYMENT: COLORS["warning"],
    VoucherStatus.PAID: COLORS["teal"],
    VoucherStatus.COMPLETED: COLORS["success"],
    VoucherStatus.CANCELLED: COLORS["danger"],
}

HEADER_HEIGHT = 45


def _darker(color, amount: int = 60):
    return tuple(max(0, c - amount) for c in color)


def _decorate_page(engine: LayoutEngine) -> None:
    """Faint circles in the four corners of every page."""
    g = engine.geometry
    primary = COLORS["primary"]
    for x, y, radius in ((10, 10, 30), (g.width - 10, 10, 25), (10, g.height - 10, 20),
                         (g.width - 10, g.height - 10, 35)):
        engine.draw_circle(x, y, radius, primary, fill_alpha=0.03)


def _draw_header_band(engine: LayoutEngine, voucher: Voucher, company: Optional[CompanyInfo], t) -> None:
    g = engine.geometry
    primary = COLORS["primary"]
    for i in range(HEADER_HEIGHT):
        engine.draw_rect(0, i, g.width, 1, fill=primary, fill_alpha=1 - (i / HEADER_HEIGHT) * 0.4)

    engine.text_at(g.center, 15, company_title(company), 22, "bold", WHITE, "center")
    engine.text_at(g.center, 23, t("voucher"), 12, "italic", WHITE, "center")
    engine.draw_rect(g.center - 30, 28, 60, 10, fill=WHITE, radius=2)
    engine.text_at(g.center, 33, f"VOUCHER #{voucher.id}", 10, "bold", primary, "center")
    engine.move_to(HEADER_HEIGHT + 8)


def _draw_status_line(engine: LayoutEngine, voucher: Voucher, t) -> None:
    g = engine.geometry
    y = engine.cursor
    engine.draw_rect(g.margin, y, 45, 8, fill=STATUS_COLORS.get(voucher.status, COLORS["info"]), radius=2)
    engine.text_at(g.margin + 22.5, y + 5.5, voucher.status.display, 9, "bold", WHITE, "center")
    engine.text_at(g.right, y + 5, f"{t('ref')}: {voucher.proposal_reference}", 8, color=GRAY, align="right")
    engine.advance(15)


def _label(text: str, color) -> CardLine:
    return CardLine(text.upper(), 8, "bold", _darker(color, 40))


def _value(text: str, size: float = 10, style: str = "bold") -> CardLine:
    return CardLine(text, size, style)


def service_cards(voucher: Voucher, t) -> List[Card]:
    """Dates, service specifics and passengers, by service type."""
    item = voucher.service_data
    green, purple, pink = COLORS["success"], COLORS["purple"], COLORS["pink"]
    unknown = t("unknown")

    if isinstance(item, HotelEntry):
        dates = [_label(t("checkin"), green), _value(format_date(item.checkin) or unknown),
                 _label(t("checkout"), green), _value(format_date(item.checkout) or unknown)]
        nights = calculate_nights(item.checkin, item.checkout)
        detail = [_label(t("accommodation"), purple), _value(f"{item.num_rooms} x {item.room_type or 'DBL'}", 9, "normal"),
                  _value(f"{nights} {t('nights')}", 9, "normal"), _value(item.board_type or "BB")]
    elif isinstance(item, TransportationEntry):
        dates = [_label(t("date"), green), _value(format_date(item.date) or unknown),
                 _label(t("days"), green), _value(str(item.num_days))]
        detail = [_label(t("vehicle"), purple), _value(item.vehicle_type or unknown, 9, "normal"),
                  _value(f"{item.num_vehicles} x {t('numVehicles')}", 9, "normal")]
    elif isinstance(item, FlightEntry):
        dates = [_label(t("flightDate"), green), _value(format_date(item.date) or unknown),
                 _label(t("time"), green), _value(item.departure_time or unknown)]
        detail = [_label(t("flight"), purple), _value(item.route, 9, "normal"),
                  _value(item.airline or unknown, 9, "normal"), _value(item.flight_type or unknown)]
    elif isinstance(item, RentACarEntry):
        dates = [_label(t("pickupDate"), green), _value(format_date(item.pickup_date) or unknown),
                 _label(t("dropoffDate"), green), _value(format_date(item.dropoff_date) or unknown)]
        detail = [_label(t("car"), purple), _value(f"{item.num_cars} x {item.car_type or unknown}", 9, "normal"),
                  _value(f"{item.num_days} {t('days')}", 9, "normal"), _value(item.pickup_location or unknown, 9)]
    elif isinstance(item, AdditionalServiceEntry):
        dates = [_label(t("date"), green), _value(format_date(item.date) or unknown),
                 _label(t("days"), green), _value(str(item.num_days))]
        detail = [_label(t("service"), purple), _value(item.service_type_name or unknown, 9, "normal"),
                  _value(f"{item.num_pax} {t('passengers')}", 9, "normal")]
    else:
        raise DocumentError(f"Unsupported service data: {type(item).__name__}")

    passengers = [_label(t("passengers"), pink),
                  _value(f"{t('adults')}: {voucher.adults}", 9, "normal"),
                  _value(f"{t('children')}: {voucher.children}", 9, "normal"),
                  _value(f"{t('total')}: {voucher.total_pax}", 11)]

    return [Card(green, dates), Card(purple, detail), Card(pink, passengers)]


NOTES_MIN_HEIGHT = 28.0
NOTES_HEAD = 12.0
NOTES_LINE = 4.0
NOTES_PAD = 2.0


def _notes_height(line_count: int) -> float:
    return max(NOTES_MIN_HEIGHT, NOTES_HEAD + line_count * NOTES_LINE + NOTES_PAD)


def _draw_notes(engine: LayoutEngine, notes: str, t) -> None:
    """One card per page; long notes continue in a new card on the next page."""
    g = engine.geometry
    warning = COLORS["warning"]
    lines = engine.split_text(notes, g.content_width - 6, 8)

    while lines:
        room = g.limit - engine.cursor
        if _notes_height(len(lines)) <= room:
            chunk = lines
        elif room >= NOTES_MIN_HEIGHT:
            chunk = lines[:int((room - NOTES_HEAD - NOTES_PAD) // NOTES_LINE)]
        else:
            chunk = []
        if not chunk:
            engine.new_page()
            continue

        height = _notes_height(len(chunk))
        y = engine.cursor
        engine.draw_rect(g.margin, y, g.content_width, height, fill=warning, fill_alpha=0.15, radius=2)
        engine.draw_rect(g.margin, y, g.content_width, height, stroke=warning, line_width=0.5, radius=2)
        engine.text_at(g.margin + 3, y + 6, t("importantNotes"), 9, "bold", _darker(warning))
        for index, line in enumerate(chunk):
            engine.text_at(g.margin + 3, y + NOTES_HEAD + index * NOTES_LINE, line, 8)
        engine.advance(height + 4)

        lines = lines[len(chunk):]
        if lines:
            engine.new_page()


def _layout_voucher(engine: LayoutEngine, voucher: Voucher, references: ReferenceData,
                    company: Optional[CompanyInfo], t, today) -> None:
    g = engine.geometry
    _draw_header_band(engine, voucher, company, t)
    _draw_status_line(engine, voucher, t)

    agency = references.agency(voucher.agency_id)
    sales_person = references.user(voucher.sales_person_id)
    engine.banner(t("agencyInformation"), COLORS["info"])
    engine.text_at(g.margin + 3, engine.cursor, entity_name(agency, t, "agency", voucher.agency_id), 10, "bold")
    engine.advance(5)
    contact = agency.contact_person if agency and agency.contact_person else t("unknown")
    engine.text_at(g.margin + 3, engine.cursor, f"{t('contact')}: {contact}", 9, color=GRAY)
    engine.advance(5)
    engine.text_at(g.margin + 3, engine.cursor,
                   f"{t('salesPerson')}: {entity_name(sales_person, t, 'sales person', voucher.sales_person_id)}",
                   9, color=GRAY)
    engine.advance(15)

    engine.banner(t("serviceDetails").upper(), COLORS["secondary"])
    engine.text_at(g.margin + 3, engine.cursor, service_name(voucher, references, t), 12, "bold")
    engine.advance(5)
    engine.text_at(g.margin + 3, engine.cursor, destination_name(voucher, references), 9, color=GRAY)
    engine.advance(12)

    engine.card_row(service_cards(voucher, t), height=32, gap=5)

    if voucher.guests:
        engine.banner(t("guestList"), COLORS["teal"])
        rows = [
            [guest.full_name, str(calculate_age(guest.birth_date, today)), guest.nationality, guest.passport_number]
            for guest in voucher.guests
        ]
        engine.table([t("name"), t("age"), t("nationality"), t("passport")], rows, striped(COLORS["teal"]))

    if voucher.notes:
        _draw_notes(engine, voucher.notes, t)


def generate_colorful_vouchers_pdf(
    vouchers: Sequence[Voucher],
    proposal: Optional[Proposal] = None,
    references: Optional[ReferenceData] = None,
    company: Optional[CompanyInfo] = None,
    language: Optional[str] = None,
    now: Optional[datetime] = None,
    fonts: Optional[FontSet] = None
) -> GeneratedDocument:
    """Lay out a batch of vouchers, one or more pages each."""
    if not vouchers:
        raise DocumentError("No vouchers selected")

    references = references or ReferenceData()
    if language is None and proposal is not None:
        language = proposal.pdf_language
    t = translator(language)
    now = now or datetime.now()
    reference = proposal.reference if proposal else vouchers[0].proposal_reference

    engine = LayoutEngine(COLORFUL_GEOMETRY, fonts, on_new_page=_decorate_page, title=f"Vouchers {reference}")
    for index, voucher in enumerate(vouchers):
        if index > 0:
            engine.new_page()
        _layout_voucher(engine, voucher, references, company, t, now.date())

    primary = COLORS["primary"]

    def footer(eng: LayoutEngine, page: int, total: int) -> None:
        g = eng.geometry
        footer_y = g.height - 25
        eng.draw_rect(0, footer_y, g.width, 25, fill=primary, fill_alpha=0.08)
        eng.draw_line(g.margin, footer_y, g.right, footer_y, 0.5, primary)
        name = company.name if company and company.name else "Travel Company"
        eng.text_at(g.center, footer_y + 6, name, 9, "bold", primary, "center")
        phone = company.phone if company and company.phone else "Phone"
        email = company.email if company and company.email else "Email"
        website = company.website if company and company.website else "Website"
        eng.text_at(g.center, footer_y + 11, f"{phone} | {email} | {website}", 7, color=primary, align="center")
        eng.text_at(g.center, footer_y + 16, f"{t('page')} {page} / {total}", 7, color=LIGHT_GRAY, align="center")

    layout = engine.finish(footer)
    millis = int(now.timestamp() * 1000)
    logger.info(f"Generated colorful batch for {reference}: {len(vouchers)} vouchers, {layout.page_count} pages")
    return GeneratedDocument(filename=f"vouchers-{safe_filename(reference)}-{millis}.pdf", layout=layout)
