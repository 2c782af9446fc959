"""Proposal Quote PDF.

One section per non-empty service variant, each a ruled table, followed by
the financial summary. Every page carries the contact footer and a
'Page i / N' counter.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from .formatting import calculate_nights, format_currency, format_date, format_timestamp, safe_filename
from .i18n import translator
from .layout import LayoutEngine, PageGeometry, FontSet
from .models import CompanyInfo, Proposal, ReferenceData, ServiceType
from .pdf_renderer import GeneratedDocument
from .pricing import compute_totals, line_total, unit_price
from .tables import PLAIN

logger = logging.getLogger(__name__)

PROPOSAL_GEOMETRY = PageGeometry(margin=20, top=20, bottom_reserve=25)


def company_title(company: Optional[CompanyInfo]) -> str:
    if company and company.name:
        return company.name.upper()
    return "TRAVEL COMPANY"


def entity_name(entity, t: Callable[[str], str], what: str = "", key: str = "") -> str:
    """Display name of a reference entity, or the localized placeholder."""
    if entity is not None and getattr(entity, "name", ""):
        return entity.name
    if key:
        logger.warning(f"Unknown {what} '{key}'; printing placeholder")
    return t("unknown")


def draw_heading(engine: LayoutEngine, company: Optional[CompanyInfo], now: Optional[datetime],
                 timestamp_y: float) -> None:
    """DATE/TIME at the top right and the company name centred below."""
    g = engine.geometry
    date_line, time_line = format_timestamp(now)
    engine.text_at(g.right, timestamp_y, date_line, 9, align="right")
    engine.text_at(g.right, timestamp_y + 5, time_line, 9, align="right")
    engine.move_to(35)
    engine.text_at(g.center, engine.cursor, company_title(company), 16, "bold", align="center")
    engine.advance(8)


def _money(amount: float, currency: str, show_pricing: bool) -> str:
    return format_currency(amount, currency) if show_pricing else "-"


def _hotel_rows(proposal: Proposal, references: ReferenceData, t, show_pricing: bool) -> List[List[str]]:
    rows = []
    for item in proposal.hotels:
        hotel = references.hotel(item.hotel_id)
        rows.append([
            entity_name(hotel, t, "hotel", item.hotel_id),
            format_date(item.checkin),
            format_date(item.checkout),
            str(calculate_nights(item.checkin, item.checkout)),
            str(item.num_rooms),
            item.room_type,
            item.board_type,
            _money(unit_price(item), item.currency, show_pricing),
            _money(line_total(item), item.currency, show_pricing),
        ])
    return rows


def _transportation_rows(proposal: Proposal, show_pricing: bool) -> List[List[str]]:
    return [
        [
            item.vehicle_type,
            str(item.num_vehicles),
            str(item.num_days),
            _money(unit_price(item), item.currency, show_pricing),
            _money(line_total(item), item.currency, show_pricing),
        ]
        for item in proposal.transportation
    ]


def _flight_rows(proposal: Proposal, show_pricing: bool) -> List[List[str]]:
    return [
        [
            item.flight_type,
            item.route,
            format_date(item.date),
            item.departure_time,
            str(item.pax),
            _money(unit_price(item), item.currency, show_pricing),
            _money(line_total(item), item.currency, show_pricing),
        ]
        for item in proposal.flights
    ]


def _rentacar_rows(proposal: Proposal, show_pricing: bool) -> List[List[str]]:
    return [
        [
            item.car_type,
            format_date(item.pickup_date),
            format_date(item.dropoff_date),
            str(item.num_days),
            str(item.num_cars),
            _money(unit_price(item), item.currency, show_pricing),
            _money(line_total(item), item.currency, show_pricing),
        ]
        for item in proposal.rent_a_car
    ]


def _additional_rows(proposal: Proposal, show_pricing: bool) -> List[List[str]]:
    return [
        [
            item.service_type_name,
            item.description,
            format_date(item.date),
            str(item.num_days),
            str(item.num_pax),
            _money(unit_price(item), item.currency, show_pricing),
            _money(line_total(item), item.currency, show_pricing),
        ]
        for item in proposal.additional_services
    ]


def _sections(proposal: Proposal, references: ReferenceData, t, show_pricing: bool):
    """(title key, header, rows) per variant in document order."""
    return [
        (ServiceType.HOTEL, [
            t("hotel"), t("checkin"), t("checkout"), t("nights"), t("rooms"),
            t("roomType"), t("mealPlan"), t("pricePerNight"), t("total"),
        ], _hotel_rows(proposal, references, t, show_pricing)),
        (ServiceType.TRANSPORTATION, [
            t("vehicleType"), t("numVehicles"), t("days"), t("pricePerDay"), t("total"),
        ], _transportation_rows(proposal, show_pricing)),
        (ServiceType.FLIGHT, [
            t("flightType"), t("route"), t("flightDate"), t("time"), t("passengers"),
            t("pricePerPax"), t("total"),
        ], _flight_rows(proposal, show_pricing)),
        (ServiceType.RENTACAR, [
            t("carType"), t("pickupDate"), t("dropoffDate"), t("days"), t("cars"),
            t("pricePerDay"), t("total"),
        ], _rentacar_rows(proposal, show_pricing)),
        (ServiceType.ADDITIONAL, [
            t("serviceType"), t("description"), t("date"), t("days"), t("passengers"),
            t("pricePerPax"), t("total"),
        ], _additional_rows(proposal, show_pricing)),
    ]


def _draw_summary(engine: LayoutEngine, proposal: Proposal, t) -> None:
    totals = compute_totals(proposal)
    currency = proposal.display_currency
    g = engine.geometry
    label_x = g.right - 65
    value_x = g.right - 5

    engine.ensure_space(45)
    engine.draw_line(g.right - 70, engine.cursor, g.right, engine.cursor)

    rows = [
        (t("subtotal"), totals.subtotal),
        (f"{t('margin')} ({totals.margin_percent:g}%)", totals.margin_amount),
        (f"{t('commission')} ({totals.commission_percent:g}%)", totals.commission_amount),
    ]
    for label, amount in rows:
        engine.advance(8)
        engine.text_at(label_x, engine.cursor, label, 10)
        engine.text_at(value_x, engine.cursor, format_currency(amount, currency), 10, align="right")

    engine.advance(8)
    engine.text_at(label_x, engine.cursor, t("grandTotal"), 12, "bold")
    engine.text_at(value_x, engine.cursor, format_currency(totals.final_total, currency), 12, "bold", align="right")
    engine.advance(3)
    engine.draw_line(g.right - 70, engine.cursor, g.right, engine.cursor)


def generate_proposal_pdf(
    proposal: Proposal,
    references: Optional[ReferenceData] = None,
    company: Optional[CompanyInfo] = None,
    language: Optional[str] = None,
    show_pricing: bool = True,
    now: Optional[datetime] = None,
    fonts: Optional[FontSet] = None
) -> GeneratedDocument:
    """Lay out the quote for a proposal."""
    references = references or ReferenceData()
    t = translator(language or proposal.pdf_language)
    engine = LayoutEngine(PROPOSAL_GEOMETRY, fonts, title=f"Proposal {proposal.reference}")
    g = engine.geometry

    draw_heading(engine, company, now, timestamp_y=20)
    engine.text_at(g.center, engine.cursor, t("proposal"), 14, "bold", align="center")
    engine.advance(15)

    engine.text_at(g.margin, engine.cursor, f"{t('reference')}: {proposal.reference}", 10)
    engine.text_at(g.margin + 80, engine.cursor, f"{t('date')}: {format_date(proposal.created_at)}", 10)
    engine.advance(6)
    engine.text_at(g.margin, engine.cursor, f"{t('status')}: {t(proposal.status.value.lower())}", 10)
    engine.advance(12)

    agency = references.agency(proposal.agency_id)
    sales_person = references.user(proposal.sales_person_id)
    engine.label_value(t("agency"), entity_name(agency, t, "agency", proposal.agency_id))
    engine.label_value(t("contact"), agency.contact_person if agency and agency.contact_person else t("unknown"))
    engine.label_value(t("salesPerson"), entity_name(sales_person, t, "sales person", proposal.sales_person_id))
    if proposal.source:
        engine.label_value(t("source"), entity_name(references.source(proposal.source), t, "source", proposal.source))
    engine.advance(4)
    names = [d.name for d in (references.destination(i) for i in proposal.destination_ids) if d]
    engine.label_value(t("destinations"), ", ".join(names) or t("unknown"))
    engine.advance(9)

    for service_type, header, rows in _sections(proposal, references, t, show_pricing):
        if not rows:
            continue
        engine.section_header(t(service_type.collection).upper(), look_ahead=30)
        engine.table(header, rows, PLAIN)

    if show_pricing:
        _draw_summary(engine, proposal, t)

    def footer(eng: LayoutEngine, page: int, total: int) -> None:
        footer_y = eng.geometry.height - 15
        eng.draw_line(g.margin, footer_y, g.right, footer_y)
        phone = company.phone if company and company.phone else "Phone"
        email = company.email if company and company.email else "Email"
        website = company.website if company and company.website else "Website"
        eng.text_at(g.center, footer_y + 5, f"{phone} | {email} | {website}", 8, align="center")
        eng.text_at(g.right, footer_y + 5, f"{t('page')} {page} / {total}", 8, align="right")

    layout = engine.finish(footer)
    logger.info(f"Generated proposal {proposal.reference}: {layout.page_count} pages")
    return GeneratedDocument(filename=f"proposal-{safe_filename(proposal.reference)}.pdf", layout=layout)
