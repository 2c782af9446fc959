"""Editable Word rendition of a service voucher."""
import io
import logging
from datetime import datetime
from typing import Optional

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, RGBColor

from .formatting import calculate_age, format_currency, format_timestamp, safe_filename
from .i18n import translator
from .models import CompanyInfo, ReferenceData, Voucher
from .pdf_renderer import GeneratedDocument
from .pricing import voucher_total
from .proposal_pdf import company_title
from .voucher_pdf import booking_columns, destination_name, service_name

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

COLOR_GRAY = RGBColor(0x74, 0x74, 0x74)
COLOR_RED = RGBColor(0xEE, 0x00, 0x00)
COLOR_DARK = RGBColor(0x22, 0x22, 0x22)


def add_text_with_style(paragraph, text: str, bold=False, italic=False, color=None, size=None):
    """Add a run of text with specific styling."""
    run = paragraph.add_run(text)
    run.bold = bold
    run.italic = italic
    if color:
        run.font.color.rgb = color
    if size:
        run.font.size = size
    return run


def add_label_line(doc, label: str, value: str):
    """'LABEL: value' with a bold gray label."""
    p = doc.add_paragraph()
    add_text_with_style(p, f"{label.upper()}: ", bold=True, color=COLOR_GRAY)
    add_text_with_style(p, value, color=COLOR_GRAY)
    return p


def _centered(doc, text: str, **style):
    p = doc.add_paragraph()
    p.alignment = WD_ALIGN_PARAGRAPH.CENTER
    add_text_with_style(p, text, **style)
    return p


def generate_voucher_docx(
    voucher: Voucher,
    references: Optional[ReferenceData] = None,
    company: Optional[CompanyInfo] = None,
    language: Optional[str] = "english",
    now: Optional[datetime] = None
) -> GeneratedDocument:
    """Build the Word voucher; same content as the plain PDF voucher."""
    references = references or ReferenceData()
    t = translator(language)
    doc = Document()

    date_line, time_line = format_timestamp(now)
    stamp = doc.add_paragraph()
    stamp.alignment = WD_ALIGN_PARAGRAPH.RIGHT
    add_text_with_style(stamp, f"{date_line}\n{time_line}", size=Pt(9), color=COLOR_GRAY)

    _centered(doc, company_title(company), bold=True, size=Pt(16), color=COLOR_DARK)
    _centered(doc, t(f"form.{voucher.service_type.value}"), italic=True, size=Pt(14))
    _centered(doc, service_name(voucher, references, t).upper(), bold=True, size=Pt(14))
    destination = destination_name(voucher, references)
    if destination:
        _centered(doc, destination.upper(), size=Pt(12), color=COLOR_GRAY)

    add_label_line(doc, t("voucherNo"), voucher.id)
    add_label_line(doc, t("ref"), voucher.proposal_reference)
    agency = references.agency(voucher.agency_id)
    add_label_line(doc, t("operator"), agency.name if agency else "")
    add_label_line(doc, t("status"), t(voucher.status.value.lower()).upper())
    add_label_line(doc, t("total"), format_currency(voucher_total(voucher), voucher.service_data.currency))

    doc.add_heading(t("serviceDetails"), level=2)
    for column in booking_columns(voucher, t):
        for line in column:
            label, _, value = line.partition(" :")
            add_label_line(doc, label, value)

    doc.add_heading(t("guests"), level=2)
    if voucher.guests:
        today = now.date() if now else None
        table = doc.add_table(rows=1, cols=4)
        table.style = "Table Grid"
        for cell, label in zip(table.rows[0].cells, (t("name"), t("age"), t("nationality"), t("passport"))):
            cell.text = ""
            add_text_with_style(cell.paragraphs[0], label, bold=True)
        for guest in voucher.guests:
            cells = table.add_row().cells
            cells[0].text = guest.full_name
            cells[1].text = str(calculate_age(guest.birth_date, today))
            cells[2].text = guest.nationality
            cells[3].text = guest.passport_number
    else:
        p = doc.add_paragraph()
        add_text_with_style(p, t("noGuests"), italic=True, color=COLOR_GRAY)

    if voucher.notes:
        doc.add_heading(t("notes"), level=2)
        p = doc.add_paragraph()
        add_text_with_style(p, voucher.notes, color=COLOR_GRAY)

    p = doc.add_paragraph()
    add_text_with_style(p, t("disclaimer"), italic=True, color=COLOR_RED, size=Pt(9))

    contacts = doc.add_paragraph()
    phone = company.phone if company and company.phone else t("unknown")
    email = company.email if company and company.email else t("unknown")
    add_text_with_style(contacts, f"{t('phone').upper()}: {phone}    {t('email').upper()}: {email}",
                        bold=True, size=Pt(10))

    buffer = io.BytesIO()
    doc.save(buffer)
    logger.info(f"Generated Word voucher {voucher.id}")
    return GeneratedDocument(
        filename=f"voucher-{safe_filename(voucher.id)}.docx",
        media_type=DOCX_MEDIA_TYPE,
        content=buffer.getvalue(),
    )
