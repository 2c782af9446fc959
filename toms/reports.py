"""Dashboard statistics and the sales-person report workbook."""
import io
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from .formatting import parse_datetime
from .models import Proposal, ProposalStatus, User, Voucher
from .pricing import compute_totals

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
MONEY_FORMAT = "#,##0.00"
HEADER_FILL = PatternFill(start_color="DDEBF7", end_color="DDEBF7", fill_type="solid")


@dataclass
class DashboardStats:
    total_proposals: int
    new_proposals: int
    confirmed_proposals: int
    total_vouchers: int
    total_revenue: float
    recent_proposals: List[Proposal] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {
            "total_proposals": self.total_proposals,
            "new_proposals": self.new_proposals,
            "confirmed_proposals": self.confirmed_proposals,
            "total_vouchers": self.total_vouchers,
            "total_revenue": self.total_revenue,
            "recent_proposals": [p.reference for p in self.recent_proposals],
        }


@dataclass
class SalesRow:
    user_id: str
    name: str
    proposals: int = 0
    confirmed: int = 0
    sales: float = 0.0
    commission: float = 0.0


def _created(proposal: Proposal) -> datetime:
    return parse_datetime(proposal.created_at) or datetime.min


def dashboard_stats(proposals: Sequence[Proposal], vouchers: Sequence[Voucher]) -> DashboardStats:
    """Counts, confirmed revenue and the five most recent proposals."""
    confirmed = [p for p in proposals if p.status == ProposalStatus.CONFIRMED]
    return DashboardStats(
        total_proposals=len(proposals),
        new_proposals=sum(1 for p in proposals if p.status == ProposalStatus.NEW),
        confirmed_proposals=len(confirmed),
        total_vouchers=len(vouchers),
        total_revenue=sum((compute_totals(p).final_total for p in confirmed), 0.0),
        recent_proposals=sorted(proposals, key=_created, reverse=True)[:5],
    )


def sales_by_person(proposals: Sequence[Proposal], users: Optional[Dict[str, User]] = None) -> List[SalesRow]:
    """Per sales person: proposals, confirmed, confirmed sales and commission."""
    users = users or {}
    rows: Dict[str, SalesRow] = {}

    for proposal in proposals:
        person_id = proposal.sales_person_id or ""
        row = rows.get(person_id)
        if row is None:
            user = users.get(person_id)
            if user is None and person_id:
                logger.warning(f"Unknown sales person '{person_id}' in proposal {proposal.reference}")
            row = rows[person_id] = SalesRow(user_id=person_id, name=user.name if user else "N/A")
        row.proposals += 1
        if proposal.status == ProposalStatus.CONFIRMED:
            totals = compute_totals(proposal)
            row.confirmed += 1
            row.sales += totals.final_total
            row.commission += totals.commission_amount

    return sorted(rows.values(), key=lambda r: r.sales, reverse=True)


def _write_header(ws, labels: Sequence[str]) -> None:
    for col, label in enumerate(labels, 1):
        cell = ws.cell(row=1, column=col, value=label)
        cell.font = Font(bold=True)
        cell.fill = HEADER_FILL
        ws.column_dimensions[get_column_letter(col)].width = max(14, len(label) + 4)


def export_sales_report(rows: Sequence[SalesRow], stats: Optional[DashboardStats] = None) -> bytes:
    """Write the sales report as an .xlsx workbook."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Sales"
    _write_header(ws, ["Sales Person", "Proposals", "Confirmed", "Conversion %", "Sales", "Commission"])
    ws.column_dimensions["A"].width = 28

    for row_num, row in enumerate(rows, 2):
        ws.cell(row=row_num, column=1, value=row.name)
        ws.cell(row=row_num, column=2, value=row.proposals)
        ws.cell(row=row_num, column=3, value=row.confirmed)
        conversion = round(row.confirmed / row.proposals * 100, 1) if row.proposals else 0.0
        ws.cell(row=row_num, column=4, value=conversion)
        ws.cell(row=row_num, column=5, value=round(row.sales, 2)).number_format = MONEY_FORMAT
        ws.cell(row=row_num, column=6, value=round(row.commission, 2)).number_format = MONEY_FORMAT

    summary = wb.create_sheet("Summary")
    _write_header(summary, ["Metric", "Value"])
    summary.column_dimensions["A"].width = 24
    metrics = [
        ("Sales persons", len(rows)),
        ("Total sales", round(sum(r.sales for r in rows), 2)),
        ("Total commission", round(sum(r.commission for r in rows), 2)),
    ]
    if stats is not None:
        metrics = [
            ("Total proposals", stats.total_proposals),
            ("New proposals", stats.new_proposals),
            ("Confirmed proposals", stats.confirmed_proposals),
            ("Vouchers", stats.total_vouchers),
            ("Total revenue", round(stats.total_revenue, 2)),
        ] + metrics
    for row_num, (label, value) in enumerate(metrics, 2):
        summary.cell(row=row_num, column=1, value=label)
        cell = summary.cell(row=row_num, column=2, value=value)
        if isinstance(value, float):
            cell.number_format = MONEY_FORMAT

    buffer = io.BytesIO()
    wb.save(buffer)
    logger.info(f"Exported sales report: {len(rows)} sales persons")
    return buffer.getvalue()
