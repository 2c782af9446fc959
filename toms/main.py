"""FastAPI application for the travel back-office document engine."""
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .colorful_pdf import generate_colorful_vouchers_pdf
from .config import VERSION, get_settings
from .confirmation import ConfirmationError, cancel_proposal, confirm_proposal
from .docx_export import generate_voucher_docx
from .layout import DocumentError, FontSet
from .loader import (
    SnapshotError, load_company_info, load_proposal, load_reference_data,
    load_voucher, to_record
)
from .pdf_renderer import GeneratedDocument, write_document
from .pricing import compute_totals
from .proposal_pdf import generate_proposal_pdf
from .reports import XLSX_MEDIA_TYPE, dashboard_stats, export_sales_report, sales_by_person
from .status import BatchValidationError, apply_bulk_action, parse_action
from .voucher_pdf import generate_voucher_bundle, generate_voucher_pdf

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="TOMS Document Engine",
    description="Proposal quotes, service vouchers and sales reports from back-office snapshots",
    version=VERSION
)


class SnapshotRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    references: Dict[str, Any] = Field(default_factory=dict)
    company_info: Optional[Dict[str, Any]] = Field(None, alias="companyInfo")
    language: Optional[str] = None


class ProposalRequest(SnapshotRequest):
    proposal: Dict[str, Any]
    show_pricing: bool = Field(True, alias="showPricing")


class ConfirmRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    proposal: Dict[str, Any]
    selected_services: Dict[str, List[Any]] = Field(default_factory=dict, alias="selectedServices")


class VoucherRequest(SnapshotRequest):
    voucher: Dict[str, Any]


class VoucherBatchRequest(SnapshotRequest):
    vouchers: List[Dict[str, Any]]
    proposal: Optional[Dict[str, Any]] = None


class StatusRequest(BaseModel):
    vouchers: List[Dict[str, Any]]
    action: str
    language: Optional[str] = None


class SalesReportRequest(BaseModel):
    proposals: List[Dict[str, Any]] = Field(default_factory=list)
    vouchers: List[Dict[str, Any]] = Field(default_factory=list)
    references: Dict[str, Any] = Field(default_factory=dict)


def _fonts() -> FontSet:
    return FontSet.from_settings(settings)


def _company(request: SnapshotRequest):
    return load_company_info(request.company_info) or settings.default_company


def _language(request: SnapshotRequest) -> str:
    return request.language or settings.default_language


@contextmanager
def _errors(action: str):
    """Map domain errors to HTTP responses."""
    try:
        yield
    except HTTPException:
        raise
    except (SnapshotError, DocumentError, ConfirmationError) as e:
        logger.error(f"{action} failed: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Unexpected error")
        raise HTTPException(status_code=500, detail=f"An unexpected error occurred: {str(e)}")


def _file_response(document: GeneratedDocument) -> FileResponse:
    path = write_document(document, settings.output_dir)
    return FileResponse(
        path=path,
        filename=document.filename,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'}
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


@app.post("/proposals/totals")
async def proposal_totals(request: ProposalRequest):
    with _errors("Totals"):
        proposal = load_proposal(request.proposal)
        return compute_totals(proposal).as_dict()


@app.post("/proposals/pdf")
async def proposal_pdf(request: ProposalRequest):
    with _errors("Proposal PDF"):
        proposal = load_proposal(request.proposal)
        logger.info(f"Request: proposal PDF for {proposal.reference}, pricing={request.show_pricing}")
        document = generate_proposal_pdf(
            proposal,
            load_reference_data(request.references),
            _company(request),
            language=request.language or proposal.pdf_language,
            show_pricing=request.show_pricing,
            fonts=_fonts(),
        )
        return _file_response(document)


@app.post("/proposals/confirm")
async def proposal_confirm(request: ConfirmRequest):
    with _errors("Confirmation"):
        proposal = load_proposal(request.proposal)
        result = confirm_proposal(proposal, request.selected_services)
        return {
            "proposal": {
                "id": result.proposal.id,
                "reference": result.proposal.reference,
                "status": result.proposal.status.value,
            },
            "vouchers": [to_record(v) for v in result.vouchers],
        }


@app.post("/proposals/cancel")
async def proposal_cancel(request: ProposalRequest):
    with _errors("Cancellation"):
        proposal = cancel_proposal(load_proposal(request.proposal))
        logger.info(f"Cancelled proposal {proposal.reference}")
        return {"id": proposal.id, "reference": proposal.reference, "status": proposal.status.value}


@app.post("/vouchers/pdf")
async def voucher_pdf(request: VoucherRequest):
    with _errors("Voucher PDF"):
        voucher = load_voucher(request.voucher)
        document = generate_voucher_pdf(
            voucher, load_reference_data(request.references), _company(request),
            language=_language(request), fonts=_fonts(),
        )
        return _file_response(document)


@app.post("/vouchers/docx")
async def voucher_docx(request: VoucherRequest):
    with _errors("Word voucher"):
        voucher = load_voucher(request.voucher)
        document = generate_voucher_docx(
            voucher, load_reference_data(request.references), _company(request), language=_language(request),
        )
        return _file_response(document)


@app.post("/vouchers/bundle")
async def voucher_bundle(request: VoucherBatchRequest):
    with _errors("Voucher bundle"):
        vouchers = [load_voucher(v) for v in request.vouchers]
        document = generate_voucher_bundle(
            vouchers, load_reference_data(request.references), _company(request),
            language=_language(request), fonts=_fonts(),
        )
        return _file_response(document)


@app.post("/vouchers/colorful-pdf")
async def colorful_vouchers_pdf(request: VoucherBatchRequest):
    with _errors("Colorful vouchers"):
        vouchers = [load_voucher(v) for v in request.vouchers]
        proposal = load_proposal(request.proposal) if request.proposal else None
        document = generate_colorful_vouchers_pdf(
            vouchers, proposal, load_reference_data(request.references), _company(request),
            language=request.language, fonts=_fonts(),
        )
        return _file_response(document)


@app.post("/vouchers/status")
async def voucher_status(request: StatusRequest):
    with _errors("Status change"):
        try:
            action = parse_action(request.action)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown action: {request.action}")

        vouchers = [load_voucher(v) for v in request.vouchers]
        try:
            result = apply_bulk_action(vouchers, action)
        except BatchValidationError as e:
            return JSONResponse(
                status_code=409,
                content={"detail": e.message(request.language), "invalid_ids": e.invalid_ids},
            )

        return {
            "message": result.message(request.language),
            "count": result.count,
            "vouchers": [{"id": v.id, "status": v.status.value} for v in result.vouchers],
        }


@app.post("/reports/dashboard")
async def dashboard(request: SalesReportRequest):
    with _errors("Dashboard"):
        proposals = [load_proposal(p) for p in request.proposals]
        vouchers = [load_voucher(v) for v in request.vouchers]
        return dashboard_stats(proposals, vouchers).as_dict()


@app.post("/reports/sales")
async def sales_report(request: SalesReportRequest):
    with _errors("Sales report"):
        proposals = [load_proposal(p) for p in request.proposals]
        vouchers = [load_voucher(v) for v in request.vouchers]
        references = load_reference_data(request.references)
        stats = dashboard_stats(proposals, vouchers)
        rows = sales_by_person(proposals, references.users)
        document = GeneratedDocument(
            filename="sales-report.xlsx",
            media_type=XLSX_MEDIA_TYPE,
            content=export_sales_report(rows, stats),
        )
        return _file_response(document)
