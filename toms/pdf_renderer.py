"""PDF output: layout plans to bytes, merging, and saving to disk.

The layout plan is in top-down millimetres; reportlab works bottom-up in
points, so every y coordinate is flipped against the page height.
"""
import io
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Iterable, Optional

from PyPDF2 import PdfMerger
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from .layout import CircleOp, FlowableOp, LayoutDocument, LineOp, RectOp, TextOp

logger = logging.getLogger(__name__)


def _rgb(color):
    return tuple(c / 255 for c in color)


class _CanvasPainter:
    """Replays draw operations on one reportlab canvas."""

    def __init__(self, canv: canvas.Canvas, layout: LayoutDocument):
        self.canv = canv
        self.fonts = layout.fonts
        self.height = layout.geometry.height

    def y(self, top_down: float) -> float:
        return (self.height - top_down) * mm

    def text(self, op: TextOp) -> None:
        c = self.canv
        c.setFillColorRGB(*_rgb(op.color))
        c.setFont(self.fonts.name(op.style), op.size)
        x, y = op.x * mm, self.y(op.y)
        if op.align == "center":
            c.drawCentredString(x, y, op.text)
        elif op.align == "right":
            c.drawRightString(x, y, op.text)
        else:
            c.drawString(x, y, op.text)

    def line(self, op: LineOp) -> None:
        c = self.canv
        c.setStrokeColorRGB(*_rgb(op.color))
        c.setLineWidth(op.width * mm)
        c.line(op.x1 * mm, self.y(op.y1), op.x2 * mm, self.y(op.y2))

    def rect(self, op: RectOp) -> None:
        c = self.canv
        c.saveState()
        fill = op.fill is not None
        stroke = op.stroke is not None
        if fill:
            c.setFillColorRGB(*_rgb(op.fill))
            c.setFillAlpha(op.fill_alpha)
        if stroke:
            c.setStrokeColorRGB(*_rgb(op.stroke))
            c.setLineWidth(op.line_width * mm)
        x, y = op.x * mm, self.y(op.y + op.height)
        w, h = op.width * mm, op.height * mm
        if op.radius:
            c.roundRect(x, y, w, h, op.radius * mm, stroke=int(stroke), fill=int(fill))
        else:
            c.rect(x, y, w, h, stroke=int(stroke), fill=int(fill))
        c.restoreState()

    def circle(self, op: CircleOp) -> None:
        c = self.canv
        c.saveState()
        c.setFillColorRGB(*_rgb(op.fill))
        c.setFillAlpha(op.fill_alpha)
        c.circle(op.x * mm, self.y(op.y), op.radius * mm, stroke=0, fill=1)
        c.restoreState()

    def flowable(self, op: FlowableOp) -> None:
        # already wrapped by the layout engine; drawOn anchors the bottom-left corner
        op.flowable.drawOn(self.canv, op.x * mm, self.y(op.y + op.height))

    def paint(self, op) -> None:
        if isinstance(op, TextOp):
            self.text(op)
        elif isinstance(op, LineOp):
            self.line(op)
        elif isinstance(op, RectOp):
            self.rect(op)
        elif isinstance(op, CircleOp):
            self.circle(op)
        elif isinstance(op, FlowableOp):
            self.flowable(op)
        else:
            raise TypeError(f"Unknown draw operation: {type(op).__name__}")


def render_pdf(layout: LayoutDocument, title: Optional[str] = None) -> bytes:
    """Render a finished layout plan to PDF bytes."""
    buffer = io.BytesIO()
    page_size = (layout.geometry.width * mm, layout.geometry.height * mm)
    canv = canvas.Canvas(buffer, pagesize=page_size)
    canv.setTitle(title or layout.title)
    painter = _CanvasPainter(canv, layout)

    for page in layout.pages:
        for op in page.ops:
            painter.paint(op)
        canv.showPage()

    canv.save()
    logger.info(f"Rendered '{title or layout.title}': {layout.page_count} pages")
    return buffer.getvalue()


def merge_pdfs(parts: Iterable[bytes]) -> bytes:
    """Concatenate PDF documents in the given order."""
    merger = PdfMerger()
    count = 0
    for part in parts:
        merger.append(io.BytesIO(part))
        count += 1

    if not count:
        merger.close()
        raise ValueError("No PDFs to merge")

    output = io.BytesIO()
    merger.write(output)
    merger.close()
    logger.info(f"Merged {count} PDFs")
    return output.getvalue()


def write_document(document, output_dir: str) -> str:
    """Save a generated document under output_dir and return its path.

    The file is written next to its destination first and then renamed, so
    a failed render never leaves a partial file behind.
    """
    os.makedirs(output_dir, exist_ok=True)
    content = document.render()
    final_path = os.path.join(output_dir, document.filename)

    fd, tmp_path = tempfile.mkstemp(dir=output_dir, suffix=".part")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(content)
        os.replace(tmp_path, final_path)
    except Exception:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

    logger.info(f"Saved {document.filename} to {output_dir}")
    return final_path


PDF_MEDIA_TYPE = "application/pdf"


@dataclass
class GeneratedDocument:
    """A named document ready to be rendered and saved."""
    filename: str
    layout: Optional[LayoutDocument] = None
    media_type: str = PDF_MEDIA_TYPE
    content: Optional[bytes] = None

    @property
    def page_count(self) -> int:
        return self.layout.page_count if self.layout else 0

    def render(self) -> bytes:
        if self.content is None:
            self.content = render_pdf(self.layout, title=self.filename)
        return self.content
