"""Paginating tables built on reportlab's platypus ``Table``.

The table is wrapped against the space left on the current page and split
where it runs into the footer reserve; the header row repeats on every
piece. Each piece is recorded on its page as a flowable op, so the layout
plan stays the single source of page order and the renderer only calls
``drawOn``.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, Table
from reportlab.platypus import TableStyle as PlatypusTableStyle

from .layout import BLACK, RGB, WHITE, DocumentError, LayoutEngine, PT_TO_MM

logger = logging.getLogger(__name__)

LEADING = 1.15


@dataclass
class TableStyle:
    font_size: float = 8
    header_font_size: float = 8
    cell_padding: float = 2
    line_width: float = 0.1
    line_color: RGB = (200, 200, 200)
    header_fill: Optional[RGB] = WHITE
    header_text_color: RGB = BLACK
    header_line_color: RGB = BLACK
    text_color: RGB = BLACK
    stripe_fill: Optional[RGB] = None
    repeat_header: bool = True
    spacing_after: float = 10


# Ruled black-on-white tables of the proposal quote.
PLAIN = TableStyle()


def striped(header_fill: RGB) -> TableStyle:
    """Coloured header with alternating row tint (colorful vouchers)."""
    return TableStyle(
        font_size=8,
        header_font_size=9,
        cell_padding=3,
        line_color=(220, 220, 220),
        header_fill=header_fill,
        header_text_color=WHITE,
        header_line_color=(220, 220, 220),
        stripe_fill=(245, 250, 252),
        spacing_after=12,
    )


def _color(rgb: RGB) -> colors.Color:
    return colors.Color(*(c / 255 for c in rgb))


def style_commands(style: TableStyle) -> list:
    """Platypus TableStyle commands for a style (row 0 is the header)."""
    line_width = style.line_width * mm
    pad = style.cell_padding * mm
    commands = [
        ("GRID", (0, 0), (-1, -1), line_width, _color(style.line_color)),
        ("GRID", (0, 0), (-1, 0), line_width, _color(style.header_line_color)),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (-1, -1), pad),
        ("RIGHTPADDING", (0, 0), (-1, -1), pad),
        ("TOPPADDING", (0, 0), (-1, -1), pad),
        ("BOTTOMPADDING", (0, 0), (-1, -1), pad),
    ]
    if style.header_fill:
        commands.append(("BACKGROUND", (0, 0), (-1, 0), _color(style.header_fill)))
    if style.stripe_fill:
        commands.append(("ROWBACKGROUNDS", (0, 1), (-1, -1), [None, _color(style.stripe_fill)]))
    return commands


def auto_col_widths(engine: LayoutEngine, rows: Sequence[Sequence[str]], total_width: float,
                    font_size: float, padding: float, min_col: float = 12.0) -> List[float]:
    """Fit columns to content, scaled down to total_width (all mm)."""
    if not rows:
        return []
    ncols = max(len(r) for r in rows)
    maxw = [0.0] * ncols
    for r in rows:
        for i in range(ncols):
            txt = str(r[i]) if i < len(r) else ""
            w = engine.text_width(txt, font_size) + 2 * padding
            if w > maxw[i]:
                maxw[i] = w
    widths = [max(min_col, w + 1.5) for w in maxw]
    total = sum(widths)
    if total <= total_width:
        # spread the slack proportionally so the table spans the content width
        return [w * total_width / total for w in widths]
    flex = [max(0.0, w - min_col) for w in widths]
    flex_total = sum(flex)
    if flex_total <= 0:
        return [total_width / ncols] * ncols
    over = total - total_width
    ratio = over / flex_total
    return [w - max(0.0, w - min_col) * ratio for w in widths]


def _plain(cell) -> str:
    if isinstance(cell, Paragraph):
        return cell.getPlainText()
    return str(cell)


class TableRenderer:
    """Writes one platypus table through a LayoutEngine, piece by piece."""

    def __init__(self, engine: LayoutEngine, style: TableStyle = PLAIN):
        self.engine = engine
        self.style = style

    def _paragraph_style(self, name: str, size: float, font: str, color: RGB) -> ParagraphStyle:
        return ParagraphStyle(
            name, fontName=self.engine.fonts.name(font), fontSize=size,
            leading=size * LEADING, textColor=_color(color),
        )

    def _cell(self, text, style: ParagraphStyle) -> Paragraph:
        return Paragraph(escape(str(text)).replace("\n", "<br/>"), style)

    def _line_height(self, size: float) -> float:
        return size * LEADING * PT_TO_MM

    def split_tall_rows(self, header: Sequence[str], rows: Sequence[Sequence[str]],
                        widths: Sequence[float]) -> List[List[str]]:
        """Break rows taller than an empty page into continuation rows.

        Cell text is pre-wrapped to its column and cut into chunks of at most
        as many lines as fit below a repeated header on a fresh page.
        """
        s = self.style
        engine = self.engine
        g = engine.geometry
        pad = s.cell_padding
        head_lines = max(
            len(engine.split_text(str(cell), max(width - 2 * pad, 1.0), s.header_font_size, "bold"))
            for cell, width in zip(header, widths)
        ) if header else 0
        head_height = head_lines * self._line_height(s.header_font_size) + 2 * pad
        room = g.limit - g.top - (head_height if s.repeat_header else 0.0) - 2 * pad
        # one line of slack for wrapping differences between measurement and layout
        max_lines = max(1, math.floor(room / self._line_height(s.font_size)) - 1)

        result = []
        for row in rows:
            wrapped = [
                engine.split_text(str(cell), max(width - 2 * pad, 1.0), s.font_size)
                for cell, width in zip(row, widths)
            ]
            tallest = max((len(lines) for lines in wrapped), default=0)
            if tallest <= max_lines:
                result.append([str(cell) for cell in row])
                continue
            logger.debug(f"Splitting a {tallest}-line table row into chunks of {max_lines}")
            for start in range(0, tallest, max_lines):
                result.append(["\n".join(lines[start:start + max_lines]) for lines in wrapped])
        return result

    def build(self, header: Sequence[str], rows: Sequence[Sequence[str]], widths: Sequence[float]) -> Table:
        s = self.style
        head_style = self._paragraph_style("TableHeader", s.header_font_size, "bold", s.header_text_color)
        body_style = self._paragraph_style("TableCell", s.font_size, "normal", s.text_color)
        data = [[self._cell(cell, head_style) for cell in header]]
        data.extend([self._cell(cell, body_style) for cell in row] for row in rows)
        table = Table(data, colWidths=[w * mm for w in widths], repeatRows=1 if s.repeat_header else 0)
        table.setStyle(PlatypusTableStyle(style_commands(s)))
        return table

    def _place(self, piece: Table, width: float, height: float) -> None:
        engine = self.engine
        texts = [_plain(cell) for row in piece._cellvalues for cell in row]
        engine.draw_flowable(engine.geometry.margin, engine.cursor, piece,
                             width * PT_TO_MM, height * PT_TO_MM, texts)
        engine.advance(height * PT_TO_MM)

    def render(self, header: Sequence[str], rows: Sequence[Sequence[str]],
               col_widths: Optional[Sequence[float]] = None) -> float:
        """Write header and rows from the engine cursor; returns the final cursor."""
        engine = self.engine
        s = self.style
        geometry = engine.geometry
        widths = list(col_widths) if col_widths else auto_col_widths(
            engine, [header, *rows], geometry.content_width, s.font_size, s.cell_padding
        )
        table = self.build(header, self.split_tall_rows(header, rows, widths), widths)
        width = sum(widths) * mm

        pieces = 0
        fresh_page = False
        while True:
            available = (geometry.limit - engine.cursor) * mm
            _, height = table.wrap(width, available)
            if height <= available:
                self._place(table, width, height)
                pieces += 1
                break
            # split keeps the header with at least one body row
            parts = table.split(width, available) if available > 0 else []
            min_rows = 1 if s.repeat_header or not pieces else 0
            if len(parts) < 2 or len(parts[0]._cellvalues) <= min_rows:
                if fresh_page:
                    raise DocumentError("A table row does not fit on an empty page")
                engine.new_page()
                fresh_page = True
                continue
            first, table = parts[0], parts[1]
            _, first_height = first.wrap(width, available)
            self._place(first, width, first_height)
            pieces += 1
            engine.new_page()
            fresh_page = True

        logger.debug(f"Table of {len(rows)} rows laid out in {pieces} pieces, ending on page {engine.page_count}")
        return engine.cursor + s.spacing_after
