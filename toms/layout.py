"""Page-flow layout engine.

Content is streamed top to bottom onto fixed-size pages. The engine owns a
single cursor (the vertical write position in millimetres from the top of
the current page) and starts a new page whenever a block would run into the
footer reserve. The result is a ``LayoutDocument``: a list of pages, each a
list of draw operations, which ``pdf_renderer`` replays on a PDF canvas.

Footers need the total page count, so they are drawn in a second pass by
``LayoutEngine.finish`` once all content has been laid out.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

BLACK: RGB = (0, 0, 0)
WHITE: RGB = (255, 255, 255)
GRAY: RGB = (100, 100, 100)
LIGHT_GRAY: RGB = (150, 150, 150)

# Font sizes are in points, positions in millimetres.
PT_TO_MM = 1 / mm


class DocumentError(Exception):
    """A document could not be assembled from the given input."""


@dataclass
class TextOp:
    x: float
    y: float
    text: str
    size: float = 10
    style: str = "normal"
    color: RGB = BLACK
    align: str = "left"


@dataclass
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 0.5
    color: RGB = BLACK


@dataclass
class RectOp:
    x: float
    y: float
    width: float
    height: float
    fill: Optional[RGB] = None
    stroke: Optional[RGB] = None
    fill_alpha: float = 1.0
    line_width: float = 0.5
    radius: float = 0.0


@dataclass
class CircleOp:
    x: float
    y: float
    radius: float
    fill: RGB = BLACK
    fill_alpha: float = 1.0


@dataclass
class FlowableOp:
    """A platypus flowable wrapped to its size; drawn with ``drawOn``."""
    x: float
    y: float
    width: float
    height: float
    flowable: object
    texts: List[str] = field(default_factory=list)


@dataclass
class Page:
    number: int
    ops: List[object] = field(default_factory=list)

    def texts(self) -> List[str]:
        """All text written on this page, in drawing order."""
        texts = []
        for op in self.ops:
            if isinstance(op, TextOp):
                texts.append(op.text)
            elif isinstance(op, FlowableOp):
                texts.extend(op.texts)
        return texts


@dataclass
class PageGeometry:
    """A4 portrait in millimetres."""
    width: float = 210.0
    height: float = 297.0
    margin: float = 20.0
    top: float = 20.0
    bottom_reserve: float = 25.0
    line_height: float = 6.0

    @property
    def limit(self) -> float:
        """Lowest y content may reach before the footer reserve."""
        return self.height - self.bottom_reserve

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def right(self) -> float:
        return self.width - self.margin

    @property
    def center(self) -> float:
        return self.width / 2


@dataclass
class LayoutDocument:
    """The finished paginated document description."""
    pages: List[Page]
    geometry: PageGeometry
    fonts: "FontSet"
    title: str = ""

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def texts(self) -> List[str]:
        return [text for page in self.pages for text in page.texts()]


@dataclass
class FontSet:
    """Font names for each style; the Helvetica family unless configured."""
    normal: str = "Helvetica"
    bold: str = "Helvetica-Bold"
    italic: str = "Helvetica-Oblique"
    bolditalic: str = "Helvetica-BoldOblique"

    def name(self, style: str) -> str:
        return getattr(self, style, self.normal)

    @classmethod
    def from_settings(cls, settings) -> "FontSet":
        """Register the configured TrueType fonts, if any."""
        if settings is None or not settings.font_path:
            return cls()
        regular = _register_ttf("TomsSans", settings.font_path)
        bold = _register_ttf("TomsSans-Bold", settings.font_bold_path) if settings.font_bold_path else regular
        return cls(normal=regular, bold=bold, italic=regular, bolditalic=bold)


def _register_ttf(name: str, path: str) -> str:
    if name not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(name, path))
        logger.info(f"Registered font {name} from {path}")
    return name


@dataclass
class CardLine:
    text: str
    size: float = 9
    style: str = "normal"
    color: Optional[RGB] = None


@dataclass
class Card:
    """A tinted, bordered box holding 2-4 short centred lines."""
    color: RGB
    lines: List[CardLine]
    tint: float = 0.08


PageHook = Callable[["LayoutEngine"], None]
FooterHook = Callable[["LayoutEngine", int, int], None]


class LayoutEngine:
    """Streams blocks onto pages, breaking pages as needed."""

    def __init__(
        self,
        geometry: Optional[PageGeometry] = None,
        fonts: Optional[FontSet] = None,
        on_new_page: Optional[PageHook] = None,
        title: str = ""
    ):
        self.geometry = geometry or PageGeometry()
        self.fonts = fonts or FontSet()
        self.title = title
        self.pages: List[Page] = []
        self.cursor = self.geometry.top
        self._on_new_page = on_new_page
        self._target: Optional[Page] = None
        self._finished = False
        self.new_page()

    # -- page flow -------------------------------------------------------

    @property
    def page(self) -> Page:
        """The page drawing operations go to."""
        return self._target or self.pages[-1]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def new_page(self) -> Page:
        """Start a new page and reset the cursor to the top margin."""
        if self._finished:
            raise DocumentError("Document already finished")
        page = Page(number=len(self.pages) + 1)
        self.pages.append(page)
        self.cursor = self.geometry.top
        if self._on_new_page:
            self._on_new_page(self)
        return page

    def ensure_space(self, required_height: float) -> bool:
        """Break the page if required_height does not fit below the cursor."""
        if self.cursor + required_height > self.geometry.limit:
            self.new_page()
            return True
        return False

    def advance(self, height: float) -> None:
        self.cursor += height

    def move_to(self, y: float) -> None:
        self.cursor = y

    @contextmanager
    def on_page(self, page: Page) -> Iterator[Page]:
        """Temporarily direct drawing to an already laid-out page."""
        previous = self._target
        self._target = page
        try:
            yield page
        finally:
            self._target = previous

    # -- measurement -----------------------------------------------------

    def text_width(self, text: str, size: float, style: str = "normal") -> float:
        return pdfmetrics.stringWidth(text, self.fonts.name(style), size) * PT_TO_MM

    def split_text(self, text: str, width: float, size: float, style: str = "normal") -> List[str]:
        """Wrap text to width (mm); always returns at least one line."""
        lines = []
        for paragraph in str(text).splitlines() or [""]:
            lines.extend(simpleSplit(paragraph, self.fonts.name(style), size, width * mm) or [""])
        return lines or [""]

    # -- primitives (absolute, cursor untouched) -------------------------

    def text_at(
        self, x: float, y: float, text: str, size: float = 10, style: str = "normal",
        color: RGB = BLACK, align: str = "left"
    ) -> None:
        self.page.ops.append(TextOp(x, y, str(text), size, style, color, align))

    def draw_line(self, x1: float, y1: float, x2: float, y2: float,
                  width: float = 0.5, color: RGB = BLACK) -> None:
        self.page.ops.append(LineOp(x1, y1, x2, y2, width, color))

    def draw_rect(self, x: float, y: float, width: float, height: float, fill: Optional[RGB] = None,
                  stroke: Optional[RGB] = None, fill_alpha: float = 1.0, line_width: float = 0.5,
                  radius: float = 0.0) -> None:
        self.page.ops.append(RectOp(x, y, width, height, fill, stroke, fill_alpha, line_width, radius))

    def draw_circle(self, x: float, y: float, radius: float, fill: RGB = BLACK,
                    fill_alpha: float = 1.0) -> None:
        self.page.ops.append(CircleOp(x, y, radius, fill, fill_alpha))

    def draw_flowable(self, x: float, y: float, flowable, width: float, height: float,
                      texts: Sequence[str] = ()) -> None:
        self.page.ops.append(FlowableOp(x, y, width, height, flowable, list(texts)))

    # -- flowing blocks --------------------------------------------------

    def text_line(
        self, text: str, x: Optional[float] = None, size: float = 10, style: str = "normal",
        color: RGB = BLACK, align: str = "left", line_height: Optional[float] = None
    ) -> None:
        """Write one baseline at the cursor and advance by the line height."""
        line_height = self.geometry.line_height if line_height is None else line_height
        self.ensure_space(line_height)
        if x is None:
            x = {"center": self.geometry.center, "right": self.geometry.right}.get(align, self.geometry.margin)
        self.text_at(x, self.cursor, text, size, style, color, align)
        self.cursor += line_height

    def wrapped_text(
        self, text: str, x: Optional[float] = None, width: Optional[float] = None,
        size: float = 10, style: str = "normal", color: RGB = BLACK, line_height: float = 5.0
    ) -> int:
        """Write text wrapped to width; returns the number of lines."""
        x = self.geometry.margin if x is None else x
        width = width or (self.geometry.right - x)
        lines = self.split_text(text, width, size, style)
        for line in lines:
            self.text_line(line, x=x, size=size, style=style, color=color, line_height=line_height)
        return len(lines)

    def label_value(self, label: str, value: str, value_x: float = 50, size: float = 10,
                    line_height: Optional[float] = None) -> None:
        """Bold 'Label:' at the margin with its value on the same baseline."""
        line_height = self.geometry.line_height if line_height is None else line_height
        self.ensure_space(line_height)
        self.text_at(self.geometry.margin, self.cursor, f"{label}:", size, "bold")
        self.text_at(self.geometry.margin + value_x, self.cursor, value, size)
        self.cursor += line_height

    def section_header(self, label: str, look_ahead: float = 30, size: float = 12) -> None:
        """Bold label with an underline rule, kept together with what follows."""
        self.ensure_space(look_ahead)
        g = self.geometry
        self.text_at(g.margin, self.cursor, label, size, "bold")
        self.draw_line(g.margin, self.cursor + 2, g.right, self.cursor + 2, 0.5)
        self.cursor += 8

    def banner(self, label: str, color: RGB, height: float = 8, size: float = 11) -> None:
        """Rounded colour bar with a white label across the content width."""
        self.ensure_space(height + 4)
        g = self.geometry
        self.draw_rect(g.margin, self.cursor, g.content_width, height, fill=color, radius=2)
        self.text_at(g.margin + 3, self.cursor + height * 0.69, label, size, "bold", WHITE)
        self.cursor += height + 4

    def card_row(self, cards: Sequence[Card], height: float = 32, gap: float = 4) -> None:
        """A row of equal-width cards in a fixed-column grid."""
        if not cards:
            return
        for card in cards:
            if not 2 <= len(card.lines) <= 4:
                raise DocumentError(f"A card holds 2 to 4 lines, got {len(card.lines)}")
        self.ensure_space(height)
        g = self.geometry
        width = (g.content_width - gap * (len(cards) - 1)) / len(cards)
        step = 7.0
        for index, card in enumerate(cards):
            x = g.margin + index * (width + gap)
            self.draw_rect(x, self.cursor, width, height, fill=card.color, fill_alpha=card.tint, radius=2)
            self.draw_rect(x, self.cursor, width, height, stroke=card.color, line_width=0.5, radius=2)
            first = 6 + (3 - (len(card.lines) - 1)) * step / 2
            for line_no, line in enumerate(card.lines):
                self.text_at(
                    x + width / 2, self.cursor + first + line_no * step, line.text,
                    line.size, line.style, line.color or BLACK, "center"
                )
        self.cursor += height + 8

    def table(self, header: Sequence[str], rows: Sequence[Sequence[str]], style=None,
              col_widths: Optional[Sequence[float]] = None) -> float:
        """Lay out a platypus table split across pages; adopt its final cursor."""
        from .tables import PLAIN, TableRenderer
        renderer = TableRenderer(self, style or PLAIN)
        self.cursor = renderer.render(header, rows, col_widths=col_widths)
        return self.cursor

    # -- second pass -----------------------------------------------------

    def finish(self, footer: Optional[FooterHook] = None) -> LayoutDocument:
        """Draw footers now that the page count is known; return the plan."""
        total = len(self.pages)
        if footer:
            for page in self.pages:
                with self.on_page(page):
                    footer(self, page.number, total)
        self._finished = True
        logger.debug(f"Laid out '{self.title}' on {total} pages")
        return LayoutDocument(pages=list(self.pages), geometry=self.geometry, fonts=self.fonts, title=self.title)
