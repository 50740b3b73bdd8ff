"""
Rendering surface: the drawing backend consumed by the layout engine.

Layout code only talks to the ``RenderingSurface`` protocol, using top-down
coordinates in points (y grows downward from the top edge of the page). The
ReportLab implementation flips to PDF coordinates internally.

License: MIT
"""

import io
import logging
from typing import Optional, Protocol, Tuple, runtime_checkable

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas
from reportlab.lib.utils import ImageReader

from vetreport.styles import LINE_WIDTHS, TextStyle, colors, page_config

logger = logging.getLogger(__name__)


# ── Unicode sanitization ────────────────────────────────────────────
# The standard PDF fonts lack glyphs for many characters that generated
# text contains. Text is sanitized before it is measured or drawn so both
# always agree.

_UNICODE_REPLACEMENTS = {
    # Dashes / hyphens
    "‑": "-",       # non-breaking hyphen
    "‐": "-",       # hyphen
    "‒": "-",       # figure dash
    "―": "-",       # horizontal bar
    "−": "-",       # minus sign
    # Spaces
    " ": " ",       # narrow no-break space
    " ": " ",       # non-breaking space
    " ": " ",       # thin space
    " ": " ",       # hair space
    "​": "",        # zero-width space
    # Superscript digits
    "⁰": "0",
    "⁴": "4",
    "⁵": "5",
    "⁶": "6",
    "⁷": "7",
    "⁸": "8",
    "⁹": "9",
    # Symbols
    "→": "->",      # rightwards arrow
    "←": "<-",      # leftwards arrow
    "↑": "^",       # upwards arrow
    "↓": "v",       # downwards arrow
    "≤": "<=",
    "≥": ">=",
    "≈": "~",
    "✓": "X",       # check mark
    "✔": "X",       # heavy check mark
    "☐": "( )",     # ballot box
    "☑": "(X)",     # ballot box with check
}


def sanitize_text(text: str) -> str:
    """Replace characters the standard fonts cannot draw."""
    for char, replacement in _UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text


@runtime_checkable
class RenderingSurface(Protocol):
    """Capabilities the layout engine needs from a drawing backend."""

    page_width: float
    page_height: float

    def measure_text_width(self, text: str, font: str, size: float) -> float:
        """Width of *text* in points when set in *font* at *size*."""
        ...

    def draw_text(self, text: str, x: float, y: float, style: TextStyle) -> None:
        """Draw *text* with its baseline at top-down coordinate *y*."""
        ...

    def draw_line(self, x1: float, y1: float, x2: float, y2: float,
                  width: float = 0.5, color: Tuple[float, float, float] = (0.0, 0.0, 0.0)) -> None:
        ...

    def draw_image(self, source: str, x: float, y: float, width: float, height: float) -> None:
        """Draw an image whose top-left corner sits at (*x*, *y*)."""
        ...

    def new_page(self) -> None:
        ...

    def save(self) -> bytes:
        """Finish the document and return its bytes."""
        ...


class ReportLabSurface:
    """
    RenderingSurface backed by a ReportLab canvas.

    One instance produces exactly one PDF; it must not be shared between
    concurrent renders.
    """

    def __init__(self, page_size: str = "A4", title: Optional[str] = None,
                 author: Optional[str] = None):
        """
        Initialize the canvas.

        Args:
            page_size: "A4" or "LETTER"
            title: PDF metadata title
            author: PDF metadata author
        """
        self.buffer = io.BytesIO()
        self.page_width, self.page_height = page_config.size_for(page_size)
        self.c = canvas.Canvas(self.buffer, pagesize=(self.page_width, self.page_height))

        if title:
            self.c.setTitle(sanitize_text(title))
        if author:
            self.c.setAuthor(sanitize_text(author))

    def measure_text_width(self, text: str, font: str, size: float) -> float:
        return pdfmetrics.stringWidth(sanitize_text(text), font, size)

    def draw_text(self, text: str, x: float, y: float, style: TextStyle) -> None:
        self.c.setFont(style.font, style.size)
        self.c.setFillColorRGB(*style.color)
        self.c.drawString(x, self.page_height - y, sanitize_text(text))

    def draw_line(self, x1: float, y1: float, x2: float, y2: float,
                  width: float = LINE_WIDTHS["regular"],
                  color: Tuple[float, float, float] = colors.rule) -> None:
        self.c.setStrokeColorRGB(*color)
        self.c.setLineWidth(width)
        self.c.line(x1, self.page_height - y1, x2, self.page_height - y2)

    def draw_image(self, source: str, x: float, y: float, width: float, height: float) -> None:
        image = ImageReader(source)
        self.c.drawImage(image, x, self.page_height - y - height, width=width, height=height,
                         preserveAspectRatio=True, mask='auto')

    def new_page(self) -> None:
        self.c.showPage()

    def save(self) -> bytes:
        self.c.save()
        pdf_bytes = self.buffer.getvalue()
        logger.debug(f"Serialized PDF ({len(pdf_bytes)} bytes)")
        return pdf_bytes
