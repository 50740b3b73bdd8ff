"""
Layout cursor and page-break controller.

All layout state for one render lives in a ``RenderContext`` that is created
at the start of the call, threaded through every layout function, and
discarded once the output bytes exist. Coordinates are top-down points.

License: MIT
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from vetreport.errors import LayoutOverflowError, RenderStateError
from vetreport.styles import LINE_WIDTHS, TextStyle, colors, page_config, spacing
from vetreport.surface import RenderingSurface

logger = logging.getLogger(__name__)


class RenderState(enum.Enum):
    INITIALIZED = "initialized"
    WRITING = "writing"
    FINALIZED = "finalized"


@dataclass(frozen=True)
class Margins:
    top: float
    right: float
    bottom: float
    left: float

    @classmethod
    def uniform(cls, points: float) -> "Margins":
        return cls(points, points, points, points)


PageHook = Callable[["RenderContext"], None]


@dataclass
class RenderContext:
    """Transient layout state owned by a single render invocation."""
    surface: RenderingSurface
    margins: Margins
    cursor_y: float
    page_number: int = 1
    footer_reserve: float = 0.0
    continuation_offset: float = 0.0
    document_id: str = ""
    state: RenderState = RenderState.INITIALIZED
    on_page_start: Optional[PageHook] = None
    on_page_end: Optional[PageHook] = None
    blank_fields: List[str] = field(default_factory=list)

    @property
    def left(self) -> float:
        return self.margins.left

    @property
    def content_width(self) -> float:
        return self.surface.page_width - self.margins.left - self.margins.right

    @property
    def bottom_limit(self) -> float:
        """Lowest y any content may reach on the current page."""
        return self.surface.page_height - self.margins.bottom - self.footer_reserve

    @property
    def page_top(self) -> float:
        if self.page_number == 1:
            return self.margins.top
        return self.margins.top + self.continuation_offset

    @property
    def at_page_top(self) -> bool:
        return self.cursor_y <= self.page_top

    @property
    def usable_height(self) -> float:
        return self.bottom_limit - self.page_top


def create_context(surface: RenderingSurface, margin_mm: float = page_config.default_margin_mm,
                   footer_reserve: float = spacing.footer_reserve,
                   continuation_offset: float = 0.0, document_id: str = "") -> RenderContext:
    """
    Create a fresh context positioned at the top of the first page.

    Args:
        surface: Drawing backend exclusively owned by this render
        margin_mm: Uniform page margin in millimeters
        footer_reserve: Space kept free above the bottom margin for the footer
        continuation_offset: Extra top space on pages after the first
        document_id: Identifier printed in the footer

    Returns:
        RenderContext in the INITIALIZED state
    """
    margins = Margins.uniform(page_config.mm_to_points(margin_mm))
    return RenderContext(
        surface=surface,
        margins=margins,
        cursor_y=margins.top,
        footer_reserve=footer_reserve,
        continuation_offset=continuation_offset,
        document_id=document_id,
    )


def _check_writable(ctx: RenderContext) -> None:
    if ctx.state is RenderState.FINALIZED:
        raise RenderStateError("Render context is finalized; no further writes are allowed")
    ctx.state = RenderState.WRITING


def advance(ctx: RenderContext, height: float) -> None:
    """Move the cursor down by *height* points."""
    _check_writable(ctx)
    ctx.cursor_y += height


def break_page(ctx: RenderContext) -> None:
    """Close the current page and move the cursor to the top of a new one."""
    _check_writable(ctx)
    if ctx.on_page_end:
        ctx.on_page_end(ctx)
    ctx.surface.new_page()
    ctx.page_number += 1
    ctx.cursor_y = ctx.page_top
    logger.debug(f"Page break: now on page {ctx.page_number}")
    if ctx.on_page_start:
        ctx.on_page_start(ctx)


def fits(ctx: RenderContext, height: float) -> bool:
    return ctx.cursor_y + height <= ctx.bottom_limit


def ensure_space(ctx: RenderContext, height: float) -> None:
    """
    Guarantee that a block of *height* points can be written at the cursor.

    Starts a new page when the block would cross the bottom limit. A block
    taller than an empty page can never fit and raises instead of drawing
    outside the page.
    """
    _check_writable(ctx)
    if fits(ctx, height):
        return
    if height > ctx.usable_height:
        raise LayoutOverflowError(height, ctx.usable_height)
    break_page(ctx)


def measure(ctx: RenderContext, text: str, style: TextStyle) -> float:
    return ctx.surface.measure_text_width(text, style.font, style.size)


def draw_text_line(ctx: RenderContext, text: str, style: TextStyle, line_height: float,
                   x: Optional[float] = None, align: str = "left") -> None:
    """
    Write one line of text at the cursor and advance past it.

    Args:
        ctx: Render context
        text: Single line of text (already wrapped)
        style: Text style
        line_height: Vertical space the line occupies
        x: Left edge (defaults to the left margin)
        align: "left", "center" or "right" within the content width
    """
    ensure_space(ctx, line_height)
    if x is None:
        x = ctx.left
        if align == "center":
            x = ctx.left + (ctx.content_width - measure(ctx, text, style)) / 2
        elif align == "right":
            x = ctx.left + ctx.content_width - measure(ctx, text, style)
    if text:
        ctx.surface.draw_text(text, x, ctx.cursor_y + style.size, style)
    advance(ctx, line_height)


def draw_rule(ctx: RenderContext, y: Optional[float] = None, width: float = LINE_WIDTHS["regular"],
              color=colors.rule, x_start: Optional[float] = None) -> None:
    """Draw a horizontal rule across the content width (at the cursor by default)."""
    _check_writable(ctx)
    y = ctx.cursor_y if y is None else y
    x1 = ctx.left if x_start is None else x_start
    ctx.surface.draw_line(x1, y, ctx.left + ctx.content_width, y, width=width, color=color)


def finalize(ctx: RenderContext) -> bytes:
    """Close the last page and serialize the document."""
    _check_writable(ctx)
    if ctx.on_page_end:
        ctx.on_page_end(ctx)
    ctx.state = RenderState.FINALIZED
    return ctx.surface.save()
