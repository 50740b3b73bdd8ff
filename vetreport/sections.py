"""
Rendering of classified generated text with role-specific typography.

License: MIT
"""

from dataclasses import dataclass
from typing import Iterable

from vetreport.classifier import ClassifiedLine, LineRole
from vetreport.layout import RenderContext, advance, break_page, draw_text_line, ensure_space, fits, measure
from vetreport.styles import LIST_MARKERS, font_sizes, spacing, text_style
from vetreport.wrapping import wrap_text


@dataclass(frozen=True)
class Typography:
    """Body size and line height factor for a generated document."""
    body_size: float = font_sizes.body
    line_height: float = 1.5

    def leading(self, size: float) -> float:
        return size * self.line_height

    @property
    def body_leading(self) -> float:
        return self.leading(self.body_size)


def _wrap(ctx: RenderContext, text: str, style, width: float):
    return wrap_text(text, width, lambda s: measure(ctx, s, style))


def render_title(ctx: RenderContext, text: str, typography: Typography) -> None:
    """Render a title, kept on the same page as the line that follows it."""
    style = text_style("title", typography.body_size)
    leading = typography.leading(style.size)
    lines = _wrap(ctx, text, style, ctx.content_width)

    # First title line plus the following body line; the rest flows like a paragraph
    keep = leading + typography.body_leading
    if ctx.at_page_top:
        ensure_space(ctx, keep)
    elif fits(ctx, spacing.title_space_before + keep):
        advance(ctx, spacing.title_space_before)
    else:
        break_page(ctx)

    for line in lines:
        draw_text_line(ctx, line, style, leading)
    advance(ctx, spacing.title_space_after)


def render_subtitle(ctx: RenderContext, text: str, typography: Typography) -> None:
    style = text_style("subtitle", typography.body_size)
    lines = _wrap(ctx, text, style, ctx.content_width)
    ensure_space(ctx, typography.body_leading * 2)
    for line in lines:
        draw_text_line(ctx, line, style, typography.body_leading)
    advance(ctx, spacing.subtitle_space_after)


def render_list_item(ctx: RenderContext, text: str, typography: Typography) -> None:
    """Render a bulleted item with a hanging indent."""
    style = text_style("body", typography.body_size)
    indent = spacing.list_indent
    lines = _wrap(ctx, text, style, ctx.content_width - indent)

    for index, line in enumerate(lines):
        ensure_space(ctx, typography.body_leading)
        if index == 0:
            ctx.surface.draw_text(LIST_MARKERS["bullet"], ctx.left, ctx.cursor_y + style.size, style)
        draw_text_line(ctx, line, style, typography.body_leading, x=ctx.left + indent)
    advance(ctx, spacing.list_item_gap)


def render_paragraph(ctx: RenderContext, text: str, typography: Typography) -> None:
    style = text_style("body", typography.body_size)
    for line in _wrap(ctx, text, style, ctx.content_width):
        draw_text_line(ctx, line, style, typography.body_leading)
    advance(ctx, spacing.paragraph_gap)


_RENDERERS = {
    LineRole.TITLE: render_title,
    LineRole.SUBTITLE: render_subtitle,
    LineRole.LIST_ITEM: render_list_item,
    LineRole.CONTENT: render_paragraph,
}


def render_classified(ctx: RenderContext, lines: Iterable[ClassifiedLine],
                      typography: Typography = Typography()) -> None:
    """
    Render classified lines in order.

    Args:
        ctx: Render context
        lines: Output of the content classifier
        typography: Body size and line height for this document
    """
    for line in lines:
        _RENDERERS[line.role](ctx, line.text, typography)
