"""
Header and footer blocks shared by every rendered document.

Headers are written through the layout cursor like any other content. The
footer is drawn straight onto the surface inside the band reserved above the
bottom margin, so it never triggers a page break of its own.

License: MIT
"""

import logging
from datetime import datetime
from typing import List, Optional

from vetreport.layout import RenderContext, advance, draw_rule, draw_text_line, measure
from vetreport.models import ClinicBranding
from vetreport.styles import (
    DEFAULT_CLINIC_SUBTITLE, DEFAULT_CLINIC_TITLE, FORM_TITLE, LINE_WIDTHS, TIMESTAMP_FORMAT,
    colors, placeholder, spacing, text_style,
)
from vetreport.wrapping import wrap_text

logger = logging.getLogger(__name__)

LOGO_SIZE = 48.0

# Offsets (points) below the top of the footer band
FOOTER_RULE_OFFSET = 6.0
FOOTER_TEXT_OFFSET = 22.0
FOOTER_CONTACT_OFFSET = 34.0

BLANK_LETTERHEAD = (
    f"Nome da Clínica: {placeholder(47)}",
    f"Endereço: {placeholder(47)}",
    f"Telefone: {placeholder(17)} E-mail: {placeholder(21)}",
)


def format_timestamp(when: datetime) -> str:
    return when.strftime(TIMESTAMP_FORMAT)


def _draw_logo(ctx: RenderContext, logo_path: str) -> None:
    x = ctx.left + ctx.content_width - LOGO_SIZE
    try:
        ctx.surface.draw_image(logo_path, x, ctx.cursor_y, LOGO_SIZE, LOGO_SIZE)
    except Exception as e:
        logger.warning(f"Logo could not be drawn from {logo_path}: {e}")


def render_letterhead(ctx: RenderContext, clinic: Optional[ClinicBranding]) -> None:
    """
    Render the clinic letterhead at the top of the form.

    Without branding a generic title and blank template lines are printed so
    the clinic details can be filled in by hand.

    Args:
        ctx: Render context at the top of the first page
        clinic: Clinic branding, if any
    """
    detail = text_style("clinic_detail")

    if clinic is None:
        draw_text_line(ctx, DEFAULT_CLINIC_TITLE, text_style("document_title"), spacing.line + 6)
        for line in BLANK_LETTERHEAD:
            draw_text_line(ctx, line, detail, spacing.line)
    else:
        if clinic.logo_path:
            _draw_logo(ctx, clinic.logo_path)
        draw_text_line(ctx, clinic.name, text_style("clinic_name"), spacing.line + 8)
        if clinic.legal_name and clinic.legal_name != clinic.name:
            draw_text_line(ctx, clinic.legal_name, text_style("legal_name"), spacing.line + 3)
        if clinic.address:
            draw_text_line(ctx, f"Endereço: {clinic.address}", detail, spacing.line)
        if clinic.phone:
            draw_text_line(ctx, f"Telefone: {clinic.phone}", detail, spacing.line)
        if clinic.email:
            draw_text_line(ctx, f"E-mail: {clinic.email}", detail, spacing.line)

    advance(ctx, spacing.title_gap)
    draw_rule(ctx)
    advance(ctx, spacing.section_gap)


def render_form_title(ctx: RenderContext, title: str = FORM_TITLE) -> None:
    draw_text_line(ctx, title, text_style("form_title"), spacing.line + spacing.section_gap, align="center")


def render_document_header(ctx: RenderContext, title: str, generated_at: datetime,
                           clinic: Optional[ClinicBranding] = None) -> None:
    """
    Render the header of a generated document.

    Clinic banner and subtitle, a double rule, the upper-cased title and the
    generation timestamp.
    """
    name = clinic.name if clinic else DEFAULT_CLINIC_TITLE
    subtitle = (clinic.legal_name if clinic and clinic.legal_name else None) or DEFAULT_CLINIC_SUBTITLE

    draw_text_line(ctx, name, text_style("clinic_banner"), spacing.line + 6)
    draw_text_line(ctx, subtitle, text_style("clinic_subtitle"), spacing.line + 6)

    draw_rule(ctx, width=LINE_WIDTHS["thick"], color=colors.brand_navy)
    advance(ctx, spacing.header_rule_gap)
    draw_rule(ctx, width=LINE_WIDTHS["thin"], color=colors.brand_navy)
    advance(ctx, spacing.section_gap)

    title_style = text_style("document_title")
    for line in wrap_text(title.upper(), ctx.content_width, lambda s: measure(ctx, s, title_style)):
        draw_text_line(ctx, line, title_style, title_style.size + 6)
    draw_text_line(ctx, f"Gerado em: {format_timestamp(generated_at)}", text_style("meta"), spacing.section_gap)


def draw_running_header(ctx: RenderContext, clinic: Optional[ClinicBranding] = None) -> None:
    """Compact header above the continuation offset of pages after the first."""
    style = text_style("running_header")
    label = clinic.name if clinic else DEFAULT_CLINIC_TITLE
    top = ctx.margins.top
    ctx.surface.draw_text(label, ctx.left, top + style.size, style)
    ctx.surface.draw_line(ctx.left, top + style.size + 4, ctx.left + ctx.content_width, top + style.size + 4,
                          width=LINE_WIDTHS["thin"], color=colors.text_muted)


def footer_contact_line(clinic: Optional[ClinicBranding]) -> str:
    """Clinic contact details for the footer, or a blank template."""
    if clinic is None:
        return f"Clínica Veterinária • Tel: {placeholder(12)} • E-mail: {placeholder(12)}"
    parts: List[str] = [clinic.name]
    if clinic.phone:
        parts.append(f"Tel: {clinic.phone}")
    if clinic.email:
        parts.append(clinic.email)
    return " • ".join(parts)


def draw_footer(ctx: RenderContext, generated_at: datetime,
                clinic: Optional[ClinicBranding] = None) -> None:
    """
    Draw the footer of the current page inside the reserved band.

    Double rule, then ``Gerado em`` on the left, the document id centered,
    ``Página N`` on the right, and the clinic contact line below.
    """
    surface = ctx.surface
    left = ctx.left
    right = ctx.left + ctx.content_width
    band_top = ctx.bottom_limit

    rule_y = band_top + FOOTER_RULE_OFFSET
    surface.draw_line(left, rule_y, right, rule_y, width=LINE_WIDTHS["thin"], color=colors.brand_navy)
    surface.draw_line(left, rule_y + 2, right, rule_y + 2, width=LINE_WIDTHS["thick"], color=colors.brand_navy)

    style = text_style("footer")
    small = text_style("footer_small")
    text_y = band_top + FOOTER_TEXT_OFFSET

    surface.draw_text(f"Gerado em: {format_timestamp(generated_at)}", left, text_y, style)

    page_label = f"Página {ctx.page_number}"
    surface.draw_text(page_label, right - measure(ctx, page_label, style), text_y, style)

    if ctx.document_id:
        id_label = f"ID: {ctx.document_id}"
        surface.draw_text(id_label, left + (ctx.content_width - measure(ctx, id_label, small)) / 2, text_y, small)

    contact = footer_contact_line(clinic)
    surface.draw_text(contact, left + (ctx.content_width - measure(ctx, contact, small)) / 2,
                      band_top + FOOTER_CONTACT_OFFSET, small)
