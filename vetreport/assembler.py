"""
Consultation report assembly: cover page plus one section per document.

License: MIT
"""

import logging
from typing import Optional, Sequence

from vetreport.classifier import classify_text
from vetreport.errors import EmptyReportError
from vetreport.layout import RenderContext, advance, break_page, draw_text_line, measure
from vetreport.models import GeneratedDocument
from vetreport.sections import Typography, render_classified
from vetreport.styles import DATE_FORMAT, REPORT_TITLE, spacing, text_style
from vetreport.wrapping import wrap_text

logger = logging.getLogger(__name__)


def cover_document_id(documents: Sequence[GeneratedDocument]) -> str:
    """Identifier printed in the cover page footer."""
    first = documents[0]
    return first.consultation_id or first.id


def _draw_wrapped(ctx: RenderContext, text: str, style, leading: float) -> None:
    for line in wrap_text(text, ctx.content_width, lambda s: measure(ctx, s, style)):
        draw_text_line(ctx, line, style, leading)


def render_cover(ctx: RenderContext, documents: Sequence[GeneratedDocument],
                 title: Optional[str] = None) -> None:
    """
    Render the report cover on the current page.

    Report title, consultation date (from the first document), document count
    and the numbered list of document titles.
    """
    body = text_style("cover_body")

    _draw_wrapped(ctx, title or REPORT_TITLE, text_style("cover_title"), spacing.cover_line)
    advance(ctx, spacing.paragraph_gap)

    consultation_date = documents[0].generated_at.strftime(DATE_FORMAT)
    draw_text_line(ctx, f"Data da Consulta: {consultation_date}", body, spacing.line + 4)
    draw_text_line(ctx, f"Total de Documentos: {len(documents)}", body, spacing.line + 4)
    advance(ctx, spacing.section_gap)

    for number, document in enumerate(documents, start=1):
        _draw_wrapped(ctx, f"{number}. {document.title}", body, spacing.line + 4)


def render_document_section(ctx: RenderContext, number: int, document: GeneratedDocument,
                            typography: Typography) -> None:
    """Numbered heading followed by the document's classified content."""
    _draw_wrapped(ctx, f"{number}. {document.title}", text_style("numbered_heading"), spacing.cover_line)
    advance(ctx, spacing.title_space_after)
    render_classified(ctx, classify_text(document.content), typography)


def assemble_report(ctx: RenderContext, documents: Sequence[GeneratedDocument],
                    title: Optional[str] = None,
                    typography: Typography = Typography()) -> None:
    """
    Lay out a consultation report.

    Args:
        ctx: Fresh render context on the first (cover) page
        documents: Documents in report order
        title: Cover title (defaults to the standard report title)
        typography: Body typography of the document sections

    Raises:
        EmptyReportError: If no documents are given
    """
    if not documents:
        raise EmptyReportError()

    ctx.document_id = cover_document_id(documents)
    render_cover(ctx, documents, title)

    for number, document in enumerate(documents, start=1):
        # Footer of the page being closed keeps the previous id
        break_page(ctx)
        ctx.document_id = document.id
        render_document_section(ctx, number, document, typography)

    logger.debug(f"Assembled report with {len(documents)} document(s) over {ctx.page_number} page(s)")
