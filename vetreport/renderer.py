"""
PDF rendering entry points.

Each call builds its own surface and render context, lays out the content,
finalizes the document and hands the bytes back (and to an optional sink).

License: MIT
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from vetreport.assembler import assemble_report
from vetreport.classifier import classify_text
from vetreport.errors import EmptyReportError
from vetreport.fields import render_ficha
from vetreport.filenames import build_filename, clinical_record_filename, report_filename
from vetreport.header_footer import (
    draw_footer, draw_running_header, render_document_header, render_form_title, render_letterhead,
)
from vetreport.layout import RenderContext, create_context, finalize
from vetreport.models import (
    ClinicalRecord, ClinicBranding, GeneratedDocument, RenderOptions, VeterinarianIdentity,
)
from vetreport.sections import Typography, render_classified
from vetreport.styles import DOCUMENT_TYPE_PRESETS, FORM_TITLE, REPORT_TITLE, page_config, spacing
from vetreport.surface import RenderingSurface, ReportLabSurface

logger = logging.getLogger(__name__)

Sink = Callable[[str, bytes], None]


@dataclass
class RenderedDocument:
    """Serialized output of a render call."""
    content: bytes
    filename: str
    page_count: int
    media_type: str = "application/pdf"
    blank_fields: List[str] = field(default_factory=list)


def typography_for(document_type: str, options: Optional[RenderOptions] = None) -> Typography:
    """
    Body typography for a generated document.

    Explicit options win; otherwise the preset of the document type applies,
    falling back to the defaults.
    """
    if options is not None:
        return Typography(options.body_font_size, options.line_height)
    if document_type in DOCUMENT_TYPE_PRESETS:
        return Typography(*DOCUMENT_TYPE_PRESETS[document_type])
    return Typography()


def _continuation_offset(options: RenderOptions, default_mm: float) -> float:
    mm = options.continuation_offset_mm if options.continuation_offset_mm is not None else default_mm
    if options.repeat_header:
        # Running header sits inside the offset
        mm = max(mm, page_config.continuation_offset_mm)
    return page_config.mm_to_points(mm)


def _build_context(surface: RenderingSurface, options: RenderOptions, document_id: str,
                   generated_at: datetime, clinic: Optional[ClinicBranding],
                   continuation_mm: float) -> RenderContext:
    ctx = create_context(
        surface,
        margin_mm=options.margin_mm,
        footer_reserve=spacing.footer_reserve if options.include_footer else 0.0,
        continuation_offset=_continuation_offset(options, continuation_mm),
        document_id=document_id,
    )
    if options.include_footer:
        ctx.on_page_end = lambda c: draw_footer(c, generated_at, clinic)
    if options.repeat_header:
        ctx.on_page_start = lambda c: draw_running_header(c, clinic)
    return ctx


def _finish(ctx: RenderContext, filename: str, sink: Optional[Sink], start_time: float,
            kind: str) -> RenderedDocument:
    content = finalize(ctx)
    rendered = RenderedDocument(
        content=content,
        filename=filename,
        page_count=ctx.page_number,
        blank_fields=list(ctx.blank_fields),
    )
    if sink is not None:
        sink(filename, content)

    duration = time.time() - start_time
    logger.info(
        f"Rendered {kind} '{filename}': {rendered.page_count} page(s), "
        f"{len(content)} bytes in {duration:.3f}s"
    )
    return rendered


def render_clinical_record(record: ClinicalRecord,
                           clinic: Optional[ClinicBranding] = None,
                           veterinarian: Optional[VeterinarianIdentity] = None,
                           options: Optional[RenderOptions] = None,
                           surface: Optional[RenderingSurface] = None,
                           generated_at: Optional[datetime] = None,
                           sink: Optional[Sink] = None) -> RenderedDocument:
    """
    Render a ficha clínica to PDF.

    Args:
        record: Clinical record (never mutated)
        clinic: Clinic letterhead; a blank template is printed when missing
        veterinarian: Identity overriding the record's veterinarian leaves
        options: Page and layout options
        surface: Drawing backend (a new ReportLab surface by default)
        generated_at: Timestamp for the footer and file name (defaults to now)
        sink: Called with ``(filename, content)`` after a successful render

    Returns:
        RenderedDocument with the PDF bytes
    """
    start_time = time.time()
    options = options or RenderOptions()
    generated_at = generated_at or datetime.now()

    if surface is None:
        surface = ReportLabSurface(
            options.page_size,
            title=f"{FORM_TITLE} - {record.animal.name or 'animal'}",
            author=clinic.name if clinic else None,
        )

    ctx = _build_context(surface, options, record.id, generated_at, clinic, continuation_mm=0.0)
    if options.include_header:
        render_letterhead(ctx, clinic)
    render_form_title(ctx)
    render_ficha(ctx, record, veterinarian)

    filename = clinical_record_filename(record.animal.name, generated_at)
    return _finish(ctx, filename, sink, start_time, "clinical record")


def render_generated_document(document: GeneratedDocument,
                              clinic: Optional[ClinicBranding] = None,
                              options: Optional[RenderOptions] = None,
                              surface: Optional[RenderingSurface] = None,
                              sink: Optional[Sink] = None) -> RenderedDocument:
    """
    Render one generated document: header, classified content and footer.

    Without explicit options the typography preset of the document type is
    used.
    """
    start_time = time.time()
    typography = typography_for(document.type, options)
    options = options or RenderOptions()

    if surface is None:
        surface = ReportLabSurface(options.page_size, title=document.title,
                                   author=clinic.name if clinic else None)

    ctx = _build_context(surface, options, document.id, document.generated_at, clinic,
                         continuation_mm=page_config.continuation_offset_mm)
    if options.include_header:
        render_document_header(ctx, document.title, document.generated_at, clinic)
    render_classified(ctx, classify_text(document.content), typography)

    filename = build_filename(document.title, document.generated_at)
    return _finish(ctx, filename, sink, start_time, f"{document.type} document")


def render_consultation_report(documents: Sequence[GeneratedDocument],
                               title: Optional[str] = None,
                               options: Optional[RenderOptions] = None,
                               surface: Optional[RenderingSurface] = None,
                               generated_at: Optional[datetime] = None,
                               sink: Optional[Sink] = None) -> RenderedDocument:
    """
    Assemble several generated documents into one cover-paged report.

    Raises:
        EmptyReportError: If *documents* is empty (nothing is drawn or returned)
    """
    if not documents:
        raise EmptyReportError()

    start_time = time.time()
    options = options or RenderOptions()
    generated_at = generated_at or datetime.now()

    if surface is None:
        surface = ReportLabSurface(options.page_size, title=title or REPORT_TITLE)

    ctx = _build_context(surface, options, "", generated_at, None,
                         continuation_mm=page_config.continuation_offset_mm)
    assemble_report(ctx, documents, title, Typography(options.body_font_size, options.line_height))

    filename = report_filename(documents[0].generated_at)
    return _finish(ctx, filename, sink, start_time, "consultation report")
