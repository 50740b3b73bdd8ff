"""
FastAPI application for the clinical PDF rendering service.

Provides REST API endpoints for rendering fichas clínicas, generated
documents and consultation reports, with error handling, logging, and
health checks.

License: MIT
"""

import time
import logging
import base64
from typing import Any, Callable, Dict

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response, JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from vetreport.models import ClinicalRecordRequest, ConsultationReportRequest, GeneratedDocumentRequest
from vetreport.renderer import (
    RenderedDocument, render_clinical_record, render_consultation_report, render_generated_document,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Veterinary Clinical PDF API",
    version="1.0.0",
    description="Renders veterinary clinical records and generated documents to printable PDFs",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing information."""
    start_time = time.time()

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} "
        f"completed in {duration:.3f}s with status {response.status_code}"
    )

    return response


def _render(render: Callable[[], RenderedDocument]):
    """
    Run a render call and map engine errors to HTTP errors.

    Returns:
        Tuple of the rendered document and the render time in seconds

    Raises:
        HTTPException: 400 on invalid input, 500 on rendering failures
    """
    try:
        start_time = time.time()
        rendered = render()
        return rendered, time.time() - start_time

    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        raise HTTPException(status_code=400, detail=f"Validation error: {str(e)}")

    except ValueError as e:
        logger.error(f"Value error: {str(e)}")
        raise HTTPException(status_code=400, detail=f"Validation error: {str(e)}")

    except Exception as e:
        logger.error(f"Rendering error: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Rendering error: {str(e)}")


def _pdf_response(rendered: RenderedDocument, render_time: float) -> Response:
    headers = {
        "Content-Disposition": f'attachment; filename="{rendered.filename}"',
        "X-Render-Time": f"{render_time:.3f}",
        "X-Page-Count": str(rendered.page_count),
    }
    return Response(content=rendered.content, media_type=rendered.media_type, headers=headers)


@app.get("/health")
def health_check() -> Dict[str, str]:
    """
    Health check endpoint.

    Returns:
        Status dictionary indicating service health
    """
    return {"status": "ok"}


@app.post("/fichas/pdf")
def render_ficha_pdf(payload: ClinicalRecordRequest) -> Response:
    """
    Render a ficha clínica to PDF.

    Args:
        payload: Record, optional clinic branding, veterinarian identity and options

    Returns:
        PDF file as binary response
    """
    rendered, render_time = _render(lambda: render_clinical_record(
        payload.record,
        clinic=payload.clinic,
        veterinarian=payload.veterinarian,
        options=payload.options,
    ))
    logger.info(
        f"Rendered ficha '{payload.record.id}' with {len(rendered.blank_fields)} blank field(s) "
        f"in {render_time:.3f}s"
    )
    return _pdf_response(rendered, render_time)


@app.post("/documents/pdf")
def render_document_pdf(payload: GeneratedDocumentRequest) -> Response:
    """Render a single generated document to PDF."""
    rendered, render_time = _render(lambda: render_generated_document(
        payload.document,
        clinic=payload.clinic,
        options=payload.options,
    ))
    return _pdf_response(rendered, render_time)


@app.post("/reports/pdf")
def render_report_pdf(payload: ConsultationReportRequest) -> Response:
    """Assemble a consultation report to PDF."""
    rendered, render_time = _render(lambda: render_consultation_report(
        payload.documents,
        title=payload.title,
        options=payload.options,
    ))
    return _pdf_response(rendered, render_time)


@app.post("/reports/pdf-base64")
def render_report_base64(payload: ConsultationReportRequest) -> Dict[str, Any]:
    """
    Assemble a consultation report and return it as base64-encoded JSON.

    Useful for API clients that cannot handle binary PDF responses.

    Returns:
        JSON with base64-encoded PDF and metadata
    """
    rendered, render_time = _render(lambda: render_consultation_report(
        payload.documents,
        title=payload.title,
        options=payload.options,
    ))

    return {
        "success": True,
        "pdf_base64": base64.b64encode(rendered.content).decode('utf-8'),
        "filename": rendered.filename,
        "size_bytes": len(rendered.content),
        "page_count": rendered.page_count,
        "render_time_seconds": round(render_time, 3),
    }


@app.exception_handler(413)
async def payload_too_large_handler(request: Request, exc: Any):
    """Handle payload too large errors."""
    return JSONResponse(
        status_code=413,
        content={"error": "Payload too large", "detail": "Request body exceeds maximum size"}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "detail": str(exc)}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
