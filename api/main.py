#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
FastAPI Web Server - REST API for Texify.

This module serves the two-pane converter page and the endpoints behind it:
- Editor sessions (mode, inputs, conversion status, result)
- Result download and sandboxed HTML preview
- Stateless one-shot conversions for scripts
- Provider listing and health

Usage:
    # Start server
    uvicorn api.main:app --host 0.0.0.0 --port 8000

    # Or run directly
    python -m api.main

Key Endpoints:
    POST /api/sessions - Create editor session
    PUT /api/sessions/{id}/mode - Switch conversion direction
    POST /api/sessions/{id}/file - Select PDF/DOCX input
    POST /api/sessions/{id}/style - Select .tex style sample
    PUT /api/sessions/{id}/latex - Set LaTeX input
    POST /api/sessions/{id}/convert - Run the conversion
    GET /api/sessions/{id}/result/download - Download converted_output.*
    POST /api/convert/doc-to-latex - One-shot document -> LaTeX
    POST /api/convert/latex-to-doc - One-shot LaTeX -> HTML document

Configuration:
    Environment variables (or .env):
    - GOOGLE_API_KEY: Gemini API key (default provider)
    - ANTHROPIC_API_KEY / OPENAI_API_KEY: other providers
    - PROVIDER, MODEL: provider and model selection
    - RATE_LIMIT: API rate limit (default: "60/minute")
    - MAX_UPLOAD_SIZE_MB: Max upload size (default: 50)
"""

import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from ai_providers import create_provider_from_settings, list_providers
from api.session_store import SessionStore
from config.logging_config import configure_from_settings, get_logger, log_api_request
from config.settings import settings
from core.converter import DocumentConverter
from core.exceptions import (
    ConversionError,
    DocxExtractionError,
    FileReadError,
    FileTooLargeError,
    MissingAPIKeyError,
    TexifyError,
    UnknownModelError,
    UnknownProviderError,
    UnsupportedFileError,
)
from core.file_utils import (
    check_file_size,
    detect_mime_type,
    make_file_data,
    read_text_file,
    validate_document,
    validate_style_file,
)
from core.result_viewer import ResultType, ResultView, ViewMode
from core.session import ConversionMode, ConverterSession, Status

logger = get_logger(__name__)

__version__ = "1.0.0"


# =============================================================================
# Pydantic Models for API
# =============================================================================

class ModeRequest(BaseModel):
    """Request model for switching conversion direction"""
    mode: ConversionMode = Field(..., description="DOC_TO_LATEX or LATEX_TO_DOC")


class LatexInputRequest(BaseModel):
    """Request model for the LaTeX input pane"""
    latex: str = Field(default="", description="LaTeX source to convert")


class ViewModeRequest(BaseModel):
    """Request model for the result pane view toggle"""
    view_mode: ViewMode = Field(..., description="code or preview")


class ConvertOptions(BaseModel):
    """Optional provider override for a conversion"""
    provider: Optional[str] = Field(default=None, description="gemini, claude or openai")
    model: Optional[str] = Field(default=None, description="Model id for the provider")


class LatexToDocRequest(ConvertOptions):
    """Request model for one-shot LaTeX -> document conversion"""
    latex: str = Field(..., description="LaTeX source to convert")


class ConversionResponse(BaseModel):
    """Response model for one-shot conversions"""
    content: str
    type: str
    filename: str
    duration_seconds: float


class ProviderModelInfo(BaseModel):
    id: str
    name: str


class ProviderResponse(BaseModel):
    """Provider information"""
    id: str
    name: str
    description: str
    models: List[ProviderModelInfo]
    default_model: str
    is_available: bool
    is_current: bool


# =============================================================================
# Converter construction
# =============================================================================

_converter_cache: Dict[Tuple[str, Optional[str]], DocumentConverter] = {}


def build_converter(provider: Optional[str] = None, model: Optional[str] = None) -> DocumentConverter:
    """
    Create (or reuse) a converter for the configured or requested provider.

    Unknown providers and models are rejected before anything is cached.

    Raises:
        UnknownProviderError: If the provider name is not recognised
        UnknownModelError: If the model is not listed for the provider
        MissingAPIKeyError: If the provider has no API key configured
    """
    key = ((provider or settings.provider).lower(), model)
    if key not in _converter_cache:
        _converter_cache[key] = DocumentConverter(
            create_provider_from_settings(settings, provider=provider, model=model),
            strip_fences=settings.strip_code_fences,
        )
    return _converter_cache[key]


# =============================================================================
# FastAPI Application
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and directories from settings."""
    settings.ensure_directories()
    configure_from_settings(settings)
    logger.info(f"Texify API {__version__} starting with {settings.summary()}")
    yield
    logger.info("Texify API shutting down")


app = FastAPI(
    title="Texify API",
    description="AI-powered conversion between PDF/DOCX documents and LaTeX",
    version=__version__,
    lifespan=lifespan,
)

# Converter factory is swappable (tests install a fake provider here)
app.state.converter_factory = build_converter
app.state.sessions = SessionStore(timeout_minutes=settings.session_timeout_minutes)

# Rate limiting (configurable via RATE_LIMIT env var)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit]
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Status codes for core errors
ERROR_STATUS_CODES = [
    (FileTooLargeError, 413),
    (UnsupportedFileError, 400),
    (FileReadError, 400),
    (DocxExtractionError, 400),
    (UnknownProviderError, 400),
    (UnknownModelError, 400),
    (MissingAPIKeyError, 503),
    (ConversionError, 502),
]


@app.exception_handler(TexifyError)
async def texify_error_handler(request: Request, exc: TexifyError):
    """Map core errors to HTTP responses"""
    status_code = 400
    for error_type, code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            status_code = code
            break
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        log_api_request(
            request.method,
            request.url.path,
            response.status_code,
            (time.time() - start) * 1000,
        )
    return response


# UI static files
ui_path = Path(__file__).parent.parent / "ui"
app.mount("/ui", StaticFiles(directory=str(ui_path), html=True), name="ui")


# =============================================================================
# Helpers
# =============================================================================

async def read_upload(file: UploadFile) -> bytes:
    """Read an upload, enforcing MAX_UPLOAD_SIZE_MB"""
    contents = await file.read()
    check_file_size(len(contents), settings.max_upload_size_mb)
    return contents


def get_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_idle_session(request: Request, session_id: str) -> ConverterSession:
    """Session whose inputs may change; 409 while a conversion is running"""
    session = get_store(request).get(session_id)
    if session.status in (Status.UPLOADING, Status.PROCESSING):
        raise HTTPException(status_code=409, detail="A conversion is already running")
    return session


# =============================================================================
# Pages & Health
# =============================================================================

@app.get("/", response_class=HTMLResponse, include_in_schema=False)
async def root():
    """Serve the converter page"""
    return FileResponse(ui_path / "index.html")


@app.get("/health")
async def health_check():
    """Liveness check"""
    return {
        "status": "ok",
        "version": __version__,
        "provider": settings.provider,
        "api_key_configured": bool(settings.get_api_key()),
        "active_sessions": app.state.sessions.get_active_sessions_count(),
    }


@app.get("/api/providers", response_model=List[ProviderResponse])
async def get_providers():
    """List AI providers and whether each has an API key configured"""
    return [
        ProviderResponse(
            id=info.type.value,
            name=info.name,
            description=info.description,
            models=[ProviderModelInfo(id=mid, name=name) for mid, name in info.models.items()],
            default_model=info.default_model,
            is_available=bool(settings.get_api_key(info.type.value)),
            is_current=info.type.value == settings.provider.lower(),
        )
        for info in list_providers()
    ]


# =============================================================================
# Editor Sessions
# =============================================================================

@app.post("/api/sessions", status_code=201)
async def create_session(request: Request):
    """Start a new editor session"""
    session = get_store(request).create()
    return session.snapshot()


@app.get("/api/sessions/{session_id}")
async def get_session(session_id: str, request: Request):
    """Current editor state"""
    return get_store(request).get(session_id).snapshot()


@app.delete("/api/sessions/{session_id}")
async def delete_session(session_id: str, request: Request):
    """Discard a session"""
    if not get_store(request).remove(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"message": "Session deleted", "session_id": session_id}


@app.put("/api/sessions/{session_id}/mode")
async def set_session_mode(session_id: str, body: ModeRequest, request: Request):
    """Switch direction; clears result, status and error. 409 while converting"""
    session = get_idle_session(request, session_id)
    session.set_mode(body.mode)
    return session.snapshot()


@app.post("/api/sessions/{session_id}/file")
async def select_session_file(session_id: str, request: Request, file: UploadFile = File(...)):
    """
    Select the PDF or DOCX document to convert.

    An unsupported type leaves the previous file in place and reports the
    problem in the session's error field.
    """
    session = get_idle_session(request, session_id)
    contents = await read_upload(file)
    session.select_file(file.filename or "upload", contents, file.content_type)
    return session.snapshot()


@app.post("/api/sessions/{session_id}/style")
async def select_session_style(session_id: str, request: Request, file: UploadFile = File(...)):
    """Select the optional .tex style sample"""
    session = get_idle_session(request, session_id)
    contents = await read_upload(file)
    session.select_style_file(file.filename or "", contents)
    return session.snapshot()


@app.delete("/api/sessions/{session_id}/style")
async def remove_session_style(session_id: str, request: Request):
    """Remove the style sample"""
    session = get_idle_session(request, session_id)
    session.remove_style_file()
    return session.snapshot()


@app.put("/api/sessions/{session_id}/latex")
async def set_session_latex(session_id: str, body: LatexInputRequest, request: Request):
    """Set the LaTeX input pane"""
    session = get_idle_session(request, session_id)
    session.set_latex_input(body.latex)
    return session.snapshot()


@app.post("/api/sessions/{session_id}/convert")
@limiter.limit(settings.convert_rate_limit)
async def convert_session(session_id: str, request: Request, options: Optional[ConvertOptions] = None):
    """
    Run the conversion for the session's current mode.

    Failures are reported through the session's status and error fields.
    """
    session = get_idle_session(request, session_id)

    options = options or ConvertOptions()
    try:
        converter = request.app.state.converter_factory(provider=options.provider, model=options.model)
    except TexifyError as e:
        session.fail(e)
        return session.snapshot()

    await session.convert(converter)
    return session.snapshot()


@app.put("/api/sessions/{session_id}/view")
async def set_session_view(session_id: str, body: ViewModeRequest, request: Request):
    """Toggle between code and preview for HTML results"""
    session = get_store(request).get(session_id)
    try:
        session.view.set_view_mode(body.view_mode)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session.snapshot()


@app.get("/api/sessions/{session_id}/result")
async def get_session_result(session_id: str, request: Request):
    """Result text and presentation details"""
    session = get_store(request).get(session_id)
    return {"content": session.view.copy_text(), **session.view.to_dict()}


@app.get("/api/sessions/{session_id}/result/download")
async def download_session_result(session_id: str, request: Request):
    """Download the result as converted_output.tex or converted_output.html"""
    session = get_store(request).get(session_id)
    if not session.result:
        raise HTTPException(status_code=404, detail="No result to download yet")
    return download_response(session.view)


@app.get("/api/sessions/{session_id}/result/preview", response_class=HTMLResponse)
async def preview_session_result(session_id: str, request: Request):
    """Serve an HTML result for the sandboxed preview frame"""
    session = get_store(request).get(session_id)
    if not session.view.can_preview:
        raise HTTPException(status_code=409, detail="Preview is only available for HTML output")
    return HTMLResponse(
        content=session.view.content,
        headers={"Content-Security-Policy": f"sandbox {session.view.preview_sandbox}"},
    )


def download_response(view: ResultView) -> Response:
    return Response(
        content=view.download_bytes(),
        media_type=f"{view.media_type}; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{view.download_filename}"'},
    )


# =============================================================================
# One-shot Conversions
# =============================================================================

@app.post("/api/convert/doc-to-latex", response_model=ConversionResponse)
@limiter.limit(settings.convert_rate_limit)
async def convert_doc_to_latex(
    request: Request,
    file: UploadFile = File(...),
    style_file: Optional[UploadFile] = File(None),
    provider: Optional[str] = Form(None),
    model: Optional[str] = Form(None),
):
    """
    Convert an uploaded PDF or DOCX to LaTeX

    Accepts: PDF, DOCX (+ optional .tex style sample)
    Max size: MAX_UPLOAD_SIZE_MB
    """
    filename = file.filename or "upload"
    mime_type = detect_mime_type(filename, file.content_type)
    validate_document(filename, mime_type)
    file_data = make_file_data(filename, await read_upload(file), mime_type)

    style_sample = None
    if style_file is not None and style_file.filename:
        validate_style_file(style_file.filename)
        style_sample = read_text_file(await read_upload(style_file))

    start = time.time()
    converter = request.app.state.converter_factory(provider=provider, model=model)
    latex = await converter.convert_doc_to_latex(file_data, style_sample)
    view = ResultView(content=latex, type=ResultType.LATEX)

    return ConversionResponse(
        content=latex,
        type=view.type.value,
        filename=view.download_filename,
        duration_seconds=round(time.time() - start, 3),
    )


@app.post("/api/convert/latex-to-doc", response_model=ConversionResponse)
@limiter.limit(settings.convert_rate_limit)
async def convert_latex_to_doc(request: Request, body: LatexToDocRequest):
    """Convert LaTeX source to a standalone HTML5 document"""
    if not body.latex.strip():
        raise HTTPException(status_code=400, detail="LaTeX input is empty")

    start = time.time()
    converter = request.app.state.converter_factory(provider=body.provider, model=body.model)
    document_html = await converter.convert_latex_to_doc(body.latex)
    view = ResultView(content=document_html, type=ResultType.HTML)

    return ConversionResponse(
        content=document_html,
        type=view.type.value,
        filename=view.download_filename,
        duration_seconds=round(time.time() - start, 3),
    )


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    from config.constants import DEFAULT_HOST, DEFAULT_PORT

    logger.info("Starting Texify API Server...")
    logger.info(f"Converter page: http://localhost:{DEFAULT_PORT}/")
    logger.info(f"API Documentation: http://localhost:{DEFAULT_PORT}/docs")

    uvicorn.run(app, host=DEFAULT_HOST, port=DEFAULT_PORT, log_level="info")
