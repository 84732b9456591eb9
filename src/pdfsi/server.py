# SPDX-License-Identifier: MIT
"""
HTTP service for PDF secret inspection.

Endpoints:
- GET  /api/health
- POST /api/inspect-pdf   (multipart field ``pdf``)
"""
from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from pdfsi import __version__
from pdfsi.config import Settings, load_settings
from pdfsi.core.exceptions import ExtractionError
from pdfsi.detectors.service import SecretDetector
from pdfsi.extract.pdf import extract_text
from pdfsi.logging_config import log_file_processing, log_secret_detection

logger = logging.getLogger(__name__)


class SecretOut(BaseModel):
    type: str
    description: str
    value: str  # always masked
    location: int
    confidence: float
    riskLevel: str
    source: str


class InspectionMetadata(BaseModel):
    pages: int
    wordCount: int
    timestamp: str


class InspectionResult(BaseModel):
    filename: str
    fileSize: int
    processingTime: int
    secretsFound: int
    riskLevel: str
    secrets: List[SecretOut]
    metadata: InspectionMetadata


class ErrorBody(BaseModel):
    error: str
    code: str
    message: Optional[str] = None


def _error(status: int, error: str, code: str, message: Optional[str] = None) -> JSONResponse:
    body = ErrorBody(error=error, code=code, message=message)
    return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_app(settings: Optional[Settings] = None, detector: Optional[SecretDetector] = None) -> FastAPI:
    settings = settings or load_settings()
    detector = detector or SecretDetector.from_settings(settings)
    started = time.monotonic()

    app = FastAPI(title="pdf-secret-inspector", version=__version__)
    app.state.settings = settings
    app.state.detector = detector

    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=_origins_regex(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _error(404, "Endpoint not found", "NOT_FOUND")
        return _error(exc.status_code, str(exc.detail), "HTTP_ERROR")

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return _error(500, "Internal server error", "INTERNAL_ERROR")

    @app.get("/api/health")
    def health():
        return {
            "status": "healthy",
            "timestamp": _now(),
            "version": __version__,
            "uptime": round(time.monotonic() - started, 3),
        }

    @app.post("/api/inspect-pdf", response_model=InspectionResult)
    def inspect_pdf(pdf: Optional[UploadFile] = File(None)):
        t0 = time.monotonic()
        if pdf is None:
            return _error(400, "No PDF file provided", "NO_FILE")

        filename = pdf.filename or "unknown"
        if pdf.content_type not in settings.allowed_types:
            return _error(400, "Only PDF files are allowed", "INVALID_FILE_TYPE")

        content = pdf.file.read(settings.max_file_size + 1)
        if len(content) > settings.max_file_size:
            limit_mb = round(settings.max_file_size / 1024 / 1024)
            return _error(400, "File too large", "FILE_TOO_LARGE", f"PDF file must be smaller than {limit_mb}MB")

        logger.info("Processing PDF: %s (%d bytes)", filename, len(content))
        try:
            document = extract_text(content, filename=filename)
        except ExtractionError as e:
            logger.error("Failed to process %s: %s", filename, e)
            return _error(500, "Failed to process PDF", "PROCESSING_ERROR", str(e))

        report = detector.inspect(document.text)
        elapsed = int((time.monotonic() - t0) * 1000)

        if report.findings:
            log_secret_detection(logger, filename, report.findings, report.risk_level)
        log_file_processing(logger, filename, len(content), elapsed, pages=document.pages)

        return InspectionResult(
            filename=filename,
            fileSize=len(content),
            processingTime=elapsed,
            secretsFound=report.count,
            riskLevel=report.risk_level.value,
            secrets=[SecretOut(**f.to_dict()) for f in report.findings],
            metadata=InspectionMetadata(
                pages=document.pages,
                wordCount=document.word_count,
                timestamp=_now(),
            ),
        )

    return app


def _origins_regex(origins: List[str]) -> Optional[str]:
    """Turn origin globs like ``http://localhost:*`` into one regex."""
    if not origins:
        return None
    parts = [re.escape(o).replace(r"\*", ".*") for o in origins]
    return "^(?:" + "|".join(parts) + ")$"
