"""
pdfsi logging configuration.

Plain text logs for local use, one JSON object per line for the service.
Secret values are never passed to a logger; the detection helpers below only
emit type, confidence, source and risk level.

Usage:
    from pdfsi.logging_config import setup_logging, log_secret_detection

    setup_logging(level="DEBUG", json_output=True)
    log_secret_detection(logger, "report.pdf", findings, risk)
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Iterable, Optional

from pdfsi.core.findings import Finding, RiskLevel
from pdfsi.core.redaction import summarize_for_log

SERVICE_NAME = "pdf-secret-inspector"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    # Standard LogRecord attributes to exclude from extra fields
    STANDARD_ATTRS = frozenset([
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "taskName",
    ])

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": SERVICE_NAME,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO", json_output: bool = False, stream=None) -> None:
    """
    Configure the ``pdfsi`` logger hierarchy.

    Args:
        level: Log level name
        json_output: Emit JSON lines instead of plain text
        stream: Output stream (defaults to stderr)
    """
    root = logging.getLogger("pdfsi")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    root.propagate = False


def log_secret_detection(
    logger: logging.Logger,
    filename: str,
    findings: Iterable[Finding],
    risk_level: RiskLevel,
) -> None:
    """Log a detection alert without any secret values."""
    findings = list(findings)
    logger.warning(
        "Secret detection alert: %d secret(s) in %s, risk %s",
        len(findings),
        filename,
        risk_level.value,
        extra={
            "document": filename,
            "secret_count": len(findings),
            "risk_level": risk_level.value,
            "secrets": summarize_for_log(findings),
        },
    )


def log_file_processing(
    logger: logging.Logger,
    filename: str,
    size: int,
    processing_ms: int,
    pages: Optional[int] = None,
) -> None:
    """Log completion of one document."""
    logger.info(
        "File processing complete: %s (%.2f KB, %d ms)",
        filename,
        round(size / 1024, 2),
        processing_ms,
        extra={
            "document": filename,
            "size_kb": round(size / 1024, 2),
            "processing_ms": processing_ms,
            "pages": pages,
        },
    )
