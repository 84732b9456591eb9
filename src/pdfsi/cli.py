# SPDX-License-Identifier: MIT
"""
PDF Secret Inspector - Command Line Interface

This CLI provides:
- pdfsi version
- pdfsi scan <path> --format {text,json} --config <path>
- pdfsi serve --host <host> --port <port>
- pdfsi init-config [--force]

Exit codes for scan: 0 clean, 1 secrets found, 2 error.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .config import CONFIG_NAMES, create_default_config_template, load_settings
from .core.exceptions import ExtractionError, InspectorConfigError
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2


def main(argv=None):
    argv = argv if argv is not None else sys.argv[1:]
    p = argparse.ArgumentParser(prog="pdfsi", description="PDF Secret Inspector")
    p.add_argument("-v", "--version", action="store_true", help="print version and exit")

    sub = p.add_subparsers(dest="cmd")
    sub.add_parser("version", help="print version")

    sp = sub.add_parser("scan", help="scan a PDF or text file for secrets")
    sp.add_argument("path", help="file to scan")
    sp.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="output format (default: text)"
    )
    sp.add_argument("--config", help="path to config YAML file")
    sp.add_argument(
        "--json-out",
        dest="json_out",
        help="write JSON results to file"
    )

    sv = sub.add_parser("serve", help="run the HTTP inspection service")
    sv.add_argument("--host", help="bind address (default from config)")
    sv.add_argument("--port", type=int, help="port (default from config)")
    sv.add_argument("--config", help="path to config YAML file")

    ic = sub.add_parser("init-config", help="write a .pdfsi.yml template")
    ic.add_argument("--force", action="store_true", help="overwrite an existing file")

    args = p.parse_args(argv)

    if args.version or args.cmd == "version":
        print(__version__)
        return 0

    if args.cmd == "scan":
        return handle_scan_command(args)

    if args.cmd == "serve":
        return handle_serve_command(args)

    if args.cmd == "init-config":
        return handle_init_config_command(args)

    p.print_help()
    return 0


def _load(config_path):
    try:
        return load_settings(config_path)
    except InspectorConfigError as e:
        print(f"CONFIG ERROR: {e}", file=sys.stderr)
        return None


def _read_document(path: Path):
    """Return (text, pages) for a PDF or plain text file."""
    from .extract.pdf import clean_text, extract_text, looks_like_pdf

    blob = path.read_bytes()
    if path.suffix.lower() == ".pdf" or looks_like_pdf(blob):
        document = extract_text(blob, filename=path.name)
        return document.text, document.pages
    return clean_text(blob.decode("utf-8", errors="ignore")), None


def handle_scan_command(args):
    """Handle the scan subcommand."""
    from .detectors.service import SecretDetector
    from .risk.score import count_by_level

    settings = _load(args.config)
    if settings is None:
        return EXIT_ERROR
    setup_logging(settings.log_level, json_output=settings.log_json)

    path = Path(args.path)
    if not path.is_file():
        print(f"Error: file not found: {path}", file=sys.stderr)
        return EXIT_ERROR

    try:
        text, pages = _read_document(path)
    except (ExtractionError, OSError) as e:
        print(f"Error reading {path}: {e}", file=sys.stderr)
        return EXIT_ERROR

    detector = SecretDetector.from_settings(settings)
    report = detector.inspect(text)

    result = {
        "filename": path.name,
        "secretsFound": report.count,
        "riskLevel": report.risk_level.value,
        "source": report.source.value,
        "pages": pages,
        "summary": count_by_level(report.findings),
        "secrets": [f.to_dict() for f in report.findings],
    }

    if args.json_out:
        with open(args.json_out, "w", encoding="utf-8") as f:
            json.dump(result, f, indent=2)

    if args.format == "json":
        print(json.dumps(result, indent=2))
    else:
        print(f"{path.name}: {report.count} secret(s), risk {report.risk_level.value} ({report.source.value} detection)")
        for finding in report.findings:
            print(
                f"  [{finding.risk_level.value}] {finding.type} at offset {finding.location}: "
                f"{finding.value} (confidence {finding.confidence:.2f})"
            )

    return EXIT_FINDINGS if report.count else EXIT_CLEAN


def handle_serve_command(args):
    """Handle the serve subcommand."""
    import uvicorn

    from .server import create_app

    settings = _load(args.config)
    if settings is None:
        return EXIT_ERROR
    setup_logging(settings.log_level, json_output=settings.log_json)

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("PDF Secret Inspector listening on %s:%d", host, port)
    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())
    return 0


def handle_init_config_command(args):
    """Handle the init-config subcommand."""
    target = Path(CONFIG_NAMES[0])
    if target.exists() and not args.force:
        print(f"{target} already exists (use --force to overwrite)", file=sys.stderr)
        return 1
    target.write_text(create_default_config_template(), encoding="utf-8")
    print(f"Wrote {target}")
    return 0
