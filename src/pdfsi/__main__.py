#!/usr/bin/env python3
"""
Allow running pdfsi as a module: python -m pdfsi
"""

from pdfsi.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
