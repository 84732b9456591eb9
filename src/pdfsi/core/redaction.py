# SPDX-License-Identifier: MIT
"""
Central redaction utilities for pdfsi.

Every finding leaves the detector with its value masked. The helpers here are
the only place that decides what a masked secret looks like, so JSON output,
console output and log lines all agree.
"""

from __future__ import annotations
import dataclasses
from typing import Dict, Any, Iterable, List

from pdfsi.core.findings import Finding

MASK_CHAR = "*"


def mask_secret(secret: str, mask_char: str = MASK_CHAR) -> str:
    """
    Mask a secret value while keeping its length.

    For secrets <= 8 characters, every character is masked.
    For longer secrets, shows first4 + mask + last4.

    Args:
        secret: The secret string to mask
        mask_char: Character used for the hidden part

    Returns:
        Masked string of the same length as ``secret``
    """
    if len(secret) <= 8:
        return mask_char * len(secret)
    return secret[:4] + mask_char * (len(secret) - 8) + secret[-4:]


def mask_finding(finding: Finding) -> Finding:
    """Return a copy of ``finding`` with its value masked."""
    return dataclasses.replace(finding, value=mask_secret(finding.value))


def redact_findings(findings: Iterable[Finding]) -> List[Finding]:
    """Mask the value of every finding in ``findings``."""
    return [mask_finding(f) for f in findings]


def summarize_for_log(findings: Iterable[Finding]) -> List[Dict[str, Any]]:
    """
    Reduce findings to fields that are safe to write to logs.

    The value, masked or not, is never included.
    """
    return [
        {
            "type": f.type,
            "confidence": f.confidence,
            "source": f.source.value,
            "riskLevel": f.risk_level.value,
        }
        for f in findings
    ]
