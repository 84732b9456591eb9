# SPDX-License-Identifier: MIT
"""
Risk aggregation for detected secrets.

The aggregate risk of a document is the most severe level among its
findings. Presence decides, not count: one CRITICAL finding outweighs any
number of LOW ones.
"""
from __future__ import annotations

from typing import Dict, Iterable

from pdfsi.core.findings import Finding, RiskLevel


def highest(levels: Iterable[RiskLevel]) -> RiskLevel:
    """Return the most severe level in ``levels`` (NONE when empty)."""
    result = RiskLevel.NONE
    for level in levels:
        if level > result:
            result = level
    return result


def aggregate_risk(findings: Iterable[Finding]) -> RiskLevel:
    """
    Calculate the overall risk level for a set of findings.

    Args:
        findings: Findings from a single detection call

    Returns:
        NONE for an empty input, otherwise the highest level present
    """
    return highest(f.risk_level for f in findings)


def count_by_level(findings: Iterable[Finding]) -> Dict[str, int]:
    """Count findings per risk level, most severe first."""
    counts = {level.value: 0 for level in reversed(list(RiskLevel))}
    for f in findings:
        counts[f.risk_level.value] += 1
    return counts
