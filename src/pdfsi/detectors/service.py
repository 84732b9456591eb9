# SPDX-License-Identifier: MIT
"""
Secret detection service.

Tries the remote classifier first and falls back to the local regex rules
when it is unconfigured or fails. The two paths never both contribute to a
single call. Output is deduplicated on (type, location) and masked.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from pdfsi.core.findings import Finding, RiskLevel, Source
from pdfsi.core.redaction import redact_findings
from pdfsi.detectors.patterns import LocalPatternDetector
from pdfsi.detectors.remote import PromptSecurityClient, RemoteResult
from pdfsi.risk.score import aggregate_risk

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionReport:
    """Findings from one detect() call plus their aggregate risk."""

    findings: Tuple[Finding, ...] = field(default_factory=tuple)
    risk_level: RiskLevel = RiskLevel.NONE
    source: Source = Source.LOCAL

    @property
    def count(self) -> int:
        return len(self.findings)


def deduplicate(findings: Iterable[Finding]) -> List[Finding]:
    """Keep the first finding for each (type, location), preserving order."""
    seen: Set[Tuple[str, int]] = set()
    out = []
    for f in findings:
        if f.dedup_key in seen:
            continue
        seen.add(f.dedup_key)
        out.append(f)
    return out


class SecretDetector:
    """Remote-then-local secret detection pipeline.

    Holds no per-call state; a single instance may be shared across
    concurrent requests.
    """

    def __init__(
        self,
        remote: Optional[PromptSecurityClient] = None,
        local: Optional[LocalPatternDetector] = None,
    ) -> None:
        self.remote = remote if remote is not None else PromptSecurityClient(None, None)
        self.local = local if local is not None else LocalPatternDetector()

    @classmethod
    def from_settings(cls, settings) -> "SecretDetector":
        remote = PromptSecurityClient(
            settings.api_url,
            settings.app_id,
            timeout=settings.remote_timeout,
        )
        return cls(remote=remote)

    def _try_remote(self, text: str) -> RemoteResult:
        if not self.remote.configured:
            logger.debug("Remote classifier not configured, using local rules")
            return RemoteResult.unavailable("remote classifier not configured")
        try:
            return self.remote.classify(text)
        except Exception as e:
            return RemoteResult.unavailable(f"unexpected error: {e.__class__.__name__}")

    def _run(self, text: str) -> Tuple[List[Finding], Source]:
        result = self._try_remote(text)
        if result.ok:
            return list(result.findings), Source.REMOTE

        if self.remote.configured:
            logger.warning(
                "Remote classifier unavailable (%s), using local detection only",
                result.error.reason,
            )
        return self.local.detect(text), Source.LOCAL

    def detect(self, text: str) -> List[Finding]:
        """
        Detect secrets in ``text``.

        Args:
            text: Extracted, normalized document text

        Returns:
            Deduplicated findings with masked values; never raises
        """
        findings, _ = self._run(text or "")
        return redact_findings(deduplicate(findings))

    def aggregate_risk(self, findings: Iterable[Finding]) -> RiskLevel:
        return aggregate_risk(findings)

    def inspect(self, text: str) -> DetectionReport:
        findings, source = self._run(text or "")
        masked = redact_findings(deduplicate(findings))
        return DetectionReport(
            findings=tuple(masked),
            risk_level=aggregate_risk(masked),
            source=source,
        )


# Global detector instance
_detector = None


def get_detector() -> SecretDetector:
    """Get the process-wide detector built from the current settings."""
    global _detector
    if _detector is None:
        from pdfsi.config import load_settings

        _detector = SecretDetector.from_settings(load_settings())
    return _detector


def detect_secrets(text: str) -> List[Finding]:
    """Convenience function using the process-wide detector."""
    return get_detector().detect(text)


def calculate_risk_level(findings: Iterable[Finding]) -> RiskLevel:
    """Convenience alias for :func:`pdfsi.risk.score.aggregate_risk`."""
    return aggregate_risk(findings)
