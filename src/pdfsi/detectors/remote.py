# SPDX-License-Identifier: MIT
"""
Remote secret classification via the Prompt Security protect API.

The client never raises: every failure (unconfigured, network, timeout,
non-2xx, unparseable body) comes back as a RemoteResult with ``ok`` False so
the caller can pick the local fallback explicitly.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import requests

from pdfsi.core.exceptions import DetectorUnavailable
from pdfsi.core.findings import Finding, RiskLevel, Source

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_CONFIDENCE = 0.95

# Where the prompt section may live, tried in order. The root-level variant
# is left over from an older API shape.
PROMPT_SHAPES: Tuple[Tuple[str, ...], ...] = (
    ("result", "prompt"),
    ("prompt",),
)


@dataclass(frozen=True)
class RemoteResult:
    """Outcome of one classification attempt."""

    findings: Tuple[Finding, ...] = ()
    error: Optional[DetectorUnavailable] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, findings: Sequence[Finding]) -> "RemoteResult":
        return cls(findings=tuple(findings))

    @classmethod
    def unavailable(cls, reason: str) -> "RemoteResult":
        return cls(error=DetectorUnavailable(reason))


def _dig(data: Any, path: Sequence[str]) -> Optional[Any]:
    """Follow ``path`` through nested mappings, None if any step is missing."""
    node = data
    for key in path:
        if not isinstance(node, Mapping) or key not in node:
            return None
        node = node[key]
    return node


def _prompt_section(payload: Any) -> Optional[Mapping[str, Any]]:
    for shape in PROMPT_SHAPES:
        section = _dig(payload, shape)
        if isinstance(section, Mapping):
            return section
    return None


def _confidence(prompt: Mapping[str, Any]) -> float:
    score = _dig(prompt, ("scores", "Secrets", "score"))
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return DEFAULT_CONFIDENCE
    if not math.isfinite(score):
        return DEFAULT_CONFIDENCE
    return float(score)


def map_category_to_risk(category: str, entity_type: str) -> RiskLevel:
    """Map a classifier category/entity pair to a risk level."""
    if category == "Access Tokens":
        if "AWS" in entity_type:
            return RiskLevel.CRITICAL
        return RiskLevel.HIGH

    if category == "Other":
        return RiskLevel.MEDIUM

    # unknown-but-present categories are still secrets
    return RiskLevel.HIGH


def parse_response(payload: Any) -> List[Finding]:
    """
    Normalize a classifier response into findings.

    Args:
        payload: Decoded JSON body

    Returns:
        One finding per entry under ``findings.Secrets``; empty when the
        expected structure is absent
    """
    prompt = _prompt_section(payload)
    if prompt is None:
        return []

    secrets = _dig(prompt, ("findings", "Secrets"))
    if not isinstance(secrets, list):
        return []

    action = _dig(payload, ("result", "action"))
    if action is None:
        action = prompt.get("action")
    blocked = action == "block"
    confidence = _confidence(prompt)

    findings = []
    for entry in secrets:
        if not isinstance(entry, Mapping):
            continue
        entity_type = str(entry.get("entity_type") or "Unknown")
        category = str(entry.get("category") or "Other")
        findings.append(
            Finding(
                type=entity_type,
                description=f"{entity_type} detected in {category}",
                value=str(entry.get("entity") or ""),
                location=0,  # API doesn't report offsets
                confidence=confidence,
                risk_level=RiskLevel.CRITICAL if blocked else map_category_to_risk(category, entity_type),
                source=Source.REMOTE,
            )
        )
    return findings


class PromptSecurityClient:
    """Thin client for the remote classification endpoint."""

    name = "remote"

    def __init__(
        self,
        api_url: Optional[str],
        app_id: Optional[str],
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_url = api_url or None
        self.app_id = app_id or None
        self.timeout = timeout
        self._session = session

    @property
    def configured(self) -> bool:
        return bool(self.api_url and self.app_id)

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "APP-ID": self.app_id or "",
        }

    def classify(self, text: str) -> RemoteResult:
        """Send ``text`` for classification once; no retry."""
        if not self.configured:
            return RemoteResult.unavailable("remote classifier not configured")

        post = self._session.post if self._session is not None else requests.post
        try:
            r = post(
                self.api_url,
                json={"prompt": text},
                headers=self._headers(),
                timeout=self.timeout,
            )
            r.raise_for_status()
            payload = r.json()
        except requests.Timeout:
            return RemoteResult.unavailable(f"timed out after {self.timeout}s")
        except requests.ConnectionError as e:
            return RemoteResult.unavailable(f"connection failed: {e.__class__.__name__}")
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            return RemoteResult.unavailable(f"HTTP {status}")
        except (requests.RequestException, ValueError) as e:
            return RemoteResult.unavailable(f"unusable response: {e.__class__.__name__}")

        findings = parse_response(payload)
        logger.debug("Remote classifier returned %d finding(s)", len(findings))
        return RemoteResult.success(findings)
