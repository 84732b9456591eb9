"""Secret detectors for the PDF secret inspector."""

from pdfsi.detectors.patterns import DEFAULT_RULES, LOCAL_CONFIDENCE, LocalPatternDetector, PatternRule
from pdfsi.detectors.remote import PromptSecurityClient, RemoteResult, map_category_to_risk, parse_response
from pdfsi.detectors.service import (
    DetectionReport,
    SecretDetector,
    calculate_risk_level,
    deduplicate,
    detect_secrets,
    get_detector,
)

__all__ = [
    "DEFAULT_RULES",
    "LOCAL_CONFIDENCE",
    "LocalPatternDetector",
    "PatternRule",
    "PromptSecurityClient",
    "RemoteResult",
    "map_category_to_risk",
    "parse_response",
    "DetectionReport",
    "SecretDetector",
    "calculate_risk_level",
    "deduplicate",
    "detect_secrets",
    "get_detector",
]
