from __future__ import annotations
import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from pdfsi.core.findings import Finding, RiskLevel, Source

# Fixed score for every local match.
LOCAL_CONFIDENCE = 0.8


@dataclass(frozen=True)
class PatternRule:
    name: str
    type: str  # Finding.type
    description: str
    risk_level: RiskLevel
    pattern: re.Pattern


def _rule(name: str, kind: str, description: str, risk: RiskLevel, pattern: str, flags: int = 0) -> PatternRule:
    return PatternRule(
        name=name,
        type=kind,
        description=description,
        risk_level=risk,
        pattern=re.compile(pattern, flags),
    )


# Order matters: findings are reported rule by rule in this order.
DEFAULT_RULES: Tuple[PatternRule, ...] = (
    _rule(
        "aws_access_key",
        "AWS Access Key",
        "AWS Access Key ID detected",
        RiskLevel.HIGH,
        r"AKIA[0-9A-Z]{16}",
    ),
    # Loose on purpose: any 40-char base64-ish run. Expect false positives.
    _rule(
        "aws_secret_key",
        "AWS Secret Key",
        "Potential AWS Secret Access Key",
        RiskLevel.HIGH,
        r"[A-Za-z0-9/+=]{40}",
    ),
    _rule(
        "github_token",
        "GitHub Token",
        "GitHub Personal Access Token",
        RiskLevel.HIGH,
        r"ghp_[A-Za-z0-9]{36}",
    ),
    _rule(
        "jwt_token",
        "JWT Token",
        "JSON Web Token detected",
        RiskLevel.MEDIUM,
        r"eyJ[A-Za-z0-9_=-]+\.[A-Za-z0-9_=-]+\.?[A-Za-z0-9_.+/=-]*",
    ),
    _rule(
        "private_key",
        "Private Key",
        "Private key detected",
        RiskLevel.CRITICAL,
        r"-----BEGIN [A-Z ]+PRIVATE KEY-----.*?-----END [A-Z ]+PRIVATE KEY-----",
        re.DOTALL,
    ),
    _rule(
        "database_url",
        "Database URL",
        "Database connection string",
        RiskLevel.HIGH,
        r"(?:mongodb|mysql|postgresql|redis)://\S+",
    ),
    _rule(
        "api_key",
        "API Key",
        "API key detected",
        RiskLevel.MEDIUM,
        r"""[Aa][Pp][Ii]_?[Kk][Ee][Yy]['"]*\s*[:=]\s*['"][A-Za-z0-9_-]{20,}['"]""",
    ),
    _rule(
        "password",
        "Password",
        "Password detected",
        RiskLevel.MEDIUM,
        r"""[Pp][Aa][Ss][Ss][Ww][Oo][Rr][Dd]['"]*\s*[:=]\s*['"][^'"]{6,}['"]""",
    ),
)


class LocalPatternDetector:
    """Regex-based detector used when the remote classifier is unavailable.

    The rule table is read-only, so one instance can serve concurrent callers.
    """

    name = "local"

    def __init__(self, rules: Sequence[PatternRule] = DEFAULT_RULES) -> None:
        self._rules = tuple(rules)

    @property
    def rules(self) -> Tuple[PatternRule, ...]:
        return self._rules

    def detect(self, text: str) -> List[Finding]:
        if not text:
            return []
        findings = []
        for rule in self._rules:
            for m in rule.pattern.finditer(text):
                raw = m.group(0)
                findings.append(
                    Finding(
                        type=rule.type,
                        description=rule.description,
                        value=raw,
                        # first occurrence of this exact substring, not m.start()
                        location=text.find(raw),
                        confidence=LOCAL_CONFIDENCE,
                        risk_level=rule.risk_level,
                        source=Source.LOCAL,
                    )
                )
        return findings
