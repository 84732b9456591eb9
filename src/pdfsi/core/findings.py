"""Finding data structures for the PDF secret inspector."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Tuple, Union


class RiskLevel(Enum):
    """Ordered severity scale: NONE < LOW < MEDIUM < HIGH < CRITICAL."""

    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _RISK_ORDER.index(self)

    @classmethod
    def from_value(cls, value: Union[str, "RiskLevel"]) -> "RiskLevel":
        """Parse a risk level name, ignoring case."""
        if isinstance(value, RiskLevel):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown risk level: {value!r}") from None

    def __lt__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RISK_ORDER = (
    RiskLevel.NONE,
    RiskLevel.LOW,
    RiskLevel.MEDIUM,
    RiskLevel.HIGH,
    RiskLevel.CRITICAL,
)


class Source(Enum):
    """Which detection path produced a finding."""

    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class Finding:
    """A single detected secret occurrence."""

    type: str  # secret category, e.g. "AWS Access Key"
    description: str
    value: str  # raw match until masked by core.redaction
    location: int  # zero-based offset of first occurrence, 0 when unknown
    confidence: float
    risk_level: RiskLevel
    source: Source

    def __post_init__(self):
        # frozen, so normalise through object.__setattr__
        object.__setattr__(self, "confidence", min(1.0, max(0.0, float(self.confidence))))
        object.__setattr__(self, "risk_level", RiskLevel.from_value(self.risk_level))
        if not isinstance(self.source, Source):
            object.__setattr__(self, "source", Source(self.source))

    @property
    def dedup_key(self) -> Tuple[str, int]:
        return (self.type, self.location)

    def to_dict(self) -> Dict[str, Any]:
        """Convert Finding to the JSON shape returned by the service."""
        return {
            "type": self.type,
            "description": self.description,
            "value": self.value,
            "location": self.location,
            "confidence": self.confidence,
            "riskLevel": self.risk_level.value,
            "source": self.source.value,
        }
