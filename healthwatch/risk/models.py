"""Risk assessment request and result types."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from healthwatch.exceptions import ValidationError
from healthwatch.recommendations.action_catalog import Urgency
from healthwatch.risk.tiers import RiskTier

# Display language tags the summary can be written in
SUPPORTED_LANGUAGES: Dict[str, str] = {
    "en": "English",
    "as": "Assamese",
    "bn": "Bengali",
    "brx": "Bodo",
}

_TEXT_FIELDS = ("region", "health_reports", "water_quality", "seasonal_trends")


def normalize_language(language: str) -> str:
    """
    Normalize a display language tag.

    Raises:
        ValidationError: If the tag is not supported
    """
    tag = (language or "").strip().lower()
    if tag not in SUPPORTED_LANGUAGES:
        raise ValidationError(
            f"Unsupported language: {language!r}",
            details={"field": "language", "supported": sorted(SUPPORTED_LANGUAGES)}
        )
    return tag


@dataclass(frozen=True)
class RiskAssessmentRequest:
    """
    Structured risk-factor summary for one region.

    All four text fields are required and stripped; construction raises
    ValidationError so a bad request never reaches the oracle.
    """
    region: str
    health_reports: str
    water_quality: str
    seasonal_trends: str
    language: str = "en"

    def __post_init__(self):
        missing = []
        for name in _TEXT_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                missing.append(name)
            else:
                object.__setattr__(self, name, value.strip())
        if missing:
            raise ValidationError(
                f"Required fields are empty: {', '.join(missing)}",
                details={"fields": missing}
            )
        object.__setattr__(self, "language", normalize_language(self.language))

    @property
    def language_name(self) -> str:
        return SUPPORTED_LANGUAGES[self.language]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "region": self.region,
            "health_reports": self.health_reports,
            "water_quality": self.water_quality,
            "seasonal_trends": self.seasonal_trends,
            "language": self.language,
        }


@dataclass
class RiskAssessment:
    """Oracle score enriched with its deterministic tier."""
    risk_score: int
    summary: str
    tier: RiskTier
    color: str
    urgency: Urgency
    recommendations: List[str] = field(default_factory=list)
    language: str = "en"

    def to_dict(self) -> Dict[str, Any]:
        """Convert assessment to dictionary."""
        return {
            "risk_score": self.risk_score,
            "summary": self.summary,
            "recommendations": list(self.recommendations),
            "tier": self.tier.value,
            "color": self.color,
            "urgency": self.urgency.value,
            "language": self.language,
        }
