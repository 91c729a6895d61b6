"""
Outbreak risk scoring and tiering.
"""

from healthwatch.risk.tiers import (
    RiskTier,
    TIER_COLORS,
    TIER_URGENCY,
    classify_risk_tier,
    tier_color,
    tier_urgency
)
from healthwatch.risk.models import (
    SUPPORTED_LANGUAGES,
    RiskAssessment,
    RiskAssessmentRequest,
    normalize_language
)
from healthwatch.risk.assessment import RiskScorerAdapter, round_score

__all__ = [
    'RiskTier',
    'TIER_COLORS',
    'TIER_URGENCY',
    'classify_risk_tier',
    'tier_color',
    'tier_urgency',
    'SUPPORTED_LANGUAGES',
    'RiskAssessment',
    'RiskAssessmentRequest',
    'normalize_language',
    'RiskScorerAdapter',
    'round_score'
]
