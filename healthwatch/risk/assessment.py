"""
Risk Scorer Adapter.

The numeric score comes from an injected RiskOracle. Everything after that
is deterministic and owned here: range checking, rounding, tier and color
mapping, and the recommendation bucket.
"""

import math
from numbers import Real
from typing import Optional

from healthwatch.config import settings
from healthwatch.exceptions import AssessmentFailed
from healthwatch.logging_config import get_logger
from healthwatch.metrics import ORACLE_FAILURES, RISK_ASSESSMENTS
from healthwatch.oracle.base import RiskOracle
from healthwatch.recommendations.action_catalog import ActionCatalog
from healthwatch.risk.models import RiskAssessment, RiskAssessmentRequest
from healthwatch.risk.tiers import classify_risk_tier, tier_color, tier_urgency

logger = get_logger(__name__)

QUICK_REGION = "Not specified"
QUICK_WATER_QUALITY = "Included in description"
QUICK_SEASONAL_TRENDS = "Not specified"


def round_score(score: float) -> int:
    """Round half up to the nearest integer."""
    return int(math.floor(score + 0.5))


class RiskScorerAdapter:
    """
    Produces a RiskAssessment from a risk-factor summary.

    Any oracle failure, missing or malformed payload, or score outside
    [0, 100] raises AssessmentFailed; no partial result is ever returned.
    """

    def __init__(
        self,
        oracle: RiskOracle,
        catalog: Optional[ActionCatalog] = None,
        high_threshold: Optional[float] = None,
        medium_threshold: Optional[float] = None
    ):
        self.oracle = oracle
        self.catalog = catalog or ActionCatalog()
        self.high_threshold = (
            high_threshold if high_threshold is not None
            else settings.triage.risk_threshold_high
        )
        self.medium_threshold = (
            medium_threshold if medium_threshold is not None
            else settings.triage.risk_threshold_medium
        )

    async def assess(self, request: RiskAssessmentRequest) -> RiskAssessment:
        """
        Score a request and enrich the result with its tier.

        Args:
            request: Validated risk-factor summary

        Returns:
            RiskAssessment

        Raises:
            AssessmentFailed: If the oracle fails or its payload is unusable
        """
        logger.info(
            "Risk assessment requested",
            region=request.region,
            language=request.language
        )

        try:
            output = await self.oracle.score_risk(request)
        except AssessmentFailed:
            ORACLE_FAILURES.labels(operation="score_risk", error_type="AssessmentFailed").inc()
            raise
        except Exception as e:
            ORACLE_FAILURES.labels(operation="score_risk", error_type=type(e).__name__).inc()
            logger.warning(
                "Risk oracle call failed",
                region=request.region,
                error=str(e),
                error_type=type(e).__name__
            )
            raise AssessmentFailed(
                f"Risk assessment failed: {str(e)}",
                details={"region": request.region, "error_type": type(e).__name__}
            ) from e

        assessment = self.build_assessment(output, request)

        RISK_ASSESSMENTS.labels(tier=assessment.tier.value).inc()
        logger.info(
            "Risk assessment completed",
            region=request.region,
            risk_score=assessment.risk_score,
            tier=assessment.tier.value
        )
        return assessment

    def build_assessment(self, output, request: RiskAssessmentRequest) -> RiskAssessment:
        """Check an oracle payload and map it to a RiskAssessment."""
        if output is None:
            raise AssessmentFailed(
                "Risk oracle returned no result",
                details={"region": request.region}
            )

        score = getattr(output, "risk_score", None)
        if isinstance(score, bool) or not isinstance(score, Real) or math.isnan(score):
            raise AssessmentFailed(
                "Risk oracle returned a non-numeric score",
                details={"region": request.region, "risk_score": repr(score)}
            )
        if not 0 <= score <= 100:
            raise AssessmentFailed(
                f"Risk score out of range: {score}",
                details={"region": request.region, "risk_score": score}
            )

        summary = getattr(output, "summary", None)
        if not isinstance(summary, str) or not summary.strip():
            raise AssessmentFailed(
                "Risk oracle returned no summary",
                details={"region": request.region}
            )

        risk_score = round_score(score)
        tier = classify_risk_tier(risk_score, self.high_threshold, self.medium_threshold)
        urgency = tier_urgency(tier)

        recommendations = list(getattr(output, "recommendations", None) or [])
        if not recommendations:
            recommendations = self.catalog.recommendations_for(urgency, request.region)

        return RiskAssessment(
            risk_score=risk_score,
            summary=summary.strip(),
            tier=tier,
            color=tier_color(tier),
            urgency=urgency,
            recommendations=recommendations,
            language=request.language
        )

    async def assess_situation(self, description: str, language: str = "en") -> RiskAssessment:
        """
        Quick assessment from a single free-text description.

        Raises:
            ValidationError: If the description is empty or the language unsupported
            AssessmentFailed: As for assess()
        """
        request = RiskAssessmentRequest(
            region=QUICK_REGION,
            health_reports=description,
            water_quality=QUICK_WATER_QUALITY,
            seasonal_trends=QUICK_SEASONAL_TRENDS,
            language=language
        )
        return await self.assess(request)
