"""Deterministic mapping from a risk score to a display tier."""

from enum import Enum
from typing import Dict

from healthwatch.recommendations.action_catalog import Urgency


class RiskTier(str, Enum):
    """Risk tier for a 0-100 score"""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


TIER_COLORS: Dict[RiskTier, str] = {
    RiskTier.HIGH: "red",
    RiskTier.MEDIUM: "yellow",
    RiskTier.LOW: "green",
}

TIER_URGENCY: Dict[RiskTier, Urgency] = {
    RiskTier.HIGH: Urgency.URGENT,
    RiskTier.MEDIUM: Urgency.TARGETED,
    RiskTier.LOW: Urgency.PREVENTIVE,
}


def classify_risk_tier(
    risk_score: float,
    high_threshold: float = 75.0,
    medium_threshold: float = 50.0
) -> RiskTier:
    """
    Map a risk score to its tier.

    Both cut points are strict:
    - HIGH: score > 75
    - MEDIUM: 50 < score <= 75
    - LOW: score <= 50

    Args:
        risk_score: Risk score (0-100)
        high_threshold: Scores above this are HIGH
        medium_threshold: Scores above this (up to high_threshold) are MEDIUM

    Returns:
        RiskTier enum
    """
    if risk_score > high_threshold:
        return RiskTier.HIGH
    elif risk_score > medium_threshold:
        return RiskTier.MEDIUM
    else:
        return RiskTier.LOW


def tier_color(tier: RiskTier) -> str:
    return TIER_COLORS[RiskTier(tier)]


def tier_urgency(tier: RiskTier) -> Urgency:
    return TIER_URGENCY[RiskTier(tier)]
