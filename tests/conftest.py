"""Shared fixtures: deterministic oracle stubs and a wired triage service."""

import asyncio
from typing import List, Optional

import pytest

from healthwatch.alerts.models import Alert
from healthwatch.config import TriageConfig
from healthwatch.oracle.schemas import RiskScoreOutput, SmsAnalysis, WaterQualityReading
from healthwatch.reports.store import ReportInput
from healthwatch.triage_service import TriageService

# Phrases that push the stub risk score up
SEVERITY_MARKERS = ["e. coli", "severe", "diarrhea", "cluster", "flood", "cholera"]


def proportional_score(text: str) -> int:
    """Score that rises with the number of severity markers in the text."""
    text = text.lower()
    matches = sum(1 for marker in SEVERITY_MARKERS if marker in text)
    return min(100, 15 + 15 * matches)


class StubOracle:
    """
    Deterministic stand-in for every oracle capability.

    Records each call. When ``gate`` is set, every call waits on it so a
    test can cancel a request while it is in flight.
    """

    def __init__(
        self,
        risk_score: Optional[float] = None,
        recommendations: Optional[List[str]] = None,
        alerts: Optional[List[Alert]] = None,
        sms: Optional[SmsAnalysis] = None,
        simulated: Optional[List[ReportInput]] = None,
        fail_with: Optional[Exception] = None,
        gate: Optional[asyncio.Event] = None
    ):
        self.risk_score = risk_score
        self.recommendations = recommendations if recommendations is not None else ["Monitor"]
        self.alerts = alerts or []
        self.sms = sms
        self.simulated = simulated or []
        self.fail_with = fail_with
        self.gate = gate
        self.calls = []

    async def _enter(self, name, argument=None):
        self.calls.append((name, argument))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with

    async def score_risk(self, request):
        await self._enter("score_risk", request)
        if self.risk_score is not None:
            score = self.risk_score
        else:
            score = proportional_score(" ".join([
                request.health_reports,
                request.water_quality,
                request.seasonal_trends
            ]))
        return RiskScoreOutput(
            risk_score=score,
            summary=f"Assessment for {request.region}",
            recommendations=list(self.recommendations)
        )

    async def generate_alerts(self, reports):
        await self._enter("generate_alerts", list(reports))
        return list(self.alerts)

    async def parse_sms(self, body):
        await self._enter("parse_sms", body)
        return self.sms

    async def simulate_outbreak(self):
        await self._enter("simulate_outbreak")
        return list(self.simulated)


@pytest.fixture
def triage_config():
    """Triage configuration with the default thresholds."""
    return TriageConfig()


@pytest.fixture
def stub_oracle():
    """Oracle stub with proportional risk scores and no alerts."""
    return StubOracle()


@pytest.fixture
def service(stub_oracle, triage_config):
    """TriageService backed by the stub oracle."""
    return TriageService(oracle=stub_oracle, config=triage_config)


@pytest.fixture
def sample_report_input():
    """A well-formed field report."""
    return ReportInput(
        village="Jalsuraksha",
        symptoms=["diarrhea", "fever"],
        ph=6.1,
        turbidity=12.0,
        cases=4,
        reporter="ASHA Worker"
    )


@pytest.fixture
def sample_sms_analysis():
    """Parsed SMS without a case count or reporter."""
    return SmsAnalysis(
        village="Pawanpur",
        symptoms=["vomiting", "diarrhea"],
        water_quality=WaterQualityReading(ph=6.0, turbidity=15.0)
    )


@pytest.fixture
def simulated_reports():
    """Eight clustered outbreak reports."""
    return [
        ReportInput(
            village="Jalsuraksha" if i < 6 else "Agnigiri",
            symptoms=["diarrhea", "vomiting", "fever"],
            ph=6.0 if i % 2 == 0 else None,
            turbidity=18.0 if i % 3 == 0 else None,
            cases=2 + i,
            reporter="Clinic Staff"
        )
        for i in range(8)
    ]
