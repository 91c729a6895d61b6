"""Capabilities the triage core consumes from a generative backend.

Each capability is a narrow async request/response contract so the
deterministic tiering and aggregation logic can run against any backend,
including test stubs.
"""

from typing import TYPE_CHECKING, List, Protocol, runtime_checkable

from healthwatch.oracle.schemas import RiskScoreOutput, SmsAnalysis

if TYPE_CHECKING:
    from healthwatch.alerts.models import Alert
    from healthwatch.reports.store import Report, ReportInput
    from healthwatch.risk.models import RiskAssessmentRequest


@runtime_checkable
class RiskOracle(Protocol):
    async def score_risk(self, request: "RiskAssessmentRequest") -> RiskScoreOutput:
        """Score outbreak risk for a structured risk-factor summary."""
        ...


@runtime_checkable
class AlertOracle(Protocol):
    async def generate_alerts(self, reports: List["Report"]) -> List["Alert"]:
        """Propose alert candidates for a report snapshot."""
        ...


@runtime_checkable
class SmsParserOracle(Protocol):
    async def parse_sms(self, body: str) -> SmsAnalysis:
        """Extract a structured report from an SMS body."""
        ...


@runtime_checkable
class OutbreakSimulator(Protocol):
    async def simulate_outbreak(self) -> List["ReportInput"]:
        """Produce a batch of synthetic, clustered high-risk reports."""
        ...
