"""
LiteLLM-backed implementation of every oracle capability.

Each method sends one JSON-mode prompt, validates the payload against its
pydantic schema and converts any failure to the operation's error type.
"""

from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from healthwatch.alerts.models import Alert
from healthwatch.exceptions import (
    AssessmentFailed,
    GenerationFailed,
    OracleError,
    SmsParsingFailed
)
from healthwatch.logging_config import get_logger
from healthwatch.oracle import prompts
from healthwatch.oracle.llm_client import LLMClient
from healthwatch.oracle.schemas import (
    GenerateAlertsOutput,
    RiskScoreOutput,
    SimulateOutbreakOutput,
    SmsAnalysis
)
from healthwatch.reports.store import Report, ReportInput
from healthwatch.risk.models import RiskAssessmentRequest

logger = get_logger(__name__)

SIMULATION_VILLAGES = ["Jalsuraksha", "Pawanpur", "Agnigiri", "Vidyutgram", "Barpeta"]
SIMULATION_REPORTERS = ["ASHA Worker", "Clinic Staff", "Volunteer", "IoT Sensor"]


def _validation_details(error: PydanticValidationError) -> dict:
    return {
        "errors": [
            {"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]}
            for e in error.errors()
        ]
    }


class LLMOracle:
    """RiskOracle, AlertOracle, SmsParserOracle and OutbreakSimulator in one."""

    def __init__(self, client: Optional[LLMClient] = None):
        self.client = client or LLMClient()

    async def score_risk(self, request: RiskAssessmentRequest) -> RiskScoreOutput:
        system, user = prompts.risk_prompt(
            request.region,
            request.health_reports,
            request.water_quality,
            request.seasonal_trends,
            request.language_name
        )
        try:
            payload = await self.client.generate_json(system, user, operation="score_risk")
            return RiskScoreOutput.model_validate(payload)
        except OracleError as e:
            raise AssessmentFailed(e.message, details=e.details) from e
        except PydanticValidationError as e:
            raise AssessmentFailed(
                "Risk oracle payload failed schema validation",
                details=_validation_details(e)
            ) from e

    async def generate_alerts(self, reports: List[Report]) -> List[Alert]:
        system, user = prompts.alert_prompt(reports)
        try:
            payload = await self.client.generate_json(system, user, operation="generate_alerts")
            output = GenerateAlertsOutput.model_validate(payload)
        except OracleError as e:
            raise GenerationFailed(e.message, details=e.details) from e
        except PydanticValidationError as e:
            raise GenerationFailed(
                "Alert oracle payload failed schema validation",
                details=_validation_details(e)
            ) from e

        logger.info(
            "Alert candidates generated",
            reports=len(reports),
            candidates=len(output.alerts)
        )
        return [Alert(**candidate.model_dump()) for candidate in output.alerts]

    async def parse_sms(self, body: str) -> SmsAnalysis:
        system, user = prompts.sms_prompt(body)
        try:
            payload = await self.client.generate_json(system, user, operation="parse_sms")
            return SmsAnalysis.model_validate(payload)
        except OracleError as e:
            raise SmsParsingFailed(e.message, details=e.details) from e
        except PydanticValidationError as e:
            raise SmsParsingFailed(
                "SMS oracle payload failed schema validation",
                details=_validation_details(e)
            ) from e

    async def simulate_outbreak(self) -> List[ReportInput]:
        system, user = prompts.simulation_prompt(SIMULATION_VILLAGES, SIMULATION_REPORTERS)
        try:
            payload = await self.client.generate_json(system, user, operation="simulate_outbreak")
            output = SimulateOutbreakOutput.model_validate(payload)
        except OracleError as e:
            raise GenerationFailed(e.message, details=e.details) from e
        except PydanticValidationError as e:
            raise GenerationFailed(
                "Simulation payload failed schema validation",
                details=_validation_details(e)
            ) from e

        return [ReportInput(**report.model_dump()) for report in output.reports]
