"""
Generative oracle boundary: capability protocols and the LiteLLM backend.
"""

from healthwatch.oracle.base import (
    AlertOracle,
    OutbreakSimulator,
    RiskOracle,
    SmsParserOracle
)
from healthwatch.oracle.schemas import (
    AlertCandidateSchema,
    GenerateAlertsOutput,
    RiskScoreOutput,
    SimulatedReport,
    SimulateOutbreakOutput,
    SmsAnalysis,
    WaterQualityReading
)
from healthwatch.oracle.llm_client import LLMClient, parse_json_payload
from healthwatch.oracle.llm_oracle import LLMOracle

__all__ = [
    'AlertOracle',
    'OutbreakSimulator',
    'RiskOracle',
    'SmsParserOracle',
    'AlertCandidateSchema',
    'GenerateAlertsOutput',
    'RiskScoreOutput',
    'SimulatedReport',
    'SimulateOutbreakOutput',
    'SmsAnalysis',
    'WaterQualityReading',
    'LLMClient',
    'parse_json_payload',
    'LLMOracle'
]
