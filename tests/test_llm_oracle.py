"""
Tests for the LiteLLM oracle client and adapter.

No network calls are made: litellm.acompletion is patched, and the adapter
tests use a fake client that returns canned payloads.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from healthwatch.alerts.models import AlertStatus, Severity
from healthwatch.config import OracleConfig
from healthwatch.exceptions import (
    AssessmentFailed,
    GenerationFailed,
    OracleError,
    OracleUnavailable,
    SmsParsingFailed
)
from healthwatch.oracle.base import AlertOracle, OutbreakSimulator, RiskOracle, SmsParserOracle
from healthwatch.oracle.llm_client import LLMClient, parse_json_payload
from healthwatch.oracle.llm_oracle import LLMOracle
from healthwatch.reports.store import ReportInput
from healthwatch.risk.models import RiskAssessmentRequest


def completion(content):
    """Object shaped like a LiteLLM ModelResponse"""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )


class FakeClient:
    """Returns a canned payload, or raises, for every call"""

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.prompts = []

    async def generate_json(self, system_prompt, user_prompt, operation="completion"):
        self.prompts.append((operation, user_prompt))
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def risk_request():
    return RiskAssessmentRequest(
        region="Agnigiri",
        health_reports="Nine diarrhea cases this week",
        water_quality="Turbidity 12 NTU",
        seasonal_trends="Early monsoon",
        language="as"
    )


class TestParseJsonPayload:
    def test_plain_object(self):
        assert parse_json_payload('{"risk_score": 40}') == {"risk_score": 40}

    def test_code_fence_stripped(self):
        assert parse_json_payload('```json\n{"alerts": []}\n```') == {"alerts": []}

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty(self, text):
        with pytest.raises(OracleError):
            parse_json_payload(text)

    def test_malformed(self):
        with pytest.raises(OracleError) as exc_info:
            parse_json_payload('{"risk_score": ')

        assert "excerpt" in exc_info.value.details

    def test_not_an_object(self):
        with pytest.raises(OracleError):
            parse_json_payload('[1, 2, 3]')


class TestLLMClient:
    """Test LLMClient against a patched LiteLLM"""

    @pytest.mark.asyncio
    async def test_generate_json(self):
        client = LLMClient(OracleConfig(model="gemini/test-model", api_key="k", timeout_seconds=5))
        mock = AsyncMock(return_value=completion('{"summary": "ok"}'))

        with patch("litellm.acompletion", mock):
            payload = await client.generate_json("system", "user", operation="score_risk")

        assert payload == {"summary": "ok"}
        kwargs = mock.call_args.kwargs
        assert kwargs["model"] == "gemini/test-model"
        assert kwargs["api_key"] == "k"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0] == {"role": "system", "content": "system"}

    @pytest.mark.asyncio
    async def test_api_key_omitted_when_unset(self):
        client = LLMClient(OracleConfig(api_key=None))
        mock = AsyncMock(return_value=completion('{}'))

        with patch("litellm.acompletion", mock):
            await client.generate_json("system", "user")

        assert "api_key" not in mock.call_args.kwargs

    @pytest.mark.asyncio
    async def test_timeout(self):
        client = LLMClient(OracleConfig(timeout_seconds=0.01))

        async def slow_completion(**kwargs):
            await asyncio.sleep(1)

        with patch("litellm.acompletion", slow_completion):
            with pytest.raises(OracleUnavailable) as exc_info:
                await client.generate_json("system", "user")

        assert "timed out" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_provider_error(self):
        client = LLMClient(OracleConfig())

        with patch("litellm.acompletion", AsyncMock(side_effect=RuntimeError("rate limited"))):
            with pytest.raises(OracleUnavailable) as exc_info:
                await client.generate_json("system", "user")

        assert exc_info.value.details["error_type"] == "RuntimeError"

    @pytest.mark.asyncio
    async def test_no_choices(self):
        client = LLMClient(OracleConfig())

        with patch("litellm.acompletion", AsyncMock(return_value=SimpleNamespace(choices=[]))):
            with pytest.raises(OracleUnavailable):
                await client.generate_json("system", "user")


class TestLLMOracle:
    """Test LLMOracle payload validation and error conversion"""

    def test_implements_every_capability(self):
        oracle = LLMOracle(FakeClient())

        assert isinstance(oracle, RiskOracle)
        assert isinstance(oracle, AlertOracle)
        assert isinstance(oracle, SmsParserOracle)
        assert isinstance(oracle, OutbreakSimulator)

    @pytest.mark.asyncio
    async def test_score_risk(self, risk_request):
        client = FakeClient({
            "riskScore": 64,
            "summary": "Rising diarrhea cases",
            "recommendations": ["Test wells", " "]
        })

        output = await LLMOracle(client).score_risk(risk_request)

        assert output.risk_score == 64
        assert output.recommendations == ["Test wells"]
        assert "Assamese" in client.prompts[0][1]
        assert "Agnigiri" in client.prompts[0][1]

    @pytest.mark.asyncio
    async def test_score_out_of_range(self, risk_request):
        client = FakeClient({"risk_score": 140, "summary": "x"})

        with pytest.raises(AssessmentFailed):
            await LLMOracle(client).score_risk(risk_request)

    @pytest.mark.asyncio
    async def test_score_transport_error(self, risk_request):
        client = FakeClient(error=OracleUnavailable("down"))

        with pytest.raises(AssessmentFailed) as exc_info:
            await LLMOracle(client).score_risk(risk_request)

        assert exc_info.value.message == "down"

    @pytest.mark.asyncio
    async def test_generate_alerts(self):
        client = FakeClient({"alerts": [
            {"id": "ALERT-101", "village": "Jalsuraksha", "severity": "High", "reports": 6, "time": "10m ago"},
            {"id": "ALERT-102", "village": "Pawanpur", "severity": "Low", "status": "Investigating"},
        ]})

        alerts = await LLMOracle(client).generate_alerts([])

        assert [a.id for a in alerts] == ["ALERT-101", "ALERT-102"]
        assert alerts[0].severity == Severity.HIGH
        assert alerts[0].status == AlertStatus.OPEN
        assert alerts[1].status == AlertStatus.INVESTIGATING
        assert alerts[1].time == "just now"

    @pytest.mark.asyncio
    async def test_empty_alert_list_is_valid(self):
        assert await LLMOracle(FakeClient({"alerts": []})).generate_alerts([]) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("candidate", [
        {"id": "101", "village": "Pawanpur", "severity": "High"},
        {"id": "ALERT-1", "village": "Pawanpur", "severity": "Critical"},
        {"id": "ALERT-1", "severity": "High"},
    ])
    async def test_malformed_candidate(self, candidate):
        with pytest.raises(GenerationFailed):
            await LLMOracle(FakeClient({"alerts": [candidate]})).generate_alerts([])

    @pytest.mark.asyncio
    async def test_parse_sms(self):
        client = FakeClient({
            "village": "Pawanpur",
            "symptoms": ["vomiting"],
            "waterQuality": {"ph": 6.0, "turbidity": None}
        })

        analysis = await LLMOracle(client).parse_sms("Pawanpur vomiting, ph 6")

        assert analysis.village == "Pawanpur"
        assert analysis.water_quality.ph == 6.0
        assert analysis.water_quality.turbidity is None
        assert analysis.cases is None

    @pytest.mark.asyncio
    async def test_parse_sms_without_village(self):
        with pytest.raises(SmsParsingFailed):
            await LLMOracle(FakeClient({"symptoms": ["fever"]})).parse_sms("fever")

    @pytest.mark.asyncio
    async def test_simulate_outbreak(self):
        client = FakeClient({"reports": [
            {"village": "Jalsuraksha", "symptoms": ["diarrhea"], "ph": 6.2,
             "turbidity": None, "cases": 4, "reporter": "ASHA Worker"},
        ]})

        reports = await LLMOracle(client).simulate_outbreak()

        assert reports == [ReportInput(
            village="Jalsuraksha", symptoms=["diarrhea"], ph=6.2,
            turbidity=None, cases=4, reporter="ASHA Worker"
        )]

    @pytest.mark.asyncio
    async def test_simulate_empty_batch(self):
        with pytest.raises(GenerationFailed):
            await LLMOracle(FakeClient({"reports": []})).simulate_outbreak()
