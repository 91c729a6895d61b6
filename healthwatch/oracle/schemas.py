"""Pydantic schemas for generative oracle responses.

Every oracle payload is parsed as JSON and validated against one of these
models before the core touches it. Field names are snake_case; the camelCase
spelling a model sometimes answers with is accepted as an alias.
"""

from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class OracleSchema(BaseModel):
    """Base for oracle payloads"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RiskScoreOutput(OracleSchema):
    """Risk score returned by the oracle"""
    risk_score: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        validation_alias=AliasChoices("risk_score", "riskScore"),
        description="Outbreak risk score between 0 and 100"
    )
    summary: str = Field(..., min_length=1, description="Rationale in the requested language")
    recommendations: List[str] = Field(default_factory=list)

    @field_validator('recommendations')
    @classmethod
    def drop_blank_recommendations(cls, v: List[str]) -> List[str]:
        return [r.strip() for r in v if r and r.strip()]


class AlertCandidateSchema(OracleSchema):
    """One alert proposed by the oracle"""
    id: str = Field(..., pattern=r"^ALERT-\S+$")
    village: str = Field(..., min_length=1)
    severity: Literal["High", "Medium", "Low"]
    status: Literal["Open", "Investigating", "Closed"] = "Open"
    reports: int = Field(default=0, ge=0)
    time: str = Field(default="just now")


class GenerateAlertsOutput(OracleSchema):
    """Alert candidates for a report snapshot"""
    alerts: List[AlertCandidateSchema] = Field(default_factory=list)


class WaterQualityReading(OracleSchema):
    """Water quality extracted from a message; None means not measured"""
    ph: Optional[float] = Field(default=None, ge=0.0, le=14.0, allow_inf_nan=False)
    turbidity: Optional[float] = Field(default=None, ge=0.0, allow_inf_nan=False)


class SmsAnalysis(OracleSchema):
    """Structured content of an SMS field report"""
    village: str = Field(..., min_length=1)
    symptoms: List[str] = Field(default_factory=list)
    water_quality: WaterQualityReading = Field(
        default_factory=WaterQualityReading,
        validation_alias=AliasChoices("water_quality", "waterQuality")
    )
    cases: Optional[int] = Field(default=None, ge=1)
    reporter: Optional[str] = None


class SimulatedReport(OracleSchema):
    """One synthetic field report"""
    village: str = Field(..., min_length=1)
    symptoms: List[str] = Field(default_factory=list)
    ph: Optional[float] = Field(default=None, ge=0.0, le=14.0, allow_inf_nan=False)
    turbidity: Optional[float] = Field(default=None, ge=0.0, allow_inf_nan=False)
    cases: int = Field(..., ge=1)
    reporter: str = Field(..., min_length=1)


class SimulateOutbreakOutput(OracleSchema):
    """A batch of synthetic reports for one simulated outbreak"""
    reports: List[SimulatedReport] = Field(..., min_length=1)
