"""Pydantic models for API request/response validation"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReportCreate(BaseModel):
    """Request model for report submission"""
    village: str = Field(..., description="Village or location label")
    symptoms: List[str] = Field(default_factory=list, description="Observed symptoms")
    ph: Optional[float] = Field(None, allow_inf_nan=False, description="Water pH, null when not measured")
    turbidity: Optional[float] = Field(None, allow_inf_nan=False, description="Turbidity in NTU, null when not measured")
    cases: int = Field(1, description="Number of affected individuals")
    reporter: str = Field("", description="Submitting worker or sensor")

    @field_validator('village', 'reporter')
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    class Config:
        json_schema_extra = {
            "example": {
                "village": "Jalsuraksha",
                "symptoms": ["diarrhea", "fever"],
                "ph": 6.1,
                "turbidity": 12.5,
                "cases": 4,
                "reporter": "ASHA Worker"
            }
        }


class ReportResponse(BaseModel):
    """A stored report"""
    id: str
    date: datetime
    village: str
    symptoms: List[str]
    ph: Optional[float] = None
    turbidity: Optional[float] = None
    cases: int
    reporter: str


class ReportListResponse(BaseModel):
    """Response model for report listing"""
    reports: List[ReportResponse]
    total: int


class SmsRequest(BaseModel):
    """Request model carrying an SMS body"""
    body: str = Field(..., description="Raw SMS text")

    class Config:
        json_schema_extra = {
            "example": {
                "body": "Pawanpur: 6 cases of diarrhea and vomiting, water pH 6.0, turbidity 15"
            }
        }


class WaterQualityResponse(BaseModel):
    ph: Optional[float] = None
    turbidity: Optional[float] = None


class SmsAnalysisResponse(BaseModel):
    """Structured content extracted from an SMS"""
    village: str
    symptoms: List[str]
    water_quality: WaterQualityResponse
    cases: Optional[int] = None
    reporter: Optional[str] = None


class SimulationResponse(BaseModel):
    """Reports stored by an outbreak simulation"""
    reports: List[ReportResponse]
    count: int


class AlertResponse(BaseModel):
    """An alert in the alert set"""
    id: str
    village: str
    severity: Literal["High", "Medium", "Low"]
    status: Literal["Open", "Investigating", "Closed"]
    reports: int
    time: str
    created_at: datetime


class AlertListResponse(BaseModel):
    """Filtered alert view in severity order"""
    alerts: List[AlertResponse]
    total: int


class AlertGenerationResponse(BaseModel):
    """Outcome of one alert generation run"""
    title: str = Field(..., description="Alerts Updated or No New Alerts")
    message: str
    added: int = Field(..., ge=0)
    dropped: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    new_alert_ids: List[str] = Field(default_factory=list)
    alerts: List[AlertResponse] = Field(default_factory=list)


class AlertStatusUpdate(BaseModel):
    """Request model for an operator status change"""
    status: str = Field(..., description="Open, Investigating or Closed")

    class Config:
        json_schema_extra = {"example": {"status": "Investigating"}}


class RiskAssessmentBody(BaseModel):
    """Request model for a full risk assessment"""
    region: str = Field(..., description="Region or village cluster")
    health_reports: str = Field(..., description="Summary of recent health reports")
    water_quality: str = Field(..., description="Summary of water quality data")
    seasonal_trends: str = Field(..., description="Seasonal and environmental factors")
    language: str = Field("en", description="Display language tag (en, as, bn, brx)")

    class Config:
        json_schema_extra = {
            "example": {
                "region": "Jalsuraksha block",
                "health_reports": "14 cases of severe diarrhea in 3 days, clustered in one ward",
                "water_quality": "E. coli detected in two tube wells, turbidity 18 NTU",
                "seasonal_trends": "Monsoon flooding last week",
                "language": "en"
            }
        }


class QuickRiskBody(BaseModel):
    """Request model for a quick risk assessment"""
    description: str = Field(..., description="Free-text description of the situation")
    language: str = Field("en", description="Display language tag (en, as, bn, brx)")


class RiskAssessmentResponse(BaseModel):
    """Risk score with its deterministic tier"""
    risk_score: int = Field(..., ge=0, le=100)
    summary: str
    recommendations: List[str]
    tier: Literal["High", "Medium", "Low"]
    color: Literal["red", "yellow", "green"]
    urgency: Literal["urgent", "targeted", "preventive"]
    language: str


class TokenRequest(BaseModel):
    """Request model for token issue"""
    user_id: str = Field(..., min_length=1, description="Dashboard user identifier")
    role: str = Field("field_worker", description="Dashboard role")
    issuer_secret: Optional[str] = Field(None, description="Shared issuing secret, when one is configured")


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in_minutes: int


class StatisticsResponse(BaseModel):
    """Report and alert statistics"""
    total_reports: int
    total_cases: int
    cases_by_village: Dict[str, int]
    symptom_counts: Dict[str, int]
    mean_ph: Optional[float] = None
    mean_turbidity: Optional[float] = None
    unsafe_water_reports: int
    alerts: Dict[str, Any]
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Error response model"""
    error: str = Field(
        ...,
        description="Error type"
    )
    message: str = Field(
        ...,
        description="Error message"
    )
    details: Optional[Dict] = Field(
        None,
        description="Additional error details"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="Error timestamp"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "error": "AssessmentFailed",
                "message": "Risk assessment failed: Oracle call timed out after 20.0s",
                "details": {"region": "Jalsuraksha block"},
                "timestamp": "2026-07-14T10:30:00Z"
            }
        }
