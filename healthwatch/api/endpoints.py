"""Core API endpoints for HealthWatch"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from healthwatch.alerts.models import Alert
from healthwatch.api.auth import DEVELOPMENT_IDENTITY, AuthResult, authenticator
from healthwatch.api.models import (
    AlertGenerationResponse,
    AlertListResponse,
    AlertResponse,
    AlertStatusUpdate,
    QuickRiskBody,
    ReportCreate,
    ReportListResponse,
    ReportResponse,
    RiskAssessmentBody,
    RiskAssessmentResponse,
    SimulationResponse,
    SmsAnalysisResponse,
    SmsRequest,
    StatisticsResponse,
    TokenRequest,
    TokenResponse
)
from healthwatch.config import settings
from healthwatch.exceptions import AuthenticationError
from healthwatch.integration import get_integration
from healthwatch.reports.store import Report
from healthwatch.triage_service import TriageService

logger = logging.getLogger(__name__)

router = APIRouter()

bearer_scheme = HTTPBearer(auto_error=False)


async def verify_authentication(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> AuthResult:
    """
    Gate requests on a valid bearer token.

    With security.require_auth off (development), requests without a valid
    token run as the development identity.
    """
    if credentials is not None:
        auth_result = authenticator.verify_token(credentials.credentials)
        if auth_result.authenticated:
            return auth_result
        error = auth_result.error
    else:
        error = "Missing bearer token"

    if settings.security.require_auth:
        raise AuthenticationError(error, details={"scheme": "Bearer"})

    logger.debug(f"Authentication skipped in development mode: {error}")
    return AuthResult(authenticated=True, user_id=DEVELOPMENT_IDENTITY, role="admin")


def get_triage_service() -> TriageService:
    """Dependency returning the process-wide triage service."""
    return get_integration().get_triage_service()


def _report_response(report: Report) -> ReportResponse:
    return ReportResponse(**report.to_dict())


def _alert_response(alert: Alert) -> AlertResponse:
    return AlertResponse(**alert.to_dict())


@router.post("/auth/token", response_model=TokenResponse, tags=["Authentication"])
async def generate_token(body: TokenRequest):
    """Issue a bearer token for a dashboard user."""
    authenticator.authorize_issuance(body.issuer_secret, settings.security.require_auth)
    token = authenticator.generate_token(body.user_id, role=body.role)
    return TokenResponse(
        access_token=token,
        expires_in_minutes=authenticator.expiry_minutes
    )


@router.post("/auth/revoke", tags=["Authentication"])
async def revoke_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
):
    """Log out: the presented token is rejected from now on."""
    if credentials is None:
        raise AuthenticationError("Missing bearer token", details={"scheme": "Bearer"})

    auth_result = authenticator.verify_token(credentials.credentials)
    if not auth_result.authenticated:
        raise AuthenticationError(auth_result.error, details={"scheme": "Bearer"})

    authenticator.revoke_token(credentials.credentials)
    logger.info("Token revoked", extra={"user_id": auth_result.user_id})
    return {"revoked": True, "user_id": auth_result.user_id}


@router.get("/reports", response_model=ReportListResponse, tags=["Reports"])
async def list_reports(
    auth: AuthResult = Depends(verify_authentication),
    service: TriageService = Depends(get_triage_service)
):
    """All reports in submission order."""
    reports = service.list_reports()
    return ReportListResponse(
        reports=[_report_response(r) for r in reports],
        total=len(reports)
    )


@router.post(
    "/reports",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Reports"]
)
async def submit_report(
    body: ReportCreate,
    auth: AuthResult = Depends(verify_authentication),
    service: TriageService = Depends(get_triage_service)
):
    """Submit a field report."""
    report = service.add_report(body.model_dump(), source="form")
    logger.info(
        "Report submitted",
        extra={"report_id": report.id, "village": report.village, "user_id": auth.user_id}
    )
    return _report_response(report)


@router.post(
    "/reports/sms",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Reports"]
)
async def ingest_sms_report(
    body: SmsRequest,
    auth: AuthResult = Depends(verify_authentication),
    service: TriageService = Depends(get_triage_service)
):
    """Parse an SMS report and store it."""
    report = await service.ingest_sms(body.body)
    return _report_response(report)


@router.post("/sms/analyze", response_model=SmsAnalysisResponse, tags=["Reports"])
async def analyze_sms(
    body: SmsRequest,
    auth: AuthResult = Depends(verify_authentication),
    service: TriageService = Depends(get_triage_service)
):
    """Parse an SMS report without storing it."""
    analysis = await service.analyze_sms(body.body)
    return SmsAnalysisResponse(**analysis.model_dump())


@router.post(
    "/reports/simulate",
    response_model=SimulationResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Reports"]
)
async def simulate_outbreak(
    auth: AuthResult = Depends(verify_authentication),
    service: TriageService = Depends(get_triage_service)
):
    """Store a synthetic outbreak report batch."""
    reports = await service.simulate_outbreak()
    return SimulationResponse(
        reports=[_report_response(r) for r in reports],
        count=len(reports)
    )


@router.get("/alerts", response_model=AlertListResponse, tags=["Alerts"])
async def list_alerts(
    search: str = Query("", description="Case-insensitive village substring"),
    status_filter: List[str] = Query([], alias="status", description="Allowed statuses"),
    severity: List[str] = Query([], description="Allowed severities"),
    auth: AuthResult = Depends(verify_authentication),
    service: TriageService = Depends(get_triage_service)
):
    """Alerts in severity order, filtered by village, status and severity."""
    alerts = service.query_alerts(search, status_filter, severity)
    return AlertListResponse(
        alerts=[_alert_response(a) for a in alerts],
        total=len(alerts)
    )


@router.post("/alerts/generate", response_model=AlertGenerationResponse, tags=["Alerts"])
async def generate_alerts(
    auth: AuthResult = Depends(verify_authentication),
    service: TriageService = Depends(get_triage_service)
):
    """Generate alert candidates from current reports and merge them."""
    result = await service.generate_alerts()
    summary = result.to_dict()
    return AlertGenerationResponse(
        title=summary["title"],
        message=summary["message"],
        added=summary["added"],
        dropped=summary["dropped"],
        total=summary["total"],
        new_alert_ids=summary["new_alert_ids"],
        alerts=[_alert_response(a) for a in result.alerts]
    )


@router.patch("/alerts/{alert_id}/status", response_model=AlertResponse, tags=["Alerts"])
async def update_alert_status(
    alert_id: str,
    body: AlertStatusUpdate,
    auth: AuthResult = Depends(verify_authentication),
    service: TriageService = Depends(get_triage_service)
):
    """Record an operator status change."""
    alert = service.update_alert_status(alert_id, body.status)
    logger.info(
        "Alert status changed",
        extra={"alert_id": alert_id, "status": alert.status.value, "user_id": auth.user_id}
    )
    return _alert_response(alert)


@router.post("/risk/assess", response_model=RiskAssessmentResponse, tags=["Risk"])
async def assess_risk(
    body: RiskAssessmentBody,
    auth: AuthResult = Depends(verify_authentication),
    service: TriageService = Depends(get_triage_service)
):
    """Score outbreak risk for a region."""
    assessment = await service.assess_risk(body.model_dump())
    return RiskAssessmentResponse(**assessment.to_dict())


@router.post("/risk/quick", response_model=RiskAssessmentResponse, tags=["Risk"])
async def quick_risk(
    body: QuickRiskBody,
    auth: AuthResult = Depends(verify_authentication),
    service: TriageService = Depends(get_triage_service)
):
    """Score outbreak risk from a single free-text description."""
    assessment = await service.assess_situation(body.description, body.language)
    return RiskAssessmentResponse(**assessment.to_dict())


@router.get("/statistics", response_model=StatisticsResponse, tags=["Statistics"])
async def get_statistics(
    auth: AuthResult = Depends(verify_authentication),
    service: TriageService = Depends(get_triage_service)
):
    """Report and alert statistics."""
    return StatisticsResponse(**service.get_statistics())
