"""
Triage service: the single owner of report and alert state for a process.

This module provides the TriageService class that integrates:
- Report validation and the append-only report store
- Risk scoring through the oracle and deterministic tiering
- Alert candidate generation, deduplication and severity ordering
- SMS parsing and outbreak simulation
- Cancellation of in-flight oracle calls
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Type, Union

import structlog

from healthwatch.alerts.aggregator import AlertAggregator, MergeResult
from healthwatch.alerts.models import Alert, AlertStatus, Severity
from healthwatch.alerts.query import query_alerts
from healthwatch.config import TriageConfig, settings
from healthwatch.exceptions import (
    AssessmentFailed,
    ConfigurationError,
    GenerationFailed,
    HealthWatchException,
    OracleError,
    SmsParsingFailed,
    ValidationError
)
from healthwatch.ingestion.sms import sms_to_report_input
from healthwatch.ingestion.validation import InputType, ReportValidator
from healthwatch.metrics import (
    ACTIVE_ALERTS,
    ALERT_CANDIDATES_DROPPED,
    ALERTS_ADDED,
    CANCELLED_OPERATIONS,
    ORACLE_FAILURES,
    REPORTS_SUBMITTED
)
from healthwatch.oracle.base import AlertOracle, OutbreakSimulator, RiskOracle, SmsParserOracle
from healthwatch.oracle.schemas import SmsAnalysis
from healthwatch.recommendations.action_catalog import ActionCatalog
from healthwatch.reports.statistics import summarize_reports
from healthwatch.reports.store import Report, ReportInput, ReportStore
from healthwatch.risk.assessment import RiskScorerAdapter
from healthwatch.risk.models import RiskAssessment, RiskAssessmentRequest, normalize_language
from healthwatch.tasks import CancellationToken, TokenRegistry

logger = structlog.get_logger(__name__)


class TriageService:
    """
    Owning context for the report store and the alert set.

    Responsibilities:
    - Validate submissions before they reach the store
    - Call the oracle capabilities and convert their failures
    - Merge alert candidates exactly once each
    - Discard oracle results whose request was cancelled
    """

    def __init__(
        self,
        oracle: Optional[Any] = None,
        risk_oracle: Optional[RiskOracle] = None,
        alert_oracle: Optional[AlertOracle] = None,
        sms_parser: Optional[SmsParserOracle] = None,
        simulator: Optional[OutbreakSimulator] = None,
        report_store: Optional[ReportStore] = None,
        aggregator: Optional[AlertAggregator] = None,
        catalog: Optional[ActionCatalog] = None,
        config: Optional[TriageConfig] = None
    ):
        """
        Initialize TriageService.

        Args:
            oracle: Object implementing every oracle capability; used for any
                capability not given explicitly
            risk_oracle: RiskOracle for risk scoring
            alert_oracle: AlertOracle for alert candidates
            sms_parser: SmsParserOracle for SMS extraction
            simulator: OutbreakSimulator for synthetic reports
            report_store: Report store (creates an empty one if None)
            aggregator: Alert aggregator (creates an empty one if None)
            catalog: Action catalog for default recommendations
            config: Triage configuration (defaults to settings.triage)
        """
        self.config = config or settings.triage

        self.risk_oracle = risk_oracle or oracle
        self.alert_oracle = alert_oracle or oracle
        self.sms_parser = sms_parser or oracle
        self.simulator = simulator or oracle

        self.report_store = report_store or ReportStore()
        self.aggregator = aggregator or AlertAggregator()
        self.validator = ReportValidator(
            ph_safe_min=self.config.ph_safe_min,
            ph_safe_max=self.config.ph_safe_max,
            turbidity_limit=self.config.turbidity_limit_ntu
        )
        self.risk_scorer = (
            RiskScorerAdapter(
                self.risk_oracle,
                catalog=catalog,
                high_threshold=self.config.risk_threshold_high,
                medium_threshold=self.config.risk_threshold_medium
            )
            if self.risk_oracle is not None else None
        )
        self._tokens = TokenRegistry()

        logger.info(
            "TriageService initialized",
            risk_threshold_high=self.config.risk_threshold_high,
            risk_threshold_medium=self.config.risk_threshold_medium,
            alerts=len(self.aggregator),
            reports=len(self.report_store)
        )

    # Reports

    def list_reports(self) -> List[Report]:
        """Snapshot of all reports in insertion order."""
        return self.report_store.list_reports()

    def add_report(
        self,
        report_input: Union[ReportInput, Dict[str, Any]],
        source: str = "form"
    ) -> Report:
        """
        Validate and store a report.

        Args:
            report_input: ReportInput or a dictionary of report fields
            source: Submission channel, used for metrics (form, sms, simulation)

        Returns:
            The stored Report

        Raises:
            ValidationError: If the submission is malformed
        """
        data = self._report_data(report_input)
        result = self.validator.require_valid(data, InputType.REPORT.value)
        if result.warnings:
            logger.info(
                "Report accepted with warnings",
                village=data.get("village"),
                warnings=result.warnings
            )

        report = self.report_store.add_report(ReportInput.from_dict(data))
        REPORTS_SUBMITTED.labels(source=source).inc()
        return report

    @staticmethod
    def _report_data(report_input: Union[ReportInput, Dict[str, Any]]) -> Dict[str, Any]:
        if isinstance(report_input, ReportInput):
            return report_input.to_dict()
        if isinstance(report_input, dict):
            return dict(report_input)
        raise ValidationError(
            "Report must be a ReportInput or a dictionary",
            details={"type": type(report_input).__name__}
        )

    # Alerts

    def list_alerts(self) -> List[Alert]:
        """Snapshot of the alert set in severity order."""
        return self.aggregator.list_alerts()

    def query_alerts(
        self,
        search_term: Optional[str] = "",
        status_filters: Optional[Iterable] = None,
        severity_filters: Optional[Iterable] = None
    ) -> List[Alert]:
        """
        Filtered view of the alert set.

        Raises:
            ValidationError: If a filter value is not a known status or severity
        """
        try:
            statuses = [AlertStatus(s) for s in (status_filters or [])]
            severities = [Severity(s) for s in (severity_filters or [])]
        except ValueError as e:
            raise ValidationError(
                f"Invalid alert filter: {str(e)}",
                details={
                    "statuses": [s.value for s in AlertStatus],
                    "severities": [s.value for s in Severity]
                }
            ) from e
        return query_alerts(self.aggregator.list_alerts(), search_term, statuses, severities)

    def update_alert_status(self, alert_id: str, status: Union[AlertStatus, str]) -> Alert:
        """
        Store an operator status change.

        Raises:
            ValidationError: If the status is not Open, Investigating or Closed
            AlertNotFound: If no alert has this id
        """
        try:
            status = AlertStatus(status)
        except ValueError as e:
            raise ValidationError(
                f"Invalid alert status: {status}",
                details={"valid_statuses": [s.value for s in AlertStatus]}
            ) from e
        alert = self.aggregator.update_status(alert_id, status)
        self._update_active_gauge()
        return alert

    async def generate_alerts(self, token: Optional[CancellationToken] = None) -> MergeResult:
        """
        Ask the oracle for candidates over the current reports and merge them.

        Returns:
            MergeResult; zero additions is a normal outcome

        Raises:
            GenerationFailed: If the oracle fails or returns malformed candidates
            OperationCancelled: If the token was cancelled before the merge
        """
        oracle = self._require(self.alert_oracle, "alert oracle")
        reports = self.list_reports()

        candidates = await self._call_oracle(
            "generate_alerts",
            lambda: oracle.generate_alerts(reports),
            GenerationFailed,
            token
        )
        if candidates is None:
            raise GenerationFailed("Alert oracle returned no result")
        candidates = self._check_candidates(candidates)

        result = self.aggregator.merge(candidates, received_at=datetime.now(timezone.utc))
        for alert in result.added:
            ALERTS_ADDED.labels(severity=alert.severity.value).inc()
        if result.dropped:
            ALERT_CANDIDATES_DROPPED.inc(len(result.dropped))
        self._update_active_gauge()

        logger.info(
            "Alert generation completed",
            reports=len(reports),
            added=result.added_count,
            dropped=len(result.dropped),
            total=result.total
        )
        return result

    @staticmethod
    def _check_candidates(candidates: Iterable) -> List[Alert]:
        checked = []
        for candidate in candidates:
            if isinstance(candidate, Alert):
                checked.append(candidate)
                continue
            try:
                checked.append(Alert.from_dict(candidate))
            except (KeyError, TypeError, ValueError) as e:
                raise GenerationFailed(
                    f"Malformed alert candidate: {str(e)}",
                    details={"candidate": repr(candidate)[:200]}
                ) from e
        return checked

    def seed_demo_alerts(self) -> MergeResult:
        """Load the demo alert set."""
        result = self.aggregator.seed_alerts()
        self._update_active_gauge()
        return result

    # Risk

    async def assess_risk(
        self,
        request: Union[RiskAssessmentRequest, Dict[str, Any]],
        token: Optional[CancellationToken] = None
    ) -> RiskAssessment:
        """
        Score outbreak risk for a region.

        Args:
            request: RiskAssessmentRequest or a dictionary of its fields
            token: Optional cancellation token

        Raises:
            ValidationError: If the request is malformed (the oracle is not called)
            AssessmentFailed: If the oracle fails or its payload is unusable
            OperationCancelled: If the token was cancelled
        """
        if isinstance(request, dict):
            self.validator.require_valid(request, InputType.RISK_INPUT.value)
            data = dict(request)
            data.setdefault("language", self.config.default_language)
            request = RiskAssessmentRequest(**data)
        elif not isinstance(request, RiskAssessmentRequest):
            raise ValidationError(
                "Risk request must be a RiskAssessmentRequest or a dictionary",
                details={"type": type(request).__name__}
            )

        scorer = self._require(self.risk_scorer, "risk oracle")
        return await self._call_oracle(
            "assess_risk",
            lambda: scorer.assess(request),
            AssessmentFailed,
            token
        )

    async def assess_situation(
        self,
        description: str,
        language: Optional[str] = None,
        token: Optional[CancellationToken] = None
    ) -> RiskAssessment:
        """Quick risk assessment from one free-text description."""
        scorer = self._require(self.risk_scorer, "risk oracle")
        language = normalize_language(language or self.config.default_language)
        if not description or not description.strip():
            raise ValidationError(
                "Situation description is empty",
                details={"field": "description"}
            )
        return await self._call_oracle(
            "assess_situation",
            lambda: scorer.assess_situation(description, language),
            AssessmentFailed,
            token
        )

    # SMS

    async def analyze_sms(
        self,
        body: str,
        token: Optional[CancellationToken] = None
    ) -> SmsAnalysis:
        """
        Extract a structured report from an SMS without storing it.

        Raises:
            ValidationError: If the message is empty
            SmsParsingFailed: If the oracle cannot parse the message
            OperationCancelled: If the token was cancelled
        """
        if not body or not body.strip():
            raise ValidationError("SMS body is empty", details={"field": "body"})

        parser = self._require(self.sms_parser, "SMS parser")
        analysis = await self._call_oracle(
            "parse_sms",
            lambda: parser.parse_sms(body.strip()),
            SmsParsingFailed,
            token
        )
        if analysis is None:
            raise SmsParsingFailed("SMS parser returned no result")
        return analysis

    async def ingest_sms(
        self,
        body: str,
        token: Optional[CancellationToken] = None
    ) -> Report:
        """
        Parse an SMS and store the resulting report.

        Raises:
            ValidationError: If the message or the extracted report is invalid
            SmsParsingFailed: If the oracle cannot parse the message
            OperationCancelled: If the token was cancelled
        """
        analysis = await self.analyze_sms(body, token)
        report = self.add_report(sms_to_report_input(analysis), source="sms")
        logger.info("SMS report ingested", report_id=report.id, village=report.village)
        return report

    # Simulation

    async def simulate_outbreak(self, token: Optional[CancellationToken] = None) -> List[Report]:
        """
        Store a batch of synthetic outbreak reports.

        The whole batch is validated before any report is stored.

        Raises:
            GenerationFailed: If the oracle fails or any simulated report is invalid
            OperationCancelled: If the token was cancelled
        """
        simulator = self._require(self.simulator, "outbreak simulator")
        inputs = await self._call_oracle(
            "simulate_outbreak",
            simulator.simulate_outbreak,
            GenerationFailed,
            token
        )
        if not inputs:
            raise GenerationFailed("Outbreak simulation returned no reports")

        batch = [self._report_data(report_input) for report_input in inputs]
        errors = {}
        for index, data in enumerate(batch):
            result = self.validator.validate_report(data)
            if not result.is_valid:
                errors[index] = result.errors
        if errors:
            raise GenerationFailed(
                f"Simulation produced {len(errors)} invalid report(s)",
                details={"errors": errors}
            )

        reports = [self.add_report(data, source="simulation") for data in batch]
        logger.info(
            "Outbreak simulation stored",
            reports=len(reports),
            villages=sorted({r.village for r in reports})
        )
        return reports

    # Statistics

    def get_statistics(self) -> Dict[str, Any]:
        """
        Summary of reports and alerts.

        Returns:
            Dictionary with report statistics and alert counts
        """
        stats = summarize_reports(
            self.list_reports(),
            ph_safe_min=self.config.ph_safe_min,
            ph_safe_max=self.config.ph_safe_max,
            turbidity_limit=self.config.turbidity_limit_ntu
        )
        alerts = self.list_alerts()
        by_severity = Counter(a.severity.value for a in alerts)
        by_status = Counter(a.status.value for a in alerts)
        stats["alerts"] = {
            "total": len(alerts),
            "active": sum(1 for a in alerts if a.status != AlertStatus.CLOSED),
            "by_severity": {s.value: by_severity.get(s.value, 0) for s in Severity},
            "by_status": {s.value: by_status.get(s.value, 0) for s in AlertStatus},
        }
        stats["timestamp"] = datetime.now(timezone.utc).isoformat()
        return stats

    # Lifecycle

    def new_token(self, operation: str = "") -> CancellationToken:
        """
        Issue a cancellation token that shutdown() will cancel.

        The token is dropped from tracking once an operation using it
        finishes or it is cancelled. A token that is never used should be
        handed back with release_token().
        """
        return self._tokens.issue(operation)

    def release_token(self, token: CancellationToken) -> None:
        """Stop tracking a token without cancelling it."""
        self._tokens.release(token)

    @property
    def is_shut_down(self) -> bool:
        return self._tokens.closed

    def shutdown(self) -> int:
        """
        Cancel every outstanding oracle request.

        Results arriving afterwards are discarded; new oracle requests are
        refused with OperationCancelled. Reads keep working.

        Returns:
            Number of requests cancelled
        """
        cancelled = self._tokens.cancel_all("Service shut down")
        logger.info("TriageService shut down", cancelled_requests=cancelled)
        return cancelled

    # Internals

    @staticmethod
    def _require(capability, name: str):
        if capability is None:
            raise ConfigurationError(
                f"No {name} configured",
                details={"capability": name}
            )
        return capability

    async def _call_oracle(
        self,
        operation: str,
        call: Callable[[], Awaitable[Any]],
        error_cls: Type[OracleError],
        token: Optional[CancellationToken] = None
    ) -> Any:
        """
        Await one oracle call under a cancellation token.

        Failures are converted to error_cls. A result that arrives after the
        token was cancelled is discarded and OperationCancelled is raised.
        """
        if token is None:
            token = self._tokens.issue(operation)
        else:
            self._tokens.track(token)

        try:
            token.raise_if_cancelled(operation)

            try:
                result = await call()
            except error_cls:
                ORACLE_FAILURES.labels(operation=operation, error_type=error_cls.__name__).inc()
                raise
            except ValidationError:
                raise
            except HealthWatchException as e:
                ORACLE_FAILURES.labels(operation=operation, error_type=type(e).__name__).inc()
                raise error_cls(e.message, details=e.details) from e
            except Exception as e:
                ORACLE_FAILURES.labels(operation=operation, error_type=type(e).__name__).inc()
                logger.error(
                    "Unexpected oracle error",
                    operation=operation,
                    error=str(e),
                    error_type=type(e).__name__
                )
                raise error_cls(
                    f"{operation} failed: {str(e)}",
                    details={"operation": operation, "error_type": type(e).__name__}
                ) from e

            if token.cancelled:
                CANCELLED_OPERATIONS.labels(operation=operation).inc()
                logger.info(
                    "Discarding oracle result for cancelled request",
                    operation=operation,
                    token_id=token.id,
                    reason=token.reason
                )
                token.raise_if_cancelled(operation)

            return result
        finally:
            self._tokens.release(token)

    def _update_active_gauge(self) -> None:
        ACTIVE_ALERTS.set(
            sum(1 for a in self.aggregator.list_alerts() if a.status != AlertStatus.CLOSED)
        )
