"""Prometheus metrics shared by the service layer and the API"""

from prometheus_client import Counter, Gauge, Histogram

REQUEST_COUNT = Counter(
    'healthwatch_http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

REQUEST_DURATION = Histogram(
    'healthwatch_http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

REPORTS_SUBMITTED = Counter(
    'healthwatch_reports_submitted_total',
    'Reports added to the report store',
    ['source']
)

ALERTS_ADDED = Counter(
    'healthwatch_alerts_added_total',
    'Alerts added to the alert set',
    ['severity']
)

ALERT_CANDIDATES_DROPPED = Counter(
    'healthwatch_alert_candidates_dropped_total',
    'Alert candidates dropped as duplicates'
)

ACTIVE_ALERTS = Gauge(
    'healthwatch_active_alerts',
    'Alerts not yet closed'
)

RISK_ASSESSMENTS = Counter(
    'healthwatch_risk_assessments_total',
    'Completed risk assessments',
    ['tier']
)

ORACLE_DURATION = Histogram(
    'healthwatch_oracle_call_duration_seconds',
    'Generative oracle call duration in seconds',
    ['operation']
)

ORACLE_FAILURES = Counter(
    'healthwatch_oracle_failures_total',
    'Failed generative oracle calls',
    ['operation', 'error_type']
)

CANCELLED_OPERATIONS = Counter(
    'healthwatch_cancelled_operations_total',
    'Oracle results discarded because the request was cancelled',
    ['operation']
)

ERROR_COUNT = Counter(
    'healthwatch_errors_total',
    'Total errors',
    ['error_type']
)
