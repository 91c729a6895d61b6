"""
Alert set aggregation and querying.
"""

from healthwatch.alerts.models import (
    Alert,
    AlertStatus,
    Severity,
    SEVERITY_RANK,
    DEMO_ALERTS,
    severity_rank
)
from healthwatch.alerts.aggregator import (
    AlertAggregator,
    MergeResult,
    merge_alerts,
    sort_by_severity,
    stamp_candidates
)
from healthwatch.alerts.query import AlertFilter, query_alerts

__all__ = [
    'Alert',
    'AlertStatus',
    'Severity',
    'SEVERITY_RANK',
    'DEMO_ALERTS',
    'severity_rank',
    'AlertAggregator',
    'MergeResult',
    'merge_alerts',
    'sort_by_severity',
    'stamp_candidates',
    'AlertFilter',
    'query_alerts'
]
