"""Filtered, read-only views over the alert set."""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from healthwatch.alerts.models import Alert, AlertStatus, Severity


@dataclass(frozen=True)
class AlertFilter:
    """
    Compound alert filter.

    An empty status or severity set means no filter on that field, not
    "match nothing". The three parts combine with AND.
    """
    search_term: str = ""
    statuses: frozenset = field(default_factory=frozenset)
    severities: frozenset = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        search_term: Optional[str] = None,
        statuses: Optional[Iterable] = None,
        severities: Optional[Iterable] = None
    ) -> "AlertFilter":
        """Normalize raw filter values (strings or enums) into a filter."""
        return cls(
            search_term=search_term or "",
            statuses=frozenset(AlertStatus(s) for s in (statuses or [])),
            severities=frozenset(Severity(s) for s in (severities or [])),
        )

    def matches(self, alert: Alert) -> bool:
        if self.search_term and self.search_term.lower() not in alert.village.lower():
            return False
        if self.statuses and alert.status not in self.statuses:
            return False
        if self.severities and alert.severity not in self.severities:
            return False
        return True


def query_alerts(
    alerts: List[Alert],
    search_term: Optional[str] = "",
    status_filters: Optional[Iterable] = None,
    severity_filters: Optional[Iterable] = None
) -> List[Alert]:
    """
    Filter alerts by village substring, status set and severity set.

    Order of the input is preserved; nothing is re-sorted or mutated.

    Args:
        alerts: Alert snapshot in severity order
        search_term: Case-insensitive village substring ("" matches all)
        status_filters: Allowed statuses (empty means any)
        severity_filters: Allowed severities (empty means any)

    Returns:
        Matching alerts
    """
    alert_filter = AlertFilter.build(search_term, status_filters, severity_filters)
    return [alert for alert in alerts if alert_filter.matches(alert)]
