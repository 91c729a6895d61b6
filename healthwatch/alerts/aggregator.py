"""
Alert aggregation: merges oracle-produced candidates into the alert set.

The alert set never holds two alerts with the same id and is kept sorted by
severity rank (High, Medium, Low), stable for equal severities.
"""

import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from healthwatch.alerts.models import DEMO_ALERTS, Alert, AlertStatus, severity_rank
from healthwatch.exceptions import AlertNotFound
from healthwatch.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class MergeResult:
    """Outcome of merging one candidate batch."""
    added: List[Alert] = field(default_factory=list)
    dropped: List[Alert] = field(default_factory=list)
    alerts: List[Alert] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.alerts)

    @property
    def added_count(self) -> int:
        return len(self.added)

    @property
    def title(self) -> str:
        return "Alerts Updated" if self.added else "No New Alerts"

    @property
    def message(self) -> str:
        """Caller-facing summary; zero additions read differently from N."""
        if not self.added:
            return "The analysis did not find any new high-risk situations requiring an alert."
        noun = "alert has" if len(self.added) == 1 else "alerts have"
        return f"{len(self.added)} new {noun} been created based on recent reports."

    def to_dict(self) -> dict:
        return {
            "added": self.added_count,
            "dropped": len(self.dropped),
            "total": self.total,
            "title": self.title,
            "message": self.message,
            "new_alert_ids": [a.id for a in self.added],
        }


def sort_by_severity(alerts: Iterable[Alert]) -> List[Alert]:
    """Stable sort ascending by severity rank."""
    return sorted(alerts, key=lambda a: severity_rank(a.severity))


def merge_alerts(
    existing: List[Alert],
    candidates: List[Alert]
) -> Tuple[List[Alert], List[Alert], List[Alert]]:
    """
    Merge candidates into an existing alert list.

    Existing alerts win on id collision; colliding candidates are dropped,
    not merged. A candidate repeating an id seen earlier in the same batch
    is dropped as well.

    Args:
        existing: Current alert set
        candidates: Newly produced alerts

    Returns:
        Tuple of (merged sorted alerts, added alerts, dropped candidates)
    """
    if not candidates:
        return list(existing), [], []

    seen_ids = {a.id for a in existing}
    added: List[Alert] = []
    dropped: List[Alert] = []

    for candidate in candidates:
        if candidate.id in seen_ids:
            dropped.append(candidate)
            continue
        seen_ids.add(candidate.id)
        added.append(candidate)

    if not added:
        return list(existing), [], dropped

    return sort_by_severity(list(existing) + added), added, dropped


def stamp_candidates(candidates: List[Alert], received_at: Optional[datetime] = None) -> List[Alert]:
    """Give every candidate the same receipt timestamp."""
    stamp = received_at or datetime.now(timezone.utc)
    return [replace(c, created_at=stamp) for c in candidates]


class AlertAggregator:
    """
    Owns the alert set for one process.

    Safe to call with overlapping candidate batches: each merge runs under a
    lock and the existing-wins rule resolves collisions between them.
    """

    def __init__(self, alerts: Optional[Iterable[Alert]] = None):
        self._alerts: List[Alert] = []
        self._lock = threading.Lock()
        if alerts:
            self.merge(list(alerts))

    def merge(
        self,
        candidates: List[Alert],
        received_at: Optional[datetime] = None
    ) -> MergeResult:
        """
        Merge a batch of candidates into the alert set.

        Args:
            candidates: Candidate alerts
            received_at: Receipt timestamp stamped on every candidate

        Returns:
            MergeResult with added and dropped alerts
        """
        if not candidates:
            return MergeResult(alerts=self.list_alerts())

        if received_at is not None:
            candidates = stamp_candidates(candidates, received_at)

        with self._lock:
            merged, added, dropped = merge_alerts(self._alerts, candidates)
            self._alerts = merged
            snapshot = list(merged)

        if dropped:
            logger.info(
                "Duplicate alert candidates dropped",
                dropped_ids=[a.id for a in dropped]
            )
        logger.info(
            "Alert candidates merged",
            candidates=len(candidates),
            added=len(added),
            total=len(snapshot)
        )
        return MergeResult(added=added, dropped=dropped, alerts=snapshot)

    def seed_alerts(self, records: Optional[Iterable[dict]] = None) -> MergeResult:
        """Load alert records (the demo set by default) into the alert set."""
        records = DEMO_ALERTS if records is None else records
        return self.merge([Alert.from_dict(r) for r in records])

    def list_alerts(self) -> List[Alert]:
        """Return a snapshot of the alert set in severity order."""
        with self._lock:
            return list(self._alerts)

    def get_alert(self, alert_id: str) -> Alert:
        """Look up an alert by id."""
        with self._lock:
            for alert in self._alerts:
                if alert.id == alert_id:
                    return alert
        raise AlertNotFound(
            f"Alert not found: {alert_id}",
            details={"alert_id": alert_id}
        )

    def update_status(self, alert_id: str, status: AlertStatus) -> Alert:
        """
        Store an operator status change.

        Any of the three statuses is accepted; transitions are not checked.
        Position in the set is unchanged since severity is unchanged.
        """
        status = AlertStatus(status)
        with self._lock:
            for index, alert in enumerate(self._alerts):
                if alert.id == alert_id:
                    updated = alert.with_status(status)
                    self._alerts[index] = updated
                    break
            else:
                raise AlertNotFound(
                    f"Alert not found: {alert_id}",
                    details={"alert_id": alert_id}
                )

        logger.info(
            "Alert status updated",
            alert_id=alert_id,
            previous_status=alert.status.value,
            status=status.value
        )
        return updated

    def __len__(self) -> int:
        return len(self._alerts)

