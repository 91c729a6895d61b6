"""Alert types and severity ranking."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class Severity(str, Enum):
    """Alert severity"""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class AlertStatus(str, Enum):
    """Alert lifecycle status"""
    OPEN = "Open"
    INVESTIGATING = "Investigating"
    CLOSED = "Closed"


# Triage priority, lower sorts first
SEVERITY_RANK: Dict[Severity, int] = {
    Severity.HIGH: 0,
    Severity.MEDIUM: 1,
    Severity.LOW: 2,
}


def severity_rank(severity: Severity) -> int:
    """Return the triage rank of a severity."""
    return SEVERITY_RANK[Severity(severity)]


@dataclass(frozen=True)
class Alert:
    """An outbreak alert, either a candidate or a member of the alert set."""
    id: str
    village: str
    severity: Severity
    status: AlertStatus = AlertStatus.OPEN
    reports: int = 0
    time: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        # Accept plain strings from oracle payloads and API bodies
        object.__setattr__(self, "severity", Severity(self.severity))
        object.__setattr__(self, "status", AlertStatus(self.status))

    def with_status(self, status: AlertStatus) -> "Alert":
        """Return a copy of the alert with a new status."""
        return replace(self, status=AlertStatus(status))

    def to_dict(self) -> Dict[str, Any]:
        """Convert alert to dictionary."""
        return {
            "id": self.id,
            "village": self.village,
            "severity": self.severity.value,
            "status": self.status.value,
            "reports": self.reports,
            "time": self.time,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], created_at: Optional[datetime] = None) -> "Alert":
        """Create alert from dictionary."""
        stamp = created_at
        if stamp is None and data.get("created_at"):
            stamp = datetime.fromisoformat(data["created_at"])
        return cls(
            id=data["id"],
            village=data["village"],
            severity=Severity(data["severity"]),
            status=AlertStatus(data.get("status", AlertStatus.OPEN.value)),
            reports=data.get("reports", 0),
            time=data.get("time", ""),
            created_at=stamp or datetime.now(timezone.utc),
        )


# Demo alert set shown on a fresh dashboard
DEMO_ALERTS = [
    {"id": "ALERT-001", "village": "Jalsuraksha", "severity": "High", "status": "Open", "reports": 12, "time": "5m ago"},
    {"id": "ALERT-002", "village": "Pawanpur", "severity": "Medium", "status": "Investigating", "reports": 7, "time": "45m ago"},
    {"id": "ALERT-003", "village": "Agnigiri", "severity": "High", "status": "Open", "reports": 15, "time": "1.2h ago"},
    {"id": "ALERT-004", "village": "Jalsuraksha", "severity": "Low", "status": "Closed", "reports": 5, "time": "3h ago"},
    {"id": "ALERT-005", "village": "Vidyutgram", "severity": "Medium", "status": "Investigating", "reports": 8, "time": "5h ago"},
]
