"""
Append-only store of field health reports.

Reports are created by a submission (form, SMS or simulation), never mutated
and never deleted. Readers always receive a snapshot.
"""

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from healthwatch.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ReportInput:
    """Report fields supplied by the submitter."""
    village: str
    symptoms: List[str] = field(default_factory=list)
    ph: Optional[float] = None
    turbidity: Optional[float] = None
    cases: int = 1
    reporter: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert input to dictionary."""
        return {
            "village": self.village,
            "symptoms": list(self.symptoms),
            "ph": self.ph,
            "turbidity": self.turbidity,
            "cases": self.cases,
            "reporter": self.reporter,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReportInput":
        """Create input from dictionary."""
        return cls(
            village=data["village"],
            symptoms=list(data.get("symptoms") or []),
            ph=data.get("ph"),
            turbidity=data.get("turbidity"),
            cases=data.get("cases", 1),
            reporter=data.get("reporter", ""),
        )


@dataclass(frozen=True)
class Report:
    """A stored field report."""
    id: str
    date: datetime
    village: str
    symptoms: tuple
    ph: Optional[float]
    turbidity: Optional[float]
    cases: int
    reporter: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "village": self.village,
            "symptoms": list(self.symptoms),
            "ph": self.ph,
            "turbidity": self.turbidity,
            "cases": self.cases,
            "reporter": self.reporter,
        }


class ReportStore:
    """
    Holds the append-only sequence of reports for one process.

    Writes are last-write-wins under a lock; no other coordination is
    needed at field-entry rates.
    """

    def __init__(self):
        self._reports: List[Report] = []
        self._lock = threading.Lock()

    def add_report(self, report_input: ReportInput) -> Report:
        """
        Assign an id and timestamp to a report and append it.

        The caller validates the input first (see ReportValidator).

        Args:
            report_input: Submitted report fields

        Returns:
            The stored Report
        """
        report = Report(
            id=f"RPT-{uuid.uuid4().hex}",
            date=datetime.now(timezone.utc),
            village=report_input.village,
            symptoms=tuple(report_input.symptoms),
            ph=report_input.ph,
            turbidity=report_input.turbidity,
            cases=report_input.cases,
            reporter=report_input.reporter,
        )
        with self._lock:
            self._reports.append(report)

        logger.info(
            "Report stored",
            report_id=report.id,
            village=report.village,
            cases=report.cases
        )
        return report

    def list_reports(self) -> List[Report]:
        """Return a snapshot of all reports in insertion order."""
        with self._lock:
            return list(self._reports)

    def __len__(self) -> int:
        return len(self._reports)
