"""Conversion of parsed SMS reports into report submissions."""

from healthwatch.oracle.schemas import SmsAnalysis
from healthwatch.reports.store import ReportInput

DEFAULT_SMS_REPORTER = "ASHA Worker"
DEFAULT_SMS_CASES = 1


def sms_to_report_input(analysis: SmsAnalysis) -> ReportInput:
    """
    Build a report submission from an SMS analysis.

    A message without a case count counts as one case; a message without a
    named sender is attributed to a field worker.
    """
    reporter = (analysis.reporter or "").strip() or DEFAULT_SMS_REPORTER
    return ReportInput(
        village=analysis.village.strip(),
        symptoms=[s.strip() for s in analysis.symptoms if s and s.strip()],
        ph=analysis.water_quality.ph,
        turbidity=analysis.water_quality.turbidity,
        cases=analysis.cases if analysis.cases is not None else DEFAULT_SMS_CASES,
        reporter=reporter
    )
