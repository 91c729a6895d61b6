"""Prompt builders for the generative oracle.

Each builder returns a ``(system_prompt, user_prompt)`` pair. The user prompt
always ends with the JSON shape expected back, which is validated against
``healthwatch.oracle.schemas``.
"""

import json
from typing import List, Tuple

from healthwatch.reports.store import Report

SYSTEM_PROMPT = (
    "You are a public health analyst supporting a community disease "
    "surveillance programme for water-borne illness. Respond with a single "
    "JSON object and nothing else."
)

RISK_RUBRIC = (
    "Weigh the evidence as follows: symptom severity and case count 40%, "
    "water quality 30%, environmental and seasonal factors 20%, geographic "
    "concentration of cases 10%."
)


def risk_prompt(
    region: str,
    health_reports: str,
    water_quality: str,
    seasonal_trends: str,
    language_name: str
) -> Tuple[str, str]:
    """Prompt for a 0-100 outbreak risk score."""
    user = "\n".join([
        "Estimate the risk of a water-borne disease outbreak for the region below.",
        RISK_RUBRIC,
        "The score must rise with the severity of the evidence. Mild, scattered "
        "cases with safe water score low; clustered severe cases with "
        "contaminated water score high.",
        "",
        f"Region: {region}",
        f"Health reports: {health_reports}",
        f"Water quality: {water_quality}",
        f"Seasonal trends: {seasonal_trends}",
        "",
        f"Write the summary and every recommendation in {language_name}.",
        'Return: {"risk_score": <integer 0-100>, "summary": "<text>", '
        '"recommendations": ["<action>", ...]}',
    ])
    return SYSTEM_PROMPT, user


def alert_prompt(reports: List[Report]) -> Tuple[str, str]:
    """Prompt for alert candidates over a report snapshot."""
    payload = json.dumps([r.to_dict() for r in reports], indent=2)
    user = "\n".join([
        "Review the field reports below and raise an alert for each village "
        "showing signs of an outbreak. Consider how many cases and reports "
        "concentrate in one village, how severe the symptoms are (fever and "
        "diarrhea weigh most), and whether water is unsafe (pH outside 6.5-8.5 "
        "or turbidity above 5 NTU).",
        "Only raise alerts for situations that need a response. An empty list "
        "is a valid answer.",
        "Alert ids use the form ALERT-<number>. New alerts have status Open. "
        "'reports' is the number of reports behind the alert and 'time' is a "
        "short relative time such as \"5m ago\".",
        "",
        f"Reports:\n{payload}",
        "",
        'Return: {"alerts": [{"id": "ALERT-...", "village": "...", '
        '"severity": "High|Medium|Low", "status": "Open", "reports": <int>, '
        '"time": "..."}]}',
    ])
    return SYSTEM_PROMPT, user


def sms_prompt(body: str) -> Tuple[str, str]:
    """Prompt for structured extraction from an SMS report."""
    user = "\n".join([
        "Extract a structured health report from the SMS below.",
        "Use null for any water quality reading the message does not give. "
        "Leave cases null when no count is stated. When the message carries a "
        "sensor id, set reporter to \"IoT Sensor\"; otherwise use the sender "
        "if named, else null.",
        "",
        f"SMS: {body}",
        "",
        'Return: {"village": "...", "symptoms": ["..."], '
        '"water_quality": {"ph": <number|null>, "turbidity": <number|null>}, '
        '"cases": <int|null>, "reporter": "<text|null>"}',
    ])
    return SYSTEM_PROMPT, user


def simulation_prompt(villages: List[str], reporters: List[str]) -> Tuple[str, str]:
    """Prompt for a synthetic outbreak report batch."""
    user = "\n".join([
        "Create between 8 and 12 realistic field reports that together point "
        "to a water-borne disease outbreak.",
        "Put roughly two thirds of them in one village so a hotspot is visible. "
        f"Pick villages from: {', '.join(villages)}.",
        "Most reports should list diarrhea, vomiting or fever.",
        "Several reports from the hotspot should show unsafe water: pH between "
        "5.5 and 6.5 or turbidity between 10 and 25 NTU. Other reports may "
        "leave readings null or within the normal range.",
        "Each report has between 2 and 15 cases. "
        f"Reporters are one of: {', '.join(reporters)}.",
        "",
        'Return: {"reports": [{"village": "...", "symptoms": ["..."], '
        '"ph": <number|null>, "turbidity": <number|null>, "cases": <int>, '
        '"reporter": "..."}]}',
    ])
    return SYSTEM_PROMPT, user
