"""Aggregate statistics over a report snapshot."""

from typing import Any, Dict, List, Optional

import pandas as pd

from healthwatch.reports.store import Report


REPORT_COLUMNS = ["id", "date", "village", "symptoms", "ph", "turbidity", "cases", "reporter"]


def reports_to_frame(reports: List[Report]) -> pd.DataFrame:
    """Build a DataFrame with one row per report."""
    if not reports:
        return pd.DataFrame(columns=REPORT_COLUMNS)
    df = pd.DataFrame([r.to_dict() for r in reports], columns=REPORT_COLUMNS)
    df["ph"] = pd.to_numeric(df["ph"], errors="coerce")
    df["turbidity"] = pd.to_numeric(df["turbidity"], errors="coerce")
    df["cases"] = pd.to_numeric(df["cases"], errors="coerce").fillna(0).astype(int)
    return df


def _mean_or_none(series: pd.Series) -> Optional[float]:
    measured = series.dropna()
    if measured.empty:
        return None
    return round(float(measured.mean()), 2)


def summarize_reports(
    reports: List[Report],
    ph_safe_min: float = 6.5,
    ph_safe_max: float = 8.5,
    turbidity_limit: float = 5.0
) -> Dict[str, Any]:
    """
    Summarize reports for the dashboard.

    Args:
        reports: Report snapshot
        ph_safe_min: Lowest safe pH
        ph_safe_max: Highest safe pH
        turbidity_limit: Turbidity (NTU) above which water is unsafe

    Returns:
        Dictionary with totals, per-village cases, symptom frequencies,
        mean water readings and the unsafe-water report count
    """
    df = reports_to_frame(reports)

    if df.empty:
        return {
            "total_reports": 0,
            "total_cases": 0,
            "cases_by_village": {},
            "symptom_counts": {},
            "mean_ph": None,
            "mean_turbidity": None,
            "unsafe_water_reports": 0,
        }

    cases_by_village = (
        df.groupby("village")["cases"].sum().sort_values(ascending=False, kind="stable")
    )

    symptoms = df["symptoms"].explode().dropna()
    symptom_counts = symptoms.str.strip().str.lower()
    symptom_counts = symptom_counts[symptom_counts != ""].value_counts()

    # Missing readings are NaN and never count as unsafe
    unsafe_ph = (df["ph"] < ph_safe_min) | (df["ph"] > ph_safe_max)
    unsafe_turbidity = df["turbidity"] > turbidity_limit

    return {
        "total_reports": int(len(df)),
        "total_cases": int(df["cases"].sum()),
        "cases_by_village": {k: int(v) for k, v in cases_by_village.items()},
        "symptom_counts": {k: int(v) for k, v in symptom_counts.items()},
        "mean_ph": _mean_or_none(df["ph"]),
        "mean_turbidity": _mean_or_none(df["turbidity"]),
        "unsafe_water_reports": int((unsafe_ph | unsafe_turbidity).sum()),
    }
