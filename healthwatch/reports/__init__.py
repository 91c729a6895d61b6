"""
Field report storage and statistics.
"""

from healthwatch.reports.store import Report, ReportInput, ReportStore
from healthwatch.reports.statistics import reports_to_frame, summarize_reports

__all__ = [
    'Report',
    'ReportInput',
    'ReportStore',
    'reports_to_frame',
    'summarize_reports'
]
