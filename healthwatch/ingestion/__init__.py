"""
Input validation and SMS ingestion.
"""

from healthwatch.ingestion.validation import InputType, ReportValidator, ValidationResult
from healthwatch.ingestion.sms import (
    DEFAULT_SMS_CASES,
    DEFAULT_SMS_REPORTER,
    sms_to_report_input
)

__all__ = [
    'InputType',
    'ReportValidator',
    'ValidationResult',
    'DEFAULT_SMS_CASES',
    'DEFAULT_SMS_REPORTER',
    'sms_to_report_input'
]
