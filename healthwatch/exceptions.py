"""Base exception classes for HealthWatch error handling"""


class HealthWatchException(Exception):
    """Base exception for all HealthWatch errors"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(HealthWatchException):
    """Raised when report or risk input fails validation"""
    pass


class OracleError(HealthWatchException):
    """Base class for failures at the generative oracle boundary"""
    pass


class OracleUnavailable(OracleError):
    """Raised when the oracle call fails, times out or returns nothing"""
    pass


class AssessmentFailed(OracleError):
    """Raised when a risk assessment cannot be produced"""
    pass


class GenerationFailed(OracleError):
    """Raised when alert candidates or simulated reports cannot be produced"""
    pass


class SmsParsingFailed(OracleError):
    """Raised when an SMS report cannot be parsed"""
    pass


class AlertNotFound(HealthWatchException):
    """Raised when an alert id is not in the alert set"""
    pass


class OperationCancelled(HealthWatchException):
    """Raised when a result arrives after its request was cancelled"""
    pass


class AuthenticationError(HealthWatchException):
    """Raised when authentication fails"""
    pass


class ConfigurationError(HealthWatchException):
    """Raised when configuration is invalid or missing"""
    pass
