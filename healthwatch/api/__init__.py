"""API layer components for HealthWatch"""

from healthwatch.api.app import app
from healthwatch.api.auth import Authenticator, AuthResult, authenticator
from healthwatch.api.endpoints import get_triage_service, verify_authentication
from healthwatch.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    TimeoutMiddleware,
    status_code_for
)
from healthwatch.api.models import ErrorResponse

__all__ = [
    'app',
    'Authenticator',
    'AuthResult',
    'authenticator',
    'get_triage_service',
    'verify_authentication',
    'ErrorHandlingMiddleware',
    'RequestLoggingMiddleware',
    'TimeoutMiddleware',
    'status_code_for',
    'ErrorResponse'
]
