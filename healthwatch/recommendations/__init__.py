"""
Public health response recommendations.
"""

from healthwatch.recommendations.action_catalog import (
    ActionCatalog,
    ActionType,
    ResponseAction,
    Urgency
)

__all__ = [
    'ActionCatalog',
    'ActionType',
    'ResponseAction',
    'Urgency'
]
