"""Services layer - recovery and validation of generated responses.

Thin service classes wire the pure recovery and validation functions to
application settings so callers share one configuration.
"""

from .recovery_service import (
    RecoveryOutcome,
    RecoveryService,
    RecoveryStatus,
    merge_response_sections,
)
from .validation_service import ResponseValidationService, ReviewVerdict

__all__ = [
    "RecoveryOutcome",
    "RecoveryService",
    "RecoveryStatus",
    "ResponseValidationService",
    "ReviewVerdict",
    "merge_response_sections",
]
