"""Cancellation error exception.

Raised at a suspension point (provider call, backoff sleep, phase boundary)
once a cooperative cancellation has been requested.
"""

from venture_assessment.exceptions.base import BaseAssessmentError


class CancellationError(BaseAssessmentError):
    """Raised when a cooperative cancellation is observed."""
    
    def __init__(
        self,
        message: str = "Analysis cancelled",
        context: dict | None = None,
    ) -> None:
        super().__init__(message, context=context)
