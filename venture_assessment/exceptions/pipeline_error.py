"""Pipeline error exceptions.

PipelineError is the single failure type surfaced by a pipeline run. It
carries the key of the phase that failed and the underlying cause, and
offers a short user-facing message that hides transport detail.
"""

from venture_assessment.exceptions.base import BaseAssessmentError
from venture_assessment.exceptions.cancellation_error import CancellationError
from venture_assessment.exceptions.provider_error import (ProviderError,
                                                          ProviderTimeoutError)
from venture_assessment.exceptions.retry_error import RetryExhaustedError
from venture_assessment.exceptions.validation_error import ValidationError

_PHASE_LABELS = {
    "company": "Company analysis",
    "competitive": "Competitive analysis",
    "market": "Market analysis",
}


class PipelineError(BaseAssessmentError):
    """Raised when a pipeline run ends in error or is cancelled.
    
    Attributes:
        phase_key: Key of the failing phase, or None for run-level failures
        cause: The underlying exception
    """
    
    def __init__(
        self,
        message: str,
        phase_key: str | None = None,
        cause: BaseException | None = None,
        context: dict | None = None,
    ) -> None:
        context = dict(context or {})
        if phase_key is not None:
            context.setdefault("phase_key", phase_key)
        super().__init__(message, context=context)
        self.phase_key = phase_key
        self.cause = cause
    
    @property
    def cancelled(self) -> bool:
        """Whether the run ended because of a cancellation request."""
        return isinstance(self.cause, CancellationError)
    
    @property
    def user_message(self) -> str:
        """Return a single human-readable sentence for presentation.
        
        The message names the phase but never includes raw transport
        detail such as response bodies or stack traces.
        """
        if self.phase_key is None and isinstance(self.cause, ValidationError):
            return f"Invalid input: {self.cause.message}"
        
        label = _PHASE_LABELS.get(self.phase_key or "", "The analysis")
        cause = self.cause
        if isinstance(cause, RetryExhaustedError):
            cause = cause.cause
        
        if isinstance(cause, CancellationError):
            reason = "was cancelled"
        elif isinstance(cause, ProviderTimeoutError):
            reason = "timed out waiting for the analysis provider"
        elif isinstance(cause, ValidationError):
            reason = "returned data that could not be validated"
        elif isinstance(cause, ProviderError):
            reason = "could not reach the analysis provider"
        elif cause is not None:
            reason = "failed unexpectedly"
        else:
            reason = "failed"
        return f"{label} {reason}. (phase: {self.phase_key or 'none'})"


class PipelineBusyError(PipelineError):
    """Raised when start() is called while a run is already active."""
    
    def __init__(self, message: str = "Analysis already in progress") -> None:
        super().__init__(message)
    
    @property
    def user_message(self) -> str:
        return "An analysis is already in progress."
