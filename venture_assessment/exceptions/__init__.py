"""Custom exception classes for the venture assessment pipeline.

This package contains the exception hierarchy:
- BaseAssessmentError: Base exception for all pipeline errors
- ValidationError: Raised when provider data or state fails validation
- ProviderError: Base for remote provider failures
- TransportError: Raised on connection failures and non-success statuses
- ProviderTimeoutError: Raised when a provider deadline is exceeded
- RetryExhaustedError: Raised when all retry attempts have failed
- CancellationError: Raised when a cooperative cancellation is observed
- PipelineError: Raised when a pipeline run fails, carrying the phase key
- PipelineBusyError: Raised when a run is started while another is active
"""

from venture_assessment.exceptions.base import BaseAssessmentError
from venture_assessment.exceptions.cancellation_error import CancellationError
from venture_assessment.exceptions.pipeline_error import (PipelineBusyError,
                                                          PipelineError)
from venture_assessment.exceptions.provider_error import (ProviderError,
                                                          ProviderTimeoutError,
                                                          TransportError)
from venture_assessment.exceptions.retry_error import RetryExhaustedError
from venture_assessment.exceptions.validation_error import ValidationError

__all__ = [
    "BaseAssessmentError",
    "ValidationError",
    "ProviderError",
    "TransportError",
    "ProviderTimeoutError",
    "RetryExhaustedError",
    "CancellationError",
    "PipelineError",
    "PipelineBusyError",
]
