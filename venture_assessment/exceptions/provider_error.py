"""Remote provider failure exceptions.

TransportError and ProviderTimeoutError are siblings under ProviderError so
a deadline can never be mistaken for a connection or status failure.
"""

from venture_assessment.exceptions.base import BaseAssessmentError

# Client errors that still signal a transient condition
RETRYABLE_CLIENT_STATUSES = frozenset({408, 429})


class ProviderError(BaseAssessmentError):
    """Base class for failures talking to a remote analysis provider.
    
    Attributes:
        provider: Phase key of the provider that failed
        retryable: Whether a retry may succeed
    """
    
    def __init__(
        self,
        message: str,
        provider: str | None = None,
        retryable: bool = True,
        context: dict | None = None,
    ) -> None:
        context = dict(context or {})
        if provider is not None:
            context.setdefault("provider", provider)
        super().__init__(message, context=context)
        self.provider = provider
        self.retryable = retryable


class TransportError(ProviderError):
    """Raised on connection failures, malformed bodies and non-2xx statuses.
    
    Attributes:
        status_code: HTTP status returned by the provider, if any
    """
    
    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status_code: int | None = None,
        context: dict | None = None,
    ) -> None:
        context = dict(context or {})
        if status_code is not None:
            context.setdefault("status_code", status_code)
        super().__init__(
            message,
            provider=provider,
            retryable=is_retryable_status(status_code),
            context=context,
        )
        self.status_code = status_code


class ProviderTimeoutError(ProviderError):
    """Raised when a provider call exceeds its deadline.
    
    Attributes:
        timeout_seconds: The deadline that was exceeded
    """
    
    def __init__(
        self,
        message: str,
        provider: str | None = None,
        timeout_seconds: float | None = None,
        context: dict | None = None,
    ) -> None:
        context = dict(context or {})
        if timeout_seconds is not None:
            context.setdefault("timeout_seconds", timeout_seconds)
        super().__init__(message, provider=provider, retryable=True, context=context)
        self.timeout_seconds = timeout_seconds


def is_retryable_status(status_code: int | None) -> bool:
    """Classify an HTTP status for retry.
    
    4xx responses are the caller's fault and are not retried, except 408
    (request timeout) and 429 (rate limited). Missing statuses (connection
    failures, malformed bodies) and 5xx responses are retryable.
    
    Args:
        status_code: HTTP status code, or None when no response was received
    
    Returns:
        True if a retry may succeed
    """
    if status_code is None:
        return True
    if 400 <= status_code < 500:
        return status_code in RETRYABLE_CLIENT_STATUSES
    return True
