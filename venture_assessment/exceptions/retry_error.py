"""Retry exhausted exception.

Raised by the retry wrapper once the configured number of attempts has been
used up. The final underlying failure is kept as ``cause`` and chained.
"""

from venture_assessment.exceptions.base import BaseAssessmentError


class RetryExhaustedError(BaseAssessmentError):
    """Raised when every retry attempt has failed.
    
    Attributes:
        cause: The exception raised by the last attempt
        attempts: Number of attempts that were made
    """
    
    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        attempts: int = 0,
        context: dict | None = None,
    ) -> None:
        context = dict(context or {})
        context.setdefault("attempts", attempts)
        if cause is not None:
            context.setdefault("cause", f"{type(cause).__name__}: {cause}")
        super().__init__(message, context=context)
        self.cause = cause
        self.attempts = attempts
