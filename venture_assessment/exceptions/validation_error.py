"""Validation error exception.

Raised when provider data is missing mandatory fields or violates a
documented range, and when internal state would break an invariant.
Validators themselves return ValidationResult objects; this exception is
raised at the client and pipeline boundaries.
"""

from venture_assessment.exceptions.base import BaseAssessmentError


class ValidationError(BaseAssessmentError):
    """Raised when validation fails.
    
    A ValidationError is never retried: a well-formed but schema-violating
    provider response does not improve by asking again.
    """
    
    pass
