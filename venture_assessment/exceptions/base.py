"""Base exception class for all assessment pipeline errors.

This module defines the BaseAssessmentError class that serves as the base
for all custom exceptions in the system. Catching BaseAssessmentError
catches every failure the pipeline classifies itself.
"""


class BaseAssessmentError(Exception):
    """Base exception for all assessment pipeline errors.
    
    Attributes:
        message: Error message describing what went wrong
        context: Optional dictionary with additional error context
    """
    
    def __init__(
        self,
        message: str,
        context: dict | None = None
    ) -> None:
        """Initialize base assessment error.
        
        Args:
            message: Human-readable error message
            context: Optional dictionary with additional error context
                (e.g., provider name, status code, field name)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
    
    def __str__(self) -> str:
        return self.message
    
    def __repr__(self) -> str:
        """Return detailed representation including context."""
        context_str = f", context={self.context}" if self.context else ""
        return f"{self.__class__.__name__}({self.message!r}{context_str})"
