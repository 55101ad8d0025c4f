"""Base validator class for all validators in the system.

This module defines the abstract base class and ValidationResult model
that all validators must implement, following the Validator Pattern.

Validators return ValidationResult objects instead of raising exceptions,
so one validation layer can be shared by every provider client and by the
state store. A successful result carries the normalized data.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from venture_assessment.exceptions.validation_error import ValidationError


class ValidationResult(BaseModel):
    """Tagged result of a validation operation.
    
    Attributes:
        is_valid: Boolean indicating whether validation passed
        errors: List of error messages encountered during validation
        warnings: List of warning messages (non-blocking issues, such as
            optional fields replaced by defaults)
        data: Normalized data produced by a successful validation
    """
    
    model_config = {"extra": "forbid", "arbitrary_types_allowed": True}
    
    is_valid: bool = Field(
        ...,
        description="Whether validation passed",
    )
    
    errors: list[str] = Field(
        default_factory=list,
        description="List of error messages",
    )
    
    warnings: list[str] = Field(
        default_factory=list,
        description="List of warning messages",
    )
    
    data: Any = Field(
        default=None,
        description="Normalized data when validation passed",
    )
    
    def add_error(self, message: str) -> None:
        """Add an error message and mark validation as invalid.
        
        Args:
            message: Error message describing the validation failure
        """
        if message and message.strip():
            self.errors.append(message.strip())
            self.is_valid = False
    
    def add_warning(self, message: str) -> None:
        """Add a warning message without affecting validation status.
        
        Args:
            message: Warning message describing a non-blocking issue
        """
        if message and message.strip():
            self.warnings.append(message.strip())
    
    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Fold another result's errors and warnings into this one.
        
        Returns:
            This result, for chaining
        """
        for message in other.errors:
            self.add_error(message)
        for message in other.warnings:
            self.add_warning(message)
        return self
    
    def has_errors(self) -> bool:
        """Check if validation result has any errors."""
        return len(self.errors) > 0
    
    def has_warnings(self) -> bool:
        """Check if validation result has any warnings."""
        return len(self.warnings) > 0
    
    def get_summary(self) -> str:
        """Get a human-readable summary of the validation result.
        
        Returns:
            Summary string describing the validation result
        """
        error_count = len(self.errors)
        warning_count = len(self.warnings)
        
        if self.is_valid:
            if warning_count > 0:
                return f"Validation passed with {warning_count} warning(s)"
            return "Validation passed"
        
        parts = [f"Validation failed: {error_count} error(s)"]
        if warning_count > 0:
            parts.append(f"{warning_count} warning(s)")
        
        return ", ".join(parts)
    
    def raise_for_errors(self, context: dict | None = None) -> Any:
        """Raise ValidationError if the result failed, else return the data.
        
        The first error becomes the exception message so callers can match
        on it; every error is kept in the exception context.
        
        Args:
            context: Optional extra context for the raised error
        
        Returns:
            The normalized data of a successful result
        
        Raises:
            ValidationError: If the result holds any error
        """
        if self.is_valid:
            return self.data
        error_context = dict(context or {})
        error_context["errors"] = list(self.errors)
        message = self.errors[0] if self.errors else "Validation failed"
        raise ValidationError(message, context=error_context)
    
    @classmethod
    def success(cls, data: Any = None) -> "ValidationResult":
        """Create a successful validation result.
        
        Args:
            data: Optional normalized data
        
        Returns:
            ValidationResult with is_valid=True
        """
        return cls(is_valid=True, data=data)
    
    @classmethod
    def failure(cls, *error_messages: str) -> "ValidationResult":
        """Create a failed validation result with error messages.
        
        Args:
            *error_messages: One or more error message strings
        
        Returns:
            ValidationResult with is_valid=False and provided errors
        """
        result = cls(is_valid=False)
        for message in error_messages:
            result.add_error(message)
        return result


class BaseValidator(ABC):
    """Base class for all provider validators.
    
    Subclasses supply the field mapping for one provider shape; shared
    coercion rules live in venture_assessment.validators.coercion.
    """
    
    @abstractmethod
    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate provider data and return a normalized result.
        
        Validators never raise for validation failures; they add errors to
        the returned ValidationResult.
        
        Args:
            data: Decoded provider outputs
        
        Returns:
            ValidationResult carrying the normalized model when valid
        """
        pass
    
    @property
    @abstractmethod
    def name(self) -> str:
        """Return the validator name used in logging."""
        pass
