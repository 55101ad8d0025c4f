"""Client for the competitive analysis provider."""

from typing import Any

from venture_assessment.clients.base_client import RemoteAnalysisClient
from venture_assessment.exceptions.validation_error import ValidationError
from venture_assessment.validators.base_validator import BaseValidator
from venture_assessment.validators.competitive_validator import \
    CompetitiveValidator


class CompetitiveClient(RemoteAnalysisClient):
    """Analyzes the competitive landscape of a technology.
    
    Sends ``in-0`` = technology description; reads the structured analysis
    from ``out-6`` and the graded assessment from ``out-7``. The raw
    ``out-6`` text becomes the artifact handed to the market phase.
    """
    
    phase_key = "competitive"
    
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._validator = CompetitiveValidator()
    
    @property
    def validator(self) -> BaseValidator:
        return self._validator
    
    def build_inputs(self, input: str) -> dict[str, Any]:
        if not isinstance(input, str) or not input.strip():
            raise ValidationError(
                "Technology description is required for competitive analysis",
                context={"provider": self.phase_key},
            )
        return {"in-0": input}
