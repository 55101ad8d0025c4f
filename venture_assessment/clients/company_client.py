"""Client for the company extraction provider."""

from typing import Any

from venture_assessment.clients.base_client import RemoteAnalysisClient
from venture_assessment.exceptions.validation_error import ValidationError
from venture_assessment.validators.base_validator import BaseValidator
from venture_assessment.validators.company_validator import CompanyValidator
from venture_assessment.validators.input_validator import validate_url


class CompanyClient(RemoteAnalysisClient):
    """Extracts a company profile from the company's website URL.
    
    Sends ``in-0`` = URL and reads the profile from output ``out-6``.
    """
    
    phase_key = "company"
    
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._validator = CompanyValidator()
    
    @property
    def validator(self) -> BaseValidator:
        return self._validator
    
    def build_inputs(self, input: str) -> dict[str, Any]:
        is_valid, url = validate_url(input if isinstance(input, str) else "")
        if not is_valid:
            raise ValidationError(
                f"Invalid company URL: {input}",
                context={"provider": self.phase_key},
            )
        return {"in-0": url}
