"""Client for the market opportunity provider."""

from typing import Any

from pydantic import BaseModel

from venture_assessment.clients.base_client import RemoteAnalysisClient
from venture_assessment.exceptions.validation_error import ValidationError
from venture_assessment.validators.base_validator import BaseValidator
from venture_assessment.validators.market_validator import MarketValidator


class MarketInput(BaseModel):
    """Inputs of the market phase.
    
    Attributes:
        tech_description: Technology description, sent verbatim as ``in-1``
        competitive_text: Competitive artifact text, sent verbatim as ``in-2``
    """
    
    tech_description: str
    competitive_text: str


class MarketClient(RemoteAnalysisClient):
    """Sizes and scores the market opportunity of a technology.
    
    Reads market data from ``out-2`` and scoring from ``out-3``.
    """
    
    phase_key = "market"
    
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._validator = MarketValidator()
    
    @property
    def validator(self) -> BaseValidator:
        return self._validator
    
    def build_inputs(self, input: MarketInput) -> dict[str, Any]:
        if not isinstance(input, MarketInput):
            raise ValidationError(
                f"Market analysis expects MarketInput, got {type(input).__name__}",
                context={"provider": self.phase_key},
            )
        if not input.tech_description.strip():
            raise ValidationError(
                "Technology description is required for market analysis",
                context={"provider": self.phase_key},
            )
        if not input.competitive_text.strip():
            raise ValidationError(
                "Competitive analysis is required for market analysis",
                context={"provider": self.phase_key},
            )
        return {
            "in-1": input.tech_description,
            "in-2": input.competitive_text,
        }
