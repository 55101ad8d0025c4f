"""Schema validation and response normalization.

This package contains:
- ValidationResult / BaseValidator: the tagged result shared by all validators
- CompanyValidator, CompetitiveValidator, MarketValidator: provider field mappings
- coercion: shared mandatory/optional field rules
- state_rules: rule table for state store setters and snapshot sanitization
- input_validator: starting input and reviewer assessment validation
"""

from venture_assessment.validators.base_validator import (BaseValidator,
                                                          ValidationResult)
from venture_assessment.validators.company_validator import CompanyValidator
from venture_assessment.validators.competitive_validator import \
    CompetitiveValidator
from venture_assessment.validators.market_validator import MarketValidator

__all__ = [
    "BaseValidator",
    "ValidationResult",
    "CompanyValidator",
    "CompetitiveValidator",
    "MarketValidator",
]
