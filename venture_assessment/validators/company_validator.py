"""Validator for company extraction provider output.

Mandatory fields:
- company_overview.name and company_overview.website (valid http(s) URL)
- technology.core_technology
- products_and_applications (object)
- market_context (object)

Everything else is optional and defaulted.
"""

import logging
from typing import Any

from venture_assessment.models.results import CompanyProfile
from venture_assessment.validators.base_validator import (BaseValidator,
                                                          ValidationResult)
from venture_assessment.validators.coercion import (as_mapping,
                                                    clean_string_list,
                                                    coerce_label, coerce_text,
                                                    decode_output,
                                                    require_mapping)
from venture_assessment.validators.input_validator import validate_url

logger = logging.getLogger(__name__)


class CompanyValidator(BaseValidator):
    """Validates and normalizes the company provider's outputs."""
    
    OUTPUT_KEY = "out-6"
    
    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate company outputs and build a CompanyProfile.
        
        Args:
            data: Envelope ``outputs`` mapping; the company payload is
                expected under ``out-6`` as JSON text or an object
        
        Returns:
            ValidationResult whose data is a CompanyProfile when valid
        """
        result = ValidationResult.success()
        
        if not isinstance(data, dict):
            result.add_error("Company outputs must be an object")
            return result
        
        decoded, error = decode_output(data.get(self.OUTPUT_KEY), self.OUTPUT_KEY)
        if decoded is None:
            result.add_error(error)
            return result
        company = decoded.value
        
        overview = require_mapping(company.get("company_overview"), "company_overview", result)
        technology = require_mapping(company.get("technology"), "technology", result)
        products = require_mapping(
            company.get("products_and_applications"), "products_and_applications", result
        )
        market = require_mapping(company.get("market_context"), "market_context", result)
        if not result.is_valid:
            return result
        
        name = coerce_text(overview.get("name"))
        website = coerce_text(overview.get("website"))
        if not name or not website:
            result.add_error("Company must have name and website")
        else:
            is_valid_url, normalized_url = validate_url(website)
            if is_valid_url:
                website = normalized_url
            else:
                result.add_error(f"Invalid company website URL: {website}")
        
        core_technology = coerce_text(technology.get("core_technology"))
        if not core_technology:
            result.add_error("Missing core technology description")
        
        if not result.is_valid:
            logger.warning(f"Company validation failed: {result.errors}")
            return result
        
        quality = as_mapping(company.get("data_quality_assessment"), "data_quality_assessment", result)
        
        result.data = CompanyProfile(
            name=name,
            website=website,
            mission_statement=coerce_text(overview.get("mission_statement")),
            company_description=coerce_text(overview.get("company_description")),
            core_technology=core_technology,
            technology_category=coerce_label(technology.get("technology_category")),
            technical_approach=coerce_text(technology.get("technical_approach")),
            key_innovations=clean_string_list(
                technology.get("key_innovations"), "technology.key_innovations", result
            ),
            primary_application=coerce_text(products.get("primary_application")),
            target_industries=clean_string_list(
                products.get("target_industries"), "products_and_applications.target_industries", result
            ),
            use_cases=clean_string_list(
                products.get("use_cases"), "products_and_applications.use_cases", result
            ),
            industry=coerce_label(market.get("industry")),
            sub_sector=coerce_text(market.get("sub_sector")),
            problem_addressed=coerce_text(market.get("problem_addressed")),
            value_proposition=coerce_text(market.get("value_proposition")),
            business_model=coerce_text(market.get("business_model")),
            primary_sources=clean_string_list(
                quality.get("primary_sources"), "data_quality_assessment.primary_sources", result
            ),
        )
        
        logger.info(f"Company validation passed: {name}")
        return result
    
    @property
    def name(self) -> str:
        return "company_validator"
