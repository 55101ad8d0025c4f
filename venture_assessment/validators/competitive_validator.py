"""Validator for competitive analysis provider output.

The provider returns two outputs:
- ``out-6``: the structured competitive analysis (competitors, data quality)
- ``out-7``: the graded assessment (score, competitor counts, risks)

Mandatory: both outputs, ``out-7.score`` (integer 1-9) and
``out-7.competitor_count`` (object). Everything else is optional.
"""

import logging
from typing import Any

from venture_assessment.models.results import (CompetitiveAnalysis,
                                               CompetitorCount,
                                               CompetitorProfile)
from venture_assessment.validators.base_validator import (BaseValidator,
                                                          ValidationResult)
from venture_assessment.validators.coercion import (as_mapping, check_score,
                                                    clean_string_list,
                                                    coerce_confidence,
                                                    coerce_count, coerce_label,
                                                    coerce_text, decode_output,
                                                    is_placeholder)

logger = logging.getLogger(__name__)

MAX_COMPETITORS = 10


class CompetitiveValidator(BaseValidator):
    """Validates and normalizes the competitive provider's outputs."""
    
    ANALYSIS_KEY = "out-6"
    GRADED_KEY = "out-7"
    
    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate competitive outputs and build a CompetitiveAnalysis.
        
        Args:
            data: Envelope ``outputs`` mapping
        
        Returns:
            ValidationResult whose data is a CompetitiveAnalysis when valid
        """
        result = ValidationResult.success()
        
        if not isinstance(data, dict):
            result.add_error("Competitive outputs must be an object")
            return result
        
        analysis_output, error = decode_output(data.get(self.ANALYSIS_KEY), self.ANALYSIS_KEY)
        if analysis_output is None:
            result.add_error(error)
        graded_output, error = decode_output(data.get(self.GRADED_KEY), self.GRADED_KEY)
        if graded_output is None:
            result.add_error(error)
        if not result.is_valid:
            return result
        
        analysis = analysis_output.value
        graded = graded_output.value
        
        score = check_score(graded.get("score"), "competitive", result)
        
        raw_count = graded.get("competitor_count")
        if not isinstance(raw_count, dict) or not raw_count:
            result.add_error("Missing competitor count data")
        
        if not result.is_valid:
            logger.warning(f"Competitive validation failed: {result.errors}")
            return result
        
        data_quality = as_mapping(analysis.get("data_quality"), "out-6.data_quality", result)
        market_leaders = clean_string_list(
            graded.get("market_leaders"), "out-7.market_leaders", result
        )
        
        result.data = CompetitiveAnalysis(
            score=score,
            justification=coerce_text(graded.get("score_justification")),
            competitor_count=CompetitorCount(
                total=coerce_count(raw_count.get("total")),
                large=coerce_count(raw_count.get("large_companies")),
                mid_size=coerce_count(raw_count.get("mid_size_companies")),
                startups=coerce_count(raw_count.get("startups")),
            ),
            market_leaders=market_leaders,
            competitive_intensity=coerce_label(graded.get("competitive_intensity")),
            key_risks=clean_string_list(
                graded.get("key_risk_factors"), "out-7.key_risk_factors", result
            ),
            opportunities=clean_string_list(
                graded.get("differentiation_opportunities"),
                "out-7.differentiation_opportunities",
                result,
            ),
            rubric_match=coerce_text(graded.get("rubric_match_explanation")),
            confidence=coerce_confidence(
                data_quality.get("confidence_level"), "out-6.data_quality.confidence_level", result
            ),
            sources_used=clean_string_list(
                data_quality.get("sources_used"), "out-6.data_quality.sources_used", result
            ),
            competitors=self._build_competitors(analysis.get("competitors"), market_leaders, result),
            analysis_text=analysis_output.text,
        )
        
        logger.info(
            f"Competitive validation passed: score={score}, "
            f"{len(result.data.competitors)} competitors, {len(result.warnings)} warnings"
        )
        return result
    
    def _build_competitors(
        self,
        raw_competitors: Any,
        market_leaders: list[str],
        result: ValidationResult,
    ) -> list[CompetitorProfile]:
        """Build detailed competitor profiles.
        
        Entries with an empty or placeholder name are dropped. When nothing
        usable remains, the market leaders are listed by name instead.
        """
        competitors: list[CompetitorProfile] = []
        
        if isinstance(raw_competitors, list):
            for index, entry in enumerate(raw_competitors):
                if not isinstance(entry, dict):
                    continue
                raw_name = entry.get("company_name")
                if not isinstance(raw_name, str) or not raw_name.strip() or is_placeholder(raw_name):
                    continue
                product_name = coerce_text(entry.get("product_name"))
                competitors.append(CompetitorProfile(
                    name=raw_name.strip(),
                    description=coerce_text(entry.get("product_description")) or product_name,
                    size=coerce_label(entry.get("size_category")),
                    products=[product_name] if product_name else [],
                    strengths=clean_string_list(
                        entry.get("strengths"), f"out-6.competitors[{index}].strengths", result
                    ),
                    weaknesses=clean_string_list(
                        entry.get("weaknesses"), f"out-6.competitors[{index}].weaknesses", result
                    ),
                ))
        elif raw_competitors is not None:
            result.add_warning("Expected a list at out-6.competitors")
        
        if not competitors and market_leaders:
            competitors = [
                CompetitorProfile(name=leader, description="Market leader in the space")
                for leader in market_leaders
            ]
        
        return competitors[:MAX_COMPETITORS]
    
    @property
    def name(self) -> str:
        return "competitive_validator"
