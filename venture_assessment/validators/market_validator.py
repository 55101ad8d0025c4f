"""Validator for market opportunity provider output.

The provider returns two outputs:
- ``out-2``: market data (primary market, candidate markets, narrative)
- ``out-3``: scoring (score, confidence, justification, rubric application)

Mandatory: both outputs, ``out-2.primary_market`` with ``tam_usd`` and
``cagr_percent``, and ``out-3.score`` (integer 1-9).
"""

import logging
from typing import Any

from venture_assessment.models.results import (MarketAnalysis,
                                               MarketDataQuality,
                                               MarketJustification,
                                               MarketNarrative, MarketSegment,
                                               PrimaryMarket,
                                               RubricApplication)
from venture_assessment.validators.base_validator import (BaseValidator,
                                                          ValidationResult)
from venture_assessment.validators.coercion import (as_mapping, check_score,
                                                    clean_string_list,
                                                    coerce_confidence,
                                                    coerce_label,
                                                    coerce_number, coerce_text,
                                                    decode_output,
                                                    require_number)

logger = logging.getLogger(__name__)


class MarketValidator(BaseValidator):
    """Validates and normalizes the market provider's outputs."""
    
    MARKET_KEY = "out-2"
    SCORING_KEY = "out-3"
    
    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate market outputs and build a MarketAnalysis.
        
        Args:
            data: Envelope ``outputs`` mapping
        
        Returns:
            ValidationResult whose data is a MarketAnalysis when valid
        """
        result = ValidationResult.success()
        
        if not isinstance(data, dict):
            result.add_error("Market outputs must be an object")
            return result
        
        market_output, error = decode_output(data.get(self.MARKET_KEY), self.MARKET_KEY)
        if market_output is None:
            result.add_error(error)
        scoring_output, error = decode_output(data.get(self.SCORING_KEY), self.SCORING_KEY)
        if scoring_output is None:
            result.add_error(error)
        if not result.is_valid:
            return result
        
        market = market_output.value
        scoring = scoring_output.value
        
        primary = market.get("primary_market")
        tam = cagr = None
        if not isinstance(primary, dict) or not primary:
            result.add_error("Missing required field: primary_market")
        else:
            tam = require_number(primary.get("tam_usd"), "primary_market.tam_usd", result)
            cagr = require_number(primary.get("cagr_percent"), "primary_market.cagr_percent", result)
        
        score = check_score(scoring.get("score"), "market", result)
        
        if not result.is_valid:
            logger.warning(f"Market validation failed: {result.errors}")
            return result
        
        justification = as_mapping(scoring.get("justification"), "out-3.justification", result)
        rubric = as_mapping(scoring.get("rubric_application"), "out-3.rubric_application", result)
        narrative = as_mapping(market.get("market_analysis"), "out-2.market_analysis", result)
        quality = as_mapping(scoring.get("data_quality"), "out-3.data_quality", result)
        
        result.data = MarketAnalysis(
            score=score,
            confidence=coerce_confidence(scoring.get("confidence"), "out-3.confidence", result),
            primary_market=PrimaryMarket(
                description=coerce_text(primary.get("description")),
                tam_usd=tam,
                cagr_percent=cagr,
                selection_rationale=coerce_text(primary.get("selection_rationale")),
            ),
            justification=MarketJustification(
                summary=coerce_text(justification.get("summary")),
                strengths=clean_string_list(
                    justification.get("strengths_considered"), "out-3.justification.strengths_considered", result
                ),
                limitations=clean_string_list(
                    justification.get("limitations_considered"), "out-3.justification.limitations_considered", result
                ),
                risks=clean_string_list(
                    justification.get("key_risks"), "out-3.justification.key_risks", result
                ),
            ),
            rubric_application=RubricApplication(
                tam_value=coerce_number(rubric.get("tam_value")),
                tam_category=coerce_label(rubric.get("tam_category")),
                cagr_value=coerce_number(rubric.get("cagr_value")),
                cagr_category=coerce_label(rubric.get("cagr_category")),
                intersection=coerce_text(rubric.get("rubric_intersection")),
                base_score=coerce_number(rubric.get("base_score")),
                adjustment=coerce_number(rubric.get("adjustment")),
                adjustment_rationale=coerce_text(rubric.get("adjustment_rationale")),
            ),
            market_analysis=MarketNarrative(
                executive_summary=coerce_text(narrative.get("executive_summary")),
                trends=clean_string_list(narrative.get("trends"), "out-2.market_analysis.trends", result),
                opportunities=clean_string_list(
                    narrative.get("opportunities"), "out-2.market_analysis.opportunities", result
                ),
                unmet_needs=clean_string_list(
                    narrative.get("unmet_needs"), "out-2.market_analysis.unmet_needs", result
                ),
                barriers=clean_string_list(
                    narrative.get("barriers_to_entry"), "out-2.market_analysis.barriers_to_entry", result
                ),
                problem_statement=coerce_text(narrative.get("problem_statement")),
                differentiation=coerce_text(narrative.get("differentiation")),
            ),
            markets=self._build_segments(market.get("markets"), result),
            data_quality=MarketDataQuality(
                recency=coerce_label(quality.get("data_recency")),
                concerns=clean_string_list(
                    quality.get("data_concerns"), "out-3.data_quality.data_concerns", result
                ),
            ),
        )
        
        logger.info(
            f"Market validation passed: score={score}, "
            f"confidence={result.data.confidence}, {len(result.warnings)} warnings"
        )
        return result
    
    def _build_segments(self, raw_markets: Any, result: ValidationResult) -> list[MarketSegment]:
        """Normalize the candidate market list, skipping non-object entries."""
        if raw_markets is None:
            return []
        if not isinstance(raw_markets, list):
            result.add_warning("Expected a list at out-2.markets")
            return []
        
        segments = []
        for index, entry in enumerate(raw_markets):
            if not isinstance(entry, dict):
                continue
            segments.append(MarketSegment(
                description=coerce_text(entry.get("description")),
                tam_current_usd=coerce_number(entry.get("tam_current_usd")),
                cagr_percent=coerce_number(entry.get("cagr_percent")),
                confidence=coerce_confidence(
                    entry.get("confidence"), f"out-2.markets[{index}].confidence", result
                ),
            ))
        return segments
    
    @property
    def name(self) -> str:
        return "market_validator"
