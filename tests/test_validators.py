"""Tests for provider validators and shared coercion rules.

This module contains unit tests for the company, competitive and market
validators, verifying mandatory field enforcement, optional field defaults,
placeholder filtering and score/confidence coercion.
"""

import json

import pytest

from venture_assessment.exceptions.validation_error import ValidationError
from venture_assessment.models.results import (CompanyProfile,
                                               CompetitiveAnalysis,
                                               MarketAnalysis)
from venture_assessment.validators.base_validator import ValidationResult
from venture_assessment.validators.coercion import (check_score,
                                                    clean_string_list,
                                                    coerce_confidence,
                                                    coerce_number, coerce_text,
                                                    decode_output)
from venture_assessment.validators.company_validator import CompanyValidator
from venture_assessment.validators.competitive_validator import \
    CompetitiveValidator
from venture_assessment.validators.market_validator import MarketValidator
from tests.fixtures.sample_data import (sample_company_output,
                                        sample_competitive_analysis,
                                        sample_competitive_graded,
                                        sample_market_data,
                                        sample_market_scoring)


class TestValidationResult:
    """Tests for ValidationResult."""
    
    def test_add_error_marks_invalid(self) -> None:
        """Test adding an error flips is_valid."""
        result = ValidationResult.success()
        result.add_error("Missing field")
        
        assert result.is_valid is False
        assert result.errors == ["Missing field"]
    
    def test_warnings_do_not_invalidate(self) -> None:
        """Test warnings leave the result valid."""
        result = ValidationResult.success()
        result.add_warning("Defaulted field")
        
        assert result.is_valid is True
        assert result.get_summary() == "Validation passed with 1 warning(s)"
    
    def test_raise_for_errors_uses_first_error(self) -> None:
        """Test raise_for_errors raises with the first error message."""
        result = ValidationResult.failure("First problem", "Second problem")
        
        with pytest.raises(ValidationError, match="First problem") as exc_info:
            result.raise_for_errors(context={"provider": "market"})
        
        assert exc_info.value.context["errors"] == ["First problem", "Second problem"]
        assert exc_info.value.context["provider"] == "market"
    
    def test_raise_for_errors_returns_data(self) -> None:
        """Test raise_for_errors returns data when valid."""
        assert ValidationResult.success(data={"a": 1}).raise_for_errors() == {"a": 1}
    
    def test_merge(self) -> None:
        """Test merging errors and warnings."""
        result = ValidationResult.success()
        other = ValidationResult.failure("Broken")
        other.add_warning("Hmm")
        
        result.merge(other)
        
        assert result.is_valid is False
        assert result.warnings == ["Hmm"]


class TestCoercion:
    """Tests for shared coercion helpers."""
    
    @pytest.mark.parametrize("score", [1, 5, 9])
    def test_check_score_accepts_range(self, score) -> None:
        """Test integer scores from 1 to 9 are accepted."""
        result = ValidationResult.success()
        assert check_score(score, "competitive", result) == score
        assert result.is_valid
    
    @pytest.mark.parametrize("score", [0, 10, 11, -1, 5.0, 5.5, "5", None, True])
    def test_check_score_rejects_others(self, score) -> None:
        """Test everything outside the integer range 1-9 is rejected."""
        result = ValidationResult.success()
        
        assert check_score(score, "competitive", result) is None
        assert result.errors == [f"Invalid competitive score: {score}"]
    
    @pytest.mark.parametrize("value,expected", [(0, 0.0), (0.5, 0.5), (1, 1.0), (None, None)])
    def test_coerce_confidence_valid(self, value, expected) -> None:
        """Test valid confidence values pass through."""
        result = ValidationResult.success()
        assert coerce_confidence(value, "confidence", result) == expected
        assert not result.has_warnings()
    
    @pytest.mark.parametrize("value", [1.5, -0.1, "high", True])
    def test_coerce_confidence_invalid_becomes_none(self, value) -> None:
        """Test invalid confidence is nulled with a warning."""
        result = ValidationResult.success()
        
        assert coerce_confidence(value, "confidence", result) is None
        assert result.is_valid
        assert len(result.warnings) == 1
    
    def test_clean_string_list_drops_placeholders(self) -> None:
        """Test placeholders, blanks and non-strings are dropped."""
        result = ValidationResult.success()
        value = ["  Alpha ", "", "{name}", "[Competitor 2]", 42, "Beta"]
        
        assert clean_string_list(value, "leaders", result) == ["Alpha", "Beta"]
    
    def test_clean_string_list_non_list(self) -> None:
        """Test a non-list becomes an empty list with a warning."""
        result = ValidationResult.success()
        
        assert clean_string_list("Alpha", "leaders", result) == []
        assert result.has_warnings()
    
    def test_coerce_text_and_number(self) -> None:
        """Test optional text and number defaults."""
        assert coerce_text(None) == ""
        assert coerce_text("{placeholder}") == ""
        assert coerce_text("  text ") == "text"
        assert coerce_number("12.5") == 12.5
        assert coerce_number("n/a") == 0
        assert coerce_number(True) == 0
    
    def test_decode_output_variants(self) -> None:
        """Test JSON text and pre-decoded objects decode to the same value."""
        text_output, error = decode_output('{"a": 1}', "out-6")
        object_output, _ = decode_output({"a": 1}, "out-6")
        
        assert error is None
        assert text_output.kind == "json_text"
        assert text_output.text == '{"a": 1}'
        assert object_output.kind == "object"
        assert text_output.value == object_output.value
    
    @pytest.mark.parametrize("value", [None, "", "not json", "[1, 2]", 42])
    def test_decode_output_failures(self, value) -> None:
        """Test missing, malformed and non-object outputs fail."""
        decoded, error = decode_output(value, "out-7")
        
        assert decoded is None
        assert "out-7" in error


class TestCompanyValidator:
    """Tests for CompanyValidator."""
    
    def test_valid_company(self) -> None:
        """Test a complete payload is normalized."""
        result = CompanyValidator().validate({"out-6": json.dumps(sample_company_output())})
        
        assert result.is_valid, result.errors
        profile = result.data
        assert isinstance(profile, CompanyProfile)
        assert profile.name == "Voltcell Labs"
        assert profile.core_technology == "Solid-state lithium metal battery cells"
        assert profile.use_cases == ["Peak shaving"]
        assert profile.primary_sources == ["Company website"]
    
    def test_optional_fields_default(self) -> None:
        """Test missing optional fields take documented defaults."""
        payload = {
            "company_overview": {"name": "Acme", "website": "acme.example.com"},
            "technology": {"core_technology": "Widgets"},
            "products_and_applications": {"primary_application": "Factories"},
            "market_context": {"industry": "Manufacturing"},
        }
        
        profile = CompanyValidator().validate({"out-6": payload}).data
        
        assert profile.technology_category == "unknown"
        assert profile.key_innovations == []
        assert profile.mission_statement == ""
    
    def test_missing_name_rejected(self) -> None:
        """Test name and website are mandatory."""
        payload = sample_company_output()
        payload["company_overview"]["name"] = ""
        
        result = CompanyValidator().validate({"out-6": payload})
        
        assert not result.is_valid
        assert "Company must have name and website" in result.errors
    
    def test_invalid_website_rejected(self) -> None:
        """Test website must be a valid URL."""
        payload = sample_company_output()
        payload["company_overview"]["website"] = "not a url"
        
        result = CompanyValidator().validate({"out-6": payload})
        
        assert not result.is_valid
        assert result.errors[0].startswith("Invalid company website URL")
    
    def test_missing_core_technology_rejected(self) -> None:
        """Test core technology is mandatory."""
        payload = sample_company_output()
        del payload["technology"]["core_technology"]
        
        result = CompanyValidator().validate({"out-6": payload})
        
        assert "Missing core technology description" in result.errors
    
    @pytest.mark.parametrize("section", ["products_and_applications", "market_context"])
    def test_missing_sections_rejected(self, section) -> None:
        """Test mandatory sections."""
        payload = sample_company_output()
        del payload[section]
        
        result = CompanyValidator().validate({"out-6": payload})
        
        assert f"Missing required field: {section}" in result.errors
    
    def test_missing_output(self) -> None:
        """Test a missing output key fails."""
        result = CompanyValidator().validate({})
        assert result.errors == ["Missing required output: out-6"]


class TestCompetitiveValidator:
    """Tests for CompetitiveValidator."""
    
    def _outputs(self, analysis=None, graded=None) -> dict:
        return {
            "out-6": json.dumps(analysis if analysis is not None else sample_competitive_analysis()),
            "out-7": json.dumps(graded if graded is not None else sample_competitive_graded()),
        }
    
    def test_valid_competitive(self) -> None:
        """Test a complete payload is normalized."""
        outputs = self._outputs()
        result = CompetitiveValidator().validate(outputs)
        
        assert result.is_valid, result.errors
        analysis = result.data
        assert isinstance(analysis, CompetitiveAnalysis)
        assert analysis.score == 6
        assert analysis.confidence == 0.8
        assert analysis.competitor_count.total == 12
        assert analysis.competitor_count.mid_size == 4
        assert analysis.analysis_text == outputs["out-6"]
    
    def test_placeholder_competitors_dropped(self) -> None:
        """Test brace placeholders are not listed as competitors."""
        analysis = CompetitiveValidator().validate(self._outputs()).data
        
        names = [c.name for c in analysis.competitors]
        assert names == ["GridCore", "Ionic Startup"]
        assert analysis.competitors[0].products == ["GC-500"]
        assert analysis.competitors[1].products == []
    
    def test_falls_back_to_market_leaders(self) -> None:
        """Test market leaders are used when no competitor is usable."""
        analysis_payload = sample_competitive_analysis()
        analysis_payload["competitors"] = [{"company_name": "[Competitor 1]"}]
        
        analysis = CompetitiveValidator().validate(self._outputs(analysis=analysis_payload)).data
        
        assert [c.name for c in analysis.competitors] == ["GridCore", "Stor Inc"]
    
    def test_competitors_limited_to_ten(self) -> None:
        """Test at most ten competitors are kept."""
        analysis_payload = sample_competitive_analysis()
        analysis_payload["competitors"] = [
            {"company_name": f"Company {i}"} for i in range(15)
        ]
        
        analysis = CompetitiveValidator().validate(self._outputs(analysis=analysis_payload)).data
        
        assert len(analysis.competitors) == 10
    
    def test_score_out_of_range(self) -> None:
        """Test score 11 is rejected with the dimension in the message."""
        graded = sample_competitive_graded()
        graded["score"] = 11
        
        result = CompetitiveValidator().validate(self._outputs(graded=graded))
        
        assert not result.is_valid
        assert result.errors == ["Invalid competitive score: 11"]
    
    def test_missing_competitor_count(self) -> None:
        """Test competitor_count is mandatory."""
        graded = sample_competitive_graded()
        del graded["competitor_count"]
        
        result = CompetitiveValidator().validate(self._outputs(graded=graded))
        
        assert "Missing competitor count data" in result.errors
    
    def test_invalid_confidence_nulled(self) -> None:
        """Test out-of-range confidence becomes None and validation passes."""
        analysis_payload = sample_competitive_analysis()
        analysis_payload["data_quality"]["confidence_level"] = 1.7
        
        result = CompetitiveValidator().validate(self._outputs(analysis=analysis_payload))
        
        assert result.is_valid
        assert result.data.confidence is None
        assert result.has_warnings()
    
    def test_missing_optional_fields_default(self) -> None:
        """Test optional fields default when absent."""
        graded = {"score": 3, "competitor_count": {"total": 2}}
        
        analysis = CompetitiveValidator().validate(
            self._outputs(analysis={}, graded=graded)
        ).data
        
        assert analysis.competitive_intensity == "unknown"
        assert analysis.market_leaders == []
        assert analysis.competitors == []
        assert analysis.confidence is None
        assert analysis.competitor_count.large == 0
    
    def test_missing_graded_output(self) -> None:
        """Test both outputs are mandatory."""
        result = CompetitiveValidator().validate({"out-6": "{}"})
        assert result.errors == ["Missing required output: out-7"]


class TestMarketValidator:
    """Tests for MarketValidator."""
    
    def test_valid_market(self) -> None:
        """Test a complete payload is normalized."""
        result = MarketValidator().validate({
            "out-2": json.dumps(sample_market_data()),
            "out-3": sample_market_scoring(),
        })
        
        assert result.is_valid, result.errors
        analysis = result.data
        assert isinstance(analysis, MarketAnalysis)
        assert analysis.score == 7
        assert analysis.confidence == 0.75
        assert analysis.primary_market.tam_usd == 45000000000
        assert analysis.primary_market.cagr_percent == 18.5
        assert analysis.market_analysis.barriers == ["Certification cost"]
        assert analysis.rubric_application.intersection == "large/high"
        assert analysis.data_quality.recency == "2024"
    
    def test_missing_tam_rejected(self) -> None:
        """Test primary market TAM is mandatory."""
        data = sample_market_data()
        del data["primary_market"]["tam_usd"]
        
        result = MarketValidator().validate({"out-2": data, "out-3": sample_market_scoring()})
        
        assert "Missing required field: primary_market.tam_usd" in result.errors
    
    def test_missing_primary_market_rejected(self) -> None:
        """Test primary market is mandatory."""
        data = sample_market_data()
        del data["primary_market"]
        
        result = MarketValidator().validate({"out-2": data, "out-3": sample_market_scoring()})
        
        assert "Missing required field: primary_market" in result.errors
    
    def test_invalid_score_rejected(self) -> None:
        """Test market score must be 1-9."""
        scoring = sample_market_scoring()
        scoring["score"] = 0
        
        result = MarketValidator().validate({"out-2": sample_market_data(), "out-3": scoring})
        
        assert result.errors == ["Invalid market score: 0"]
    
    def test_optional_sections_default(self) -> None:
        """Test optional sections default when absent."""
        data = {"primary_market": {"tam_usd": 1000, "cagr_percent": 5}}
        
        analysis = MarketValidator().validate({"out-2": data, "out-3": {"score": 4}}).data
        
        assert analysis.confidence is None
        assert analysis.markets == []
        assert analysis.data_quality.recency == "unknown"
        assert analysis.justification.summary == ""
