"""Normalized provider result models.

Each remote provider returns a loosely structured payload. The validators
map those payloads onto the models below, filling documented defaults for
missing optional fields:

- list fields default to an empty list
- categorical text defaults to "unknown"
- free text defaults to ""
- counts and numeric rubric values default to 0
- confidence defaults to None (no value is invented)
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

UNKNOWN = "unknown"


class DecodedOutput(BaseModel):
    """A provider output decoded once at the boundary.
    
    Provider outputs arrive either as JSON-encoded strings or as already
    decoded objects. ``kind`` records which variant was received, ``value``
    holds the decoded object and ``text`` the JSON text (verbatim when the
    provider sent a string).
    """
    
    kind: Literal["json_text", "object"]
    value: dict[str, Any]
    text: str


class CompanyProfile(BaseModel):
    """Normalized company extraction result."""
    
    name: str
    website: str
    mission_statement: str = ""
    company_description: str = ""
    core_technology: str
    technology_category: str = UNKNOWN
    technical_approach: str = ""
    key_innovations: list[str] = Field(default_factory=list)
    primary_application: str = ""
    target_industries: list[str] = Field(default_factory=list)
    use_cases: list[str] = Field(default_factory=list)
    industry: str = UNKNOWN
    sub_sector: str = ""
    problem_addressed: str = ""
    value_proposition: str = ""
    business_model: str = ""
    primary_sources: list[str] = Field(default_factory=list)


class CompetitorCount(BaseModel):
    """Competitor counts by company size."""
    
    total: int = 0
    large: int = 0
    mid_size: int = 0
    startups: int = 0


class CompetitorProfile(BaseModel):
    """One competitor as listed in the competitive analysis."""
    
    name: str = Field(..., min_length=1)
    description: str = ""
    size: str = UNKNOWN
    products: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class CompetitiveAnalysis(BaseModel):
    """Normalized competitive analysis result.
    
    Attributes:
        score: Competitive risk score (1-9)
        justification: Provider's score justification
        competitor_count: Competitor counts by size
        market_leaders: Names of market leaders
        competitive_intensity: Provider's intensity label
        key_risks: Key competitive risk factors
        opportunities: Differentiation opportunities
        rubric_match: Explanation of the rubric match
        confidence: Data quality confidence (0-1) or None
        sources_used: Sources cited by the provider
        competitors: Detailed competitors, at most ten
        analysis_text: Competitive artifact handed to the market phase
    """
    
    score: int = Field(..., ge=1, le=9)
    justification: str = ""
    competitor_count: CompetitorCount = Field(default_factory=CompetitorCount)
    market_leaders: list[str] = Field(default_factory=list)
    competitive_intensity: str = UNKNOWN
    key_risks: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)
    rubric_match: str = ""
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    sources_used: list[str] = Field(default_factory=list)
    competitors: list[CompetitorProfile] = Field(default_factory=list, max_length=10)
    analysis_text: str


class PrimaryMarket(BaseModel):
    """The market selected for scoring. TAM and CAGR are carried opaquely."""
    
    description: str = ""
    tam_usd: float
    cagr_percent: float
    selection_rationale: str = ""


class MarketJustification(BaseModel):
    """Provider justification of the market score."""
    
    summary: str = ""
    strengths: list[str] = Field(default_factory=list)
    limitations: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)


class RubricApplication(BaseModel):
    """How the provider applied its scoring rubric."""
    
    tam_value: float = 0
    tam_category: str = UNKNOWN
    cagr_value: float = 0
    cagr_category: str = UNKNOWN
    intersection: str = ""
    base_score: float = 0
    adjustment: float = 0
    adjustment_rationale: str = ""


class MarketNarrative(BaseModel):
    """Narrative market analysis sections."""
    
    executive_summary: str = ""
    trends: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)
    unmet_needs: list[str] = Field(default_factory=list)
    barriers: list[str] = Field(default_factory=list)
    problem_statement: str = ""
    differentiation: str = ""


class MarketSegment(BaseModel):
    """One candidate market considered by the provider."""
    
    description: str = ""
    tam_current_usd: float = 0
    cagr_percent: float = 0
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class MarketDataQuality(BaseModel):
    """Provider's own data quality notes."""
    
    recency: str = UNKNOWN
    concerns: list[str] = Field(default_factory=list)


class MarketAnalysis(BaseModel):
    """Normalized market opportunity result."""
    
    score: int = Field(..., ge=1, le=9)
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    primary_market: PrimaryMarket
    justification: MarketJustification = Field(default_factory=MarketJustification)
    rubric_application: RubricApplication = Field(default_factory=RubricApplication)
    market_analysis: MarketNarrative = Field(default_factory=MarketNarrative)
    markets: list[MarketSegment] = Field(default_factory=list)
    data_quality: MarketDataQuality = Field(default_factory=MarketDataQuality)


class PipelineResults(BaseModel):
    """Aggregated results of a completed pipeline run.
    
    Attributes:
        company: Company profile, or None when the input was free text
        competitive: Competitive analysis result
        market: Market analysis result
        tech_description: Description fed to the competitive and market phases
        duration_seconds: Total run time
    """
    
    company: CompanyProfile | None = None
    competitive: CompetitiveAnalysis
    market: MarketAnalysis
    tech_description: str
    duration_seconds: float = 0.0


class ProviderResult(BaseModel):
    """Outcome of one successful provider call.
    
    Attributes:
        data: Normalized result model (CompanyProfile, CompetitiveAnalysis
            or MarketAnalysis)
        raw_data: The provider envelope as received
        warnings: Coercion warnings raised while normalizing optional fields
    """
    
    model_config = {"arbitrary_types_allowed": True}
    
    data: Any
    raw_data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
