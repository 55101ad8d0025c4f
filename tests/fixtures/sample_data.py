"""Sample test data fixtures.

This module contains sample provider payloads used in tests for realistic
but anonymized test scenarios.
"""

import json


def sample_company_output() -> dict:
    """Create a sample company extraction payload (out-6)."""
    return {
        "company_overview": {
            "name": "Voltcell Labs",
            "website": "https://voltcell.example.com",
            "mission_statement": "Make grid storage safe and cheap",
            "company_description": "Voltcell Labs builds solid-state batteries for utilities.",
        },
        "technology": {
            "core_technology": "Solid-state lithium metal battery cells",
            "technology_category": "energy storage",
            "technical_approach": "Ceramic electrolyte separators",
            "key_innovations": [
                "Dendrite-free anode",
                "Low-temperature sintering",
                "Recyclable casing",
                "Modular packs",
            ],
        },
        "products_and_applications": {
            "primary_application": "Utility-scale grid storage",
            "target_industries": ["Utilities", "Renewables"],
            "use_cases": ["Peak shaving", "[Use case 3]"],
        },
        "market_context": {
            "industry": "Energy",
            "sub_sector": "Batteries",
            "problem_addressed": "Lithium-ion fire risk in grid installations",
            "value_proposition": "Non-flammable cells with longer cycle life",
            "business_model": "Hardware sales",
        },
        "data_quality_assessment": {
            "primary_sources": ["Company website"],
        },
    }


def sample_competitive_analysis() -> dict:
    """Create a sample competitive analysis payload (out-6)."""
    return {
        "competitors": [
            {
                "company_name": "GridCore",
                "product_name": "GC-500",
                "product_description": "Flow battery for utilities",
                "size_category": "Large",
                "strengths": ["Installed base"],
                "weaknesses": ["Low energy density"],
            },
            {
                "company_name": "{competitor_name}",
                "product_name": "{product}",
            },
            {
                "company_name": "Ionic Startup",
                "product_name": "",
                "size_category": "Startup",
            },
        ],
        "data_quality": {
            "confidence_level": 0.8,
            "sources_used": ["Industry reports"],
        },
    }


def sample_competitive_graded() -> dict:
    """Create a sample graded competitive assessment (out-7)."""
    return {
        "score": 6,
        "score_justification": "Several funded competitors, none dominant.",
        "competitor_count": {
            "total": 12,
            "large_companies": 3,
            "mid_size_companies": 4,
            "startups": 5,
        },
        "market_leaders": ["GridCore", "Stor Inc"],
        "competitive_intensity": "moderate",
        "key_risk_factors": ["Incumbent pricing"],
        "differentiation_opportunities": ["Safety certification"],
        "rubric_match_explanation": "Moderate competition with clear gaps.",
    }


def sample_market_data() -> dict:
    """Create a sample market data payload (out-2)."""
    return {
        "primary_market": {
            "description": "Utility-scale battery storage",
            "tam_usd": 45000000000,
            "cagr_percent": 18.5,
            "selection_rationale": "Largest addressable segment",
        },
        "markets": [
            {
                "description": "Utility-scale battery storage",
                "tam_current_usd": 45000000000,
                "cagr_percent": 18.5,
                "confidence": 0.7,
            },
        ],
        "market_analysis": {
            "executive_summary": "Rapidly growing market.",
            "trends": ["Renewables build-out"],
            "opportunities": ["Safety regulation"],
            "unmet_needs": ["Fire-safe storage"],
            "barriers_to_entry": ["Certification cost"],
        },
    }


def sample_market_scoring() -> dict:
    """Create a sample market scoring payload (out-3)."""
    return {
        "score": 7,
        "confidence": 0.75,
        "justification": {
            "summary": "Large, fast-growing market.",
            "strengths_considered": ["High CAGR"],
            "limitations_considered": ["Long sales cycles"],
            "key_risks": ["Policy changes"],
        },
        "rubric_application": {
            "tam_value": 45000000000,
            "tam_category": "large",
            "cagr_value": 18.5,
            "cagr_category": "high",
            "rubric_intersection": "large/high",
            "base_score": 7,
            "adjustment": 0,
        },
        "data_quality": {
            "data_recency": "2024",
            "data_concerns": [],
        },
    }


def company_envelope() -> dict:
    """Company provider envelope with a JSON-encoded output."""
    return {"outputs": {"out-6": json.dumps(sample_company_output())}}


def competitive_envelope(graded: dict | None = None) -> dict:
    """Competitive provider envelope with JSON-encoded outputs."""
    return {
        "outputs": {
            "out-6": json.dumps(sample_competitive_analysis()),
            "out-7": json.dumps(graded if graded is not None else sample_competitive_graded()),
        }
    }


def market_envelope() -> dict:
    """Market provider envelope mixing a JSON string and a decoded object."""
    return {
        "outputs": {
            "out-2": json.dumps(sample_market_data()),
            "out-3": sample_market_scoring(),
        }
    }
