"""Technology description builder.

Turns a normalized company profile into the free-text technology
description consumed by the competitive and market providers.
"""

from venture_assessment.models.results import CompanyProfile

# Descriptions shorter than this get a generic closing sentence
MIN_DESCRIPTION_LENGTH = 200

MAX_INNOVATIONS = 3

FILLER_SENTENCE = (
    "This company is developing innovative technology solutions for their target market."
)


def build_tech_description(company: CompanyProfile) -> str:
    """Compose a technology description from a company profile.
    
    Sections are joined by blank lines in a fixed order: name, mission,
    description, core technology, technical approach, up to three key
    innovations, primary application, target industries, problem addressed
    and value proposition. Empty sections are omitted.
    
    Args:
        company: Normalized company profile
    
    Returns:
        Description text of at least one section
    """
    parts = []
    
    if company.name:
        parts.append(f"Company: {company.name}")
    if company.mission_statement:
        parts.append(f"Mission: {company.mission_statement}")
    if company.company_description:
        parts.append(company.company_description)
    
    if company.core_technology:
        parts.append(f"Core Technology: {company.core_technology}")
    if company.technical_approach:
        parts.append(f"Technical Approach: {company.technical_approach}")
    if company.key_innovations:
        parts.append(f"Key Innovations: {'; '.join(company.key_innovations[:MAX_INNOVATIONS])}")
    
    if company.primary_application:
        parts.append(f"Primary Application: {company.primary_application}")
    if company.target_industries:
        parts.append(f"Target Industries: {', '.join(company.target_industries)}")
    
    if company.problem_addressed:
        parts.append(f"Problem Addressed: {company.problem_addressed}")
    if company.value_proposition:
        parts.append(f"Value Proposition: {company.value_proposition}")
    
    if len("\n\n".join(parts)) < MIN_DESCRIPTION_LENGTH:
        parts.append(FILLER_SENTENCE)
    
    return "\n\n".join(parts)
