"""Input validation and normalization utilities.

This module validates everything a person types into the system:
- The starting input (company website URL or free-text technology description)
- URL normalization (scheme added when missing, hostname must contain a dot)
- Reviewer assessments (score 1-9, justification 20-2000 characters)

URL and assessment checks return results; classify_input raises
ValidationError because an invalid starting input aborts the run.
"""

import logging
import re
from typing import Any, Literal
from urllib.parse import urlparse, urlunparse

from pydantic import BaseModel

from venture_assessment.config import get_config
from venture_assessment.exceptions.validation_error import ValidationError
from venture_assessment.validators.base_validator import ValidationResult
from venture_assessment.validators.coercion import is_valid_score

logger = logging.getLogger(__name__)

# Allowed URL schemes
ALLOWED_URL_SCHEMES = {'http', 'https'}

MAX_URL_LENGTH = 2048

JUSTIFICATION_MIN_LENGTH = 20
JUSTIFICATION_MAX_LENGTH = 2000

_SCHEME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')


class ClassifiedInput(BaseModel):
    """Starting input after classification.
    
    Attributes:
        kind: "url" when the company phase should run, "text" otherwise
        value: Normalized URL or trimmed technology description
    """
    
    kind: Literal["url", "text"]
    value: str


def validate_url(url: str) -> tuple[bool, str | None]:
    """Validate and normalize a URL.
    
    Adds ``https://`` when no scheme is present, accepts only http(s), and
    requires a hostname containing a dot.
    
    Args:
        url: URL string to validate
    
    Returns:
        Tuple of (is_valid: bool, normalized_url: str | None)
    
    Example:
        ```python
        is_valid, normalized = validate_url("example.com")
        # Returns: (True, "https://example.com")
        
        is_valid, normalized = validate_url("javascript:alert(1)")
        # Returns: (False, None)
        ```
    """
    if not url or not url.strip():
        return False, None
    
    url = url.strip()
    if any(ch.isspace() for ch in url):
        return False, None
    
    if not _SCHEME_PATTERN.match(url):
        url = f"https://{url}"
    
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError as e:
        logger.debug(f"URL validation failed: {e}, URL: {url}")
        return False, None
    
    scheme = parsed.scheme.lower()
    if scheme not in ALLOWED_URL_SCHEMES:
        logger.debug(f"URL validation failed: disallowed scheme '{scheme}': {url}")
        return False, None
    
    if not hostname or "." not in hostname or hostname.startswith(".") or hostname.endswith("."):
        logger.debug(f"URL validation failed: invalid hostname: {url}")
        return False, None
    
    normalized = urlunparse((
        scheme,
        parsed.netloc.lower(),
        parsed.path,
        parsed.params,
        parsed.query,
        parsed.fragment,
    ))
    
    if len(normalized) > MAX_URL_LENGTH:
        logger.debug(f"URL validation failed: URL too long: {len(normalized)} characters")
        return False, None
    
    return True, normalized


def classify_input(raw: str, config: Any | None = None) -> ClassifiedInput:
    """Decide whether the starting input is a URL or a technology description.
    
    A single whitespace-free token that validates as an http(s) URL runs the
    company phase. Anything else is used directly as the technology
    description and must satisfy the configured length bounds.
    
    Args:
        raw: User input
        config: Optional Config instance. If not provided, uses get_config()
    
    Returns:
        ClassifiedInput
    
    Raises:
        ValidationError: If the input is empty, too short, or too long
    """
    if config is None:
        config = get_config()
    
    text = (raw or "").strip()
    if not text:
        raise ValidationError(
            "Input cannot be empty",
            context={"input_length": 0}
        )
    
    if len(text) > config.max_input_length:
        raise ValidationError(
            f"Input is too long. Maximum length: {config.max_input_length} characters",
            context={
                "input_length": len(text),
                "max_length": config.max_input_length
            }
        )
    
    if not any(ch.isspace() for ch in text):
        is_valid, normalized = validate_url(text)
        if is_valid:
            logger.debug(f"Input classified as URL: {normalized}")
            return ClassifiedInput(kind="url", value=normalized)
    
    if len(text) < config.min_input_length:
        raise ValidationError(
            f"Technology description is too short. Minimum length: {config.min_input_length} characters",
            context={
                "input_length": len(text),
                "min_length": config.min_input_length
            }
        )
    
    logger.debug(f"Input classified as technology description ({len(text)} characters)")
    return ClassifiedInput(kind="text", value=text)


def validate_user_assessment(user_score: Any, justification: Any) -> ValidationResult:
    """Validate a reviewer's score and justification.
    
    Args:
        user_score: Reviewer score, must be an integer in [1, 9]
        justification: Reviewer text, 20-2000 characters after trimming
    
    Returns:
        ValidationResult whose data is ``{"user_score", "justification"}``
        (justification trimmed) when valid
    """
    result = ValidationResult.success()
    
    if not is_valid_score(user_score):
        result.add_error("Score must be between 1 and 9")
    
    if not isinstance(justification, str):
        result.add_error("Justification is required")
    else:
        text = justification.strip()
        if len(text) < JUSTIFICATION_MIN_LENGTH:
            result.add_error(
                f"Justification must be at least {JUSTIFICATION_MIN_LENGTH} characters"
            )
        elif len(text) > JUSTIFICATION_MAX_LENGTH:
            result.add_error(
                f"Justification must be less than {JUSTIFICATION_MAX_LENGTH} characters"
            )
    
    if result.is_valid:
        result.data = {"user_score": user_score, "justification": justification.strip()}
    return result
