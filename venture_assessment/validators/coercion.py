"""Shared coercion rules for provider payloads.

Policy: a missing or invalid mandatory field is an error; a missing or
malformed optional field is replaced by its documented default and reported
as a warning. Every provider validator builds on these helpers so the rules
are defined once.
"""

import json
import logging
import re
from typing import Any

from venture_assessment.models.results import UNKNOWN, DecodedOutput
from venture_assessment.validators.base_validator import ValidationResult

logger = logging.getLogger(__name__)

# Template artifacts such as "{company_name}" or "[Competitor 1]"
PLACEHOLDER_PATTERN = re.compile(r"^\s*(\{[^{}]*\}|\[[^\[\]]*\])\s*$")

SCORE_MIN = 1
SCORE_MAX = 9


def decode_output(value: Any, key: str) -> tuple[DecodedOutput | None, str | None]:
    """Decode one provider output into its object form.
    
    Outputs may arrive as a JSON-encoded string or as an already decoded
    object. Both variants are accepted; anything else is an error.
    
    Args:
        value: Raw output value from the provider envelope
        key: Output key, used in error messages
    
    Returns:
        Tuple of (decoded output, None) on success or (None, error message)
    """
    if value is None or value == "":
        return None, f"Missing required output: {key}"
    
    if isinstance(value, dict):
        return DecodedOutput(kind="object", value=value, text=json.dumps(value)), None
    
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError as e:
            return None, f"Output {key} is not valid JSON: {e.msg}"
        if not isinstance(decoded, dict):
            return None, f"Output {key} must decode to an object, got {type(decoded).__name__}"
        return DecodedOutput(kind="json_text", value=decoded, text=value), None
    
    return None, f"Output {key} has unsupported type {type(value).__name__}"


def check_score(value: Any, dimension: str, result: ValidationResult) -> int | None:
    """Validate a mandatory 1-9 integer score.
    
    Booleans, floats (even integral ones), strings and None are rejected.
    
    Args:
        value: Raw score value
        dimension: Dimension name used in the error message
        result: ValidationResult that receives the error
    
    Returns:
        The score, or None when invalid
    """
    if (
        isinstance(value, bool)
        or not isinstance(value, int)
        or not SCORE_MIN <= value <= SCORE_MAX
    ):
        result.add_error(f"Invalid {dimension} score: {value}")
        return None
    return value


def is_valid_score(value: Any) -> bool:
    """Return True if value is an integer score in [1, 9]."""
    return (
        not isinstance(value, bool)
        and isinstance(value, int)
        and SCORE_MIN <= value <= SCORE_MAX
    )


def is_valid_confidence(value: Any) -> bool:
    """Return True if value is a number in [0, 1]."""
    return (
        not isinstance(value, bool)
        and isinstance(value, (int, float))
        and 0.0 <= value <= 1.0
    )


def coerce_confidence(
    value: Any,
    field: str,
    result: ValidationResult,
) -> float | None:
    """Coerce an optional confidence value.
    
    Out-of-range or non-numeric values become None and are reported as a
    warning; they are never passed through.
    
    Args:
        value: Raw confidence value
        field: Field path used in the warning
        result: ValidationResult that receives the warning
    
    Returns:
        Confidence in [0, 1], or None
    """
    if value is None:
        return None
    if is_valid_confidence(value):
        return float(value)
    result.add_warning(f"Discarded invalid confidence at {field}: {value!r}")
    return None


def is_placeholder(text: str) -> bool:
    """Return True for bracket- or brace-wrapped template artifacts."""
    return bool(PLACEHOLDER_PATTERN.match(text))


def clean_string_list(value: Any, field: str, result: ValidationResult) -> list[str]:
    """Coerce an optional string-array field.
    
    Keeps non-empty strings (trimmed) and drops placeholder tokens. A value
    that is not a list becomes an empty list with a warning.
    
    Args:
        value: Raw list value
        field: Field path used in warnings
        result: ValidationResult that receives warnings
    
    Returns:
        Cleaned list of strings
    """
    if value is None:
        return []
    if not isinstance(value, list):
        result.add_warning(f"Expected a list at {field}, got {type(value).__name__}")
        return []
    
    cleaned = []
    for item in value:
        if not isinstance(item, str):
            continue
        text = item.strip()
        if text and not is_placeholder(text):
            cleaned.append(text)
    return cleaned


def coerce_text(value: Any, default: str = "") -> str:
    """Coerce an optional text field, falling back to default.
    
    Placeholders and blank strings count as missing.
    """
    if isinstance(value, str):
        text = value.strip()
        if text and not is_placeholder(text):
            return text
        return default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def coerce_label(value: Any) -> str:
    """Coerce an optional categorical field, defaulting to "unknown"."""
    return coerce_text(value, default=UNKNOWN)


def coerce_number(value: Any, default: float = 0) -> float:
    """Coerce an optional numeric field.
    
    Numeric strings such as "12.5" are parsed; anything else yields default.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return default
    return default


def coerce_count(value: Any) -> int:
    """Coerce an optional non-negative count, defaulting to 0."""
    number = coerce_number(value, default=0)
    try:
        return max(0, int(number))
    except (OverflowError, ValueError):
        return 0


def as_mapping(value: Any, field: str, result: ValidationResult) -> dict[str, Any]:
    """Return value if it is a mapping, else an empty one with a warning."""
    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    result.add_warning(f"Expected an object at {field}, got {type(value).__name__}")
    return {}


def require_mapping(
    value: Any,
    field: str,
    result: ValidationResult,
) -> dict[str, Any] | None:
    """Return value if it is a non-empty mapping, else record an error."""
    if isinstance(value, dict) and value:
        return value
    result.add_error(f"Missing required field: {field}")
    return None


def require_number(value: Any, field: str, result: ValidationResult) -> float | None:
    """Return a mandatory numeric field, recording an error when absent."""
    if isinstance(value, bool) or value is None:
        result.add_error(f"Missing required field: {field}")
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            pass
    result.add_error(f"Invalid numeric value at {field}: {value!r}")
    return None
