"""Rule table for state store mutations and snapshot sanitization.

Every field the store accepts is listed here with the predicate that guards
it. Setters validate a partial update against the table before applying it;
snapshot loading sanitizes each persisted field on its own, so one invalid
value (say ``aiScore: 15``) is nulled without discarding the rest.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from venture_assessment.models.assessment import DIMENSIONS
from venture_assessment.models.session import PHASE_ORDER
from venture_assessment.models.snapshot import (SNAPSHOT_VERSION,
                                                PersistedAssessment,
                                                PersistedSnapshot)
from venture_assessment.validators.base_validator import ValidationResult
from venture_assessment.validators.coercion import (is_valid_confidence,
                                                    is_valid_score)

logger = logging.getLogger(__name__)

ASSESSMENT_STATUSES = ("pending", "in-progress", "complete", "error")
OVERALL_STATUSES = ("idle", "running", "completed", "error", "cancelled")
CURRENT_VIEWS = ("competitive", "market", "summary")


def _optional(check: Callable[[Any], bool]) -> Callable[[Any], bool]:
    return lambda value: value is None or check(value)


def _is_text(value: Any) -> bool:
    return isinstance(value, str)


def _is_flag(value: Any) -> bool:
    return isinstance(value, bool)


SESSION_RULES: dict[str, Callable[[Any], bool]] = {
    "input_descriptor": _is_text,
    "is_analyzing": _is_flag,
    "analysis_phase": _optional(lambda v: v in PHASE_ORDER),
    "overall_status": lambda v: v in OVERALL_STATUSES,
    "current_assessment": _optional(lambda v: v in CURRENT_VIEWS),
    "competitive_artifact_text": _optional(_is_text),
    "last_error": _optional(_is_text),
}

ASSESSMENT_RULES: dict[str, Callable[[Any], bool]] = {
    "status": lambda v: v in ASSESSMENT_STATUSES,
    "ai_score": _optional(is_valid_score),
    "user_score": _optional(is_valid_score),
    "justification": _is_text,
    "confidence": _optional(is_valid_confidence),
    "submitted": _is_flag,
    "data": _optional(lambda v: isinstance(v, dict)),
    "raw_data": lambda v: True,
    "error": _optional(_is_text),
    "timestamp": _optional(_is_text),
}


def _assessment_message(dimension: str, field: str, value: Any) -> str:
    if field == "ai_score":
        return f"Invalid {dimension} score: {value}"
    if field == "user_score":
        return f"Invalid {dimension} user score: {value}"
    return f"Invalid {dimension} {field}: {value!r}"


def validate_session_update(partial: dict[str, Any]) -> ValidationResult:
    """Validate a partial session-level update against the rule table."""
    result = ValidationResult.success(data=dict(partial))
    for field, value in partial.items():
        rule = SESSION_RULES.get(field)
        if rule is None:
            result.add_error(f"Unknown state field: {field}")
        elif not rule(value):
            result.add_error(f"Invalid value for {field}: {value!r}")
    return result


def validate_assessment_update(dimension: str, partial: dict[str, Any]) -> ValidationResult:
    """Validate a partial assessment update for one dimension.
    
    Args:
        dimension: "competitive" or "market"
        partial: Field updates in snake_case
    
    Returns:
        ValidationResult carrying the accepted update as data
    """
    if dimension not in DIMENSIONS:
        return ValidationResult.failure(f"Unknown assessment dimension: {dimension}")
    
    result = ValidationResult.success(data=dict(partial))
    for field, value in partial.items():
        rule = ASSESSMENT_RULES.get(field)
        if rule is None:
            result.add_error(f"Unknown assessment field: {field}")
        elif not rule(value):
            result.add_error(_assessment_message(dimension, field, value))
    return result


def _sanitize_assessment(
    dimension: str,
    raw: Any,
    result: ValidationResult,
) -> PersistedAssessment:
    """Sanitize one persisted assessment field by field.
    
    Invalid scores and confidence are nulled individually; other invalid
    fields fall back to their defaults. Every replacement is a warning.
    """
    if not isinstance(raw, dict):
        if raw is not None:
            result.add_warning(f"Discarded malformed {dimension} assessment")
        return PersistedAssessment()
    
    def take(alias: str, check: Callable[[Any], bool], default: Any) -> Any:
        value = raw.get(alias, default)
        if check(value):
            return value
        result.add_warning(f"Discarded invalid {dimension}.{alias}: {value!r}")
        return default
    
    return PersistedAssessment(
        status=take("status", ASSESSMENT_RULES["status"], "pending"),
        ai_score=take("aiScore", ASSESSMENT_RULES["ai_score"], None),
        user_score=take("userScore", ASSESSMENT_RULES["user_score"], None),
        justification=take("justification", _is_text, ""),
        confidence=take("confidence", ASSESSMENT_RULES["confidence"], None),
        submitted=take("submitted", _is_flag, False),
        timestamp=take("timestamp", ASSESSMENT_RULES["timestamp"], None),
        data=take("data", ASSESSMENT_RULES["data"], None),
        raw_data=raw.get("rawData"),
    )


def sanitize_snapshot(raw: Any) -> ValidationResult:
    """Validate and sanitize a decoded snapshot.
    
    A non-object payload or a version mismatch fails the whole snapshot.
    Otherwise invalid fields are replaced one by one and reported as
    warnings.
    
    Args:
        raw: Decoded JSON content of the snapshot file
    
    Returns:
        ValidationResult whose data is a PersistedSnapshot when usable
    """
    if not isinstance(raw, dict):
        return ValidationResult.failure("Snapshot is not an object")
    
    version = raw.get("version")
    if version != SNAPSHOT_VERSION:
        return ValidationResult.failure(
            f"Snapshot version mismatch: expected {SNAPSHOT_VERSION}, got {version!r}"
        )
    
    result = ValidationResult.success()
    
    raw_assessments = raw.get("assessments")
    if not isinstance(raw_assessments, dict):
        if raw_assessments is not None:
            result.add_warning("Discarded malformed assessments")
        raw_assessments = {}
    
    assessments = {
        dimension: _sanitize_assessment(dimension, raw_assessments.get(dimension), result)
        for dimension in DIMENSIONS
    }
    
    input_descriptor = raw.get("inputDescriptor", "")
    if not isinstance(input_descriptor, str):
        result.add_warning(f"Discarded invalid inputDescriptor: {input_descriptor!r}")
        input_descriptor = ""
    
    artifact = raw.get("competitiveArtifactText")
    if artifact is not None and not isinstance(artifact, str):
        result.add_warning("Discarded invalid competitiveArtifactText")
        artifact = None
    
    timestamp = raw.get("timestamp")
    if not isinstance(timestamp, str):
        timestamp = datetime.now(timezone.utc).isoformat()
    
    result.data = PersistedSnapshot(
        version=SNAPSHOT_VERSION,
        input_descriptor=input_descriptor,
        assessments=assessments,
        competitive_artifact_text=artifact,
        timestamp=timestamp,
    )
    
    for warning in result.warnings:
        logger.warning(f"Snapshot sanitized: {warning}")
    return result
