"""Assessment and session state models owned by the state store."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from venture_assessment.models.session import OverallStatus, PhaseKey

AssessmentStatus = Literal["pending", "in-progress", "complete", "error"]
Dimension = Literal["competitive", "market"]
CurrentView = Literal["competitive", "market", "summary"]

DIMENSIONS: tuple[str, ...] = ("competitive", "market")


class Assessment(BaseModel):
    """Scoring record for one assessment dimension.
    
    Attributes:
        status: pending, in-progress, complete or error
        ai_score: Provider score (1-9) or None
        user_score: Reviewer score (1-9) or None
        justification: Reviewer justification text
        confidence: Provider confidence (0-1) or None
        submitted: Whether the reviewer submitted the assessment
        data: Normalized provider result as a plain dictionary
        raw_data: Opaque provider envelope; dropped first under storage pressure
        error: Validation message when the record is tagged with an error
        timestamp: ISO-8601 time of the last mutation
    """
    
    status: AssessmentStatus = "pending"
    ai_score: int | None = Field(default=None, ge=1, le=9)
    user_score: int | None = Field(default=None, ge=1, le=9)
    justification: str = ""
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    submitted: bool = False
    data: dict[str, Any] | None = None
    raw_data: Any = None
    error: str | None = None
    timestamp: str | None = None


def _default_assessments() -> dict[str, Assessment]:
    return {dimension: Assessment() for dimension in DIMENSIONS}


class SessionState(BaseModel):
    """Canonical state held by the assessment store.
    
    Attributes:
        input_descriptor: The starting URL or technology description
        is_analyzing: True while a pipeline run is in flight
        analysis_phase: Key of the active phase, if any
        overall_status: Mirror of the pipeline's overall status
        current_assessment: Dimension or summary the reviewer is looking at
        competitive_artifact_text: Competitive output handed to the market phase
        assessments: One Assessment per dimension
        last_error: Last session-level error message
    """
    
    input_descriptor: str = ""
    is_analyzing: bool = False
    analysis_phase: PhaseKey | None = None
    overall_status: OverallStatus = "idle"
    current_assessment: CurrentView | None = None
    competitive_artifact_text: str | None = None
    assessments: dict[str, Assessment] = Field(default_factory=_default_assessments)
    last_error: str | None = None
