"""Persisted snapshot models.

The snapshot is what the state store writes to durable storage. Field names
are serialized in camelCase to keep the on-disk format stable.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from venture_assessment.models.assessment import AssessmentStatus

SNAPSHOT_VERSION = "1.0"


class PersistedAssessment(BaseModel):
    """One assessment as stored in the snapshot."""
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    
    status: AssessmentStatus = "pending"
    ai_score: int | None = Field(default=None, ge=1, le=9)
    user_score: int | None = Field(default=None, ge=1, le=9)
    justification: str = ""
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    submitted: bool = False
    timestamp: str | None = None
    data: dict[str, Any] | None = None
    raw_data: Any = None


class PersistedSnapshot(BaseModel):
    """Versioned, serializable copy of the session state.
    
    Attributes:
        version: Snapshot schema version
        input_descriptor: The starting URL or technology description
        assessments: Persisted competitive and market assessments
        competitive_artifact_text: Competitive output used by the market phase
        timestamp: ISO-8601 time the snapshot was written
    """
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    
    version: str = SNAPSHOT_VERSION
    input_descriptor: str = ""
    assessments: dict[str, PersistedAssessment] = Field(default_factory=dict)
    competitive_artifact_text: str | None = None
    timestamp: str
