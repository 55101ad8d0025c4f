"""Assessment state store.

The store owns the canonical SessionState. It is mutated only through
validated setters, readers always receive deep copies, and every mutation
notifies subscribers synchronously and schedules a debounced save.

Failed validations never raise: the offending record is tagged (an
assessment gets ``status="error"`` and ``error``; the session gets
``last_error``) and the ValidationResult is returned to the caller.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable

from venture_assessment.config import get_config
from venture_assessment.models.assessment import Assessment, SessionState
from venture_assessment.models.snapshot import (PersistedAssessment,
                                                PersistedSnapshot)
from venture_assessment.state.persistence import (DebouncedWriter,
                                                  SnapshotStorage,
                                                  encode_snapshot)
from venture_assessment.validators.base_validator import ValidationResult
from venture_assessment.validators.input_validator import \
    validate_user_assessment
from venture_assessment.validators.state_rules import (
    sanitize_snapshot, validate_assessment_update, validate_session_update)

logger = logging.getLogger(__name__)

Listener = Callable[[SessionState], Any]


class AssessmentStore:
    """Validated, observable, persisted session state.
    
    Lifecycle: construct, init() to load the persisted snapshot, mutate
    through the setters, dispose() to flush the pending autosave.
    """
    
    def __init__(
        self,
        storage: SnapshotStorage | None = None,
        autosave_delay: float = 1.0,
        max_bytes: int = 4_500_000,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the store.
        
        Args:
            storage: Snapshot storage; when None the store is memory-only
            autosave_delay: Quiet period in seconds before an autosave
            max_bytes: Size bound of the serialized snapshot
            clock: Optional time source for timestamps
        """
        self._storage = storage
        self._max_bytes = max_bytes
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._state = SessionState()
        self._listeners: list[Listener] = []
        self._writer = DebouncedWriter(self.save, autosave_delay)
        self._initialized = False
    
    @classmethod
    def from_config(cls, config: Any | None = None) -> "AssessmentStore":
        """Build a file-backed store from the application configuration."""
        if config is None:
            config = get_config()
        return cls(
            storage=SnapshotStorage(config.state_file),
            autosave_delay=config.state_autosave_delay,
            max_bytes=config.state_max_bytes,
        )
    
    # Lifecycle
    
    def init(self) -> bool:
        """Load the persisted snapshot, if any.
        
        Returns:
            True if a snapshot was restored
        """
        restored = self.load()
        self._initialized = True
        return restored
    
    def reset(self) -> None:
        """Restore the empty state and clear the persisted snapshot."""
        self._writer.cancel()
        self._state = SessionState()
        if self._storage is not None:
            try:
                self._storage.clear()
            except OSError as e:
                logger.error(f"Failed to clear snapshot: {e}")
        logger.info("Assessment state reset")
        self._notify()
    
    def dispose(self) -> None:
        """Flush any pending autosave and drop all listeners."""
        self._writer.flush()
        self._listeners.clear()
        self._initialized = False
    
    # Readers
    
    def get_state(self) -> SessionState:
        """Return a deep copy of the full state."""
        return self._state.model_copy(deep=True)
    
    def get_assessment(self, dimension: str) -> Assessment:
        """Return a deep copy of one assessment.
        
        Raises:
            KeyError: If the dimension is unknown
        """
        return self._state.assessments[dimension].model_copy(deep=True)
    
    def are_all_assessments_complete(self) -> bool:
        """Whether the reviewer submitted every assessment."""
        return all(a.submitted for a in self._state.assessments.values())
    
    def get_completed_count(self) -> int:
        """Number of assessments the reviewer submitted."""
        return sum(1 for a in self._state.assessments.values() if a.submitted)
    
    def get_summary(self) -> dict[str, Any]:
        """Derived score metrics for presentation.
        
        Returns:
            Dictionary with per-dimension scores, the AI and reviewer
            averages (None when no score is set) and the completion count
        """
        assessments = self._state.assessments
        ai_scores = [a.ai_score for a in assessments.values() if a.ai_score is not None]
        user_scores = [a.user_score for a in assessments.values() if a.user_score is not None]
        return {
            "scores": {
                dimension: {
                    "ai_score": a.ai_score,
                    "user_score": a.user_score,
                    "confidence": a.confidence,
                    "status": a.status,
                }
                for dimension, a in assessments.items()
            },
            "ai_average": sum(ai_scores) / len(ai_scores) if ai_scores else None,
            "user_average": sum(user_scores) / len(user_scores) if user_scores else None,
            "completed_count": self.get_completed_count(),
            "total": len(assessments),
        }
    
    # Mutations
    
    def set_state(self, **partial: Any) -> ValidationResult:
        """Apply a partial session-level update.
        
        Returns:
            ValidationResult; on failure nothing is applied and the error is
            recorded as ``last_error``
        """
        result = validate_session_update(partial)
        if not result.is_valid:
            logger.warning(f"Rejected state update: {result.errors}")
            self._state.last_error = result.errors[0]
        else:
            for field, value in partial.items():
                setattr(self._state, field, value)
        self._changed()
        return result
    
    def set_assessment_data(self, dimension: str, partial: dict[str, Any]) -> ValidationResult:
        """Apply a partial update to one assessment.
        
        Args:
            dimension: "competitive" or "market"
            partial: Field updates in snake_case
        
        Returns:
            ValidationResult; on failure nothing from the update is applied
            and the assessment is tagged with ``status="error"``
        """
        result = validate_assessment_update(dimension, partial)
        if dimension not in self._state.assessments:
            logger.warning(f"Rejected update for unknown dimension {dimension!r}")
            return result
        
        assessment = self._state.assessments[dimension]
        if not result.is_valid:
            logger.warning(f"Rejected {dimension} assessment update: {result.errors}")
            assessment.status = "error"
            assessment.error = result.errors[0]
        else:
            for field, value in partial.items():
                setattr(assessment, field, value)
            if assessment.status != "error" and "error" not in partial:
                assessment.error = None
        assessment.timestamp = self._now()
        self._changed()
        return result
    
    def submit_assessment(
        self,
        dimension: str,
        user_score: Any,
        justification: Any,
    ) -> ValidationResult:
        """Record the reviewer's score and justification for a dimension.
        
        Returns:
            ValidationResult; invalid submissions leave the assessment untouched
        """
        if dimension not in self._state.assessments:
            return ValidationResult.failure(f"Unknown assessment dimension: {dimension}")
        
        result = validate_user_assessment(user_score, justification)
        if not result.is_valid:
            return result
        
        assessment = self._state.assessments[dimension]
        assessment.user_score = result.data["user_score"]
        assessment.justification = result.data["justification"]
        assessment.submitted = True
        assessment.timestamp = self._now()
        logger.info(f"{dimension} assessment submitted with score {assessment.user_score}")
        self._changed()
        return result
    
    # Subscriptions
    
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with a state copy after every mutation.
        
        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)
        
        def unsubscribe() -> None:
            self.unsubscribe(listener)
        
        return unsubscribe
    
    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)
    
    # Persistence
    
    def build_snapshot(self) -> PersistedSnapshot:
        """Build the persisted form of the current state."""
        return PersistedSnapshot(
            input_descriptor=self._state.input_descriptor,
            assessments={
                dimension: PersistedAssessment(
                    **assessment.model_dump(exclude={"error"})
                )
                for dimension, assessment in self._state.assessments.items()
            },
            competitive_artifact_text=self._state.competitive_artifact_text,
            timestamp=self._now(),
        )
    
    def save(self) -> bool:
        """Write the snapshot now.
        
        Returns:
            True if the snapshot was written
        """
        if self._storage is None:
            return False
        
        text = encode_snapshot(self.build_snapshot(), self._max_bytes)
        if text is None:
            logger.error(
                f"Snapshot exceeds {self._max_bytes} bytes even without heavy fields; "
                f"skipping write"
            )
            return False
        
        try:
            self._storage.write(text)
        except OSError as e:
            logger.error(f"Failed to write snapshot to {self._storage.path}: {e}")
            return False
        
        logger.debug("Assessment snapshot saved")
        return True
    
    def load(self) -> bool:
        """Load and adopt the persisted snapshot.
        
        Unparsable content or a version mismatch clears the stored snapshot
        and leaves the state empty. Individually invalid fields are
        replaced by their defaults.
        
        Returns:
            True if a snapshot was adopted
        """
        if self._storage is None:
            return False
        
        try:
            text = self._storage.read()
        except UnicodeDecodeError as e:
            logger.warning(f"Discarding undecodable snapshot: {e}")
            self._discard_snapshot()
            return False
        except OSError as e:
            logger.error(f"Failed to read snapshot: {e}")
            return False
        if text is None:
            return False
        
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding unparsable snapshot: {e}")
            self._discard_snapshot()
            return False
        
        result = sanitize_snapshot(raw)
        if not result.is_valid:
            logger.warning(f"Discarding snapshot: {result.errors[0]}")
            self._discard_snapshot()
            return False
        
        snapshot: PersistedSnapshot = result.data
        self._state = SessionState(
            input_descriptor=snapshot.input_descriptor,
            competitive_artifact_text=snapshot.competitive_artifact_text,
            assessments={
                dimension: Assessment(**persisted.model_dump())
                for dimension, persisted in snapshot.assessments.items()
            },
        )
        logger.info(f"Restored assessment snapshot from {snapshot.timestamp}")
        self._notify()
        return True
    
    def _discard_snapshot(self) -> None:
        self._state = SessionState()
        try:
            self._storage.clear()
        except OSError as e:
            logger.error(f"Failed to clear snapshot: {e}")
    
    # Internals
    
    def _now(self) -> str:
        return self._clock().isoformat()
    
    def _changed(self) -> None:
        self._notify()
        if self._storage is not None:
            self._writer.schedule()
    
    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.get_state())
            except Exception as e:
                logger.error(
                    f"State listener {getattr(listener, '__name__', listener)!r} failed: {e}",
                    exc_info=True,
                )
