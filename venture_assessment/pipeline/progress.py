"""Time-weighted progress estimation for a pipeline run."""

from datetime import datetime

from pydantic import BaseModel, Field

from venture_assessment.models.session import AnalysisSession

# Progress never reaches 100 before the run has actually completed
MAX_RUNNING_PERCENTAGE = 95.0


class PipelineProgress(BaseModel):
    """Progress snapshot of a pipeline run.
    
    Attributes:
        percentage: Estimated completion, 0-100
        elapsed_seconds: Time since the run started
        current_phase_key: Key of the active phase, if any
        estimated_total_seconds: Sum of the expected durations of the phases
            that actually run
        remaining_seconds: Estimated time left
    """
    
    percentage: float = Field(default=0.0, ge=0.0, le=100.0)
    elapsed_seconds: float = 0.0
    current_phase_key: str | None = None
    estimated_total_seconds: float = 0.0
    remaining_seconds: float = 0.0


def estimate_progress(session: AnalysisSession, now: datetime) -> PipelineProgress:
    """Estimate progress from the phases' expected durations.
    
    Completed phases contribute their full share; the active phase
    contributes its share scaled by ``min(1, elapsed / expected)``. Skipped
    phases are left out of the total. The result is capped at 95 until the
    run has completed, then reported as 100.
    
    Args:
        session: Current analysis session
        now: Current time (same clock as the session timestamps)
    
    Returns:
        PipelineProgress
    """
    phases = [p for p in session.phases if not p.skipped]
    total = sum(p.expected_duration_seconds for p in phases)
    
    if session.started_at is None:
        return PipelineProgress(estimated_total_seconds=total, remaining_seconds=total)
    
    end = session.ended_at or now
    elapsed = max(0.0, (end - session.started_at).total_seconds())
    
    if session.overall_status == "completed":
        return PipelineProgress(
            percentage=100.0,
            elapsed_seconds=elapsed,
            estimated_total_seconds=total,
            remaining_seconds=0.0,
        )
    
    percentage = 0.0
    remaining = 0.0
    current_key = None
    for phase in phases:
        share = phase.expected_duration_seconds / total * 100 if total else 0.0
        if phase.status == "completed":
            percentage += share
        elif phase.status == "active":
            current_key = phase.key
            phase_elapsed = 0.0
            if phase.started_at is not None:
                phase_elapsed = max(0.0, (now - phase.started_at).total_seconds())
            ratio = min(1.0, phase_elapsed / phase.expected_duration_seconds)
            percentage += share * ratio
            remaining += max(0.0, phase.expected_duration_seconds - phase_elapsed)
        elif phase.status == "pending":
            remaining += phase.expected_duration_seconds
    
    if session.overall_status != "running":
        remaining = 0.0
    
    return PipelineProgress(
        percentage=round(min(percentage, MAX_RUNNING_PERCENTAGE), 2),
        elapsed_seconds=elapsed,
        current_phase_key=current_key,
        estimated_total_seconds=total,
        remaining_seconds=remaining,
    )
