"""Analysis session and phase models.

An AnalysisSession describes one pipeline run: the starting input, the three
phases in their fixed order, and the overall status. It is created by the
pipeline on start() and mutated only by the pipeline.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

PhaseKey = Literal["company", "competitive", "market"]
PhaseStatus = Literal["pending", "active", "completed", "error"]
OverallStatus = Literal["idle", "running", "completed", "error", "cancelled"]

PHASE_ORDER: tuple[str, ...] = ("company", "competitive", "market")

PHASE_NAMES: dict[str, str] = {
    "company": "Company Analysis",
    "competitive": "Competitive Analysis",
    "market": "Market Analysis",
}


class PhaseError(BaseModel):
    """Classified failure recorded on a phase.
    
    Attributes:
        error_type: Exception class name (e.g. "ValidationError")
        message: Error message
    """
    
    error_type: str
    message: str


class Phase(BaseModel):
    """One provider invocation inside a pipeline run.
    
    Attributes:
        key: Phase key (company, competitive, market)
        name: Display name of the phase
        status: pending, active, completed or error
        started_at: Wall-clock time the phase became active
        ended_at: Wall-clock time the phase reached a terminal status
        expected_duration_seconds: Typical duration used for progress weighting
        data: Normalized provider result once the phase completed
        error: Classified failure once the phase errored
        skipped: True when the phase was bypassed (company phase on free text)
    """
    
    key: PhaseKey
    name: str
    status: PhaseStatus = "pending"
    started_at: datetime | None = None
    ended_at: datetime | None = None
    expected_duration_seconds: float = Field(..., gt=0)
    data: Any = None
    error: PhaseError | None = None
    skipped: bool = False
    
    @property
    def duration_seconds(self) -> float | None:
        """Elapsed wall-clock seconds between start and end, if both are set."""
        if self.started_at is None or self.ended_at is None:
            return None
        return (self.ended_at - self.started_at).total_seconds()


class AnalysisSession(BaseModel):
    """Root object for one pipeline run.
    
    Attributes:
        input_descriptor: The starting URL or technology description
        phases: Phases in fixed execution order
        overall_status: idle, running, completed, error or cancelled
        started_at: Wall-clock time the run started
        ended_at: Wall-clock time the run reached a terminal status
        tech_description: Normalized description fed to later phases
    """
    
    input_descriptor: str = ""
    phases: list[Phase] = Field(default_factory=list)
    overall_status: OverallStatus = "idle"
    started_at: datetime | None = None
    ended_at: datetime | None = None
    tech_description: str | None = None
    
    def get_phase(self, key: str) -> Phase:
        """Return the phase with the given key.
        
        Raises:
            KeyError: If no phase has that key
        """
        for phase in self.phases:
            if phase.key == key:
                return phase
        raise KeyError(key)
    
    @property
    def active_phase(self) -> Phase | None:
        """The phase currently active, if any."""
        return next((p for p in self.phases if p.status == "active"), None)


def create_session(
    input_descriptor: str,
    expected_durations: dict[str, float],
) -> AnalysisSession:
    """Create a fresh session with all phases pending.
    
    Args:
        input_descriptor: The starting URL or technology description
        expected_durations: Mapping of phase key to typical duration in seconds
    
    Returns:
        AnalysisSession in the idle state
    """
    phases = [
        Phase(
            key=key,
            name=PHASE_NAMES[key],
            expected_duration_seconds=expected_durations[key],
        )
        for key in PHASE_ORDER
    ]
    return AnalysisSession(input_descriptor=input_descriptor, phases=phases)
