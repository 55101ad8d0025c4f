"""Pipeline orchestration: sequencing, events, progress and descriptions."""

from venture_assessment.pipeline.events import (EventBus, PhaseCompleted,
                                                PhaseFailed, PhaseStarted,
                                                PipelineCancelled,
                                                PipelineCompleted,
                                                PipelineEvent, PipelineFailed,
                                                PipelineStarted)
from venture_assessment.pipeline.orchestrator import AnalysisPipeline
from venture_assessment.pipeline.progress import PipelineProgress

__all__ = [
    "AnalysisPipeline",
    "EventBus",
    "PipelineEvent",
    "PipelineStarted",
    "PhaseStarted",
    "PhaseCompleted",
    "PhaseFailed",
    "PipelineCompleted",
    "PipelineCancelled",
    "PipelineFailed",
    "PipelineProgress",
]
