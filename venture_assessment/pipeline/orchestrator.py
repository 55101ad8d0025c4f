"""Pipeline orchestrator for the three-phase venture assessment.

AnalysisPipeline drives one run at a time through the company, competitive
and market phases, records phase transitions on its AnalysisSession,
publishes events, and writes results into the assessment store.

Guarantees:
- single flight: start() while running is rejected before any phase starts
- a phase only becomes active when every earlier phase is completed
- an error or cancellation leaves every later phase pending
- the orchestrator never retries a phase; retries live in the clients
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from venture_assessment.clients.company_client import CompanyClient
from venture_assessment.clients.competitive_client import CompetitiveClient
from venture_assessment.clients.market_client import MarketClient, MarketInput
from venture_assessment.config import get_config
from venture_assessment.exceptions.base import BaseAssessmentError
from venture_assessment.exceptions.cancellation_error import CancellationError
from venture_assessment.exceptions.pipeline_error import (PipelineBusyError,
                                                          PipelineError)
from venture_assessment.exceptions.validation_error import ValidationError
from venture_assessment.models.assessment import DIMENSIONS
from venture_assessment.models.results import PipelineResults, ProviderResult
from venture_assessment.models.session import (PHASE_ORDER, AnalysisSession,
                                               PhaseError, create_session)
from venture_assessment.pipeline.description import build_tech_description
from venture_assessment.pipeline.events import (EventBus, PhaseCompleted,
                                                PhaseFailed, PhaseStarted,
                                                PipelineCancelled,
                                                PipelineCompleted,
                                                PipelineFailed,
                                                PipelineStarted)
from venture_assessment.pipeline.progress import (PipelineProgress,
                                                  estimate_progress)
from venture_assessment.pipeline.workflow import (PipelineState,
                                                  create_workflow)
from venture_assessment.state.store import AssessmentStore
from venture_assessment.utils.cancellation import CancellationToken
from venture_assessment.validators.input_validator import classify_input

logger = logging.getLogger(__name__)


class AnalysisPipeline:
    """Runs the company -> competitive -> market analysis.
    
    Example:
        ```python
        pipeline = AnalysisPipeline(store=store)
        results = await pipeline.start("https://example.com")
        print(results.competitive.score, results.market.score)
        ```
    """
    
    def __init__(
        self,
        company_client: CompanyClient | None = None,
        competitive_client: CompetitiveClient | None = None,
        market_client: MarketClient | None = None,
        store: AssessmentStore | None = None,
        event_bus: EventBus | None = None,
        config: Any | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the pipeline.
        
        Args:
            company_client: Company provider client (built from config if None)
            competitive_client: Competitive provider client
            market_client: Market provider client
            store: Optional assessment store receiving results
            event_bus: Event bus for pipeline events (a private one if None)
            config: Optional Config instance. If not provided, uses get_config()
            clock: Optional time source
        """
        self.config = config or get_config()
        self.company_client = company_client or CompanyClient.from_config(self.config)
        self.competitive_client = competitive_client or CompetitiveClient.from_config(self.config)
        self.market_client = market_client or MarketClient.from_config(self.config)
        self.store = store
        self.events = event_bus or EventBus()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        
        self._expected = {key: self.config.get_expected_duration(key) for key in PHASE_ORDER}
        self._session = create_session("", self._expected)
        self._results: PipelineResults | None = None
        self._token: CancellationToken | None = None
        self._in_flight = False
        self._graph = create_workflow(
            self._company_node, self._competitive_node, self._market_node
        )
    
    # Public API
    
    async def start(self, input: str) -> PipelineResults:
        """Run the full analysis for a URL or technology description.
        
        Args:
            input: Company website URL or free-text technology description
        
        Returns:
            PipelineResults
        
        Raises:
            PipelineBusyError: If a run is already in progress
            PipelineError: If the input is invalid, a phase fails, or the run
                is cancelled (``error.cancelled`` is True)
        """
        if self._in_flight or self._session.overall_status == "running":
            logger.warning("Rejected start(): analysis already in progress")
            raise PipelineBusyError()
        
        try:
            classified = classify_input(input, self.config)
        except ValidationError as e:
            error = PipelineError(f"Invalid input: {e.message}", cause=e)
            self._write_state(last_error=error.user_message)
            raise error from e
        
        token = CancellationToken()
        self._token = token
        self._results = None
        self._session = create_session(classified.value, self._expected)
        self._session.overall_status = "running"
        self._session.started_at = self._now()
        
        self._write_state(
            input_descriptor=classified.value,
            is_analyzing=True,
            overall_status="running",
            analysis_phase=None,
            competitive_artifact_text=None,
            last_error=None,
        )
        for dimension in DIMENSIONS:
            self._write_assessment(dimension, {
                "status": "pending",
                "ai_score": None,
                "user_score": None,
                "justification": "",
                "confidence": None,
                "submitted": False,
                "data": None,
                "raw_data": None,
                "error": None,
            })
        
        logger.info(f"Starting analysis ({classified.kind} input)")
        self.events.publish(PipelineStarted(input_descriptor=classified.value))
        
        initial: PipelineState = {"input_kind": classified.kind, "input_value": classified.value}
        if classified.kind == "text":
            self._skip_phase("company")
            self._session.tech_description = classified.value
            initial["tech_description"] = classified.value
        
        session = self._session
        self._in_flight = True
        try:
            final = await self._graph.ainvoke(initial)
        except PipelineError as e:
            # A reset() during the run already replaced the session
            if self._session is session:
                self._finish_failed(e)
            raise
        except Exception as e:
            error = self._unexpected_failure(session, e)
            raise error from e
        finally:
            self._in_flight = False
            if self._token is token:
                self._token = None
        
        if self._session is not session:
            raise PipelineError("Analysis was reset before completing", cause=CancellationError())
        return self._finish_completed(final)
    
    def cancel(self) -> bool:
        """Request cooperative cancellation of the in-flight run.
        
        Returns:
            True if a running analysis was signalled
        """
        if self._token is None or self._session.overall_status != "running":
            return False
        logger.info("Cancelling analysis")
        self._token.cancel()
        return True
    
    def get_progress(self) -> PipelineProgress:
        """Estimate progress of the current run."""
        return estimate_progress(self._session, self._now())
    
    def get_results(self) -> PipelineResults | None:
        """Results of the last completed run, or None."""
        return self._results
    
    def is_complete(self) -> bool:
        return self._session.overall_status == "completed"
    
    def get_phase_status(self, phase_key: str) -> str:
        """Return the status of one phase.
        
        Raises:
            KeyError: If the phase key is unknown
        """
        return self._session.get_phase(phase_key).status
    
    def reset(self) -> None:
        """Cancel any in-flight run and restore an idle session."""
        if self._token is not None:
            self._token.cancel()
            self._token = None
        self._session = create_session("", self._expected)
        self._results = None
        logger.info("Pipeline reset")
    
    @property
    def session(self) -> AnalysisSession:
        """Deep copy of the current session."""
        return self._session.model_copy(deep=True)
    
    # Graph nodes
    
    async def _company_node(self, state: PipelineState) -> dict[str, Any]:
        result = await self._run_phase(
            "company",
            lambda token: self.company_client.retry_with_backoff(state["input_value"], token),
        )
        description = build_tech_description(result.data)
        self._session.tech_description = description
        return {"company": result, "tech_description": description}
    
    async def _competitive_node(self, state: PipelineState) -> dict[str, Any]:
        description = state.get("tech_description")
        if not description:
            raise PipelineError(
                "Technology description not available",
                phase_key="competitive",
                cause=ValidationError("Technology description not available"),
            )
        
        result = await self._run_phase(
            "competitive",
            lambda token: self.competitive_client.retry_with_backoff(description, token),
        )
        
        analysis = result.data
        self._write_state(competitive_artifact_text=analysis.analysis_text)
        self._write_assessment("competitive", {
            "status": "complete",
            "ai_score": analysis.score,
            "confidence": analysis.confidence,
            "data": analysis.model_dump(),
            "raw_data": result.raw_data,
        })
        return {"competitive": result}
    
    async def _market_node(self, state: PipelineState) -> dict[str, Any]:
        competitive = state.get("competitive")
        if competitive is None:
            raise PipelineError(
                "Competitive analysis not available",
                phase_key="market",
                cause=ValidationError("Competitive analysis not available"),
            )
        
        market_input = MarketInput(
            tech_description=state["tech_description"],
            competitive_text=competitive.data.analysis_text,
        )
        result = await self._run_phase(
            "market",
            lambda token: self.market_client.retry_with_backoff(market_input, token),
        )
        
        analysis = result.data
        self._write_assessment("market", {
            "status": "complete",
            "ai_score": analysis.score,
            "confidence": analysis.confidence,
            "data": analysis.model_dump(),
            "raw_data": result.raw_data,
        })
        return {"market": result}
    
    # Phase transitions
    
    async def _run_phase(
        self,
        phase_key: str,
        operation: Callable[[CancellationToken | None], Any],
    ) -> ProviderResult:
        """Activate a phase, run its provider call and record the outcome.
        
        Raises:
            PipelineError: Wrapping the failure, with the phase key
        """
        token = self._token
        try:
            if token is not None:
                token.raise_if_cancelled()
        except CancellationError as e:
            raise PipelineError(f"{phase_key} phase cancelled", phase_key=phase_key, cause=e) from e
        
        self._activate(phase_key)
        if phase_key in DIMENSIONS:
            self._write_assessment(phase_key, {"status": "in-progress"})
        
        try:
            result = await operation(token)
        except BaseAssessmentError as e:
            self._fail_phase(phase_key, e)
            raise PipelineError(f"{phase_key} phase failed: {e}", phase_key=phase_key, cause=e) from e
        
        self._complete_phase(phase_key, result.data)
        return result
    
    def _activate(self, phase_key: str) -> None:
        index = PHASE_ORDER.index(phase_key)
        for earlier in self._session.phases[:index]:
            if earlier.status != "completed":
                raise PipelineError(
                    f"Cannot start {phase_key} before {earlier.key} has completed",
                    phase_key=phase_key,
                )
        if self._session.active_phase is not None:
            raise PipelineError(
                f"Cannot start {phase_key} while {self._session.active_phase.key} is active",
                phase_key=phase_key,
            )
        
        phase = self._session.get_phase(phase_key)
        phase.status = "active"
        phase.started_at = self._now()
        
        logger.info(f"Phase started: {phase.name}")
        self._write_state(analysis_phase=phase_key)
        self.events.publish(PhaseStarted(
            phase_key=phase_key,
            estimated_duration=phase.expected_duration_seconds,
        ))
    
    def _complete_phase(self, phase_key: str, data: Any) -> None:
        phase = self._session.get_phase(phase_key)
        phase.status = "completed"
        phase.ended_at = self._now()
        phase.data = data
        
        logger.info(f"Phase completed: {phase.name} in {phase.duration_seconds:.1f}s")
        self.events.publish(PhaseCompleted(
            phase_key=phase_key,
            duration_seconds=phase.duration_seconds or 0.0,
            data=data,
        ))
    
    def _fail_phase(self, phase_key: str, error: Exception) -> None:
        phase = self._session.get_phase(phase_key)
        if phase.status != "active":
            return
        phase.status = "error"
        phase.ended_at = self._now()
        phase.error = PhaseError(error_type=type(error).__name__, message=str(error))
        
        if phase_key in DIMENSIONS:
            if isinstance(error, CancellationError):
                self._write_assessment(phase_key, {"status": "pending"})
            else:
                self._write_assessment(phase_key, {"status": "error", "error": str(error)})
        
        if isinstance(error, CancellationError):
            logger.info(f"Phase cancelled: {phase.name}")
        else:
            logger.error(f"Phase failed: {phase.name}: {error!r}")
            self.events.publish(PhaseFailed(phase_key=phase_key, error=str(error)))
    
    def _skip_phase(self, phase_key: str) -> None:
        phase = self._session.get_phase(phase_key)
        now = self._now()
        phase.status = "completed"
        phase.skipped = True
        phase.started_at = now
        phase.ended_at = now
        logger.info(f"Phase skipped: {phase.name}")
    
    # Terminal states
    
    def _finish_completed(self, final: PipelineState) -> PipelineResults:
        self._session.overall_status = "completed"
        self._session.ended_at = self._now()
        
        company = final.get("company")
        results = PipelineResults(
            company=company.data if company is not None else None,
            competitive=final["competitive"].data,
            market=final["market"].data,
            tech_description=final["tech_description"],
            duration_seconds=(self._session.ended_at - self._session.started_at).total_seconds(),
        )
        self._results = results
        
        self._write_state(
            is_analyzing=False,
            analysis_phase=None,
            overall_status="completed",
            current_assessment="competitive",
        )
        logger.info(f"Analysis completed in {results.duration_seconds:.1f}s")
        self.events.publish(PipelineCompleted(results=results))
        return results
    
    def _unexpected_failure(self, session: AnalysisSession, exc: Exception) -> PipelineError:
        """Wrap an unclassified exception and end the run in error.
        
        The active phase, if any, is marked failed so the session always
        reaches a terminal status.
        """
        active = session.active_phase
        phase_key = active.key if active is not None else None
        error = PipelineError(
            f"Unexpected failure during {phase_key or 'analysis'}: {exc!r}",
            phase_key=phase_key,
            cause=exc,
        )
        if self._session is not session:
            return error
        
        logger.exception(f"Unexpected error in analysis pipeline: {exc!r}")
        if active is not None:
            self._fail_phase(active.key, exc)
        self._finish_failed(error)
        return error
    
    def _finish_failed(self, error: PipelineError) -> None:
        status = "cancelled" if error.cancelled else "error"
        self._session.overall_status = status
        self._session.ended_at = self._now()
        
        self._write_state(
            is_analyzing=False,
            analysis_phase=None,
            overall_status=status,
            last_error=None if error.cancelled else error.user_message,
        )
        
        if error.cancelled:
            logger.info(f"Analysis cancelled during {error.phase_key}")
            self.events.publish(PipelineCancelled(phase_key=error.phase_key))
        else:
            logger.error(f"Analysis failed: {error.user_message}")
            self.events.publish(PipelineFailed(phase_key=error.phase_key, error=error.user_message))
    
    # Store writes
    
    def _write_state(self, **partial: Any) -> None:
        if self.store is not None:
            self.store.set_state(**partial)
    
    def _write_assessment(self, dimension: str, partial: dict[str, Any]) -> None:
        if self.store is not None:
            self.store.set_assessment_data(dimension, partial)
    
    def _now(self) -> datetime:
        return self._clock()
