"""Main entry point for the venture assessment pipeline.

This module wires configuration, the assessment store and the analysis
pipeline together and runs one analysis from the command line.

Example:
    ```python
    import asyncio
    from venture_assessment.main import run_analysis
    
    results = asyncio.run(run_analysis("https://example.com"))
    print(results.competitive.score, results.market.score)
    ```
    
    Or as a command-line tool:
    ```bash
    python -m venture_assessment.main "https://example.com"
    python -m venture_assessment.main "Solid-state battery chemistry for grid storage"
    ```
"""

import argparse
import asyncio
import json
import logging
import signal
import sys
from pathlib import Path
from typing import Any

from venture_assessment.config import get_config
from venture_assessment.exceptions.pipeline_error import PipelineError
from venture_assessment.models.results import PipelineResults
from venture_assessment.pipeline.events import (PhaseCompleted, PhaseStarted,
                                                PipelineEvent)
from venture_assessment.pipeline.orchestrator import AnalysisPipeline
from venture_assessment.state.persistence import SnapshotStorage
from venture_assessment.state.store import AssessmentStore

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging with the standard format."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def build_summary(results: PipelineResults, store: AssessmentStore) -> dict[str, Any]:
    """Build the JSON summary printed by the CLI.
    
    Args:
        results: Results of a completed run
        store: Store holding the assessments of that run
    
    Returns:
        JSON-serializable dictionary with scores and key metrics
    """
    competitive = results.competitive
    market = results.market
    return {
        "company": results.company.name if results.company else None,
        "duration_seconds": round(results.duration_seconds, 1),
        "competitive": {
            "score": competitive.score,
            "confidence": competitive.confidence,
            "competitor_count": competitive.competitor_count.model_dump(),
            "market_leaders": competitive.market_leaders,
            "competitive_intensity": competitive.competitive_intensity,
        },
        "market": {
            "score": market.score,
            "confidence": market.confidence,
            "tam_usd": market.primary_market.tam_usd,
            "cagr_percent": market.primary_market.cagr_percent,
            "primary_market": market.primary_market.description,
        },
        "summary": store.get_summary(),
    }


def _log_event(event: PipelineEvent) -> None:
    if isinstance(event, PhaseStarted):
        logger.info(f"[{event.phase_key}] started (typically ~{event.estimated_duration:.0f}s)")
    elif isinstance(event, PhaseCompleted):
        logger.info(f"[{event.phase_key}] done in {event.duration_seconds:.1f}s")


async def run_analysis(
    input: str,
    config: Any | None = None,
    store: AssessmentStore | None = None,
    pipeline: AnalysisPipeline | None = None,
) -> PipelineResults:
    """Run one analysis, cancelling cooperatively on SIGINT.
    
    Args:
        input: Company website URL or technology description
        config: Optional Config instance. If not provided, uses get_config()
        store: Optional store; a file-backed one is built from config if None
        pipeline: Optional pre-built pipeline
    
    Returns:
        PipelineResults
    
    Raises:
        PipelineError: If the run fails or is cancelled
    """
    if config is None:
        config = get_config()
    if store is None:
        store = AssessmentStore.from_config(config)
        store.init()
    if pipeline is None:
        pipeline = AnalysisPipeline(store=store, config=config)
    pipeline.events.subscribe_all(_log_event)
    
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, pipeline.cancel)
        handler_installed = True
    except (NotImplementedError, RuntimeError):
        handler_installed = False
    
    try:
        return await pipeline.start(input)
    finally:
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)
        pipeline.events.unsubscribe_all(_log_event)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for command-line usage.
    
    Returns:
        Exit code (0 for success, 1 for failure, 130 when cancelled)
    """
    parser = argparse.ArgumentParser(
        description="Venture assessment: company, competitive and market analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m venture_assessment.main "https://example.com"
  python -m venture_assessment.main "Solid-state battery chemistry for grid storage"
        """,
    )
    
    parser.add_argument(
        "input",
        type=str,
        help="Company website URL or technology description",
    )
    
    parser.add_argument(
        "--state-file",
        type=Path,
        default=None,
        help="Path of the persisted assessment snapshot",
    )
    
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Discard the persisted snapshot before running",
    )
    
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    
    args = parser.parse_args(argv)
    
    try:
        config = get_config()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    
    configure_logging(args.log_level or config.log_level)
    
    storage = SnapshotStorage(args.state_file or config.state_file)
    store = AssessmentStore(
        storage=storage,
        autosave_delay=config.state_autosave_delay,
        max_bytes=config.state_max_bytes,
    )
    if args.reset:
        store.reset()
    store.init()
    
    try:
        results = asyncio.run(run_analysis(args.input, config=config, store=store))
    except PipelineError as e:
        logger.error(f"Analysis failed: {e!r}")
        print(f"Error: {e.user_message}", file=sys.stderr)
        return 130 if e.cancelled else 1
    finally:
        store.dispose()
    
    print(json.dumps(build_summary(results, store), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
