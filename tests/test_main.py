"""Tests for main entry point.

This module contains unit tests for the command-line entry point: summary
building, the run_analysis wrapper, and exit codes.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest

from venture_assessment.exceptions import (CancellationError, PipelineError,
                                           TransportError)
from venture_assessment.main import (_log_event, build_summary, main,
                                     run_analysis)
from venture_assessment.models.results import PipelineResults
from venture_assessment.pipeline import AnalysisPipeline


@pytest.fixture
def pipeline_results(company_result, competitive_result, market_result) -> PipelineResults:
    return PipelineResults(
        company=company_result.data,
        competitive=competitive_result.data,
        market=market_result.data,
        tech_description="Company: Voltcell Labs",
        duration_seconds=12.34,
    )


class TestBuildSummary:
    """Tests for build_summary function."""
    
    def test_summary_contents(self, pipeline_results, store) -> None:
        """Test the summary carries scores and key metrics."""
        store.set_assessment_data("competitive", {"ai_score": 6, "status": "complete"})
        store.set_assessment_data("market", {"ai_score": 7, "status": "complete"})
        
        summary = build_summary(pipeline_results, store)
        
        assert summary["company"] == "Voltcell Labs"
        assert summary["duration_seconds"] == 12.3
        assert summary["competitive"]["score"] == 6
        assert summary["competitive"]["competitor_count"]["total"] == 12
        assert summary["market"]["tam_usd"] == 45e9
        assert summary["market"]["cagr_percent"] == 18.5
        assert summary["summary"]["ai_average"] == 6.5
        json.dumps(summary)
    
    def test_summary_without_company(self, pipeline_results, store) -> None:
        """Test text runs report no company name."""
        results = pipeline_results.model_copy(update={"company": None})
        
        assert build_summary(results, store)["company"] is None


class TestRunAnalysis:
    """Tests for run_analysis function."""
    
    @pytest.mark.asyncio
    async def test_run_analysis_success(self, mock_clients, store, test_config) -> None:
        """Test run_analysis returns the pipeline results."""
        pipeline = AnalysisPipeline(
            company_client=mock_clients["company"],
            competitive_client=mock_clients["competitive"],
            market_client=mock_clients["market"],
            store=store,
            config=test_config,
        )
        
        results = await run_analysis(
            "https://voltcell.example.com",
            config=test_config,
            store=store,
            pipeline=pipeline,
        )
        
        assert results.market.score == 7
        assert pipeline.events.unsubscribe_all(_log_event) is False
    
    @pytest.mark.asyncio
    async def test_run_analysis_propagates_errors(self, mock_clients, store, test_config) -> None:
        """Test pipeline errors reach the caller."""
        mock_clients["competitive"].retry_with_backoff.side_effect = TransportError(
            "bad request", provider="competitive", status_code=400
        )
        pipeline = AnalysisPipeline(
            company_client=mock_clients["company"],
            competitive_client=mock_clients["competitive"],
            market_client=mock_clients["market"],
            store=store,
            config=test_config,
        )
        
        with pytest.raises(PipelineError) as exc_info:
            await run_analysis(
                "Solid-state battery cells for grid storage",
                config=test_config,
                store=store,
                pipeline=pipeline,
            )
        
        assert exc_info.value.phase_key == "competitive"


class TestMain:
    """Tests for main function."""
    
    def test_main_success(self, pipeline_results, test_config, tmp_path, capsys) -> None:
        """Test a successful run prints the JSON summary."""
        state_file = tmp_path / "cli_state.json"
        
        with patch("venture_assessment.main.get_config", return_value=test_config):
            with patch(
                "venture_assessment.main.run_analysis",
                new=AsyncMock(return_value=pipeline_results),
            ) as mock_run:
                exit_code = main(["https://voltcell.example.com", "--state-file", str(state_file)])
        
        assert exit_code == 0
        assert mock_run.await_args.args[0] == "https://voltcell.example.com"
        output = json.loads(capsys.readouterr().out)
        assert output["competitive"]["score"] == 6
        assert output["market"]["score"] == 7
    
    def test_main_failure(self, test_config, tmp_path, capsys) -> None:
        """Test a failed run prints the user message and returns 1."""
        error = PipelineError(
            "market phase failed",
            phase_key="market",
            cause=TransportError("HTTP 500", provider="market", status_code=500),
        )
        
        with patch("venture_assessment.main.get_config", return_value=test_config):
            with patch("venture_assessment.main.run_analysis", new=AsyncMock(side_effect=error)):
                exit_code = main(["https://voltcell.example.com", "--state-file", str(tmp_path / "s.json")])
        
        assert exit_code == 1
        err = capsys.readouterr().err
        assert "Market analysis could not reach the analysis provider" in err
        assert "HTTP 500" not in err
    
    def test_main_cancelled(self, test_config, tmp_path) -> None:
        """Test a cancelled run returns 130."""
        error = PipelineError("cancelled", phase_key="competitive", cause=CancellationError())
        
        with patch("venture_assessment.main.get_config", return_value=test_config):
            with patch("venture_assessment.main.run_analysis", new=AsyncMock(side_effect=error)):
                exit_code = main(["https://voltcell.example.com", "--state-file", str(tmp_path / "s.json")])
        
        assert exit_code == 130
    
    def test_main_configuration_error(self, capsys) -> None:
        """Test invalid configuration returns 1."""
        with patch("venture_assessment.main.get_config", side_effect=ValueError("bad config")):
            exit_code = main(["https://voltcell.example.com"])
        
        assert exit_code == 1
        assert "Configuration error" in capsys.readouterr().err
    
    def test_main_reset_clears_snapshot(self, pipeline_results, test_config, tmp_path) -> None:
        """Test --reset discards the persisted snapshot before running."""
        state_file = tmp_path / "cli_state.json"
        state_file.write_text('{"version": "1.0", "assessments": {}}', encoding="utf-8")
        
        with patch("venture_assessment.main.get_config", return_value=test_config):
            with patch(
                "venture_assessment.main.run_analysis",
                new=AsyncMock(return_value=pipeline_results),
            ):
                exit_code = main(["https://voltcell.example.com", "--state-file", str(state_file), "--reset"])
        
        assert exit_code == 0
        assert not state_file.exists()
