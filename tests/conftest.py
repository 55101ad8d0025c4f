"""Pytest configuration and shared fixtures.

This module contains pytest configuration and shared fixtures used
across all test files.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from venture_assessment.config import Config
from venture_assessment.models.results import ProviderResult
from venture_assessment.state.persistence import SnapshotStorage
from venture_assessment.state.store import AssessmentStore
from venture_assessment.validators.competitive_validator import \
    CompetitiveValidator
from venture_assessment.validators.company_validator import CompanyValidator
from venture_assessment.validators.market_validator import MarketValidator
from tests.fixtures.sample_data import (company_envelope, competitive_envelope,
                                        market_envelope)


class FakeClock:
    """Manually advanced clock for deterministic timestamps."""
    
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
    
    def __call__(self) -> datetime:
        return self.now
    
    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Create a Config isolated from the environment and .env file."""
    return Config(
        _env_file=None,
        provider_api_key="test_api_key",
        company_api_url="http://provider.test/company",
        competitive_api_url="http://provider.test/competitive",
        market_api_url="http://provider.test/market",
        retry_base_delay=0.1,
        retry_jitter_max=0.0,
        state_file=tmp_path / "state.json",
        state_autosave_delay=0.0,
    )


@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock starting at 2024-01-01T00:00:00Z."""
    return FakeClock()


@pytest.fixture
def storage(tmp_path: Path) -> SnapshotStorage:
    """Create snapshot storage in a temporary directory."""
    return SnapshotStorage(tmp_path / "state.json")


@pytest.fixture
def store(storage: SnapshotStorage) -> AssessmentStore:
    """Create a file-backed store that saves immediately."""
    return AssessmentStore(storage=storage, autosave_delay=0.0)


@pytest.fixture
def company_result() -> ProviderResult:
    """Normalized company result built from the sample payload."""
    envelope = company_envelope()
    data = CompanyValidator().validate(envelope["outputs"]).data
    return ProviderResult(data=data, raw_data=envelope)


@pytest.fixture
def competitive_result() -> ProviderResult:
    """Normalized competitive result built from the sample payload."""
    envelope = competitive_envelope()
    data = CompetitiveValidator().validate(envelope["outputs"]).data
    return ProviderResult(data=data, raw_data=envelope)


@pytest.fixture
def market_result() -> ProviderResult:
    """Normalized market result built from the sample payload."""
    envelope = market_envelope()
    data = MarketValidator().validate(envelope["outputs"]).data
    return ProviderResult(data=data, raw_data=envelope)


@pytest.fixture
def mock_clients(company_result, competitive_result, market_result) -> dict[str, Mock]:
    """Create mock provider clients that succeed with the sample results."""
    clients = {}
    for key, result in (
        ("company", company_result),
        ("competitive", competitive_result),
        ("market", market_result),
    ):
        client = Mock()
        client.phase_key = key
        client.retry_with_backoff = AsyncMock(return_value=result)
        clients[key] = client
    return clients
