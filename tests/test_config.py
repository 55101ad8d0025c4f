"""Tests for configuration management.

This module contains unit tests for the configuration system to verify
environment variable loading, validation, and type safety.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from venture_assessment.config import Config, get_config, reload_config


class TestConfig:
    """Tests for Config class."""
    
    def test_config_loads_from_environment(self) -> None:
        """Test config loads values from environment variables."""
        with patch.dict(
            os.environ,
            {
                "PROVIDER_API_KEY": "test_api_key",
                "MARKET_TIMEOUT_SECONDS": "30",
                "RETRY_MAX_ATTEMPTS": "5",
                "LOG_LEVEL": "debug",
                "STATE_FILE": "./test_data/state.json",
            },
            clear=False,
        ):
            config = Config(_env_file=None)
            
            assert config.provider_api_key == "test_api_key"
            assert config.market_timeout_seconds == 30
            assert config.retry_max_attempts == 5
            assert config.log_level == "DEBUG"
            assert isinstance(config.state_file, Path)
    
    def test_config_uses_defaults(self) -> None:
        """Test config uses default values when env vars not set."""
        env_vars = [
            "COMPANY_TIMEOUT_SECONDS",
            "COMPETITIVE_TIMEOUT_SECONDS",
            "MARKET_TIMEOUT_SECONDS",
            "RETRY_MAX_ATTEMPTS",
            "RETRY_BASE_DELAY",
            "RETRY_JITTER_MAX",
            "LOG_LEVEL",
        ]
        clean_env = {k: v for k, v in os.environ.items() if k not in env_vars}
        
        with patch.dict(os.environ, clean_env, clear=True):
            config = Config(_env_file=None)
            
            assert config.company_timeout_seconds == 420
            assert config.competitive_timeout_seconds == 180
            assert config.market_timeout_seconds == 600
            assert config.retry_max_attempts == 3
            assert config.retry_base_delay == 2.0
            assert config.retry_jitter_max == 1.0
            assert config.log_level == "INFO"
    
    def test_invalid_log_level_rejected(self) -> None:
        """Test log_level validation."""
        with pytest.raises(ValidationError):
            Config(_env_file=None, log_level="VERBOSE")
    
    def test_jitter_must_be_below_base_delay(self) -> None:
        """Test jitter equal to the base delay is rejected."""
        with pytest.raises(ValidationError, match="retry_jitter_max"):
            Config(_env_file=None, retry_base_delay=1.0, retry_jitter_max=1.0)
    
    def test_min_input_length_cannot_exceed_max(self) -> None:
        """Test input length bounds are consistent."""
        with pytest.raises(ValidationError):
            Config(_env_file=None, min_input_length=500, max_input_length=200)
    
    def test_retry_attempts_bounds(self) -> None:
        """Test retry attempts must be positive."""
        with pytest.raises(ValidationError):
            Config(_env_file=None, retry_max_attempts=0)
    
    def test_phase_lookups(self) -> None:
        """Test per-phase timeout and expected duration lookups."""
        config = Config(_env_file=None)
        
        assert config.get_timeout_for_phase("company") == 420
        assert config.get_timeout_for_phase("Market") == 600
        assert config.get_expected_duration("competitive") == 240
        with pytest.raises(KeyError):
            config.get_timeout_for_phase("summary")


class TestConfigAccessors:
    """Tests for the global configuration accessors."""
    
    def test_get_config_returns_singleton(self) -> None:
        """Test get_config caches the instance."""
        reload_config()
        assert get_config() is get_config()
    
    def test_reload_config_replaces_instance(self) -> None:
        """Test reload_config picks up environment changes."""
        first = reload_config()
        with patch.dict(os.environ, {"RETRY_MAX_ATTEMPTS": "4"}, clear=False):
            second = reload_config()
        
        assert second is not first
        assert second.retry_max_attempts == 4
        assert get_config() is second
        reload_config()
