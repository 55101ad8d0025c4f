"""Configuration management for the venture assessment pipeline.

This module handles environment variable loading and provides type-safe
configuration access using Pydantic models.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration loaded from environment variables and .env file.
    
    All configuration values are automatically loaded from:
    1. `.env` file in the project root (if present)
    2. Environment variables (as fallback)
    
    Attributes:
        provider_api_key: Bearer token sent to every analysis provider (optional)
        company_api_url: Endpoint of the company extraction provider
        competitive_api_url: Endpoint of the competitive analysis provider
        market_api_url: Endpoint of the market opportunity provider
        company_timeout_seconds: Hard deadline for one company call
        competitive_timeout_seconds: Hard deadline for one competitive call
        market_timeout_seconds: Hard deadline for one market call
        company_expected_seconds: Typical company phase duration (progress weighting)
        competitive_expected_seconds: Typical competitive phase duration
        market_expected_seconds: Typical market phase duration
        retry_max_attempts: Maximum attempts per provider call (default: 3)
        retry_base_delay: Backoff base delay in seconds (default: 2.0)
        retry_jitter_max: Upper bound of the random jitter added to each delay
        min_input_length: Minimum length of a free-text technology description
        max_input_length: Maximum length of the starting input
        state_file: Path of the persisted assessment snapshot
        state_max_bytes: Size bound of the serialized snapshot
        state_autosave_delay: Quiet period before a debounced save is flushed
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    provider_api_key: Optional[str] = Field(
        default=None,
        description="Bearer token for the analysis providers",
    )
    
    company_api_url: str = Field(
        default="https://api.stack-ai.com/inference/v0/run/company",
        description="Company extraction provider endpoint",
        min_length=1,
    )
    
    competitive_api_url: str = Field(
        default="https://api.stack-ai.com/inference/v0/run/competitive",
        description="Competitive analysis provider endpoint",
        min_length=1,
    )
    
    market_api_url: str = Field(
        default="https://api.stack-ai.com/inference/v0/run/market",
        description="Market opportunity provider endpoint",
        min_length=1,
    )
    
    # Provider deadlines
    company_timeout_seconds: float = Field(
        default=420.0,
        description="Hard timeout for one company provider call",
        gt=0,
        le=3600,
    )
    
    competitive_timeout_seconds: float = Field(
        default=180.0,
        description="Hard timeout for one competitive provider call",
        gt=0,
        le=3600,
    )
    
    market_timeout_seconds: float = Field(
        default=600.0,
        description="Hard timeout for one market provider call",
        gt=0,
        le=3600,
    )
    
    # Progress estimation
    company_expected_seconds: float = Field(
        default=480.0,
        description="Typical duration of the company phase",
        gt=0,
    )
    
    competitive_expected_seconds: float = Field(
        default=240.0,
        description="Typical duration of the competitive phase",
        gt=0,
    )
    
    market_expected_seconds: float = Field(
        default=480.0,
        description="Typical duration of the market phase",
        gt=0,
    )
    
    # Retry configuration
    retry_max_attempts: int = Field(
        default=3,
        description="Maximum number of attempts per provider call",
        ge=1,
        le=10,
    )
    
    retry_base_delay: float = Field(
        default=2.0,
        description="Base delay in seconds; attempt n waits base * 2^(n-1) plus jitter",
        ge=0.1,
        le=60.0,
    )
    
    retry_jitter_max: float = Field(
        default=1.0,
        description="Maximum random jitter in seconds added to each backoff delay",
        ge=0.0,
        le=60.0,
    )
    
    # Input validation
    min_input_length: int = Field(
        default=10,
        description="Minimum character length for a free-text technology description",
        ge=1,
        le=1000,
    )
    
    max_input_length: int = Field(
        default=5000,
        description="Maximum character length for the starting input",
        ge=100,
        le=50000,
    )
    
    # State persistence
    state_file: Path = Field(
        default=Path("./data/assessment_state.json"),
        description="Path of the persisted assessment snapshot",
    )
    
    state_max_bytes: int = Field(
        default=4_500_000,
        description="Maximum serialized snapshot size before heavy fields are dropped",
        ge=1024,
    )
    
    state_autosave_delay: float = Field(
        default=1.0,
        description="Quiet period in seconds before a debounced save is written",
        ge=0.0,
        le=60.0,
    )
    
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level is one of the allowed values.
        
        Args:
            value: Log level string to validate
        
        Returns:
            Uppercase log level string
        
        Raises:
            ValueError: If log level is not one of the allowed values
        """
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in allowed_levels:
            raise ValueError(
                f"log_level must be one of {allowed_levels}, got {value}"
            )
        return upper_value
    
    @field_validator("state_file", mode="before")
    @classmethod
    def validate_state_file(cls, value: str | Path) -> Path:
        """Convert state_file to a Path object.
        
        The parent directory is created lazily on the first save.
        """
        return Path(value)
    
    @model_validator(mode="after")
    def validate_backoff(self) -> "Config":
        """Ensure jitter cannot reorder consecutive backoff delays.
        
        Consecutive delays differ by at least the base delay, so a jitter
        strictly below the base keeps every delay longer than the previous.
        """
        if self.retry_jitter_max >= self.retry_base_delay:
            raise ValueError(
                f"retry_jitter_max ({self.retry_jitter_max}) must be lower than "
                f"retry_base_delay ({self.retry_base_delay})"
            )
        if self.min_input_length > self.max_input_length:
            raise ValueError("min_input_length cannot exceed max_input_length")
        return self
    
    def get_timeout_for_phase(self, phase_key: str) -> float:
        """Return the provider deadline for a phase key.
        
        Args:
            phase_key: One of "company", "competitive", "market"
        
        Returns:
            Timeout in seconds
        """
        timeouts = {
            "company": self.company_timeout_seconds,
            "competitive": self.competitive_timeout_seconds,
            "market": self.market_timeout_seconds,
        }
        return timeouts[phase_key.lower()]
    
    def get_expected_duration(self, phase_key: str) -> float:
        """Return the typical duration of a phase, used for progress weighting."""
        durations = {
            "company": self.company_expected_seconds,
            "competitive": self.competitive_expected_seconds,
            "market": self.market_expected_seconds,
        }
        return durations[phase_key.lower()]


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.
    
    Loads configuration from `.env` file (if present) and environment variables
    on first call and returns the same instance on subsequent calls.
    
    Returns:
        Config instance with loaded configuration values
    
    Raises:
        ValueError: If configuration values are invalid
    """
    import logging
    logger = logging.getLogger(__name__)
    
    global _config
    if _config is None:
        _config = Config()
        # Never log the key itself
        logger.debug(
            f"Configuration loaded: "
            f"PROVIDER_API_KEY={'set' if _config.provider_api_key else 'missing'}, "
            f"RETRY_MAX_ATTEMPTS={_config.retry_max_attempts}, "
            f"STATE_FILE={_config.state_file}"
        )
    return _config


def reload_config() -> Config:
    """Reload configuration from environment variables.
    
    Useful for testing or when configuration changes at runtime.
    
    Returns:
        New Config instance with reloaded configuration values
    """
    global _config
    _config = Config()
    return _config
