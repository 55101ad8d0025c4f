"""Base client for remote analysis providers.

Every provider speaks the same contract: a JSON POST of ``{user_id, ...named
inputs}`` answered by an envelope ``{"outputs": {key: str | object}}``.
Subclasses only name their phase, build their inputs and pick a validator.

Failure classification:
- deadline exceeded -> ProviderTimeoutError (retryable)
- connection failure, malformed body, non-2xx -> TransportError
  (retryable unless a 4xx other than 408/429)
- schema violation -> ValidationError (never retried)
- cancellation -> CancellationError (never retried)
"""

import asyncio
import json
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

import aiohttp

from venture_assessment.config import get_config
from venture_assessment.exceptions.provider_error import (ProviderTimeoutError,
                                                          TransportError)
from venture_assessment.exceptions.validation_error import ValidationError
from venture_assessment.models.results import ProviderResult
from venture_assessment.utils.cancellation import (CancellationToken,
                                                   race_with_deadline)
from venture_assessment.utils.retry import call_with_retry
from venture_assessment.validators.base_validator import BaseValidator

logger = logging.getLogger(__name__)

# Longest response body excerpt kept in error context
BODY_EXCERPT_LENGTH = 500


class RemoteAnalysisClient(ABC):
    """Shared transport, timeout, retry and validation for a provider.
    
    Attributes:
        phase_key: Phase this provider serves ("company", "competitive", "market")
        api_url: Provider endpoint
        timeout_seconds: Hard deadline for one call
        max_attempts: Default attempt budget for retry_with_backoff
    """
    
    phase_key: str = ""
    
    def __init__(
        self,
        api_url: str,
        api_key: str | None = None,
        timeout_seconds: float = 180.0,
        max_attempts: int = 3,
        base_delay: float = 2.0,
        jitter_max: float = 1.0,
        session: aiohttp.ClientSession | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        """Initialize the client.
        
        Args:
            api_url: Provider endpoint
            api_key: Optional bearer token
            timeout_seconds: Hard deadline for one call
            max_attempts: Default maximum attempts per analysis
            base_delay: Backoff base delay in seconds
            jitter_max: Upper bound of the backoff jitter in seconds
            session: Optional shared aiohttp session; a short-lived session
                is opened per call otherwise
            sleep: Optional backoff sleep override
        """
        self.api_url = api_url
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.jitter_max = jitter_max
        self._session = session
        self._sleep = sleep
    
    @classmethod
    def from_config(cls, config: Any | None = None, **kwargs: Any) -> "RemoteAnalysisClient":
        """Build a client from the application configuration.
        
        Args:
            config: Optional Config instance. If not provided, uses get_config()
            **kwargs: Overrides passed to the constructor
        
        Returns:
            Configured client
        """
        if config is None:
            config = get_config()
        options = {
            "api_url": cls._api_url_from(config),
            "api_key": config.provider_api_key,
            "timeout_seconds": config.get_timeout_for_phase(cls.phase_key),
            "max_attempts": config.retry_max_attempts,
            "base_delay": config.retry_base_delay,
            "jitter_max": config.retry_jitter_max,
        }
        options.update(kwargs)
        return cls(**options)
    
    @classmethod
    def _api_url_from(cls, config: Any) -> str:
        return getattr(config, f"{cls.phase_key}_api_url")
    
    @property
    @abstractmethod
    def validator(self) -> BaseValidator:
        """Validator applied to the envelope outputs."""
        pass
    
    @abstractmethod
    def build_inputs(self, input: Any) -> dict[str, Any]:
        """Map the analysis input onto the provider's named input fields.
        
        Raises:
            ValidationError: If the input is unusable
        """
        pass
    
    def build_request(self, input: Any) -> dict[str, Any]:
        """Build the request payload for one call.
        
        Each call carries a fresh session identifier ``<phase>_<hex>``.
        """
        payload = {"user_id": f"{self.phase_key}_{uuid.uuid4().hex}"}
        payload.update(self.build_inputs(input))
        return payload
    
    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers
    
    async def _post(self, payload: dict[str, Any]) -> Any:
        """POST the payload and return the decoded JSON body.
        
        Raises:
            TransportError: On connection failure, non-2xx status or a body
                that is not JSON
            ProviderTimeoutError: If the transport reported a timeout
        """
        try:
            if self._session is not None:
                return await self._send(self._session, payload)
            timeout_obj = aiohttp.ClientTimeout(total=self.timeout_seconds)
            async with aiohttp.ClientSession(timeout=timeout_obj) as session:
                return await self._send(session, payload)
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(
                f"{self.phase_key} provider timed out after {self.timeout_seconds}s",
                provider=self.phase_key,
                timeout_seconds=self.timeout_seconds,
            ) from e
        except aiohttp.ClientError as e:
            logger.warning(f"{self.phase_key} provider request failed: {e}")
            raise TransportError(
                f"{self.phase_key} provider request failed: {e}",
                provider=self.phase_key,
                status_code=getattr(e, "status", None),
            ) from e
    
    async def _send(self, session: aiohttp.ClientSession, payload: dict[str, Any]) -> Any:
        async with session.post(self.api_url, json=payload, headers=self._headers()) as response:
            raw = await response.read()
            status = response.status
            charset = response.charset or "utf-8"
        
        if not 200 <= status < 300:
            raise TransportError(
                f"{self.phase_key} provider returned HTTP {status}",
                provider=self.phase_key,
                status_code=status,
                context={"body": raw[:BODY_EXCERPT_LENGTH].decode("utf-8", errors="replace")},
            )
        
        try:
            return json.loads(raw.decode(charset))
        except (UnicodeDecodeError, LookupError, json.JSONDecodeError) as e:
            raise TransportError(
                f"{self.phase_key} provider returned a malformed body",
                provider=self.phase_key,
                status_code=status,
                context={"body": raw[:BODY_EXCERPT_LENGTH].decode("utf-8", errors="replace")},
            ) from e
    
    def process_response(self, envelope: Any) -> ProviderResult:
        """Validate a provider envelope and normalize its outputs.
        
        Args:
            envelope: Decoded response body
        
        Returns:
            ProviderResult with the normalized model and the raw envelope
        
        Raises:
            ValidationError: If the envelope or any mandatory field is invalid
        """
        if not isinstance(envelope, dict) or not isinstance(envelope.get("outputs"), dict):
            raise ValidationError(
                "Invalid response format: missing outputs",
                context={"provider": self.phase_key},
            )
        
        result = self.validator.validate(envelope["outputs"])
        data = result.raise_for_errors(context={"provider": self.phase_key})
        
        if result.has_warnings():
            logger.warning(
                f"{self.phase_key} response normalized with {len(result.warnings)} warning(s): "
                f"{result.warnings}"
            )
        
        return ProviderResult(data=data, raw_data=envelope, warnings=list(result.warnings))
    
    async def analyze(
        self,
        input: Any,
        cancellation: CancellationToken | None = None,
    ) -> ProviderResult:
        """Run one provider call under the deadline and cancellation race.
        
        Args:
            input: Provider-specific input
            cancellation: Optional cancellation token
        
        Returns:
            ProviderResult
        
        Raises:
            ProviderTimeoutError: If the deadline passed first
            TransportError: On transport failure
            ValidationError: If the response fails validation
            CancellationError: If cancellation was requested
        """
        payload = self.build_request(input)
        logger.info(f"Calling {self.phase_key} provider (session {payload['user_id']})")
        
        try:
            envelope = await race_with_deadline(
                self._post(payload), cancellation, self.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(
                f"{self.phase_key} provider timed out after {self.timeout_seconds}s",
                provider=self.phase_key,
                timeout_seconds=self.timeout_seconds,
            ) from e
        
        return self.process_response(envelope)
    
    async def retry_with_backoff(
        self,
        input: Any,
        cancellation: CancellationToken | None = None,
        max_attempts: int | None = None,
    ) -> ProviderResult:
        """Run analyze() with bounded retries and exponential backoff.
        
        Args:
            input: Provider-specific input
            cancellation: Optional cancellation token
            max_attempts: Attempt budget; defaults to the client's
        
        Returns:
            ProviderResult
        
        Raises:
            RetryExhaustedError: If every attempt failed transiently
            ValidationError, CancellationError, TransportError: Non-retryable
                failures, raised on first occurrence
        """
        return await call_with_retry(
            lambda: self.analyze(input, cancellation),
            max_attempts=max_attempts or self.max_attempts,
            base_delay=self.base_delay,
            jitter_max=self.jitter_max,
            cancellation=cancellation,
            label=f"{self.phase_key} provider",
            sleep=self._sleep,
        )
