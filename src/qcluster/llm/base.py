"""
Text-Generation Capability - Base Classes

Provides a unified interface for the LLM providers (Gemini, Claude) used to
name question clusters, so the labeler never depends on a specific SDK.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence

from ..rate_limit import RateLimiter

logger = logging.getLogger(__name__)

# Retry configuration
MAX_RETRIES = 3
INITIAL_BACKOFF = 1.0
MAX_BACKOFF = 30.0


class EmptyResponseError(ValueError):
    """The model answered, but with no usable text. Never retried."""
    pass


class LLMProvider(str, Enum):
    """Supported LLM providers."""
    GEMINI = "gemini"
    CLAUDE = "claude"


@dataclass
class GenerationConfig:
    """
    Model-agnostic generation configuration.

    Maps to provider-specific configs internally.
    """
    temperature: float = 0.7
    max_output_tokens: int = 2048
    top_p: float = 0.95
    top_k: int = 40

    # Provider-specific overrides (optional)
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LLMResponse:
    """
    Unified response from any LLM provider.
    """
    text: str
    model: str
    provider: LLMProvider

    # Usage stats (if available)
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None

    # Raw response for debugging
    raw_response: Optional[Any] = None

    # Finish reason
    finish_reason: Optional[str] = None


class BaseLLMClient(ABC):
    """
    Abstract base class for LLM clients.

    Subclasses implement ``_initialize`` and ``_generate_once``; the base
    class owns rate limiting and the retry loop so every provider honours
    the same ``max_retries`` policy. ``max_retries=1`` means a failed call
    is raised immediately.
    """

    # Substrings of error messages worth retrying
    RETRIABLE_MARKERS: Sequence[str] = ('rate', 'quota', '429', 'internal', '500', '503')

    def __init__(
        self,
        model_id: str,
        project_id: str,
        region: str = "europe-west4",
        max_retries: int = MAX_RETRIES,
        rate_limiter: Optional[RateLimiter] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize LLM client.

        Args:
            model_id: Model identifier (e.g., "gemini-2.5-flash", "claude-haiku-4-5@20251001")
            project_id: GCP project ID
            region: GCP region
            max_retries: Attempts per request (1 disables retries)
            rate_limiter: Optional limiter acquired before every request
            sleep: Backoff sleep function (injectable for tests)
        """
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")

        self.model_id = model_id
        self.project_id = project_id
        self.region = region
        self.max_retries = max_retries
        self.rate_limiter = rate_limiter
        self._sleep = sleep
        self._initialized = False

    @property
    @abstractmethod
    def provider(self) -> LLMProvider:
        """Return the provider type."""
        pass

    @abstractmethod
    def _initialize(self) -> None:
        """Initialize the underlying client. Called lazily on first use."""
        pass

    @abstractmethod
    def _generate_once(
        self,
        prompt: str,
        config: GenerationConfig,
        system_prompt: Optional[str]
    ) -> LLMResponse:
        """Issue a single provider request."""
        pass

    def _ensure_initialized(self) -> None:
        """Ensure client is initialized before use."""
        if not self._initialized:
            self._initialize()
            self._initialized = True

    def _is_retriable(self, error: Exception) -> bool:
        if isinstance(error, EmptyResponseError):
            return False
        error_msg = str(error).lower()
        return any(marker in error_msg for marker in self.RETRIABLE_MARKERS)

    def generate(
        self,
        prompt: str,
        config: Optional[GenerationConfig] = None,
        system_prompt: Optional[str] = None
    ) -> LLMResponse:
        """
        Generate text from a prompt.

        Args:
            prompt: User prompt
            config: Generation configuration (uses defaults if None)
            system_prompt: Optional system prompt (Claude) / system instruction (Gemini)

        Returns:
            LLMResponse with generated text and metadata
        """
        self._ensure_initialized()

        config = config or GenerationConfig()
        backoff = INITIAL_BACKOFF

        for attempt in range(self.max_retries):
            if self.rate_limiter is not None:
                self.rate_limiter.acquire()

            try:
                return self._generate_once(prompt, config, system_prompt)

            except Exception as e:
                if self._is_retriable(e) and attempt < self.max_retries - 1:
                    logger.warning(
                        f"Retriable error (attempt {attempt + 1}/{self.max_retries}): {e}. "
                        f"Retrying after {backoff}s"
                    )
                    self._sleep(backoff)
                    backoff = min(backoff * 2, MAX_BACKOFF)
                else:
                    logger.error(
                        f"{self.provider.value} generation failed after {attempt + 1} attempts: {e}"
                    )
                    raise

        # Unreachable: the loop either returns or raises
        raise RuntimeError("Generation loop exited without a result")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model_id}, region={self.region})"
