"""
Claude LLM Client Implementation

Uses Anthropic SDK with Vertex AI backend.
"""

import logging
import os
from typing import Optional

from .base import BaseLLMClient, EmptyResponseError, GenerationConfig, LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class ClaudeClient(BaseLLMClient):
    """
    Claude client using Anthropic SDK with Vertex AI.

    Requires: pip install anthropic[vertex]
    """

    RETRIABLE_MARKERS = ('rate', 'overloaded', '429', '500', '503', 'timeout')

    def __init__(
        self,
        model_id: str = "claude-haiku-4-5@20251001",
        project_id: Optional[str] = None,
        region: Optional[str] = "us-east5",
        **kwargs
    ):
        """
        Initialize Claude client.

        Args:
            model_id: Claude model ID (e.g., "claude-haiku-4-5@20251001")
            project_id: GCP project ID (uses GCP_PROJECT env var if None)
            region: GCP region for Claude (us-east5 recommended)
            **kwargs: max_retries / rate_limiter, see BaseLLMClient
        """
        project_id = project_id or os.environ.get('GCP_PROJECT')
        region = region or os.environ.get('CLAUDE_REGION', 'us-east5')

        super().__init__(model_id, project_id, region, **kwargs)
        self._client = None

    @property
    def provider(self) -> LLMProvider:
        return LLMProvider.CLAUDE

    def _initialize(self) -> None:
        """Initialize Anthropic Vertex AI client."""
        from anthropic import AnthropicVertex

        logger.info(f"Initializing Claude: model={self.model_id}, project={self.project_id}, region={self.region}")

        self._client = AnthropicVertex(
            project_id=self.project_id,
            region=self.region
        )

        logger.info(f"Claude client initialized: {self.model_id}")

    def _generate_once(
        self,
        prompt: str,
        config: GenerationConfig,
        system_prompt: Optional[str]
    ) -> LLMResponse:
        kwargs = {
            "model": self.model_id,
            "max_tokens": config.max_output_tokens,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": config.temperature,
        }

        if system_prompt:
            kwargs["system"] = system_prompt

        if config.top_k:
            kwargs["top_k"] = config.top_k

        response = self._client.messages.create(**kwargs)

        if not response.content:
            raise EmptyResponseError("No content in Claude response")

        # Claude returns content blocks, concatenate text blocks
        text = ''.join(block.text for block in response.content if hasattr(block, 'text'))

        if not text.strip():
            raise EmptyResponseError("Empty text from Claude API")

        return LLMResponse(
            text=text,
            model=self.model_id,
            provider=self.provider,
            input_tokens=response.usage.input_tokens if response.usage else None,
            output_tokens=response.usage.output_tokens if response.usage else None,
            finish_reason=response.stop_reason,
            raw_response=response
        )
