"""
Gemini LLM Client Implementation

Uses Google Gen AI SDK for Gemini models via Vertex AI.
"""

import logging
import os
from typing import Optional

from .base import BaseLLMClient, EmptyResponseError, GenerationConfig, LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class GeminiClient(BaseLLMClient):
    """
    Gemini client using Google Gen AI SDK.

    Supports all Gemini models available on Vertex AI.
    """

    def __init__(
        self,
        model_id: str = "gemini-2.5-flash",
        project_id: Optional[str] = None,
        region: Optional[str] = "europe-west4",
        **kwargs
    ):
        """
        Initialize Gemini client.

        Args:
            model_id: Gemini model ID (e.g., "gemini-2.5-flash", "gemini-2.5-pro")
            project_id: GCP project ID (uses GCP_PROJECT env var if None)
            region: GCP region (uses GCP_REGION env var if None)
            **kwargs: max_retries / rate_limiter, see BaseLLMClient
        """
        project_id = project_id or os.environ.get('GCP_PROJECT')
        region = region or os.environ.get('GCP_REGION', 'europe-west4')

        super().__init__(model_id, project_id, region, **kwargs)
        self._client = None

    @property
    def provider(self) -> LLMProvider:
        return LLMProvider.GEMINI

    def _initialize(self) -> None:
        """Initialize Google Gen AI client for Vertex AI."""
        from google import genai

        logger.info(f"Initializing Gemini: model={self.model_id}, project={self.project_id}, region={self.region}")

        self._client = genai.Client(
            vertexai=True,
            project=self.project_id,
            location=self.region
        )

        logger.info(f"Gemini client initialized: {self.model_id}")

    def _generate_once(
        self,
        prompt: str,
        config: GenerationConfig,
        system_prompt: Optional[str]
    ) -> LLMResponse:
        from google.genai import types

        gen_config = types.GenerateContentConfig(
            temperature=config.temperature,
            max_output_tokens=config.max_output_tokens,
            top_p=config.top_p,
            top_k=config.top_k,
        )

        if system_prompt:
            gen_config.system_instruction = system_prompt

        response = self._client.models.generate_content(
            model=self.model_id,
            contents=prompt,
            config=gen_config
        )

        text = response.text

        if not text or not text.strip():
            # Check for blocked content
            if response.candidates:
                finish_reason = getattr(response.candidates[0], 'finish_reason', None)
                raise EmptyResponseError(f"Empty response from Gemini. Finish reason: {finish_reason}")
            raise EmptyResponseError("Empty response from Gemini API")

        usage = getattr(response, 'usage_metadata', None)
        input_tokens = getattr(usage, 'prompt_token_count', None) if usage else None
        output_tokens = getattr(usage, 'candidates_token_count', None) if usage else None

        finish_reason = None
        if response.candidates:
            finish_reason = getattr(response.candidates[0], 'finish_reason', None)

        return LLMResponse(
            text=text,
            model=self.model_id,
            provider=self.provider,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            finish_reason=str(finish_reason) if finish_reason else None,
            raw_response=response
        )
