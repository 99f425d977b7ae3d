"""
Text-generation capability used to name question clusters.

Usage:
    from qcluster.llm import get_client
    client = get_client("claude-haiku", project_id="my-project", max_retries=1)
    response = client.generate("Name this theme...", system_prompt="...")

Environment Variables:
    LLM_MODEL: Default model to use (e.g., "gemini-2.5-flash", "claude-haiku")
    LLM_PROVIDER: Provider preference ("gemini" or "claude")
    CLAUDE_REGION: GCP region for Claude (default: europe-west1)
"""

import logging
import os
from typing import Optional

from ..rate_limit import RateLimiter
from .base import MAX_RETRIES, BaseLLMClient, EmptyResponseError, GenerationConfig, LLMProvider, LLMResponse
from .config import MODEL_ALIASES, MODEL_REGISTRY, ModelInfo, get_default_model, get_model_info

logger = logging.getLogger(__name__)


def get_client(
    model: Optional[str] = None,
    project_id: Optional[str] = None,
    region: Optional[str] = None,
    max_retries: int = MAX_RETRIES,
    rate_limiter: Optional[RateLimiter] = None,
) -> BaseLLMClient:
    """
    Get an LLM client for the specified model.

    Args:
        model: Model name or alias; uses LLM_MODEL env var or default if None
        project_id: GCP project ID
        region: GCP region (provider default if None)
        max_retries: Attempts per request (1 disables retries)
        rate_limiter: Optional limiter shared by all requests of this client

    Returns:
        Configured LLM client

    Raises:
        ValueError: If model is not supported
    """
    model_name = model or get_default_model()

    model_info = get_model_info(model_name)
    if not model_info:
        available = ", ".join(list(MODEL_REGISTRY.keys()) + list(MODEL_ALIASES.keys()))
        raise ValueError(f"Unknown model: {model_name}. Available: {available}")

    if model_info.provider == LLMProvider.GEMINI:
        from .gemini import GeminiClient

        client = GeminiClient(
            model_id=model_info.model_id,
            project_id=project_id,
            region=region or model_info.default_region,
            max_retries=max_retries,
            rate_limiter=rate_limiter,
        )
    elif model_info.provider == LLMProvider.CLAUDE:
        from .claude import ClaudeClient

        client = ClaudeClient(
            model_id=model_info.model_id,
            project_id=project_id,
            region=region or os.environ.get("CLAUDE_REGION", model_info.default_region),
            max_retries=max_retries,
            rate_limiter=rate_limiter,
        )
    else:
        raise ValueError(f"Unsupported provider: {model_info.provider}")

    logger.info(f"Created LLM client: {client}")
    return client


__all__ = [
    "get_client",
    "BaseLLMClient",
    "EmptyResponseError",
    "LLMProvider",
    "GenerationConfig",
    "LLMResponse",
    "ModelInfo",
    "get_model_info",
    "get_default_model",
]
