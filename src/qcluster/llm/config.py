"""
LLM model registry for cluster labeling.

Model selection via environment variables (LLM_MODEL, LLM_PROVIDER).
Theme names are only a few tokens long, so the registry lists the fast,
cheap tier of each provider.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional

from .base import LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


@dataclass(frozen=True)
class ModelInfo:
    """Information about a specific model."""
    model_id: str
    provider: LLMProvider
    description: str
    default_region: str


MODEL_REGISTRY: Dict[str, ModelInfo] = {
    "gemini-2.5-flash": ModelInfo(
        model_id="gemini-2.5-flash",
        provider=LLMProvider.GEMINI,
        description="Gemini 2.5 Flash - Balanced speed/quality (GA)",
        default_region="europe-west4",
    ),
    "gemini-2.5-flash-lite": ModelInfo(
        model_id="gemini-2.5-flash-lite",
        provider=LLMProvider.GEMINI,
        description="Gemini 2.5 Flash-Lite - Lowest latency",
        default_region="europe-west4",
    ),
    "claude-haiku-4-5": ModelInfo(
        model_id="claude-haiku-4-5@20251001",
        provider=LLMProvider.CLAUDE,
        description="Claude Haiku 4.5 - Fast, cost-effective, GA",
        default_region="europe-west1",
    ),
}

MODEL_ALIASES: Dict[str, str] = {
    "gemini": "gemini-2.5-flash",
    "gemini-flash": "gemini-2.5-flash",
    "gemini-lite": "gemini-2.5-flash-lite",
    "claude": "claude-haiku-4-5",
    "claude-haiku": "claude-haiku-4-5",
    "haiku": "claude-haiku-4-5",
}


def resolve_model_name(name: str) -> str:
    """Resolve model name from alias or return as-is."""
    return MODEL_ALIASES.get(name.lower(), name)


def get_model_info(name: str) -> Optional[ModelInfo]:
    """
    Get model info by name or alias.

    Returns:
        ModelInfo or None if not found
    """
    return MODEL_REGISTRY.get(resolve_model_name(name))


def get_default_model() -> str:
    """
    Get default model from environment or fallback.

    Environment variables:
        LLM_MODEL: Primary model selection
        LLM_PROVIDER: Provider preference (gemini/claude)

    Returns:
        Model name to use
    """
    model = os.environ.get('LLM_MODEL')
    if model:
        resolved = resolve_model_name(model)
        if resolved in MODEL_REGISTRY:
            logger.info(f"Using model from LLM_MODEL: {resolved}")
            return resolved
        logger.warning(f"Unknown model '{model}', falling back to default")

    provider = os.environ.get('LLM_PROVIDER', '').lower()
    if provider == LLMProvider.CLAUDE.value:
        logger.info("Using Claude (from LLM_PROVIDER)")
        return "claude-haiku-4-5"

    logger.info(f"Using default model: {DEFAULT_MODEL}")
    return DEFAULT_MODEL
