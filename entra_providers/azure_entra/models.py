"""Static Azure OpenAI model table.

Deployment names map to :class:`ModelInfo` records shipped with the package
(nothing is fetched at runtime). Lookups are exact; an unknown deployment
resolves to :func:`fallback_model_info`.

Reference: https://learn.microsoft.com/en-us/azure/ai-services/openai/reference
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from ..base.models import ModelDescriptor, ModelInfo

AZURE_OPENAI_MODELS: Mapping[str, ModelInfo] = MappingProxyType(
    {
        "gpt-4o": ModelInfo(
            max_tokens=4096,
            context_window=128_000,
            supports_images=True,
            supports_prompt_cache=False,
            input_price=5.0,
            output_price=15.0,
            description="Azure OpenAI GPT-4o model with multimodal capabilities including vision",
        ),
        "gpt-4o-mini": ModelInfo(
            max_tokens=16384,
            context_window=128_000,
            supports_images=True,
            supports_prompt_cache=False,
            input_price=0.15,
            output_price=0.6,
            description="Azure OpenAI GPT-4o Mini model with vision support, optimized for speed and cost",
        ),
        "gpt-4-turbo": ModelInfo(
            max_tokens=4096,
            context_window=128_000,
            supports_images=False,
            supports_prompt_cache=False,
            input_price=10.0,
            output_price=30.0,
            description="Azure OpenAI GPT-4 Turbo model with large context window",
        ),
        "gpt-4": ModelInfo(
            max_tokens=8192,
            context_window=8192,
            supports_images=False,
            supports_prompt_cache=False,
            input_price=30.0,
            output_price=60.0,
            description="Azure OpenAI GPT-4 base model",
        ),
        "gpt-4-32k": ModelInfo(
            max_tokens=8192,
            context_window=32768,
            supports_images=False,
            supports_prompt_cache=False,
            input_price=60.0,
            output_price=120.0,
            description="Azure OpenAI GPT-4 32K model with extended context",
        ),
        "gpt-35-turbo": ModelInfo(
            max_tokens=4096,
            context_window=16385,
            supports_images=False,
            supports_prompt_cache=False,
            input_price=0.5,
            output_price=1.5,
            description="Azure OpenAI GPT-3.5 Turbo model",
        ),
        "gpt-35-turbo-16k": ModelInfo(
            max_tokens=4096,
            context_window=16385,
            supports_images=False,
            supports_prompt_cache=False,
            input_price=3.0,
            output_price=4.0,
            description="Azure OpenAI GPT-3.5 Turbo 16K model with extended context",
        ),
    }
)

FALLBACK_MAX_TOKENS = 4096
FALLBACK_CONTEXT_WINDOW = 128_000
# Placeholder pricing for deployments the table does not know.
FALLBACK_INPUT_PRICE = 0.01
FALLBACK_OUTPUT_PRICE = 0.03


def fallback_model_info(deployment_name: str) -> ModelInfo:
    """Conservative record for a deployment missing from the table."""
    return ModelInfo(
        max_tokens=FALLBACK_MAX_TOKENS,
        context_window=FALLBACK_CONTEXT_WINDOW,
        supports_images=False,
        supports_prompt_cache=False,
        input_price=FALLBACK_INPUT_PRICE,
        output_price=FALLBACK_OUTPUT_PRICE,
        description=f"Azure OpenAI {deployment_name} with Entra ID authentication",
    )


def resolve_model(deployment_name: str) -> ModelDescriptor:
    """Return the descriptor for ``deployment_name`` (table entry or fallback)."""
    info = AZURE_OPENAI_MODELS.get(deployment_name)
    if info is None:
        info = fallback_model_info(deployment_name)
    return ModelDescriptor(id=deployment_name, info=info)


__all__ = [
    "AZURE_OPENAI_MODELS",
    "fallback_model_info",
    "resolve_model",
]
