"""
ModelInfo record describing one deployable model.

Prices are USD per million tokens. Instances are immutable; the static
deployment table and the fallback entry share this type.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ModelInfo:
    """Capabilities, limits, and pricing of a model.

    Attributes:
        max_tokens: Upper bound sent as the completion token limit.
        context_window: Total tokens (prompt + completion) the model accepts.
        supports_images: Whether image content parts may be sent.
        supports_prompt_cache: Whether the deployment offers prompt caching.
        input_price: USD per million prompt tokens.
        output_price: USD per million completion tokens.
        description: Human-readable summary.
    """

    max_tokens: int
    context_window: int
    supports_images: bool
    supports_prompt_cache: bool
    input_price: Optional[float] = None
    output_price: Optional[float] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary of the record."""
        return asdict(self)


__all__ = ["ModelInfo"]
