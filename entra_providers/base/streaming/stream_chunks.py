"""Stream chunk types produced by provider handlers.

A handler stream yields zero or more :class:`TextChunk` followed by exactly one
:class:`UsageChunk`. :class:`ErrorChunk` exists for consumers that render a
failure inline (see :func:`error_chunk_from_exception`); handlers raise
instead of yielding it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Literal, Optional, Union


@dataclass(frozen=True)
class TextChunk:
    """Incremental assistant text (one delta)."""

    text: str
    type: Literal["text"] = "text"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class UsageChunk:
    """Terminal token and cost accounting for one request.

    Fields:
      input_tokens / output_tokens: token counts reported for the request
      total_cost: USD cost
      cache_write_tokens / cache_read_tokens: prompt-cache accounting when known
    """

    input_tokens: int
    output_tokens: int
    total_cost: float = 0.0
    cache_write_tokens: Optional[int] = None
    cache_read_tokens: Optional[int] = None
    type: Literal["usage"] = "usage"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type,
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "totalCost": self.total_cost,
        }
        if self.cache_write_tokens is not None:
            data["cacheWriteTokens"] = self.cache_write_tokens
        if self.cache_read_tokens is not None:
            data["cacheReadTokens"] = self.cache_read_tokens
        return data


@dataclass(frozen=True)
class ErrorChunk:
    """A failure rendered as a chunk: ``error`` is the short code, ``message`` the detail."""

    error: str
    message: str
    type: Literal["error"] = "error"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "error": self.error, "message": self.message}


ApiStreamChunk = Union[TextChunk, UsageChunk, ErrorChunk]
ApiStream = AsyncIterator[ApiStreamChunk]


__all__ = [
    "TextChunk",
    "UsageChunk",
    "ErrorChunk",
    "ApiStreamChunk",
    "ApiStream",
]
