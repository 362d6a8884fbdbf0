"""Consumer-side helpers for handler streams.

Kept apart from the chunk types so handlers depend only on the types while
front ends (CLI, tests) use the helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterable, List, Optional

from ..errors import ErrorCode, ProviderError, classify_exception
from .stream_chunks import ApiStreamChunk, ErrorChunk, TextChunk, UsageChunk


@dataclass
class StreamSummary:
    """Result of draining a stream: joined text, terminal usage, chunk count."""

    text: str = ""
    usage: Optional[UsageChunk] = None
    error: Optional[ErrorChunk] = None
    chunks: int = 0


async def accumulate_chunks(stream: AsyncIterable[ApiStreamChunk]) -> StreamSummary:
    """Drain ``stream`` into a :class:`StreamSummary`.

    Text deltas are concatenated in arrival order. The last usage chunk wins.
    An error chunk ends accumulation. Exceptions raised by the stream propagate
    unchanged.
    """
    summary = StreamSummary()
    parts: List[str] = []
    async for chunk in stream:
        summary.chunks += 1
        if isinstance(chunk, TextChunk):
            parts.append(chunk.text)
        elif isinstance(chunk, UsageChunk):
            summary.usage = chunk
        elif isinstance(chunk, ErrorChunk):
            summary.error = chunk
            break
    summary.text = "".join(parts)
    return summary


def error_chunk_from_exception(exc: BaseException) -> ErrorChunk:
    """Render an exception as an :class:`ErrorChunk`.

    ``ProviderError`` keeps its own code and message; anything else is
    classified and described by its string form (or its type name when empty).
    """
    if isinstance(exc, ProviderError):
        return ErrorChunk(error=exc.code.value, message=exc.message)
    code: ErrorCode = classify_exception(exc)
    return ErrorChunk(error=code.value, message=str(exc) or type(exc).__name__)


__all__ = ["StreamSummary", "accumulate_chunks", "error_chunk_from_exception"]
