"""Streaming package: chunk types plus consumer helpers."""

from .stream_chunks import ApiStream, ApiStreamChunk, ErrorChunk, TextChunk, UsageChunk
from .streaming import StreamSummary, accumulate_chunks, error_chunk_from_exception

__all__ = [
    "ApiStream",
    "ApiStreamChunk",
    "TextChunk",
    "UsageChunk",
    "ErrorChunk",
    "StreamSummary",
    "accumulate_chunks",
    "error_chunk_from_exception",
]
