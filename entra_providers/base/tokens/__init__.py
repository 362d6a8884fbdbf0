"""Token counting for content blocks."""

from .counter import DEFAULT_ENCODING, TOKEN_FUDGE_FACTOR, TiktokenCounter

__all__ = ["TiktokenCounter", "DEFAULT_ENCODING", "TOKEN_FUDGE_FACTOR"]
